"""
Truelist CLI - check addresses from the command line.

Usage:
    truelist --help                         Show all commands
    truelist check user@example.com         Classify one address
    truelist check user@example.com --json  Print the full result as JSON
"""

import asyncio

import typer

app = typer.Typer(
    name="truelist",
    help="Truelist email validation gate",
    no_args_is_help=True,
)


def _print_success(message: str) -> None:
    """Print a success message."""
    typer.echo(f"  ✅ {message}")


def _print_warning(message: str) -> None:
    """Print a warning message."""
    typer.echo(f"  ⚠️ {message}")


def _print_error(message: str) -> None:
    """Print an error message to stderr."""
    typer.echo(f"❌ {message}", err=True)


@app.callback()
def main() -> None:
    """Truelist email validation gate."""


@app.command()
def check(
    email: str = typer.Argument(..., help="Email address to classify"),
    reject_state: list[str] = typer.Option(
        ["invalid"],
        "--reject-state",
        "-r",
        help="State to reject (repeatable): ok, invalid, risky, unknown, accept_all",
    ),
    timeout_ms: int | None = typer.Option(
        None, "--timeout-ms", "-t", help="API timeout in ms (default: TRUELIST_TIMEOUT_MS or 10000)"
    ),
    api_key: str | None = typer.Option(None, "--api-key", help="Overrides TRUELIST_API_KEY"),
    base_url: str | None = typer.Option(None, "--base-url", help="Override the API base URL"),
    as_json: bool = typer.Option(False, "--json", help="Print the full result as JSON"),
):
    """Classify an email address. Exits 1 if rejected, 2 on errors."""
    from truelist_fastapi.core.logging import setup_logging
    from truelist_fastapi.errors import TruelistError
    from truelist_fastapi.models import ValidateEmailConfig
    from truelist_fastapi.server import validate_email

    setup_logging()

    overrides = {"timeout_ms": timeout_ms} if timeout_ms is not None else {}
    config = ValidateEmailConfig(
        api_key=api_key,
        base_url=base_url,
        reject_states=reject_state,
        **overrides,
    )
    try:
        result = asyncio.run(validate_email(email, config))
    except TruelistError as e:
        _print_error(str(e))
        raise typer.Exit(2) from e

    if as_json:
        typer.echo(result.model_dump_json(by_alias=True, indent=2))
    else:
        typer.echo(f"\n📧 {result.email}")
        typer.echo(f"  state: {result.state.value} ({result.sub_state.value})")
        if result.suggestion:
            _print_warning(f"Did you mean {result.suggestion}?")

    if not result.is_valid:
        if not as_json:
            _print_error(f"Rejected: {result.state.value}")
        raise typer.Exit(1)

    if not as_json:
        _print_success("Accepted")


if __name__ == "__main__":
    app()
