import logging
import sys
from typing import Any

from loguru import logger

from truelist_fastapi.config import get_settings


class InterceptHandler(logging.Handler):
    """Intercept stdlib logging and redirect to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back  # type: ignore[assignment]
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _format_extra(record: dict[str, Any]) -> str:
    """Render bound context after the message."""
    extra = {k: v for k, v in record["extra"].items() if k != "name"}
    record["extra"]["_context"] = " ".join(f"{k}={v!r}" for k, v in extra.items())
    return (
        "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[name]} | "
        "{message} {extra[_context]}\n{exception}"
    )


def setup_logging() -> None:
    """Configure loguru for applications using the validation gate."""
    settings = get_settings()

    # Remove default handler
    logger.remove()
    logger.configure(extra={"name": "truelist"})

    if settings.debug:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format=(
                "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
                "<level>{level: <8}</level> | "
                "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
                "<level>{message}</level> {extra}"
            ),
            backtrace=True,
            diagnose=True,
        )
    else:
        logger.add(
            sys.stderr,
            level=settings.log_level.upper(),
            format=_format_extra,
            backtrace=True,
            diagnose=False,
        )

    # Intercept stdlib logging (uvicorn, aiohttp)
    for name in ["uvicorn", "uvicorn.error", "aiohttp"]:
        logging.getLogger(name).handlers = [InterceptHandler()]


def get_logger(name: str) -> Any:
    """Get a logger bound to a module name."""
    return logger.bind(name=name)
