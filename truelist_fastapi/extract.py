"""Extract a single field from a form submission body."""

from starlette.requests import Request

from truelist_fastapi.core.logging import get_logger

logger = get_logger(__name__)

FORM_CONTENT_TYPES = ("multipart/form-data", "application/x-www-form-urlencoded")


async def extract_field(request: Request, field_name: str) -> str | None:
    """
    Return the string value of ``field_name`` from the request body.

    Supports JSON objects and multipart/url-encoded forms. Any other content
    type, a non-string value or a parse failure yields None; this never
    raises. The body is read through ``Request.body()`` so it stays cached
    on the request for later readers.
    """
    content_type = request.headers.get("content-type", "").lower()

    if "application/json" in content_type:
        try:
            await request.body()
            body = await request.json()
        except Exception as e:
            logger.bind(error=str(e)).debug("email_body_unparseable")
            return None
        if not isinstance(body, dict):
            return None
        value = body.get(field_name)
        return value if isinstance(value, str) and value else None

    if any(ct in content_type for ct in FORM_CONTENT_TYPES):
        try:
            await request.body()
            form = await request.form()
        except Exception as e:
            # Multipart parse errors surface as several starlette/multipart types
            logger.bind(error=str(e)).debug("email_body_unparseable")
            return None
        value = form.get(field_name)
        return value if isinstance(value, str) and value else None

    return None
