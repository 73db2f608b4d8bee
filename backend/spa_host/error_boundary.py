import logging

from starlette.requests import Request
from starlette.responses import JSONResponse

from .content import GLOBAL_SECURITY_HEADERS

logger = logging.getLogger(__name__)


def error_status(exc: Exception) -> int:
    for attr in ("status_code", "status"):
        status = getattr(exc, attr, None)
        if isinstance(status, int) and 400 <= status <= 599:
            return status
    return 500


async def error_boundary(request: Request, exc: Exception) -> JSONResponse:
    """Log any unhandled request error and answer with a JSON ``{message}`` body.

    Registered as the handler for ``Exception``, so Starlette re-raises the
    error to the ASGI server after this response is sent. The traceback goes
    to the log record only.
    """
    message = str(exc) or "Internal Server Error"
    logger.error(
        "Error: %s (%s %s)",
        message,
        request.method,
        request.url.path,
        exc_info=exc,
        extra={"error": message, "path": request.url.path, "method": request.method},
    )
    # runs outside the user middleware stack, so global headers are added here
    return JSONResponse(
        {"message": message},
        status_code=error_status(exc),
        headers=dict(GLOBAL_SECURITY_HEADERS),
    )
