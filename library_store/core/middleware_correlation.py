from typing_extensions import override
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp
from starlette.requests import Request
from starlette.responses import Response
from typing import Callable
from collections.abc import Awaitable
from starlette.status import HTTP_500_INTERNAL_SERVER_ERROR

from library_store.core.errors import error_response
from library_store.core.logging import get_logger


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """
    Reads or generates the X-Request-ID header.
    - Sets `request.state.correlation_id`
    - Echoes the id on the response
    - Logs one access line per request
    - Turns unhandled errors into a 500 `{"error": ...}` carrying the id
    """

    def __init__(self, app: ASGIApp, header_name: str = "X-Request-ID"):
        super().__init__(app)
        self.header_name: str = header_name

    @override
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        corr_id = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.correlation_id = corr_id
        logger = get_logger(__name__, request)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception("Unhandled server error", exc_info=exc)
            response = error_response(
                HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal Server Error"
            )
        response.headers[self.header_name] = corr_id
        logger.info(
            "%s %s -> %d (%.1f ms)",
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - started) * 1000,
        )
        return response
