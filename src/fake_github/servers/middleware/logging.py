import time
from logging import Logger, getLogger

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs the method, path, status code and duration of every request."""

    logger: Logger

    def __init__(self, app: ASGIApp, logger: Logger | None = None):
        super().__init__(app)
        self.logger = logger or getLogger(__name__)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - started) * 1000
        self.logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.1f}ms)")

        return response
