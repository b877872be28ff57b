"""
Request logging for the AyurSutra API.

Each request gets an id, reused from an incoming X-Request-ID header when the
caller supplies one, that is echoed back with the handling time.
"""
import logging
import time
import uuid

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one line per request outcome and tag the response with its id."""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        route = f"{request.method} {request.url.path}"

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"[{request_id}] {route} crashed after {time.perf_counter() - started:.4f}s")
            raise
        elapsed = time.perf_counter() - started

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"

        log = logger.warning if response.status_code >= 500 else logger.info
        log(f"[{request_id}] {route} -> {response.status_code} in {elapsed:.4f}s")
        return response


def setup_middlewares(app: FastAPI) -> None:
    app.add_middleware(RequestLoggingMiddleware)
