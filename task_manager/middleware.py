"""HTTP request logging."""

import logging
import time

from fastapi import FastAPI, Request, Response

logger = logging.getLogger(__name__)


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


def add_request_logging(app: FastAPI) -> None:
    """Log one line per request: method, path, status, latency and client."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next) -> Response:
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        client = request.client.host if request.client else "-"
        logger.log(
            _level_for(response.status_code),
            "%s %s | %d | %.2fms | %s",
            request.method,
            request.url.path,
            response.status_code,
            latency_ms,
            client,
        )
        return response
