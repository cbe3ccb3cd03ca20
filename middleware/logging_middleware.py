import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from utils.correlation_id import set_correlation_id, clear_correlation_id
from utils.logger import setup_logger
from utils.prometheus_metrics import get_prometheus_metrics

logger = setup_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
DURATION_HEADER = "X-Request-Duration-Ms"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds a correlation id to the request, times it, logs it and counts it."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        set_correlation_id(correlation_id)

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.error(
                "Request failed",
                exc_info=True,
                extra={"method": request.method, "path": request.url.path},
            )
            raise
        finally:
            clear_correlation_id()

        duration_seconds = time.perf_counter() - start
        duration_ms = round(duration_seconds * 1000, 2)

        logger.info(
            f"{request.method} {request.url.path} {response.status_code}",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "correlation_id": correlation_id,
            }
        )

        metrics = get_prometheus_metrics()
        if metrics:
            # route template, not the raw path
            route = request.scope.get("route")
            endpoint = getattr(route, "path", request.url.path)
            metrics.record_request(request.method, endpoint, response.status_code, duration_seconds)

        response.headers[CORRELATION_HEADER] = correlation_id
        response.headers[DURATION_HEADER] = str(duration_ms)
        return response
