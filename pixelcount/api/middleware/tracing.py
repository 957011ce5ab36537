"""
Tracing Middleware - OpenTelemetry integration for FastAPI
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import time
import uuid

from ...observability.logging import get_logger
from ...observability.tracing import get_tracer

logger = get_logger(__name__)
tracer = get_tracer(__name__)


class TracingMiddleware(BaseHTTPMiddleware):
    """Adds a span, a request ID and an access log line to every request"""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid.uuid4())

        with tracer.start_as_current_span(
            f"{request.method} {request.url.path}"
        ) as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("http.url", str(request.url))
            span.set_attribute("request.id", request_id)

            start_time = time.time()
            request.state.request_id = request_id

            response = await call_next(request)

            latency_ms = (time.time() - start_time) * 1000
            span.set_attribute("http.status_code", response.status_code)
            span.set_attribute("http.latency_ms", latency_ms)

            response.headers["X-Request-ID"] = request_id

            logger.debug(
                "http.request",
                method=request.method,
                path=request.url.path,
                status=response.status_code,
                latency_ms=round(latency_ms, 1),
                request_id=request_id,
            )
            return response
