# barberbook/core/middleware.py
"""Custom middleware for request handling"""
import uuid
import time
import logging
from starlette.requests import Request

logger = logging.getLogger(__name__)

# Load balancer probes would drown out booking traffic
QUIET_PATH_PREFIXES = ("/health",)


async def correlation_id_middleware(request: Request, call_next):
    """Attach a correlation id so a booking can be traced from request to worker logs"""
    correlation_id = request.headers.get("X-Correlation-ID") or str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers["X-Correlation-ID"] = correlation_id
    return response


async def request_logging_middleware(request: Request, call_next):
    """One log line per request; 409s from booking are expected and logged at INFO"""
    if request.url.path.startswith(QUIET_PATH_PREFIXES):
        return await call_next(request)

    start_time = time.perf_counter()
    correlation_id = getattr(request.state, "correlation_id", "unknown")

    response = await call_next(request)

    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
    level = logging.ERROR if response.status_code >= 500 else logging.INFO
    logger.log(
        level,
        f"[{correlation_id}] {request.method} {request.url.path} -> {response.status_code} ({duration_ms} ms)",
        extra={
            "correlation_id": correlation_id,
            "method": request.method,
            "path": request.url.path,
            "client": request.client.host if request.client else "unknown",
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        }
    )

    return response
