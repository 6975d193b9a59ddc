from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
import uuid, time, logging

logger = logging.getLogger(__name__)


def get_client_ip(request: Request) -> str:
    """
    Resolve the caller's address for logging and rate limiting.

    Prefers the first X-Forwarded-For entry, then X-Real-IP, then the socket peer.
    """
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request, call_next):
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id
        request.state.client_ip = get_client_ip(request)
        start = time.time()
        response = await call_next(request)
        duration_ms = (time.time() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {duration_ms:.2f}ms",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "ip": request.state.client_ip,
                "user_agent": request.headers.get("user-agent", "unknown"),
                "status": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        response.headers["X-Request-ID"] = request_id
        return response
