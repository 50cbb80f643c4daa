import time
import logging
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from core.config import settings
from core.monitoring.metrics import record_request

logger = logging.getLogger("app")


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Middleware для логирования всех HTTP запросов в структурированном виде
    """
    async def dispatch(self, request: Request, call_next):
        start = time.time()

        # request_id и client_ip уже выставлены в RequestContextMiddleware
        request_id = getattr(request.state, "request_id", None)
        client_ip = getattr(request.state, "client_ip", None)
        if client_ip is None:
            client_ip = request.client.host if request.client else "unknown"

        user_agent = request.headers.get("user-agent", "-")

        try:
            response = await call_next(request)
            duration = round((time.time() - start) * 1000, 2)

            logger.info({
                "event": "http_request",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": duration,
                "ip": client_ip,
                "user_agent": user_agent,
            })

            if settings.METRICS_ENABLED:
                record_request(
                    method=request.method,
                    endpoint=request.url.path,
                    status_code=response.status_code,
                    duration=duration / 1000
                )

            return response

        except Exception as e:
            duration = round((time.time() - start) * 1000, 2)

            logger.error({
                "event": "http_request_error",
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "duration_ms": duration,
                "ip": client_ip,
                "user_agent": user_agent,
                "error": str(e),
                "error_type": type(e).__name__,
            })

            # Прокидываем исключение дальше
            raise
