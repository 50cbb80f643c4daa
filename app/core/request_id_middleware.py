import uuid
import contextvars
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from core.config import settings
from modules.ip.client_ip import get_client_ip

# Context variable для хранения request_id в пределах одного запроса
request_id_ctx = contextvars.ContextVar('request_id', default=None)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Middleware: request_id и IP клиента для каждого запроса
    """

    def __init__(self, app, trust_proxy_headers: bool = settings.TRUST_PROXY_HEADERS):
        super().__init__(app)
        self.trust_proxy_headers = trust_proxy_headers

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get('X-Request-ID') or str(uuid.uuid4())
        request_id_ctx.set(request_id)

        request.state.request_id = request_id
        request.state.client_ip = get_client_ip(request, trust_proxy_headers=self.trust_proxy_headers)

        response = await call_next(request)
        response.headers['X-Request-ID'] = request_id
        return response


def get_request_id() -> str:
    """Получить текущий request_id"""
    return request_id_ctx.get()
