from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.requests import Request

from core.config import settings


def client_ip_key(request: Request) -> str:
    """Ключ лимита: IP, вычисленный RequestContextMiddleware, иначе адрес сокета"""
    return getattr(request.state, "client_ip", None) or get_remote_address(request)


limiter = Limiter(key_func=client_ip_key, enabled=settings.RATE_LIMIT_ENABLED)
