from fastapi import Request

from core.config import settings
from core.container import ServiceContainer
from modules.countries.service import CountryManagementService
from modules.ip.client_ip import get_client_ip
from modules.ip.service import IpBlockingService
from modules.logs.service import AttemptLogService


# ===================================
# Доступ к сервисам из app.state
# ===================================
def get_container(request: Request) -> ServiceContainer:
    return request.app.state.container


def get_country_service(request: Request) -> CountryManagementService:
    return get_container(request).countries


def get_ip_service(request: Request) -> IpBlockingService:
    return get_container(request).ip_blocking


def get_attempt_service(request: Request) -> AttemptLogService:
    return get_container(request).attempts


def get_request_client_ip(request: Request) -> str:
    """IP из RequestContextMiddleware; если middleware не отработал, вычисляем сами"""
    client_ip = getattr(request.state, "client_ip", None)
    if client_ip:
        return client_ip
    return get_client_ip(request, trust_proxy_headers=settings.TRUST_PROXY_HEADERS)
