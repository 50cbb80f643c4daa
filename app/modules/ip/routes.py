"""
IP lookup and block check routes
"""
from fastapi import APIRouter, Depends, HTTPException, Request
from typing import Optional

from core.config import settings
from core.dependencies import get_ip_service, get_request_client_ip
from core.limiter import limiter
from modules.geolocation.schemas import IpLookupResult
from modules.ip.schemas import CheckBlockResponse
from modules.ip.service import IpBlockingService

router = APIRouter(prefix="/ip", tags=["IP"])


@router.get(
    "/lookup",
    response_model=IpLookupResult,
    summary="Lookup IP",
    description="Country details for an IP address; the caller's IP when none is given"
)
@limiter.limit(settings.INBOUND_RATE_LIMIT)
async def lookup_ip(
    request: Request,
    ip_address: Optional[str] = None,
    service: IpBlockingService = Depends(get_ip_service)
):
    if ip_address is None:
        ip_address = get_request_client_ip(request)

    result = await service.lookup_ip(ip_address)
    if not result.is_success:
        raise HTTPException(status_code=result.status_code, detail=result.error_message)
    return result.data


@router.get(
    "/check-block",
    response_model=CheckBlockResponse,
    summary="Check Block",
    description="Whether the caller's country is blocked; every call is logged"
)
@limiter.limit(settings.INBOUND_RATE_LIMIT)
async def check_block(
    request: Request,
    service: IpBlockingService = Depends(get_ip_service)
):
    result = await service.check_block(
        ip_address=get_request_client_ip(request),
        user_agent=request.headers.get("user-agent", ""),
    )
    return result.data
