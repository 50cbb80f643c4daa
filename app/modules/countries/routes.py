"""
Country blocking API routes
"""
from fastapi import APIRouter, Depends, HTTPException, Query, Response
from typing import Optional
import logging

from core.dependencies import get_country_service
from modules.countries.service import CountryManagementService
from modules.countries.schemas import (
    BlockCountryRequest, TemporalBlockRequest,
    BlockedCountryResponse, BlockedCountryListResponse
)

logger = logging.getLogger("app")
router = APIRouter(prefix="/countries", tags=["Countries"])


@router.post(
    "/block",
    response_model=BlockedCountryResponse,
    summary="Block Country",
    description="Permanently block a country by its ISO 3166-1 alpha-2 code"
)
async def block_country(
    body: BlockCountryRequest,
    service: CountryManagementService = Depends(get_country_service)
):
    result = service.block_country(body.country_code)
    if not result.is_success:
        raise HTTPException(status_code=result.status_code, detail=result.error_message)
    return result.data


@router.delete(
    "/block/{country_code}",
    status_code=204,
    summary="Unblock Country",
    description="Remove a permanent or temporal block",
    response_class=Response
)
async def unblock_country(
    country_code: str,
    service: CountryManagementService = Depends(get_country_service)
):
    result = service.unblock_country(country_code)
    if not result.is_success:
        raise HTTPException(status_code=result.status_code, detail=result.error_message)
    return Response(status_code=204)


@router.get(
    "/blocked",
    response_model=BlockedCountryListResponse,
    summary="List Blocked Countries",
    description="Active blocks with optional search by code or name"
)
async def list_blocked_countries(
    page: int = Query(default=1),
    page_size: int = Query(default=10),
    search: Optional[str] = None,
    service: CountryManagementService = Depends(get_country_service)
):
    result = service.list_blocked_countries(page=page, page_size=page_size, search_term=search)
    return result.data


@router.post(
    "/temporal-block",
    response_model=BlockedCountryResponse,
    summary="Temporal Block",
    description="Block a country for 1-1440 minutes"
)
async def temporal_block(
    body: TemporalBlockRequest,
    service: CountryManagementService = Depends(get_country_service)
):
    result = service.add_temporal_block(body.country_code, body.duration_minutes)
    if not result.is_success:
        raise HTTPException(status_code=result.status_code, detail=result.error_message)
    return result.data
