"""
Attempt log API routes
"""
from fastapi import APIRouter, Depends, Query

from core.dependencies import get_attempt_service
from modules.logs.schemas import AttemptListResponse
from modules.logs.service import AttemptLogService

router = APIRouter(prefix="/logs", tags=["Logs"])


@router.get(
    "/blocked-attempts",
    response_model=AttemptListResponse,
    summary="Blocked Attempts",
    description="Block-check attempts, newest first"
)
async def get_blocked_attempts(
    page: int = Query(default=1),
    page_size: int = Query(default=10),
    service: AttemptLogService = Depends(get_attempt_service)
):
    return service.list_attempts(page=page, page_size=page_size).data
