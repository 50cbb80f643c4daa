"""
Pydantic schemas for attempt logs API
"""
from pydantic import BaseModel
from typing import List
from datetime import datetime


class AttemptResponse(BaseModel):
    ip_address: str
    timestamp: datetime
    country_code: str
    is_blocked: bool
    user_agent: str = ""

    class Config:
        from_attributes = True


class AttemptListResponse(BaseModel):
    """Paginated attempt log"""
    items: List[AttemptResponse]
    total_count: int
    page: int = 1
    page_size: int = 10
