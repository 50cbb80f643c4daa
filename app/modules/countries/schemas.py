"""
Pydantic schemas for country blocking API
"""
from pydantic import BaseModel
from typing import Optional, List
from datetime import datetime


class BlockCountryRequest(BaseModel):
    """Permanent block request"""
    country_code: str = ""


class TemporalBlockRequest(BaseModel):
    """Temporal block request (duration 1-1440 minutes)"""
    country_code: str = ""
    duration_minutes: int = 0


class BlockedCountryResponse(BaseModel):
    country_code: str
    country_name: str
    blocked_at: datetime
    is_temporal: bool = False
    expires_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BlockedCountryListResponse(BaseModel):
    """Paginated list of blocked countries"""
    items: List[BlockedCountryResponse]
    total_count: int
    page: int = 1
    page_size: int = 10
