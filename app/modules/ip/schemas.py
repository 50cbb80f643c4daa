"""
Pydantic schemas for IP lookup and block checks
"""
from pydantic import BaseModel


class CheckBlockResponse(BaseModel):
    ip_address: str
    country_code: str
    is_blocked: bool
