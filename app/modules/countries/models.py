from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


@dataclass(frozen=True)
class CountryBlockEntry:
    """Блокировка страны: постоянная или временная (с expires_at)"""
    country_code: str
    country_name: str
    blocked_at: datetime
    is_temporal: bool = False
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """
        Single expiry predicate shared by lazy eviction, listing and the sweep.
        Permanent entries never expire.
        """
        if not self.is_temporal or self.expires_at is None:
            return False
        return self.expires_at < (now or datetime.now(timezone.utc))
