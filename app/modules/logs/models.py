from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class AttemptRecord:
    """Результат одной проверки блокировки (неизменяемая запись)"""
    ip_address: str
    timestamp: datetime
    country_code: str
    is_blocked: bool
    user_agent: str = ""
