# core/constants.py
"""
Единый справочник констант для всего проекта
"""

from enum import Enum


# ===================================
# Справочник стран (ISO 3166-1 alpha-2)
# ===================================
COUNTRY_NAMES = {
    "US": "United States",
    "GB": "United Kingdom",
    "EG": "Egypt",
    "CA": "Canada",
    "AU": "Australia",
    "DE": "Germany",
    "FR": "France",
    "IT": "Italy",
    "ES": "Spain",
    "BR": "Brazil",
    "IN": "India",
    "CN": "China",
    "JP": "Japan",
    "KR": "South Korea",
    "MX": "Mexico",
    "RU": "Russia",
    "TR": "Turkey",
    "SA": "Saudi Arabia",
    "AE": "United Arab Emirates",
    "ZA": "South Africa",
}

# Sentinel for attempts whose country could not be resolved
UNKNOWN_COUNTRY = "Unknown"


def get_country_name(country_code: str) -> str:
    """Display name for a code, or the code itself if it is not in the table"""
    return COUNTRY_NAMES.get(country_code.upper(), country_code)


# ===================================
# Ограничения
# ===================================
TEMPORAL_BLOCK_MIN_MINUTES = 1
TEMPORAL_BLOCK_MAX_MINUTES = 1440  # 24 часа

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


# ===================================
# Классы ошибок сервисного слоя
# ===================================
class ErrorKind(str, Enum):
    """Категории ошибок, которые сервисы возвращают вызывающему коду"""
    VALIDATION = "validation"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    PROVIDER = "provider"


class LookupOutcome(str, Enum):
    """Outcome labels of a provider lookup, used for logs and metrics"""
    SUCCESS = "success"
    INVALID_IP = "invalid_ip"
    RATE_LIMITED = "rate_limited"
    PROVIDER_ERROR = "provider_error"
    PROVIDER_REJECTED = "provider_rejected"
    INVALID_PAYLOAD = "invalid_payload"
    TRANSPORT_ERROR = "transport_error"
