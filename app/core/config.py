from pydantic_settings import BaseSettings
from datetime import timedelta
from pydantic import Field, field_validator, ValidationInfo
from typing import Optional, List
import logging
import warnings

logger = logging.getLogger(__name__)


# Базовые адреса провайдеров геолокации
PROVIDER_BASE_URLS = {
    "ipapi": "https://ipapi.co",
    "ipgeolocation": "https://api.ipgeolocation.io",
    "ip-api": "http://ip-api.com",
}


class Settings(BaseSettings):
    APP_NAME: str = "Blocked Countries API"
    ENVIRONMENT: str = "development"  # development, staging, production
    DEBUG: bool = False
    ENABLE_DOCS: bool = True

    # ===== Geolocation provider =====
    GEOLOCATION_PROVIDER: str = "ipapi"
    GEOLOCATION_BASE_URL: Optional[str] = Field(default=None, validate_default=True)
    GEOLOCATION_API_KEY: str = ""
    GEOLOCATION_RATE_LIMIT_PER_MINUTE: int = 60
    GEOLOCATION_TIMEOUT_SECONDS: float = 30.0
    GEOLOCATION_USER_AGENT: str = "BlockedCountries/1.0"

    # ===== Client IP =====
    TRUST_PROXY_HEADERS: bool = True

    # ===== Inbound rate limiting (slowapi) =====
    RATE_LIMIT_ENABLED: bool = True
    INBOUND_RATE_LIMIT: str = "120/minute"

    # ===== CORS =====
    CORS_ORIGINS: List[str] = Field(default=["http://localhost:3000", "http://localhost:8000"])
    CORS_METHODS: List[str] = ["GET", "POST", "DELETE"]
    CORS_HEADERS: List[str] = ["Content-Type"]

    # ===== Logging & monitoring =====
    LOG_DIR: Optional[str] = None  # файловые логи выключены, если не задано
    LOG_TIMEZONE: str = "UTC"
    METRICS_ENABLED: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_parse_none_str = 'empty'

    @field_validator('GEOLOCATION_PROVIDER')
    @classmethod
    def validate_provider(cls, v: str) -> str:
        """Only providers with a known URL builder are accepted"""
        name = v.strip().lower()
        if name not in PROVIDER_BASE_URLS:
            raise ValueError(
                f"Unknown GEOLOCATION_PROVIDER '{v}'. "
                f"Supported: {', '.join(sorted(PROVIDER_BASE_URLS))}"
            )
        return name

    @field_validator('GEOLOCATION_BASE_URL')
    @classmethod
    def build_base_url(cls, v: Optional[str], info: ValidationInfo) -> str:
        """Fall back to the provider's public endpoint if no base URL is configured"""
        if v:
            return v.rstrip("/")

        provider = info.data.get('GEOLOCATION_PROVIDER', 'ipapi')
        return PROVIDER_BASE_URLS.get(provider, PROVIDER_BASE_URLS["ipapi"])

    @field_validator('GEOLOCATION_RATE_LIMIT_PER_MINUTE')
    @classmethod
    def clamp_rate_limit(cls, v: int) -> int:
        if v < 1:
            logger.warning(f"GEOLOCATION_RATE_LIMIT_PER_MINUTE={v} is below 1, using 1")
            return 1
        return v

    @field_validator('DEBUG')
    @classmethod
    def validate_debug_mode(cls, v: bool, info: ValidationInfo) -> bool:
        """Warn if DEBUG is enabled in production"""
        environment = info.data.get('ENVIRONMENT', 'development')

        if v is True and environment == 'production':
            warnings.warn(
                "DEBUG=True in production environment! This should be disabled in production.",
                UserWarning
            )

        return v

    @field_validator('CORS_ORIGINS', mode='before')
    @classmethod
    def parse_cors_origins(cls, v):
        """Parse CORS_ORIGINS from JSON string or list"""
        if isinstance(v, str):
            import json
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                logger.warning(f"Failed to parse CORS_ORIGINS as JSON: {v}, using comma split")
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v if v else []


settings = Settings()

# Фиксированные параметры ядра
GEOLOCATION_CACHE_TTL = timedelta(minutes=5)
TEMPORAL_BLOCK_CLEANUP_INTERVAL = timedelta(minutes=5)
RATE_LIMIT_WINDOW = timedelta(minutes=1)
