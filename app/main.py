from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import logging.config

from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from core.config import settings
from core.container import build_container
from core.limiter import limiter
from core.logging.filters import SensitiveDataFilter
from core.logging.formatters import JsonFormatter
from core.logging.handlers import setup_log_handlers
from core.logging.middleware import AccessLogMiddleware
from core.request_id_middleware import RequestContextMiddleware
from modules.countries.routes import router as countries_router
from modules.ip.routes import router as ip_router
from modules.logs.routes import router as logs_router
from modules.monitoring.routes import router as monitoring_router

# ===================================
# JSON Logging
# ===================================
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,

    "formatters": {
        "json": {
            "()": JsonFormatter,
        },
    },

    "filters": {
        "redact": {
            "()": SensitiveDataFilter,
        },
    },

    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "filters": ["redact"],
            "stream": "ext://sys.stdout",
        },
        "access": {
            "class": "logging.StreamHandler",
            "formatter": "json",
            "stream": "ext://sys.stdout",
        },
    },

    "loggers": {
        "uvicorn": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["access"],
            "level": "INFO",
            "propagate": False,
        },
        "app": {
            "handlers": ["default"],
            "level": "DEBUG" if settings.DEBUG else "INFO",
            "propagate": False,
        },
        "system": {
            "handlers": ["default"],
            "level": "DEBUG" if settings.DEBUG else "INFO",
            "propagate": False,
        },
        "security": {
            "handlers": ["default"],
            "level": "WARNING",
            "propagate": False,
        },
    },
}

logging.config.dictConfig(LOGGING_CONFIG)
logger = logging.getLogger("app")

# ===================================
# Файловые хендлеры (только если задан LOG_DIR)
# ===================================
if settings.LOG_DIR:
    for name, handler in setup_log_handlers(settings.LOG_DIR).items():
        logging.getLogger(name).addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Тесты могут подложить свой контейнер (MockTransport) заранее
    container = getattr(app.state, "container", None)
    if container is None:
        container = build_container(settings)
        app.state.container = container

    container.cleanup.start()
    logger.info({
        "event": "app_startup",
        "environment": settings.ENVIRONMENT,
        "geolocation_provider": settings.GEOLOCATION_PROVIDER,
        "geolocation_rate_limit": settings.GEOLOCATION_RATE_LIMIT_PER_MINUTE,
    })

    try:
        yield
    finally:
        await container.aclose()
        del app.state.container
        logger.info({"event": "app_shutdown"})


# ===================================
# FastAPI App
# ===================================
app = FastAPI(
    title="Blocked Countries API",
    description="""
    ## Country blocking by IP geolocation

    * **Countries**: permanent and temporal (1-1440 minutes) blocks
    * **IP**: geolocation lookup and caller block checks
    * **Logs**: paged history of block checks
    """,
    version="1.0.0",
    lifespan=lifespan,
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
    openapi_url="/openapi.json" if settings.ENABLE_DOCS else None,
)

# ===================================
# Rate Limiting Setup
# ===================================
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# ===================================
# Middleware
# ===================================

# Добавляем в обратном порядке выполнения:

# 3. CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=settings.CORS_METHODS,
    allow_headers=settings.CORS_HEADERS,
)

# 2. Access Logging
app.add_middleware(AccessLogMiddleware)

# 1. Request context: request_id + client_ip (выполнится ПЕРВЫМ)
app.add_middleware(RequestContextMiddleware)

# ===================================
# Подключение роутеров
# ===================================
app.include_router(countries_router, prefix="/api")
app.include_router(ip_router, prefix="/api")
app.include_router(logs_router, prefix="/api")

if settings.METRICS_ENABLED:
    app.include_router(monitoring_router)


# ===================================
# Healthcheck endpoint
# ===================================
@app.get(
    "/health",
    summary="Health check",
    tags=["System"]
)
async def health(request: Request, detailed: bool = False):
    """
    Проверка что сервис запущен и работает
    Supports detailed health checks with ?detailed=true
    """
    if detailed:
        from core.monitoring.health import check_health
        return await check_health(getattr(request.app.state, "container", None), detailed=True)

    return {"status": "ok", "app": settings.APP_NAME, "version": "1.0.0"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
