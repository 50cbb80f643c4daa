"""
Health check: in-memory stores, cleanup scheduler and host resources
"""
from enum import Enum
from typing import Any, Dict, Optional
from datetime import datetime, timezone
import logging
import asyncio
import psutil
import shutil

logger = logging.getLogger("app")


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


# ============================================================
# APPLICATION STATE
# ============================================================

def check_services(container) -> Dict[str, Any]:
    """Store sizes and scheduler state from the service container"""
    if container is None:
        return {
            "status": HealthStatus.UNHEALTHY.value,
            "message": "Services are not initialized"
        }

    cleanup = container.cleanup
    status = HealthStatus.HEALTHY if cleanup.is_running else HealthStatus.DEGRADED

    return {
        "status": status.value,
        "blocked_countries": len(container.country_store),
        "blocked_attempts": len(container.attempt_log),
        "cached_responses": len(container.response_cache),
        "geolocation_provider": container.geolocation.provider.name,
        "cleanup_scheduler": {
            "state": cleanup.state.value,
            "running": cleanup.is_running,
            "runs": cleanup.runs,
            "interval_seconds": cleanup.interval_seconds,
        },
    }


# ============================================================
# DISK CHECK
# ============================================================

async def check_disk_space(threshold_percent: int = 10) -> Dict[str, Any]:
    try:
        usage = shutil.disk_usage("/")

        free_gb = usage.free / (1024**3)
        percent_free = (usage.free / usage.total) * 100

        if percent_free >= threshold_percent * 2:
            status = HealthStatus.HEALTHY
        elif percent_free >= threshold_percent:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.UNHEALTHY

        return {
            "status": status.value,
            "free_gb": round(free_gb, 2),
            "percent_free": round(percent_free, 2),
        }

    except Exception as e:
        logger.error(f"Disk space check failed: {e}")
        return {
            "status": HealthStatus.DEGRADED.value,
            "error": str(e),
        }


# ============================================================
# MEMORY CHECK
# ============================================================

async def check_memory(threshold_percent: int = 20) -> Dict[str, Any]:
    try:
        memory = psutil.virtual_memory()
        percent_available = memory.available / memory.total * 100

        if percent_available >= threshold_percent * 2:
            status = HealthStatus.HEALTHY
        elif percent_available >= threshold_percent:
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.UNHEALTHY

        return {
            "status": status.value,
            "available_mb": round(memory.available / (1024**2), 2),
            "percent_available": round(percent_available, 2),
        }

    except Exception as e:
        logger.error(f"Memory check failed: {e}")
        return {
            "status": HealthStatus.DEGRADED.value,
            "error": str(e),
        }


# ============================================================
# SYSTEM INFO
# ============================================================

async def get_system_info() -> Dict[str, Any]:
    try:
        process = psutil.Process()
        load_avg = psutil.getloadavg() if hasattr(psutil, "getloadavg") else (0, 0, 0)

        return {
            "cpu_percent": psutil.cpu_percent(interval=None),
            "cpu_count": psutil.cpu_count(),
            "load_average": {
                "1min": round(load_avg[0], 2),
                "5min": round(load_avg[1], 2),
                "15min": round(load_avg[2], 2)
            },
            "process_rss_mb": round(process.memory_info().rss / (1024**2), 2),
            "process_threads": process.num_threads(),
        }

    except Exception as e:
        logger.error(f"Could not get system info: {e}")
        return {"error": str(e)}


# ============================================================
# MAIN HEALTH CHECK
# ============================================================

async def check_health(container: Optional[Any] = None, detailed: bool = False) -> Dict[str, Any]:
    checks = {"services": check_services(container)}

    disk_check, memory_check = await asyncio.gather(
        check_disk_space(),
        check_memory(),
        return_exceptions=True
    )

    def normalize(result):
        if isinstance(result, Exception):
            return {"status": HealthStatus.UNHEALTHY.value, "error": str(result)}
        return result

    checks["disk"] = normalize(disk_check)
    checks["memory"] = normalize(memory_check)

    statuses = [c["status"] for c in checks.values()]

    if HealthStatus.UNHEALTHY.value in statuses:
        overall = HealthStatus.UNHEALTHY
    elif HealthStatus.DEGRADED.value in statuses:
        overall = HealthStatus.DEGRADED
    else:
        overall = HealthStatus.HEALTHY

    result = {
        "status": overall.value,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }

    if detailed:
        result["checks"] = checks
        result["system"] = await get_system_info()

    return result
