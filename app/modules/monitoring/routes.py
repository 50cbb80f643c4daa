"""
Monitoring API routes
"""
from fastapi import APIRouter
from fastapi.responses import Response

from core.monitoring.metrics import get_metrics, get_metrics_content_type

router = APIRouter(prefix="/monitoring", tags=["Monitoring"])


# ===================================
# Metrics Endpoint (Prometheus format)
# ===================================
@router.get(
    "/metrics",
    response_class=Response,
    summary="Prometheus Metrics",
    description="Get application metrics in Prometheus format"
)
async def metrics_endpoint():
    """
    Export metrics in Prometheus format
    This endpoint is typically scraped by Prometheus server
    """
    return Response(
        content=get_metrics(),
        media_type=get_metrics_content_type()
    )
