"""Health check router."""

from datetime import datetime, timezone

from fastapi import APIRouter
from sqlalchemy import text

from src.dependencies import DbSession, SettingsDep
from src.schemas.health import HealthResponse, ServiceStatus
from src.utils.logger import get_logger

router = APIRouter()
log = get_logger(__name__)

VERSION = "0.1.0"


@router.get("/health", response_model=HealthResponse)
async def health_check(db: DbSession, settings: SettingsDep) -> HealthResponse:
    """
    Health check for the report service.

    Checks:
    - Database connectivity
    - Water data API key configuration

    Returns:
        HealthResponse with status and service details
    """
    services = {}
    overall_status = "ok"

    try:
        await db.execute(text("SELECT 1"))
        services["database"] = ServiceStatus(status="healthy", message="Connected")
    except Exception as e:
        log.error("health check failed", service="database", error=str(e))
        services["database"] = ServiceStatus(status="unhealthy", message="Service unavailable")
        overall_status = "degraded"

    if settings.has_water_api_key():
        services["water_api"] = ServiceStatus(status="healthy", message="API key configured")
    else:
        log.warning("health check failed", service="water_api", error="no api key")
        services["water_api"] = ServiceStatus(status="unhealthy", message="API key not configured")
        overall_status = "degraded"

    return HealthResponse(
        status=overall_status,
        version=VERSION,
        services=services,
        timestamp=datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
    )
