"""FastAPI dependency injection providers."""

import hmac
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from src.database import get_db
from src.config import Settings, get_settings
from src.exceptions import UnauthorizedError
from src.factories.service_factories import (
    get_report_service,
    get_water_diagnostics_service,
)
from src.services.diagnostics_service import WaterDiagnosticsService
from src.services.report_service import ReportService
from src.utils.logger import get_logger

log = get_logger(__name__)


# Type aliases for cleaner router signatures
DbSession = Annotated[AsyncSession, Depends(get_db)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


# Service dependencies
def get_report_service_dep(db: DbSession) -> ReportService:
    """Get ReportService with database session."""
    return get_report_service(db)


ReportServiceDep = Annotated[ReportService, Depends(get_report_service_dep)]
WaterDiagnosticsDep = Annotated[WaterDiagnosticsService, Depends(get_water_diagnostics_service)]


# ============================================================================
# Authentication Dependencies
# ============================================================================


def verify_bearer_secret(
    settings: SettingsDep,
    authorization: Annotated[str | None, Header(alias="Authorization")] = None,
) -> None:
    """Verify the Authorization header carries the configured bearer secret."""
    if not settings.api_secret or not authorization:
        log.warning("bearer secret rejected", reason="missing header or unconfigured")
        raise UnauthorizedError()

    expected = f"Bearer {settings.api_secret}"
    if not hmac.compare_digest(authorization.encode(), expected.encode()):
        log.warning("bearer secret rejected", reason="secret mismatch")
        raise UnauthorizedError()


BearerCheck = Annotated[None, Depends(verify_bearer_secret)]
