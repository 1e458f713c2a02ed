"""Ops diagnostics router."""

from fastapi import APIRouter, Query

from src.dependencies import BearerCheck, WaterDiagnosticsDep
from src.schemas.ops import WaterCheckResponse
from src.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/ops", tags=["Ops"])


@router.get("/water-check", response_model=WaterCheckResponse)
async def water_check(
    diagnostics: WaterDiagnosticsDep,
    _auth: BearerCheck,
    city: str = Query("Farragut", min_length=1),
    state: str = Query("TN", min_length=2, max_length=2),
) -> WaterCheckResponse:
    """Probe the water data provider for a city, reporting each step's outcome."""
    log.info("water check requested", city=city, state=state)
    return await diagnostics.check(city, state)
