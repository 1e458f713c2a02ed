"""Factory functions for business logic services."""

from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncSession

from src.config import get_settings
from src.database import AsyncSessionLocal
from src.factories.client_factories import (
    get_census_geocoder,
    get_nominatim_geocoder,
    get_water_data_client,
)
from src.policies import (
    contaminant_policy_from_settings,
    proximity_policy_from_settings,
    review_policy_from_settings,
)
from src.repositories.report_repository import ReportRepository
from src.schemas.reports import Coordinates
from src.services.contaminant_service import ContaminantService
from src.services.customer_service import NearbyCustomerFinder
from src.services.diagnostics_service import WaterDiagnosticsService
from src.services.geocoding_service import GeocodingService
from src.services.review_service import ReviewSelector
from src.services.report_service import ReportService
from src.services.utility_service import UtilityResolver


@lru_cache(maxsize=1)
def get_geocoding_service() -> GeocodingService:
    """
    Create singleton geocoding service.

    Provider order is significant: Census first, Nominatim only as fallback.
    """
    return GeocodingService(providers=[get_census_geocoder(), get_nominatim_geocoder()])


@lru_cache(maxsize=1)
def get_contaminant_service() -> ContaminantService:
    settings = get_settings()
    client = get_water_data_client()
    return ContaminantService(
        client=client,
        resolver=UtilityResolver(client),
        policy=contaminant_policy_from_settings(settings),
        has_api_key=settings.has_water_api_key(),
        debug=settings.debug,
    )


@lru_cache(maxsize=1)
def get_customer_finder() -> NearbyCustomerFinder:
    """
    Create singleton customer finder.

    Opens its own session per search so it can run alongside other queries.
    """
    settings = get_settings()
    return NearbyCustomerFinder(
        session_factory=AsyncSessionLocal,
        policy=proximity_policy_from_settings(settings),
    )


@lru_cache(maxsize=1)
def get_review_selector() -> ReviewSelector:
    settings = get_settings()
    return ReviewSelector(
        session_factory=AsyncSessionLocal,
        policy=review_policy_from_settings(settings),
    )


def get_report_service(db_session: AsyncSession) -> ReportService:
    """
    Create ReportService with dependencies.

    Note: Not cached because depends on request-scoped db session.

    Args:
        db_session: Database session

    Returns:
        ReportService instance
    """
    settings = get_settings()
    return ReportService(
        report_repository=ReportRepository(db_session),
        geocoding_service=get_geocoding_service(),
        contaminant_service=get_contaminant_service(),
        customer_finder=get_customer_finder(),
        review_selector=get_review_selector(),
        default_center=Coordinates(lat=settings.default_lat, lng=settings.default_lng),
        site_url=settings.site_url,
        map_token=settings.map_token,
    )


def get_water_diagnostics_service() -> WaterDiagnosticsService:
    return WaterDiagnosticsService(client=get_water_data_client())
