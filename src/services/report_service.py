"""Report creation and assembly of the personalized report page."""

import asyncio
from typing import Awaitable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from src.exceptions import DatabaseError, MissingFieldsError
from src.models.report import Report
from src.repositories.report_repository import ReportRepository
from src.schemas.reports import (
    Coordinates,
    CreateReportRequest,
    CreateReportResponse,
    ReportPage,
    ReportSummary,
)
from src.schemas.reviews import ReviewSelection
from src.services.contaminant_service import ContaminantService
from src.services.customer_service import NearbyCustomerFinder
from src.services.geocoding_service import GeocodingService, format_full_address
from src.services.review_service import ReviewSelector
from src.utils.logger import get_logger

log = get_logger(__name__)

T = TypeVar("T")


async def _enrichment(name: str, awaitable: Awaitable[T], fallback: T) -> T:
    """Await one optional enrichment branch; any failure yields ``fallback``."""
    try:
        return await awaitable
    except Exception as e:
        log.error(
            "report enrichment failed",
            step=name,
            error_type=type(e).__name__,
            error=str(e),
        )
        return fallback


class ReportService:
    """Creates reports for CRM leads and builds the data behind each report page."""

    def __init__(
        self,
        report_repository: ReportRepository,
        geocoding_service: GeocodingService,
        contaminant_service: ContaminantService,
        customer_finder: NearbyCustomerFinder,
        review_selector: ReviewSelector,
        default_center: Coordinates,
        site_url: Optional[str] = None,
        map_token: Optional[str] = None,
    ):
        self.report_repository = report_repository
        self.geocoding_service = geocoding_service
        self.contaminant_service = contaminant_service
        self.customer_finder = customer_finder
        self.review_selector = review_selector
        self.default_center = default_center
        self.site_url = site_url
        self.map_token = map_token

    def build_report_url(self, report_id: str, host: Optional[str]) -> str:
        base = self.site_url or f"https://{host}"
        return f"{base.rstrip('/')}/report?id={report_id}"

    async def create_report(
        self, request: CreateReportRequest, host: Optional[str] = None
    ) -> CreateReportResponse:
        """
        Persist a report for a lead, geocoding the address when needed.

        Raises:
            MissingFieldsError: If any required lead field is absent
            DatabaseError: If the report could not be stored
        """
        missing = request.missing_fields()
        if missing:
            raise MissingFieldsError(missing)

        lat, lng = request.lat, request.lng
        geocoded = not request.has_coordinates
        if geocoded:
            coords = await self.geocoding_service.geocode(
                request.address, request.city, request.state, request.zip
            )
            if coords is not None:
                lat, lng = coords.lat, coords.lng

        try:
            report = await self.report_repository.create(
                client_name=request.client_name,
                address=request.address,
                city=request.city,
                state=request.state,
                zip_code=request.zip,
                phone=request.phone or None,
                lat=lat,
                lng=lng,
            )
        except SQLAlchemyError as e:
            log.error("report insert failed", error=str(e), client_city=request.city)
            raise DatabaseError("Failed to create report")

        return CreateReportResponse(
            success=True,
            report_id=report.id,
            url=self.build_report_url(report.id, host),
            geocoded=geocoded,
            coordinates=Coordinates(lat=lat, lng=lng),
        )

    async def build_page(self, report_id: str) -> Optional[ReportPage]:
        """
        Load a report (recording the view) and gather its enrichment data.

        Contaminants, nearby customers and reviews are fetched concurrently
        and each degrades to an empty value on failure. Returns None when
        the report does not exist or cannot be read.
        """
        try:
            report = await self.report_repository.get_and_mark_viewed(report_id)
        except SQLAlchemyError as e:
            log.error("report read failed", report_id=report_id, error=str(e))
            return None
        if report is None:
            return None

        center = self._center_for(report)

        contaminants, customers, selection = await asyncio.gather(
            _enrichment(
                "contaminants",
                self.contaminant_service.get_contaminants(report.city, report.state),
                [],
            ),
            _enrichment(
                "nearby_customers",
                self.customer_finder.find(center.lat, center.lng),
                [],
            ),
            _enrichment(
                "reviews",
                self.review_selector.select(report.zip),
                ReviewSelection(),
            ),
        )

        flagged = sum(1 for c in contaminants if c.status in ("exceeds", "warning"))
        log.info(
            "report page assembled",
            report_id=report.id,
            contaminants=len(contaminants),
            flagged=flagged,
            customers=len(customers),
            reviews=len(selection.reviews),
        )

        return ReportPage(
            report=ReportSummary.model_validate(report),
            first_name=(report.client_name.split() or [report.client_name])[0],
            full_address=format_full_address(
                report.address, report.city, report.state, report.zip
            ),
            center=center,
            contaminants=contaminants,
            flagged_count=flagged,
            nearby_customers=customers,
            customer_count=len(customers),
            reviews=selection.reviews,
            five_star_total=selection.five_star_total,
            map_token=self.map_token,
        )

    def _center_for(self, report: Report) -> Coordinates:
        # Zero coordinates are treated as missing, like an unset value
        if report.lat and report.lng:
            return Coordinates(lat=report.lat, lng=report.lng)
        return self.default_center
