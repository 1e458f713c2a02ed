"""Report ingestion (CRM webhook) and report data router."""

from fastapi import APIRouter, Request

from src.dependencies import BearerCheck, ReportServiceDep
from src.exceptions import ResourceNotFoundError
from src.schemas.reports import CreateReportRequest, CreateReportResponse, ReportPage
from src.utils.logger import get_logger

log = get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])

# Path the CRM automation was originally configured with
legacy_router = APIRouter(tags=["Reports"])


async def _create(
    body: CreateReportRequest, request: Request, report_service: ReportServiceDep
) -> CreateReportResponse:
    log.info("create report requested", city=body.city, state=body.state, zip=body.zip)
    return await report_service.create_report(body, host=request.headers.get("host"))


@router.post("", response_model=CreateReportResponse)
async def create_report(
    body: CreateReportRequest,
    request: Request,
    report_service: ReportServiceDep,
    _auth: BearerCheck,
) -> CreateReportResponse:
    """
    Create a personalized report for a CRM lead.

    Geocodes the address when lat/lng are not supplied and returns the
    unique report URL to text or email to the lead.
    """
    return await _create(body, request, report_service)


@legacy_router.post("/api/create-report", response_model=CreateReportResponse)
async def create_report_legacy(
    body: CreateReportRequest,
    request: Request,
    report_service: ReportServiceDep,
    _auth: BearerCheck,
) -> CreateReportResponse:
    """Same as ``POST /api/v1/reports``."""
    return await _create(body, request, report_service)


@router.get("/{report_id}", response_model=ReportPage)
async def get_report(report_id: str, report_service: ReportServiceDep) -> ReportPage:
    """Get the assembled report data. Marks the report as viewed."""
    page = await report_service.build_page(report_id)
    if page is None:
        raise ResourceNotFoundError("Report", report_id)
    return page
