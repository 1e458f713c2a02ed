"""Lead-facing HTML report page."""

from fastapi import APIRouter, Query, status
from fastapi.responses import HTMLResponse

from src.dependencies import ReportServiceDep, SettingsDep
from src.utils.logger import get_logger
from src.utils.page_renderer import (
    NOT_FOUND_NO_ID,
    NOT_FOUND_UNKNOWN,
    render_not_found,
    render_report,
)

log = get_logger(__name__)

router = APIRouter(tags=["Pages"])


@router.get("/report", response_class=HTMLResponse)
async def report_page(
    report_service: ReportServiceDep,
    settings: SettingsDep,
    report_id: str | None = Query(None, alias="id"),
) -> HTMLResponse:
    """Render the personalized water report for the id in the link."""
    if not report_id:
        return HTMLResponse(
            content=render_not_found(NOT_FOUND_NO_ID), status_code=status.HTTP_404_NOT_FOUND
        )

    page = await report_service.build_page(report_id)
    if page is None:
        log.info("report page not found", report_id=report_id)
        return HTMLResponse(
            content=render_not_found(NOT_FOUND_UNKNOWN), status_code=status.HTTP_404_NOT_FOUND
        )

    return HTMLResponse(
        content=render_report(page, cta_url=settings.cta_url, cta_phone=settings.cta_phone)
    )
