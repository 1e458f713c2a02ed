"""Repository for Report model operations."""

import secrets
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from src.models.report import Report
from src.utils.logger import get_logger

log = get_logger(__name__)


def generate_report_id() -> str:
    """Short, URL-safe, unguessable id: 12 hex chars from 6 random bytes."""
    return secrets.token_hex(6)


class ReportRepository:
    """Repository for Report CRUD operations."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        client_name: str,
        address: str,
        city: str,
        state: str,
        zip_code: str,
        phone: Optional[str] = None,
        lat: Optional[float] = None,
        lng: Optional[float] = None,
    ) -> Report:
        """
        Create a new report with a freshly generated id.

        Caller is responsible for committing the transaction.
        """
        report = Report(
            id=generate_report_id(),
            client_name=client_name,
            address=address,
            city=city,
            state=state,
            zip=zip_code,
            phone=phone,
            lat=lat,
            lng=lng,
            viewed=False,
        )
        self.session.add(report)
        await self.session.flush()
        await self.session.refresh(report)
        log.info("report created", report_id=report.id, city=city, state=state)
        return report

    async def get_by_id(self, report_id: str) -> Optional[Report]:
        """Get report by id without side effects."""
        result = await self.session.execute(select(Report).where(Report.id == report_id))
        return result.scalar_one_or_none()

    async def mark_viewed(self, report_id: str) -> bool:
        """Flip viewed to true. Returns True only for the call that flipped it."""
        result = await self.session.execute(
            update(Report)
            .where(Report.id == report_id, Report.viewed.is_(False))
            .values(viewed=True)
        )
        await self.session.flush()
        flipped = (result.rowcount or 0) > 0
        if flipped:
            log.info("report first viewed", report_id=report_id)
        return flipped

    async def get_and_mark_viewed(self, report_id: str) -> Optional[Report]:
        """Load a report for display, recording the view on first read."""
        report = await self.get_by_id(report_id)
        if report is None:
            log.debug("report not found", report_id=report_id)
            return None

        if not report.viewed:
            await self.mark_viewed(report_id)
            # Already persisted by the UPDATE; keep the flush from repeating it
            set_committed_value(report, "viewed", True)
        return report
