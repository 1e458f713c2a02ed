"""Repository for customer location queries."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.customer import Customer
from src.utils.logger import get_logger

log = get_logger(__name__)


class CustomerRepository:
    """Read-only access to the imported customer list."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def find_in_box(
        self, lat: float, lng: float, delta_deg: float, limit: Optional[int] = None
    ) -> list[Customer]:
        """Customers whose lat and lng both fall within +/- delta of the center."""
        stmt = select(Customer).where(
            Customer.lat >= lat - delta_deg,
            Customer.lat <= lat + delta_deg,
            Customer.lng >= lng - delta_deg,
            Customer.lng <= lng + delta_deg,
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self.session.execute(stmt)
        customers = list(result.scalars().all())
        log.debug("customers in box", delta_deg=round(delta_deg, 4), count=len(customers))
        return customers
