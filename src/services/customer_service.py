"""Find existing customers near a lead, widening the search until a quorum is met."""

from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.policies import ProximityPolicy
from src.repositories.customer_repository import CustomerRepository
from src.schemas.customers import NearbyCustomer
from src.utils.logger import get_logger

log = get_logger(__name__)


class NearbyCustomerFinder:
    """Expanding bounding-box search over the customer list.

    Radii are tried smallest first and the first tier with at least
    ``quorum`` customers wins. If none reaches quorum, the largest tier's
    result is returned; if that query failed, the result is empty.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        policy: ProximityPolicy,
        repository_factory: Callable[[AsyncSession], CustomerRepository] = CustomerRepository,
    ):
        self.session_factory = session_factory
        self.policy = policy
        self.repository_factory = repository_factory

    async def find(self, lat: float, lng: float) -> list[NearbyCustomer]:
        found: list[NearbyCustomer] = []

        async with self.session_factory() as session:
            repo = self.repository_factory(session)

            for radius in self.policy.radii_miles:
                delta = self.policy.degree_delta(radius)
                try:
                    rows = await repo.find_in_box(lat, lng, delta)
                except SQLAlchemyError as e:
                    log.error(
                        "customer query failed",
                        step="nearby_customers",
                        radius_miles=radius,
                        error=str(e),
                    )
                    await session.rollback()
                    found = []
                    continue

                found = [NearbyCustomer.model_validate(row) for row in rows]
                if len(found) >= self.policy.quorum:
                    log.info("customer quorum reached", radius_miles=radius, count=len(found))
                    return found

        log.info(
            "customer quorum not reached",
            radius_miles=self.policy.radii_miles[-1] if self.policy.radii_miles else None,
            count=len(found),
            quorum=self.policy.quorum,
        )
        return found
