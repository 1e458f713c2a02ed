"""Resolve a city/state to the public water system that serves it."""

from src.clients.water_data_client import WaterDataClient
from src.exceptions import UpstreamError
from src.utils.attempts import FetchResult
from src.utils.logger import get_logger

log = get_logger(__name__)


class UtilityResolver:
    """Map a location to a single utility id (PWSID).

    The directory can list several systems for one city. The first entry is
    taken as authoritative, with no further disambiguation.
    """

    def __init__(self, client: WaterDataClient):
        self.client = client

    async def resolve(self, city: str | None, state: str | None) -> FetchResult[str]:
        try:
            payload = await self.client.list_utilities(city, state)
        except UpstreamError as e:
            log.error(
                "utility lookup failed",
                step=e.step,
                status_code=e.status_code,
                error=e.message,
                city=city,
                state=state,
            )
            return FetchResult.failure(f"util fetch failed: {e.message}", status_code=e.status_code)

        if payload.result != "OK" or not payload.data:
            log.warning(
                "no utilities found",
                step="utility_lookup",
                result=payload.result,
                city=city,
                state=state,
            )
            return FetchResult.failure(f"no utils for {city}")

        if len(payload.data) > 1:
            log.info(
                "multiple utilities for location, using first",
                city=city,
                state=state,
                candidates=[u.pwsid for u in payload.data[:5]],
            )

        return FetchResult.success(payload.data[0].pwsid)
