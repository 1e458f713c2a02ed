"""Address geocoding with an ordered provider fallback chain."""

from typing import Protocol, Sequence

from src.exceptions import UpstreamError
from src.schemas.reports import Coordinates
from src.utils.attempts import FetchResult, first_success
from src.utils.logger import get_logger

log = get_logger(__name__)


class Geocoder(Protocol):
    name: str

    async def geocode(self, address: str) -> Coordinates | None: ...


def format_full_address(address: str, city: str, state: str, zip_code: str) -> str:
    return f"{address}, {city}, {state} {zip_code}"


class GeocodingService:
    """Resolve a street address to coordinates.

    Providers are tried one at a time in the given order; a provider is only
    called when every earlier one failed or found nothing. Provider failures
    are logged and never raised.
    """

    def __init__(self, providers: Sequence[Geocoder]):
        self.providers = list(providers)

    async def _attempt(self, provider: Geocoder, address: str) -> FetchResult[Coordinates]:
        try:
            coords = await provider.geocode(address)
        except UpstreamError as e:
            return FetchResult.failure(e.message, status_code=e.status_code)
        if coords is None:
            return FetchResult.failure("no match")
        return FetchResult.success(coords)

    async def geocode(
        self, address: str, city: str, state: str, zip_code: str
    ) -> Coordinates | None:
        full_address = format_full_address(address, city, state, zip_code)

        def make_attempt(provider: Geocoder):
            return lambda: self._attempt(provider, full_address)

        coords = await first_success(
            [(p.name, make_attempt(p)) for p in self.providers], fallback=None
        )
        if coords is None:
            log.warning("geocoding failed for all providers", address=full_address)
        else:
            log.info("address geocoded", address=full_address, lat=coords.lat, lng=coords.lng)
        return coords
