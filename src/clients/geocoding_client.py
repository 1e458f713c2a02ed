"""Address geocoding providers (US Census and OpenStreetMap Nominatim)."""

import asyncio

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from src.exceptions import UpstreamError
from src.schemas.reports import Coordinates
from src.utils.logger import get_logger

log = get_logger(__name__)


class _CensusPoint(BaseModel):
    x: float
    y: float


class _CensusMatch(BaseModel):
    model_config = ConfigDict(extra="ignore")

    coordinates: _CensusPoint | None = None


class _CensusResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    addressMatches: list[_CensusMatch] = []


class CensusPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    result: _CensusResult | None = None


class NominatimPlace(BaseModel):
    model_config = ConfigDict(extra="ignore")

    lat: float
    lon: float


class CensusGeocoder:
    """US Census one-line address geocoder. No key required."""

    name = "census"

    def __init__(self, url: str, benchmark: str = "Public_AR_Current", timeout: float = 5.0):
        self.url = url
        self.benchmark = benchmark
        self.timeout = timeout

    async def _get(self, params: dict) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.url, params=params)

    async def geocode(self, address: str) -> Coordinates | None:
        """Return the first match's coordinates, or None when nothing matched."""
        params = {"address": address, "benchmark": self.benchmark, "format": "json"}
        # httpx timeouts are per phase; this bounds the whole call
        try:
            response = await asyncio.wait_for(self._get(params), self.timeout)
            response.raise_for_status()
            payload = CensusPayload.model_validate_json(response.content)
        except asyncio.TimeoutError:
            raise UpstreamError(step="census_geocode", message=f"timed out after {self.timeout}s")
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                step="census_geocode",
                message=str(e),
                status_code=e.response.status_code,
            )
        except (httpx.HTTPError, ValidationError) as e:
            raise UpstreamError(step="census_geocode", message=f"{type(e).__name__}: {e}")

        matches = payload.result.addressMatches if payload.result else []
        for match in matches[:1]:
            if match.coordinates is not None:
                return Coordinates(lat=match.coordinates.y, lng=match.coordinates.x)
        return None


class NominatimGeocoder:
    """OpenStreetMap Nominatim search. Requires an identifying User-Agent."""

    name = "nominatim"

    def __init__(self, url: str, user_agent: str, timeout: float = 5.0):
        self.url = url
        self.user_agent = user_agent
        self.timeout = timeout

    async def _get(self, params: dict) -> httpx.Response:
        headers = {"User-Agent": self.user_agent}
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await client.get(self.url, params=params, headers=headers)

    async def geocode(self, address: str) -> Coordinates | None:
        params = {"q": address, "format": "json", "limit": 1}
        try:
            response = await asyncio.wait_for(self._get(params), self.timeout)
            response.raise_for_status()
            places = [NominatimPlace.model_validate(p) for p in response.json()]
        except asyncio.TimeoutError:
            raise UpstreamError(
                step="nominatim_geocode", message=f"timed out after {self.timeout}s"
            )
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                step="nominatim_geocode",
                message=str(e),
                status_code=e.response.status_code,
            )
        except (httpx.HTTPError, ValidationError, ValueError, TypeError) as e:
            raise UpstreamError(step="nominatim_geocode", message=f"{type(e).__name__}: {e}")

        if not places:
            return None
        return Coordinates(lat=places[0].lat, lng=places[0].lon)
