"""Factory functions for external API clients."""

from functools import lru_cache

from src.config import get_settings
from src.clients.geocoding_client import CensusGeocoder, NominatimGeocoder
from src.clients.water_data_client import WaterDataClient


@lru_cache(maxsize=1)
def get_water_data_client() -> WaterDataClient:
    """
    Create singleton water data client.

    Returns:
        WaterDataClient instance
    """
    settings = get_settings()
    return WaterDataClient(
        api_key=settings.water_api_key,
        base_url=settings.water_api_base_url,
        timeout=settings.water_api_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_census_geocoder() -> CensusGeocoder:
    settings = get_settings()
    return CensusGeocoder(
        url=settings.census_geocoder_url,
        benchmark=settings.census_benchmark,
        timeout=settings.geocoder_timeout_seconds,
    )


@lru_cache(maxsize=1)
def get_nominatim_geocoder() -> NominatimGeocoder:
    settings = get_settings()
    return NominatimGeocoder(
        url=settings.nominatim_url,
        user_agent=settings.geocoder_user_agent,
        timeout=settings.geocoder_timeout_seconds,
    )
