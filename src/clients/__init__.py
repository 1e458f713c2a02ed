"""External API clients."""

from src.clients.geocoding_client import CensusGeocoder, NominatimGeocoder
from src.clients.water_data_client import WaterDataClient

__all__ = [
    "CensusGeocoder",
    "NominatimGeocoder",
    "WaterDataClient",
]
