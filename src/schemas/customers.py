"""Nearby customer schemas."""

from datetime import date

from pydantic import BaseModel, ConfigDict


class NearbyCustomer(BaseModel):
    """A previously served household, reduced to what the map needs."""

    model_config = ConfigDict(from_attributes=True)

    lat: float
    lng: float
    install_date: date | None = None
