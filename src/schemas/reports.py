"""Schemas for report creation and the assembled report page."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from src.schemas.customers import NearbyCustomer
from src.schemas.reviews import ReviewItem
from src.schemas.water import ContaminantView

REQUIRED_LEAD_FIELDS = ("client_name", "address", "city", "state", "zip")


class CreateReportRequest(BaseModel):
    """Lead payload posted by the CRM automation.

    Every field is optional at the schema level so that missing required
    fields can be reported together by name with a 400.
    """

    model_config = ConfigDict(extra="ignore")

    client_name: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    phone: str | None = None
    lat: float | None = None
    lng: float | None = None

    @field_validator("client_name", "address", "city", "state", "zip", "phone", mode="before")
    @classmethod
    def stringify(cls, v: Any) -> Any:
        # CRMs frequently send zip codes and phone numbers as numbers
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("lat", "lng", mode="before")
    @classmethod
    def blank_coordinate(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def missing_fields(self) -> list[str]:
        return [name for name in REQUIRED_LEAD_FIELDS if not getattr(self, name)]

    @property
    def has_coordinates(self) -> bool:
        return self.lat is not None and self.lng is not None


class Coordinates(BaseModel):
    lat: float | None = None
    lng: float | None = None


class CreateReportResponse(BaseModel):
    success: bool = True
    report_id: str
    url: str
    geocoded: bool = Field(..., description="True when coordinates were not supplied by the caller")
    coordinates: Coordinates


class ReportSummary(BaseModel):
    """The persisted lead fields shown on the page."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    client_name: str
    address: str
    city: str
    state: str
    zip: str
    phone: str | None = None
    lat: float | None = None
    lng: float | None = None
    viewed: bool = False
    created_at: datetime | None = None


class ReportPage(BaseModel):
    """Everything the report page renders, assembled per request."""

    report: ReportSummary
    first_name: str
    full_address: str
    center: Coordinates
    contaminants: list[ContaminantView] = Field(default_factory=list)
    flagged_count: int = 0
    nearby_customers: list[NearbyCustomer] = Field(default_factory=list)
    customer_count: int = 0
    reviews: list[ReviewItem] = Field(default_factory=list)
    five_star_total: int = 0
    map_token: str | None = None
