"""Schemas for operator diagnostics."""

from pydantic import BaseModel, Field


class SampleContaminant(BaseModel):
    name: str
    median: float | None = None
    unit: str | None = None
    fed_mcl: float | None = None
    slr: float | None = None


class WaterCheckResponse(BaseModel):
    """Step-by-step probe of the water data provider for one city."""

    city: str
    state: str
    has_api_key: bool
    key_length: int = 0
    key_preview: str = "MISSING"
    utility_status: int | None = None
    utility_result: str | None = None
    utility_count: int = 0
    pwsid: str | None = None
    results_status: int | None = None
    results_result: str | None = None
    contaminant_count: int = 0
    sample_contaminants: list[SampleContaminant] = Field(default_factory=list)
    error: str | None = None
