"""Schemas for the water data provider and derived contaminant views."""

from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

Classification = Literal["exceeds", "warning", "ok"]

CLASSIFICATION_RANK: dict[str, int] = {"exceeds": 0, "warning": 1, "ok": 2}


def _to_optional_float(value: Any) -> float | None:
    """Coerce loosely typed numerics; anything unparsable counts as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip().rstrip("%").strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            return None
    return None


def _to_optional_text(value: Any) -> str | None:
    """Numbers become strings, lists of strings are joined, other shapes count as absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, list):
        parts = [str(v).strip() for v in value if isinstance(v, (str, int, float)) and str(v).strip()]
        return ", ".join(parts) or None
    return None


def is_usable(value: float | None) -> bool:
    """True when an optional numeric is present and strictly positive."""
    return value is not None and value > 0


# ----------------------------------------------------------------------------
# Upstream payloads
# ----------------------------------------------------------------------------


class UtilityEntry(BaseModel):
    """One public water system returned by the utility directory."""

    model_config = ConfigDict(extra="ignore")

    pwsid: str
    name: str | None = Field(None, validation_alias=AliasChoices("name", "pws_name"))
    city: str | None = None
    state_code: str | None = None


class UtilityListPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    result: str | None = None
    data: list[UtilityEntry] | None = None


class ContaminantRecord(BaseModel):
    """Aggregated test statistics for one analyte at one utility."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str = "Unnamed contaminant"
    type: str | None = None
    unit: str | None = None
    median: float | None = None
    max: float | None = None
    detection_rate: float | None = Field(
        None, validation_alias=AliasChoices("detection_rate", "pct_detected")
    )
    slr: float | None = None
    fed_mcl: float | None = None
    health_effects: str | None = None
    sources: str | None = None
    body_effects: list[Any] | str | None = None

    @field_validator("median", "max", "detection_rate", "slr", "fed_mcl", mode="before")
    @classmethod
    def coerce_numeric(cls, v: Any) -> float | None:
        return _to_optional_float(v)

    @field_validator("type", "unit", "health_effects", "sources", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str | None:
        return _to_optional_text(v)

    @field_validator("name", mode="before")
    @classmethod
    def default_blank_name(cls, v: Any) -> str:
        return _to_optional_text(v) or "Unnamed contaminant"


class UtilityResultsPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    result: str | None = None
    # Entries stay raw so one malformed record cannot reject the rest
    data: list[Any] | None = None


def parse_contaminant_records(entries: list[Any]) -> tuple[list[ContaminantRecord], int]:
    """Validate each raw entry on its own. Returns the records and how many were skipped."""
    records: list[ContaminantRecord] = []
    skipped = 0
    for entry in entries:
        try:
            records.append(ContaminantRecord.model_validate(entry))
        except ValidationError:
            skipped += 1
    return records, skipped


# ----------------------------------------------------------------------------
# Derived views
# ----------------------------------------------------------------------------


class ContaminantView(BaseModel):
    """An analyte selected for display on the report page."""

    name: str
    description: str
    detected_level: float
    unit: str
    ewg_guideline: float = Field(..., description="Guideline actually used for the ratio")
    epa_limit: float = Field(0, description="Federal legal limit, 0 when unknown")
    times_above_guideline: int
    status: Classification
    health_effects: str = ""
    sources: str = ""
    body_effects: list[str] = Field(default_factory=list)

    @property
    def has_details(self) -> bool:
        return bool(self.health_effects or self.sources or self.body_effects)


class PipelineOutcome(BaseModel):
    """Contaminants for one report plus the reason when the result is degraded."""

    contaminants: list[ContaminantView] = Field(default_factory=list)
    diagnostic: str | None = None
    source_count: int = 0
    pwsid: str | None = None

    @property
    def degraded(self) -> bool:
        return self.diagnostic is not None
