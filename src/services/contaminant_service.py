"""Contaminant filtering and ranking for a utility's published test results.

Each raw record is judged on its own: it must have been meaningfully
detected, must have a guideline to compare against, and must sit at least
``warning_ratio`` times above that guideline. Survivors are classified,
ranked (most severe first) and capped.
"""

import math
from typing import Iterable, Optional

from src.clients.water_data_client import WaterDataClient
from src.exceptions import UpstreamError
from src.policies import ContaminantPolicy
from src.schemas.water import (
    CLASSIFICATION_RANK,
    Classification,
    ContaminantRecord,
    ContaminantView,
    PipelineOutcome,
    is_usable,
    parse_contaminant_records,
)
from src.services.utility_service import UtilityResolver
from src.utils.logger import get_logger

log = get_logger(__name__)


def detected_level(record: ContaminantRecord) -> Optional[float]:
    """Prefer the maximum reading, fall back to the median."""
    if is_usable(record.max):
        return record.max
    if is_usable(record.median):
        return record.median
    return None


def was_detected(record: ContaminantRecord) -> bool:
    # An absent detection rate places no constraint on the record
    if record.detection_rate is None:
        return True
    return record.detection_rate > 0


def select_guideline(record: ContaminantRecord) -> Optional[float]:
    """State health guideline first, federal legal limit second."""
    if is_usable(record.slr):
        return record.slr
    if is_usable(record.fed_mcl):
        return record.fed_mcl
    return None


def times_above(detected: float, guideline: float) -> int:
    # Half-up rounding; round() would send 2.5 to 2
    return int(math.floor(detected / guideline + 0.5))


def classify(ratio: int, policy: ContaminantPolicy) -> Classification:
    if ratio >= policy.exceeds_ratio:
        return "exceeds"
    if ratio >= policy.warning_ratio:
        return "warning"
    return "ok"


def _clip(text: str, max_chars: int) -> str:
    if len(text) > max_chars:
        return text[: max_chars - 3] + "..."
    return text


def describe(record: ContaminantRecord, max_chars: int = 120) -> str:
    """Short description: first sentence of health effects, else of sources."""
    if record.health_effects:
        return _clip(record.health_effects.split(". ")[0], max_chars)
    if record.sources:
        return _clip(record.sources.split(". ")[0], max_chars)
    return _clip(f"{record.type or 'Contaminant'} detected in your water", max_chars)


def normalize_body_effects(raw: object) -> list[str]:
    if isinstance(raw, list):
        return [str(item) for item in raw]
    if isinstance(raw, str):
        return [part.strip() for part in raw.split(",") if part.strip()]
    return []


def evaluate_record(
    record: ContaminantRecord, policy: ContaminantPolicy
) -> Optional[ContaminantView]:
    """Turn one raw record into a display view, or None if it is not report-worthy."""
    detected = detected_level(record)
    if detected is None:
        return None

    if not was_detected(record):
        return None

    guideline = select_guideline(record)
    if guideline is None:
        return None

    ratio = times_above(detected, guideline)
    if ratio < policy.warning_ratio:
        return None

    return ContaminantView(
        name=record.name,
        description=describe(record, policy.description_max_chars),
        detected_level=detected,
        unit=record.unit or policy.default_unit,
        ewg_guideline=guideline,
        epa_limit=record.fed_mcl if is_usable(record.fed_mcl) else 0,
        times_above_guideline=ratio,
        status=classify(ratio, policy),
        health_effects=record.health_effects or "",
        sources=record.sources or "",
        body_effects=normalize_body_effects(record.body_effects),
    )


def rank_contaminants(
    records: Iterable[ContaminantRecord], policy: ContaminantPolicy
) -> list[ContaminantView]:
    """Filter, classify, sort by severity then ratio, and cap the list."""
    views = [v for v in (evaluate_record(r, policy) for r in records) if v is not None]
    views.sort(key=lambda v: (CLASSIFICATION_RANK[v.status], -v.times_above_guideline))
    return views[: policy.max_results]


def diagnostic_placeholder(message: str) -> ContaminantView:
    """A visible stand-in row explaining why no contaminants are shown."""
    return ContaminantView(
        name=f"DEBUG: {message}",
        description="debug",
        detected_level=0,
        unit="",
        ewg_guideline=0,
        epa_limit=0,
        times_above_guideline=0,
        status="ok",
    )


class ContaminantService:
    """Fetch a location's utility results and produce the ranked contaminant list."""

    def __init__(
        self,
        client: WaterDataClient,
        resolver: UtilityResolver,
        policy: ContaminantPolicy,
        has_api_key: bool = True,
        debug: bool = False,
    ):
        self.client = client
        self.resolver = resolver
        self.policy = policy
        self.has_api_key = has_api_key
        self.debug = debug

    async def fetch_outcome(self, city: str, state: str) -> PipelineOutcome:
        """Run lookup, fetch and ranking; never raises for upstream trouble."""
        if not self.has_api_key:
            log.warning("water api key not configured", step="config")
            return PipelineOutcome(diagnostic="No API key")

        utility = await self.resolver.resolve(city, state)
        if not utility.ok:
            return PipelineOutcome(diagnostic=utility.error)

        pwsid = utility.value
        try:
            payload = await self.client.get_results(pwsid)
        except UpstreamError as e:
            log.error(
                "contaminant results unavailable",
                step=e.step,
                status_code=e.status_code,
                error=e.message,
                pwsid=pwsid,
            )
            return PipelineOutcome(diagnostic=f"{e.step} failed: {e.message}", pwsid=pwsid)

        if payload.data is None or payload.result != "OK":
            log.warning(
                "contaminant results empty",
                step="results_fetch",
                result=payload.result,
                pwsid=pwsid,
            )
            return PipelineOutcome(
                diagnostic=f"no data for {pwsid} (result={payload.result})", pwsid=pwsid
            )

        records, skipped = parse_contaminant_records(payload.data)
        if skipped:
            log.warning(
                "malformed contaminant records skipped",
                step="results_parse",
                skipped=skipped,
                pwsid=pwsid,
            )

        ranked = rank_contaminants(records, self.policy)
        source_count = len(payload.data)
        log.info(
            "contaminants ranked",
            pwsid=pwsid,
            source_count=source_count,
            shown=len(ranked),
        )

        if not ranked:
            return PipelineOutcome(
                diagnostic=f"0 passed filter of {source_count}",
                source_count=source_count,
                pwsid=pwsid,
            )

        return PipelineOutcome(contaminants=ranked, source_count=source_count, pwsid=pwsid)

    async def get_contaminants(self, city: str, state: str) -> list[ContaminantView]:
        """Contaminants for the report page.

        A degraded outcome becomes a single explanatory row in debug mode and
        an empty list otherwise.
        """
        outcome = await self.fetch_outcome(city, state)
        if not outcome.degraded:
            return outcome.contaminants

        log.warning("contaminant pipeline degraded", diagnostic=outcome.diagnostic, city=city)
        if self.debug:
            return [diagnostic_placeholder(outcome.diagnostic or "unknown")]
        return []
