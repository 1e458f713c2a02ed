"""Tests for contaminant filtering, ranking and the pipeline's degraded paths."""

from unittest.mock import AsyncMock

import pytest

from src.exceptions import UpstreamError
from src.policies import ContaminantPolicy
from src.schemas.water import ContaminantRecord, UtilityListPayload, UtilityResultsPayload
from src.services.contaminant_service import (
    ContaminantService,
    describe,
    evaluate_record,
    normalize_body_effects,
    rank_contaminants,
    times_above,
)
from src.services.utility_service import UtilityResolver
from src.utils.attempts import FetchResult

POLICY = ContaminantPolicy()


def _record(make_record, **overrides) -> ContaminantRecord:
    return ContaminantRecord.model_validate(make_record(**overrides))


# ------------------------------------------------------------------
# Single-record evaluation
# ------------------------------------------------------------------


class TestEvaluateRecord:
    def test_state_guideline_preferred_over_federal_limit(self, make_record):
        """Median-only record, percent-string detection rate, state guideline."""
        record = _record(
            make_record, median=36.5, max=None, slr=0.1, fed_mcl=60, detection_rate="85%"
        )

        view = evaluate_record(record, POLICY)

        assert view is not None
        assert view.detected_level == 36.5
        assert view.ewg_guideline == 0.1
        assert view.epa_limit == 60
        assert view.times_above_guideline == 365
        assert view.status == "exceeds"

    def test_max_preferred_and_ratio_two_is_warning(self, make_record):
        record = _record(make_record, median=3, max=4, slr=None, fed_mcl=2)

        view = evaluate_record(record, POLICY)

        assert view is not None
        assert view.detected_level == 4
        assert view.ewg_guideline == 2
        assert view.times_above_guideline == 2
        assert view.status == "warning"

    def test_zero_detection_rate_discarded(self, make_record):
        record = _record(make_record, median=1, max=None, slr=0.9, fed_mcl=5, detection_rate="0%")

        assert evaluate_record(record, POLICY) is None

    def test_numeric_zero_detection_rate_discarded(self, make_record):
        record = _record(make_record, max=50, slr=1, detection_rate=0)

        assert evaluate_record(record, POLICY) is None

    def test_absent_or_unparsable_detection_rate_does_not_filter(self, make_record):
        for rate in (None, "", "n/a"):
            record = _record(make_record, max=50, slr=1, detection_rate=rate)
            assert evaluate_record(record, POLICY) is not None

    def test_median_used_when_max_absent(self, make_record):
        record = _record(make_record, median=5, max=None, slr=1)

        view = evaluate_record(record, POLICY)

        assert view is not None
        assert view.times_above_guideline == 5

    def test_median_used_when_max_is_zero(self, make_record):
        record = _record(make_record, median=5, max=0, slr=1)

        view = evaluate_record(record, POLICY)

        assert view is not None
        assert view.detected_level == 5

    def test_no_detected_level_discarded(self, make_record):
        record = _record(make_record, median=None, max=None, slr=1)

        assert evaluate_record(record, POLICY) is None

    def test_no_positive_guideline_discarded(self, make_record):
        record = _record(make_record, max=10, slr=0, fed_mcl=None)

        assert evaluate_record(record, POLICY) is None

    def test_ratio_below_two_discarded(self, make_record):
        # 1.4 rounds to 1
        record = _record(make_record, max=1.4, slr=1)

        assert evaluate_record(record, POLICY) is None

    def test_ratio_half_rounds_up_into_range(self, make_record):
        # 1.5 rounds to 2
        record = _record(make_record, max=3, slr=2)

        view = evaluate_record(record, POLICY)

        assert view is not None
        assert view.times_above_guideline == 2

    def test_exceeds_boundary(self, make_record):
        assert evaluate_record(_record(make_record, max=10, slr=1), POLICY).status == "exceeds"
        assert evaluate_record(_record(make_record, max=9, slr=1), POLICY).status == "warning"

    def test_epa_limit_zero_when_federal_limit_unknown(self, make_record):
        view = evaluate_record(_record(make_record, max=10, slr=1, fed_mcl=None), POLICY)

        assert view.epa_limit == 0

    def test_unit_defaults_to_ppb(self, make_record):
        view = evaluate_record(_record(make_record, max=10, slr=1, unit=None), POLICY)

        assert view.unit == "PPB"

    def test_blank_name_replaced(self, make_record):
        view = evaluate_record(_record(make_record, name="", max=10, slr=1), POLICY)

        assert view.name == "Unnamed contaminant"


class TestTimesAbove:
    def test_half_up_rounding(self):
        assert times_above(5, 2) == 3
        assert times_above(7, 2) == 4
        assert times_above(1.4, 1) == 1


# ------------------------------------------------------------------
# Display text
# ------------------------------------------------------------------


class TestDescribe:
    def test_first_sentence_of_health_effects(self, make_record):
        record = _record(
            make_record,
            health_effects="Increases cancer risk. Harms the nervous system.",
            sources="Erosion of natural deposits.",
        )

        assert describe(record) == "Increases cancer risk"

    def test_falls_back_to_sources(self, make_record):
        record = _record(make_record, sources="Runoff from orchards. Industrial waste.")

        assert describe(record) == "Runoff from orchards"

    def test_generic_text_uses_type(self, make_record):
        assert describe(_record(make_record, type="Disinfection byproduct")) == (
            "Disinfection byproduct detected in your water"
        )
        assert describe(_record(make_record, type=None)) == "Contaminant detected in your water"

    def test_long_text_clipped_with_ellipsis(self, make_record):
        record = _record(make_record, health_effects="x" * 200)

        text = describe(record, max_chars=120)

        assert len(text) == 120
        assert text.endswith("...")

    def test_text_at_limit_not_clipped(self, make_record):
        record = _record(make_record, health_effects="y" * 120)

        assert describe(record, max_chars=120) == "y" * 120


class TestNormalizeBodyEffects:
    def test_list_passes_through(self):
        assert normalize_body_effects(["Liver", "Kidney"]) == ["Liver", "Kidney"]

    def test_comma_string_split_and_trimmed(self):
        assert normalize_body_effects("Liver, Kidney ,, Skin") == ["Liver", "Kidney", "Skin"]

    def test_list_entries_kept_as_given(self):
        assert normalize_body_effects(["Liver", 3]) == ["Liver", "3"]

    def test_other_values_become_empty(self):
        assert normalize_body_effects(None) == []
        assert normalize_body_effects(42) == []


# ------------------------------------------------------------------
# Ranking
# ------------------------------------------------------------------


class TestRankContaminants:
    def test_sorted_by_class_then_ratio(self, make_record):
        records = [
            _record(make_record, name="A", max=3, slr=1),
            _record(make_record, name="B", max=50, slr=1),
            _record(make_record, name="C", max=12, slr=1),
            _record(make_record, name="D", max=9, slr=1),
        ]

        ranked = rank_contaminants(records, POLICY)

        assert [v.name for v in ranked] == ["B", "C", "D", "A"]
        assert [v.status for v in ranked] == ["exceeds", "exceeds", "warning", "warning"]

    def test_capped_at_max_results(self, make_record):
        records = [_record(make_record, name=f"C{i}", max=2 + i, slr=1) for i in range(12)]

        ranked = rank_contaminants(records, POLICY)

        assert len(ranked) == 8
        assert ranked[0].name == "C11"

    def test_every_view_at_least_twice_guideline(self, make_record):
        records = [_record(make_record, name=f"C{i}", max=i * 0.5, slr=1) for i in range(1, 30)]

        ranked = rank_contaminants(records, POLICY)

        assert ranked
        assert all(v.times_above_guideline >= 2 for v in ranked)
        ratios = [(v.status, v.times_above_guideline) for v in ranked]
        assert ratios == sorted(ratios, key=lambda r: (r[0] != "exceeds", -r[1]))

    def test_policy_limits_respected(self, make_record):
        policy = ContaminantPolicy(max_results=2, warning_ratio=5, exceeds_ratio=20)
        records = [
            _record(make_record, name="low", max=4, slr=1),
            _record(make_record, name="mid", max=6, slr=1),
            _record(make_record, name="high", max=25, slr=1),
            _record(make_record, name="higher", max=30, slr=1),
        ]

        ranked = rank_contaminants(records, policy)

        assert [v.name for v in ranked] == ["higher", "high"]


# ------------------------------------------------------------------
# ContaminantService
# ------------------------------------------------------------------


def _service(client, **kwargs) -> ContaminantService:
    return ContaminantService(
        client=client, resolver=UtilityResolver(client), policy=POLICY, **kwargs
    )


class TestContaminantService:
    @pytest.mark.asyncio
    async def test_ranked_contaminants_returned(self, mock_water_client, make_record):
        mock_water_client.get_results.return_value = UtilityResultsPayload.model_validate(
            {
                "result": "OK",
                "data": [
                    make_record(name="Lead", max=15, slr=0.2),
                    make_record(name="Calcium", max=1, slr=10),
                ],
            }
        )

        outcome = await _service(mock_water_client).fetch_outcome("Farragut", "TN")

        assert not outcome.degraded
        assert outcome.pwsid == "TN0000123"
        assert outcome.source_count == 2
        assert [c.name for c in outcome.contaminants] == ["Lead"]
        mock_water_client.get_results.assert_awaited_once_with("TN0000123")

    @pytest.mark.asyncio
    async def test_missing_api_key_skips_upstream(self, mock_water_client):
        service = _service(mock_water_client, has_api_key=False)

        outcome = await service.fetch_outcome("Farragut", "TN")

        assert outcome.diagnostic == "No API key"
        mock_water_client.list_utilities.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_utility_found(self, mock_water_client):
        mock_water_client.list_utilities.return_value = UtilityListPayload(result="OK", data=[])

        outcome = await _service(mock_water_client).fetch_outcome("Nowhere", "TN")

        assert outcome.diagnostic == "no utils for Nowhere"
        mock_water_client.get_results.assert_not_called()

    @pytest.mark.asyncio
    async def test_results_http_failure(self, mock_water_client):
        mock_water_client.get_results.side_effect = UpstreamError(
            step="results_fetch", message="unexpected status 502", status_code=502
        )

        outcome = await _service(mock_water_client).fetch_outcome("Farragut", "TN")

        assert outcome.contaminants == []
        assert outcome.diagnostic == "results_fetch failed: unexpected status 502"

    @pytest.mark.asyncio
    async def test_results_without_data(self, mock_water_client):
        mock_water_client.get_results.return_value = UtilityResultsPayload(
            result="NO_DATA", data=None
        )

        outcome = await _service(mock_water_client).fetch_outcome("Farragut", "TN")

        assert outcome.degraded
        assert "NO_DATA" in outcome.diagnostic

    @pytest.mark.asyncio
    async def test_nothing_survives_filter(self, mock_water_client, make_record):
        mock_water_client.get_results.return_value = UtilityResultsPayload.model_validate(
            {"result": "OK", "data": [make_record(max=1, slr=1), make_record(max=None)]}
        )

        outcome = await _service(mock_water_client).fetch_outcome("Farragut", "TN")

        assert outcome.diagnostic == "0 passed filter of 2"
        assert outcome.source_count == 2

    @pytest.mark.asyncio
    async def test_malformed_record_does_not_drop_the_rest(self, mock_water_client, make_record):
        mock_water_client.get_results.return_value = UtilityResultsPayload.model_validate(
            {
                "result": "OK",
                "data": [
                    make_record(name="Lead", max=15, slr=0.2),
                    "not a record",
                    make_record(name=1234, max=8, slr=1, health_effects=["Cancer"]),
                ],
            }
        )

        outcome = await _service(mock_water_client).fetch_outcome("Farragut", "TN")

        assert not outcome.degraded
        assert outcome.source_count == 3
        assert [c.name for c in outcome.contaminants] == ["Lead", "1234"]
        assert outcome.contaminants[1].health_effects == "Cancer"

    @pytest.mark.asyncio
    async def test_degraded_outcome_is_empty_list(self, mock_water_client):
        service = _service(mock_water_client, has_api_key=False)

        assert await service.get_contaminants("Farragut", "TN") == []

    @pytest.mark.asyncio
    async def test_degraded_outcome_in_debug_mode_shows_placeholder(self, mock_water_client):
        service = _service(mock_water_client, has_api_key=False, debug=True)

        contaminants = await service.get_contaminants("Farragut", "TN")

        assert len(contaminants) == 1
        assert contaminants[0].name == "DEBUG: No API key"
        assert contaminants[0].status == "ok"
        assert contaminants[0].times_above_guideline == 0

    @pytest.mark.asyncio
    async def test_debug_mode_does_not_alter_healthy_results(self, mock_water_client, make_record):
        mock_water_client.get_results.return_value = UtilityResultsPayload.model_validate(
            {"result": "OK", "data": [make_record(name="Lead", max=15, slr=0.2)]}
        )
        service = _service(mock_water_client, debug=True)

        contaminants = await service.get_contaminants("Farragut", "TN")

        assert [c.name for c in contaminants] == ["Lead"]

    @pytest.mark.asyncio
    async def test_resolver_failure_reported(self):
        client = AsyncMock()
        resolver = AsyncMock()

        resolver.resolve = AsyncMock(return_value=FetchResult.failure("util fetch failed: boom"))
        service = ContaminantService(client=client, resolver=resolver, policy=POLICY)

        outcome = await service.fetch_outcome("Farragut", "TN")

        assert outcome.diagnostic == "util fetch failed: boom"
        client.get_results.assert_not_called()
