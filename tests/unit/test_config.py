"""Tests for settings helpers and policy construction."""

from src.config import Settings
from src.policies import (
    ProximityPolicy,
    contaminant_policy_from_settings,
    proximity_policy_from_settings,
    review_policy_from_settings,
)


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestSettings:
    def test_customer_radii_parsed(self):
        assert _settings(customer_radii_miles="5, 15,, 40").get_customer_radii() == [5.0, 15.0, 40.0]

    def test_placeholder_water_key_unusable(self):
        assert not _settings(water_api_key="").has_water_api_key()
        assert not _settings(water_api_key="your-api-key-here").has_water_api_key()
        assert _settings(water_api_key="abc123").has_water_api_key()


class TestPolicies:
    def test_defaults_from_settings(self):
        settings = _settings()

        contaminant = contaminant_policy_from_settings(settings)
        proximity = proximity_policy_from_settings(settings)
        review = review_policy_from_settings(settings)

        assert (contaminant.max_results, contaminant.warning_ratio, contaminant.exceeds_ratio) == (
            8,
            2,
            10,
        )
        assert proximity.radii_miles == (3.0, 10.0, 25.0, 50.0)
        assert proximity.quorum == 20
        assert (review.target, review.rating, review.pool_multiplier) == (4, 5, 3)

    def test_degree_delta(self):
        assert ProximityPolicy(miles_per_degree=69.0).degree_delta(34.5) == 0.5
