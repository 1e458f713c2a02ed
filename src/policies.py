"""Tunable policy values for the report enrichment pipeline.

Each component receives its policy at construction so tests can vary the
thresholds. Defaults mirror the values the business runs with today.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.config import Settings


@dataclass(frozen=True, slots=True)
class ContaminantPolicy:
    max_results: int = 8
    warning_ratio: int = 2  # minimum times-above-guideline to be shown
    exceeds_ratio: int = 10
    description_max_chars: int = 120
    default_unit: str = "PPB"


@dataclass(frozen=True, slots=True)
class ProximityPolicy:
    radii_miles: tuple[float, ...] = field(default=(3.0, 10.0, 25.0, 50.0))
    quorum: int = 20
    miles_per_degree: float = 69.0

    def degree_delta(self, radius_miles: float) -> float:
        return radius_miles / self.miles_per_degree


@dataclass(frozen=True, slots=True)
class ReviewPolicy:
    target: int = 4
    rating: int = 5
    pool_multiplier: int = 3


def contaminant_policy_from_settings(settings: Settings) -> ContaminantPolicy:
    return ContaminantPolicy(
        max_results=settings.contaminant_max_results,
        warning_ratio=settings.contaminant_warning_ratio,
        exceeds_ratio=settings.contaminant_exceeds_ratio,
        description_max_chars=settings.contaminant_description_max_chars,
    )


def proximity_policy_from_settings(settings: Settings) -> ProximityPolicy:
    return ProximityPolicy(
        radii_miles=tuple(settings.get_customer_radii()),
        quorum=settings.customer_quorum,
        miles_per_degree=settings.miles_per_degree,
    )


def review_policy_from_settings(settings: Settings) -> ReviewPolicy:
    return ReviewPolicy(
        target=settings.review_target,
        rating=settings.review_rating,
        pool_multiplier=settings.review_pool_multiplier,
    )
