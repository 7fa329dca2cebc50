"""Compatibility scoring between two users' fountain ratings.

Usage example:
    from hydrater.domain.compatibility import compute_compatibility
    from hydrater.domain.ratings import RatingRecord

    alice = {"f-1": RatingRecord("f-1", 5, 5, 5, 5), "f-2": RatingRecord("f-2", 1, 1, 1, 1)}
    bob = {"f-1": RatingRecord("f-1", 5, 5, 5, 5), "f-2": RatingRecord("f-2", 1, 1, 1, 1)}

    score = compute_compatibility(alice, bob)
    assert score.weighted_similarity_score == 1.0
    assert score.shared_fountains_count == 2
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

from ..exceptions import DimensionWeightsError
from .ratings import MAX_RATING, MIN_RATING, RatingRecord, UserRatingSet
from .statistics import clamp, mean, pearson_correlation

DEFAULT_COLDNESS_WEIGHT = 0.30
DEFAULT_PRESSURE_WEIGHT = 0.25
DEFAULT_EXPERIENCE_WEIGHT = 0.25
DEFAULT_YUM_FACTOR_WEIGHT = 0.20

DEFAULT_CORRELATION_WEIGHT = 0.6
DEFAULT_SIMILARITY_WEIGHT = 0.4

# Shared fountains at which count-based confidence saturates
DEFAULT_CONFIDENCE_SATURATION_COUNT = 10

MAX_RATING_DIFFERENCE = float(MAX_RATING - MIN_RATING)


@dataclass(frozen=True)
class DimensionWeights:
    """Per-dimension weights for the similarity score; must sum to 1.0."""

    coldness: float = DEFAULT_COLDNESS_WEIGHT
    pressure: float = DEFAULT_PRESSURE_WEIGHT
    experience: float = DEFAULT_EXPERIENCE_WEIGHT
    yum_factor: float = DEFAULT_YUM_FACTOR_WEIGHT

    def __post_init__(self) -> None:
        total = sum(self.values)
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise DimensionWeightsError(total)

    @property
    def values(self) -> tuple[float, float, float, float]:
        return (self.coldness, self.pressure, self.experience, self.yum_factor)


@dataclass(frozen=True)
class CompatibilityWeights:
    """Tunable constants for the compatibility blend."""

    dimensions: DimensionWeights = field(default_factory=DimensionWeights)
    correlation_weight: float = DEFAULT_CORRELATION_WEIGHT
    similarity_weight: float = DEFAULT_SIMILARITY_WEIGHT
    confidence_saturation_count: int = DEFAULT_CONFIDENCE_SATURATION_COUNT


DEFAULT_COMPATIBILITY_WEIGHTS = CompatibilityWeights()


@dataclass(frozen=True)
class CompatibilityScore:
    """Score breakdown for one pair of users."""

    correlation_score: float  # -1.0 to 1.0
    weighted_similarity_score: float  # 0.0 to 1.0
    overall_compatibility: float  # 0.0 to 1.0
    shared_fountains_count: int
    confidence_score: float  # 0.0 to 1.0

    @classmethod
    def zero(cls) -> CompatibilityScore:
        """Score for a pair with no shared fountains."""
        return cls(
            correlation_score=0.0,
            weighted_similarity_score=0.0,
            overall_compatibility=0.0,
            shared_fountains_count=0,
            confidence_score=0.0,
        )


def shared_fountain_ids(user_a: UserRatingSet, user_b: UserRatingSet) -> list[str]:
    """Fountains rated by both users, in sorted order."""
    return sorted(user_a.keys() & user_b.keys())


def correlation_score(ratings_a: list[RatingRecord], ratings_b: list[RatingRecord]) -> float:
    """Pearson correlation over each fountain's mean rating.

    Each shared fountain is one paired sample; the four dimensions are averaged
    before correlating.
    """
    return pearson_correlation(
        [record.average for record in ratings_a],
        [record.average for record in ratings_b],
    )


def weighted_similarity(
    ratings_a: list[RatingRecord],
    ratings_b: list[RatingRecord],
    weights: DimensionWeights | None = None,
) -> float:
    """Inverse of the mean weighted per-dimension difference, in [0, 1]."""
    if not ratings_a or len(ratings_a) != len(ratings_b):
        return 0.0

    dimension_weights = (weights or DimensionWeights()).values
    differences: list[float] = []
    for record_a, record_b in zip(ratings_a, ratings_b, strict=True):
        differences.append(
            sum(
                weight * abs(value_a - value_b)
                for weight, value_a, value_b in zip(
                    dimension_weights, record_a.values, record_b.values, strict=True
                )
            )
        )

    average_difference = mean(differences)
    return clamp(1.0 - average_difference / MAX_RATING_DIFFERENCE)


def confidence_score(
    shared_count: int,
    correlation: float,
    saturation_count: int = DEFAULT_CONFIDENCE_SATURATION_COUNT,
) -> float:
    """Confidence from data volume, boosted by correlation strength."""
    if shared_count <= 0:
        return 0.0
    volume = min(shared_count / saturation_count, 1.0)
    return clamp(volume * (0.5 + 0.5 * abs(correlation)))


def overall_compatibility(
    correlation: float,
    similarity: float,
    weights: CompatibilityWeights = DEFAULT_COMPATIBILITY_WEIGHTS,
) -> float:
    """Blend absolute correlation with weighted similarity, clamped to [0, 1]."""
    return clamp(
        abs(correlation) * weights.correlation_weight + similarity * weights.similarity_weight
    )


def compute_compatibility(
    user_a: UserRatingSet,
    user_b: UserRatingSet,
    weights: CompatibilityWeights = DEFAULT_COMPATIBILITY_WEIGHTS,
) -> CompatibilityScore:
    """Compute the compatibility of two users from their fountain ratings."""
    shared = shared_fountain_ids(user_a, user_b)
    if not shared:
        return CompatibilityScore.zero()

    ratings_a = [user_a[fountain_id] for fountain_id in shared]
    ratings_b = [user_b[fountain_id] for fountain_id in shared]

    correlation = correlation_score(ratings_a, ratings_b)
    similarity = weighted_similarity(ratings_a, ratings_b, weights.dimensions)

    return CompatibilityScore(
        correlation_score=correlation,
        weighted_similarity_score=similarity,
        overall_compatibility=overall_compatibility(correlation, similarity, weights),
        shared_fountains_count=len(shared),
        confidence_score=confidence_score(
            len(shared), correlation, weights.confidence_saturation_count
        ),
    )
