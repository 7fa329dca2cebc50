"""Match selection, ranking and presentation labels."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from .compatibility import CompatibilityScore

DEFAULT_MIN_COMPATIBILITY = 0.3
DEFAULT_MIN_CONFIDENCE = 0.2
DEFAULT_MAX_WORKERS = 8

# Label thresholds (score >= threshold), highest first
COMPATIBILITY_LABELS = (
    (0.8, "Excellent Match"),
    (0.6, "Good Match"),
    (0.4, "Fair Match"),
)
LOW_MATCH_LABEL = "Low Match"


@dataclass(frozen=True)
class CandidateProfile:
    """Profile summary for a user who could be matched."""

    user_id: str
    display_name: str | None = None
    email: str | None = None
    total_ratings: int = 0
    badges: tuple[str, ...] = ()


@dataclass(frozen=True)
class MatchThresholds:
    """Inclusive minimums a pair must reach to be offered as a match."""

    min_compatibility: float = DEFAULT_MIN_COMPATIBILITY
    min_confidence: float = DEFAULT_MIN_CONFIDENCE

    def accepts(self, score: CompatibilityScore) -> bool:
        if score.shared_fountains_count == 0:
            return False
        return (
            score.overall_compatibility >= self.min_compatibility
            and score.confidence_score >= self.min_confidence
        )


@dataclass(frozen=True)
class Match:
    """A candidate whose compatibility cleared the thresholds."""

    profile: CandidateProfile
    compatibility: CompatibilityScore

    @property
    def user_id(self) -> str:
        return self.profile.user_id

    @property
    def compatibility_score(self) -> float:
        return self.compatibility.overall_compatibility

    @property
    def confidence_score(self) -> float:
        return self.compatibility.confidence_score

    @property
    def shared_fountains_count(self) -> int:
        return self.compatibility.shared_fountains_count

    @property
    def label(self) -> str:
        return compatibility_label(self.compatibility_score)


def rank_matches(matches: Iterable[Match]) -> list[Match]:
    """Sort by overall compatibility (highest first), ties by user id."""
    return sorted(matches, key=lambda match: (-match.compatibility_score, match.user_id))


def compatibility_label(score: float) -> str:
    """Human-readable band for an overall compatibility score."""
    for threshold, label in COMPATIBILITY_LABELS:
        if score >= threshold:
            return label
    return LOW_MATCH_LABEL


def format_percentage(score: float) -> str:
    """Format a 0-1 score as a whole percentage, rounding halves up."""
    return f"{math.floor(score * 100 + 0.5)}%"
