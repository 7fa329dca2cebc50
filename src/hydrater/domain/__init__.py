"""Domain modules for compatibility matching."""

from .compatibility import CompatibilityScore, CompatibilityWeights, compute_compatibility
from .matching import CandidateProfile, Match, MatchThresholds, rank_matches
from .ratings import RatingRecord, UserRatingSet, build_rating_set

__all__ = [
    "CandidateProfile",
    "CompatibilityScore",
    "CompatibilityWeights",
    "Match",
    "MatchThresholds",
    "RatingRecord",
    "UserRatingSet",
    "build_rating_set",
    "compute_compatibility",
    "rank_matches",
]
