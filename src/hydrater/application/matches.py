"""Match finding: score a candidate pool against one user and rank the results.

Rating fetches run on a bounded thread pool. A candidate whose ratings cannot
be fetched is logged and skipped; the rest of the pool is still scored.
"""

from __future__ import annotations

from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed
from dataclasses import dataclass

from ..config import MatchingConfig
from ..domain.compatibility import (
    DEFAULT_COMPATIBILITY_WEIGHTS,
    CompatibilityScore,
    CompatibilityWeights,
    compute_compatibility,
)
from ..domain.matching import (
    DEFAULT_MAX_WORKERS,
    CandidateProfile,
    Match,
    MatchThresholds,
    rank_matches,
)
from ..domain.ratings import UserRatingSet
from ..exceptions import AuthenticationError, DirectoryFetchError
from ..observability import get_logger
from ..protocols import RatingStore, UserDirectory

logger = get_logger("hydrater.matches")


class MaxWorkersError(ValueError):
    """Raised when the worker pool size is not a positive integer."""

    def __init__(self, max_workers: int) -> None:
        super().__init__(f"max_workers must be at least 1 (got {max_workers}).")


@dataclass(frozen=True)
class MatchRunSummary:
    """Counts describing one match search."""

    candidates: int
    scored: int
    matched: int
    failed: int


@dataclass(frozen=True)
class MatchResult:
    """Ranked matches plus the run summary."""

    matches: tuple[Match, ...]
    summary: MatchRunSummary


def unique_candidates(
    user_id: str, candidate_pool: Iterable[CandidateProfile]
) -> list[CandidateProfile]:
    """Drop the target user and repeated candidates (first occurrence wins)."""
    seen: set[str] = {user_id}
    unique: list[CandidateProfile] = []
    for candidate in candidate_pool:
        if candidate.user_id in seen:
            continue
        seen.add(candidate.user_id)
        unique.append(candidate)
    return unique


def _score_candidate(
    candidate: CandidateProfile,
    target_ratings: UserRatingSet,
    rating_store: RatingStore,
    weights: CompatibilityWeights,
) -> CompatibilityScore:
    candidate_ratings = rating_store.get_ratings_for_user(candidate.user_id)
    return compute_compatibility(target_ratings, candidate_ratings, weights)


def score_candidate_pool(
    user_id: str,
    candidate_pool: Iterable[CandidateProfile],
    rating_store: RatingStore,
    *,
    thresholds: MatchThresholds | None = None,
    weights: CompatibilityWeights = DEFAULT_COMPATIBILITY_WEIGHTS,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> MatchResult:
    """Score every candidate against the target user.

    Args:
        user_id: Target user.
        candidate_pool: Users who have rated at least one fountain.
        rating_store: Source of rating sets.
        thresholds: Inclusive minimums for a match (defaults 0.3 / 0.2).
        weights: Compatibility blend constants.
        max_workers: Maximum concurrent rating fetches.

    Returns:
        MatchResult with matches ranked by overall compatibility.

    Raises:
        RatingFetchError: If the target user's own ratings cannot be fetched.
        AuthenticationError: If the store rejects our credentials.
    """
    if max_workers < 1:
        raise MaxWorkersError(max_workers)

    thresholds = thresholds or MatchThresholds()
    candidates = unique_candidates(user_id, candidate_pool)
    target_ratings = rating_store.get_ratings_for_user(user_id)

    logger.info("Scoring %s candidates for user %s", len(candidates), user_id)

    matches: list[Match] = []
    scored = 0
    failed = 0
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures: dict[Future[CompatibilityScore], CandidateProfile] = {
            executor.submit(
                _score_candidate, candidate, target_ratings, rating_store, weights
            ): candidate
            for candidate in candidates
        }
        for future in as_completed(futures):
            candidate = futures[future]
            try:
                score = future.result()
            except AuthenticationError:
                for pending in futures:
                    pending.cancel()
                raise
            except Exception as exc:
                failed += 1
                logger.warning(
                    "Skipping candidate %s: %s",
                    candidate.user_id,
                    exc,
                )
                continue
            scored += 1
            if thresholds.accepts(score):
                matches.append(Match(profile=candidate, compatibility=score))

    ranked = rank_matches(matches)
    summary = MatchRunSummary(
        candidates=len(candidates),
        scored=scored,
        matched=len(ranked),
        failed=failed,
    )
    logger.info(
        "Matches for %s: %s of %s candidates (%s skipped)",
        user_id,
        summary.matched,
        summary.candidates,
        summary.failed,
    )
    return MatchResult(matches=tuple(ranked), summary=summary)


def find_matches(
    user_id: str,
    candidate_pool: Iterable[CandidateProfile],
    rating_store: RatingStore,
    *,
    thresholds: MatchThresholds | None = None,
    weights: CompatibilityWeights = DEFAULT_COMPATIBILITY_WEIGHTS,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> list[Match]:
    """Return ranked matches for a user from a pre-filtered candidate pool."""
    result = score_candidate_pool(
        user_id,
        candidate_pool,
        rating_store,
        thresholds=thresholds,
        weights=weights,
        max_workers=max_workers,
    )
    return list(result.matches)


def get_user_matches(
    user_id: str,
    *,
    directory: UserDirectory,
    rating_store: RatingStore,
    config: MatchingConfig | None = None,
) -> MatchResult:
    """Look up the candidate pool for a user and find their matches.

    A directory failure is logged and yields an empty result.
    """
    config = config or MatchingConfig()
    try:
        candidate_pool = directory.get_candidate_pool(user_id)
    except DirectoryFetchError as exc:
        logger.error("Error fetching users: %s", exc)
        return MatchResult(
            matches=(),
            summary=MatchRunSummary(candidates=0, scored=0, matched=0, failed=0),
        )

    if not candidate_pool:
        logger.info("No candidates available for user %s", user_id)
        return MatchResult(
            matches=(),
            summary=MatchRunSummary(candidates=0, scored=0, matched=0, failed=0),
        )

    return score_candidate_pool(
        user_id,
        candidate_pool,
        rating_store,
        thresholds=config.thresholds,
        weights=config.compatibility_weights,
        max_workers=config.max_workers,
    )
