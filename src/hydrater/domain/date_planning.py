"""Top-fountain selection and meeting-spot suggestion for a matched pair."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .ratings import UserRatingSet

DEFAULT_TOP_FOUNTAINS_LIMIT = 5


@dataclass(frozen=True)
class TopFountain:
    """A fountain with the user's mean rating across the four dimensions."""

    fountain_id: str
    average_rating: float


def top_fountains(
    ratings: UserRatingSet, limit: int = DEFAULT_TOP_FOUNTAINS_LIMIT
) -> list[TopFountain]:
    """Return the user's highest-rated fountains (ties by fountain id)."""
    ranked = sorted(
        (TopFountain(fountain_id, record.average) for fountain_id, record in ratings.items()),
        key=lambda fountain: (-fountain.average_rating, fountain.fountain_id),
    )
    return ranked[: max(limit, 0)]


def suggest_fountain(
    user_top: Sequence[TopFountain],
    partner_top: Sequence[TopFountain],
) -> TopFountain | None:
    """Pick a meeting fountain for two users.

    Prefers a fountain in both top lists, scored by the mean of both users'
    ratings. Without overlap, falls back to the single highest-rated fountain
    from either list. Earlier entries win ties.
    """
    user_averages = {fountain.fountain_id: fountain.average_rating for fountain in user_top}
    common = [fountain for fountain in partner_top if fountain.fountain_id in user_averages]

    if common:
        best = common[0]
        best_score = _combined_rating(best, user_averages)
        for fountain in common[1:]:
            score = _combined_rating(fountain, user_averages)
            if score > best_score:
                best, best_score = fountain, score
        return best

    candidates = [*user_top, *partner_top]
    if not candidates:
        return None
    best = candidates[0]
    for fountain in candidates[1:]:
        if fountain.average_rating > best.average_rating:
            best = fountain
    return best


def _combined_rating(fountain: TopFountain, user_averages: dict[str, float]) -> float:
    return (fountain.average_rating + user_averages.get(fountain.fountain_id, 0.0)) / 2
