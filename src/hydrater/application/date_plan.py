"""Date planning: top fountains, a meeting spot, and the pair's compatibility."""

from __future__ import annotations

from dataclasses import dataclass

from ..config import MatchingConfig
from ..domain.compatibility import compute_compatibility
from ..domain.date_planning import TopFountain, suggest_fountain, top_fountains
from ..observability import get_logger
from ..protocols import RatingStore, UserDirectory

logger = get_logger("hydrater.date_plan")


@dataclass(frozen=True)
class DatePlan:
    """Everything needed to propose a fountain date between two users."""

    user_top_fountains: tuple[TopFountain, ...]
    partner_top_fountains: tuple[TopFountain, ...]
    suggested_fountain: TopFountain | None
    compatibility_score: float
    partner_display_name: str | None


def plan_date(
    user_id: str,
    partner_id: str,
    *,
    rating_store: RatingStore,
    directory: UserDirectory,
    config: MatchingConfig | None = None,
) -> DatePlan:
    """Build a date plan for two users.

    Raises:
        RatingFetchError: If either user's ratings cannot be fetched.
    """
    config = config or MatchingConfig()
    user_ratings = rating_store.get_ratings_for_user(user_id)
    partner_ratings = rating_store.get_ratings_for_user(partner_id)
    partner = directory.get_profile(partner_id)

    user_top = top_fountains(user_ratings, config.top_fountains_limit)
    partner_top = top_fountains(partner_ratings, config.top_fountains_limit)
    suggestion = suggest_fountain(user_top, partner_top)
    compatibility = compute_compatibility(
        user_ratings, partner_ratings, config.compatibility_weights
    )

    if suggestion is None:
        logger.info("No rated fountains to suggest for %s and %s", user_id, partner_id)

    return DatePlan(
        user_top_fountains=tuple(user_top),
        partner_top_fountains=tuple(partner_top),
        suggested_fountain=suggestion,
        compatibility_score=compatibility.overall_compatibility,
        partner_display_name=partner.display_name if partner is not None else None,
    )
