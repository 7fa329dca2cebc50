"""Supabase-backed rating store and user directory (PostgREST over HTTPS)."""

from __future__ import annotations

from typing import override

import requests

from ..domain.matching import CandidateProfile
from ..domain.ratings import UserRatingSet, build_rating_set
from ..exceptions import (
    CircuitBreakerOpen,
    DirectoryFetchError,
    InvalidRatingValueError,
    JsonArrayExpectedError,
    RateLimitError,
    RatingFetchError,
)
from ..io_contracts import UserRowIO
from ..protocols import JsonApiClient, RatingStore, UserDirectory
from .io.validation import IncomingDataError, parse_rating_rows, parse_user_rows

RATINGS_TABLE = "ratings"
USERS_TABLE = "users"
RATING_COLUMNS = "fountain_id,coldness,pressure,experience,yum_factor"
USER_COLUMNS = "id,display_name,email,total_ratings,badges"

# AuthenticationError is not recoverable and propagates unchanged.
_RECOVERABLE_ERRORS: tuple[type[Exception], ...] = (
    requests.RequestException,
    IncomingDataError,
    InvalidRatingValueError,
    JsonArrayExpectedError,
    RateLimitError,
    CircuitBreakerOpen,
)


def rest_url(base_url: str, table: str) -> str:
    """Return the PostgREST endpoint for a table."""
    return f"{base_url.rstrip('/')}/rest/v1/{table}"


def profile_from_row(row: UserRowIO) -> CandidateProfile:
    return CandidateProfile(
        user_id=row["id"],
        display_name=row["display_name"],
        email=row["email"],
        total_ratings=row["total_ratings"],
        badges=tuple(row["badges"]),
    )


class SupabaseRatingStore(RatingStore):
    """Reads a user's ratings from the ``ratings`` table."""

    def __init__(self, *, client: JsonApiClient, base_url: str) -> None:
        self.client = client
        self.url = rest_url(base_url, RATINGS_TABLE)

    @override
    def get_ratings_for_user(self, user_id: str) -> UserRatingSet:
        try:
            payload = self.client.get_rows(
                self.url, {"select": RATING_COLUMNS, "user_id": f"eq.{user_id}"}
            )
            return build_rating_set(parse_rating_rows(payload))
        except _RECOVERABLE_ERRORS as exc:
            raise RatingFetchError(user_id, str(exc)) from exc


class SupabaseUserDirectory(UserDirectory):
    """Reads profiles from the ``users`` table."""

    def __init__(self, *, client: JsonApiClient, base_url: str) -> None:
        self.client = client
        self.url = rest_url(base_url, USERS_TABLE)

    @override
    def get_candidate_pool(self, exclude_user_id: str) -> list[CandidateProfile]:
        try:
            payload = self.client.get_rows(
                self.url,
                {
                    "select": USER_COLUMNS,
                    "id": f"neq.{exclude_user_id}",
                    "total_ratings": "gt.0",
                },
            )
            rows = parse_user_rows(payload)
        except _RECOVERABLE_ERRORS as exc:
            raise DirectoryFetchError(str(exc)) from exc
        return [profile_from_row(row) for row in rows]

    @override
    def get_profile(self, user_id: str) -> CandidateProfile | None:
        try:
            payload = self.client.get_rows(
                self.url, {"select": USER_COLUMNS, "id": f"eq.{user_id}"}
            )
            rows = parse_user_rows(payload)
        except _RECOVERABLE_ERRORS as exc:
            raise DirectoryFetchError(str(exc)) from exc
        if not rows:
            return None
        return profile_from_row(rows[0])
