"""Protocol definitions for dependency injection.

These protocols define the abstract interfaces that matching components depend on,
enabling isolated unit testing with in-memory implementations.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import pandas as pd

    from .domain.matching import CandidateProfile
    from .domain.ratings import UserRatingSet


@runtime_checkable
class RatingStore(Protocol):
    """Read-only source of fountain ratings keyed by user."""

    def get_ratings_for_user(self, user_id: str) -> UserRatingSet:
        """Return every valid rating the user has submitted, keyed by fountain.

        Raises:
            RatingFetchError: If the ratings cannot be fetched.
        """
        ...


@runtime_checkable
class UserDirectory(Protocol):
    """Read-only source of user profiles."""

    def get_candidate_pool(self, exclude_user_id: str) -> Sequence[CandidateProfile]:
        """Return every other user who has rated at least one fountain.

        Raises:
            DirectoryFetchError: If the directory cannot be queried.
        """
        ...

    def get_profile(self, user_id: str) -> CandidateProfile | None:
        """Return a single user's profile, or None if the user is unknown."""
        ...


@runtime_checkable
class JsonApiClient(Protocol):
    """Abstract HTTP client for JSON row APIs (PostgREST)."""

    def get_rows(self, url: str, params: Mapping[str, str]) -> list[dict[str, object]]:
        """Fetch a JSON array of row objects.

        Args:
            url: The endpoint URL.
            params: Query string parameters.

        Returns:
            Parsed rows.

        Raises:
            AuthenticationError: On 401/403 responses.
            requests.RequestException: On network or HTTP errors.
        """
        ...


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for reading snapshots and writing exports."""

    def read_json(self, path: Path) -> dict[str, object]:
        """Read JSON object file."""
        ...

    def read_text(self, path: Path) -> str:
        """Read text file."""
        ...

    def write_csv(self, df: pd.DataFrame, path: Path) -> None:
        """Write DataFrame to CSV file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check if path exists."""
        ...


@runtime_checkable
class RateLimiter(Protocol):
    """Abstract rate limiter for outbound requests."""

    def wait_if_needed(self) -> None:
        """Block until a request is allowed."""
        ...


@runtime_checkable
class CircuitBreaker(Protocol):
    """Abstract circuit breaker for outbound requests."""

    def check(self) -> None:
        """Raise if the circuit is open."""
        ...

    def record_success(self) -> None:
        """Record a successful request."""
        ...

    def record_failure(self) -> None:
        """Record a failed request."""
        ...


@runtime_checkable
class RetryPolicy(Protocol):
    """Abstract retry policy for transient failures."""

    max_retries: int
    retry_statuses: tuple[int, ...]
    retry_exceptions: tuple[type[Exception], ...]

    def compute_backoff(self, attempt: int, retry_after: int | None = None) -> float:
        """Return a delay for the next retry attempt."""
        ...
