"""Custom exceptions for the hyDATEr matching engine.

These exceptions provide clear error handling and enable testing of error paths.
"""

from __future__ import annotations


class HydraterError(Exception):
    """Base exception for all matching errors."""

    pass


class InvalidRatingValueError(HydraterError, ValueError):
    """Raised when a rating dimension lies outside the 1-5 scale."""

    def __init__(self, fountain_id: str, dimension: str, value: object) -> None:
        self.fountain_id = fountain_id
        self.dimension = dimension
        self.value = value
        super().__init__(
            f"Invalid {dimension} rating {value!r} for fountain {fountain_id!r}: "
            "ratings must be whole numbers from 1 to 5."
        )


class DimensionWeightsError(HydraterError, ValueError):
    """Raised when rating dimension weights do not sum to 1.0."""

    def __init__(self, total: float) -> None:
        self.total = total
        super().__init__(f"Rating dimension weights must sum to 1.0 (got {total:.4f}).")


class RatingFetchError(HydraterError):
    """Raised when the rating store cannot return a user's ratings."""

    def __init__(self, user_id: str, reason: str) -> None:
        self.user_id = user_id
        self.reason = reason
        super().__init__(f"Failed to fetch ratings for user {user_id}: {reason}")


class DirectoryFetchError(HydraterError):
    """Raised when the user directory cannot return candidate profiles."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Failed to fetch users: {reason}")


class AuthenticationError(HydraterError):
    """Raised when Supabase rejects the configured API key (401/403).

    This is a fatal error - matching should stop immediately.
    """

    def __init__(self, message: str = "Supabase authentication failed") -> None:
        super().__init__(
            f"{message}\n"
            "Please check SUPABASE_KEY in .env is correct and allowed to read "
            "the ratings and users tables."
        )

    @classmethod
    def for_status(cls, status_code: int, details: str) -> AuthenticationError:
        return cls(f"Supabase rejected the request (HTTP {status_code}): {details}")


class RateLimitError(HydraterError):
    """Raised when Supabase rate limiting persists after retries (429)."""

    def __init__(self, retry_after: int = 60) -> None:
        self.retry_after = retry_after
        super().__init__(f"Rate limit exceeded. Retry after {retry_after} seconds.")


class CircuitBreakerOpen(HydraterError):
    """Raised when circuit breaker trips due to repeated failures."""

    def __init__(self, failure_count: int, threshold: int) -> None:
        self.failure_count = failure_count
        self.threshold = threshold
        super().__init__(
            f"Circuit breaker tripped: {failure_count} consecutive failures "
            f"(threshold: {threshold}). Refusing further requests until it recovers."
        )


class JsonArrayExpectedError(HydraterError, ValueError):
    """Raised when a PostgREST response is not a JSON array of objects."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Expected a JSON array of objects from {url}.")


class MissingSupabaseCredentialsError(HydraterError):
    """Raised when the API source is selected without Supabase credentials."""

    def __init__(self) -> None:
        super().__init__(
            "SUPABASE_URL and SUPABASE_KEY must be set when HYDRATER_SOURCE=api. "
            "Set HYDRATER_SOURCE=file to read a local snapshot instead."
        )


class SnapshotNotFoundError(HydraterError, FileNotFoundError):
    """Raised when the local ratings snapshot file is missing."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"Ratings snapshot not found: {path}. "
            "Set HYDRATER_SNAPSHOT_PATH or pass --config with snapshot_path."
        )


class SourceTypeError(HydraterError, ValueError):
    """Raised when the configured data source is not supported."""

    def __init__(self, value: str) -> None:
        super().__init__(f"HYDRATER_SOURCE must be 'api' or 'file' (got {value!r}).")


class ConfigFileNotFoundError(HydraterError, FileNotFoundError):
    """Raised when a configured TOML file does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Config file not found: {path}")


class ConfigFileParseError(HydraterError, ValueError):
    """Raised when a TOML file cannot be parsed."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(f"Config file {path} is not valid TOML: {details}")


class ConfigFileValidationError(HydraterError, ValueError):
    """Raised when a TOML file fails schema validation."""

    def __init__(self, path: str, details: str) -> None:
        super().__init__(f"Config file {path} failed validation: {details}")
