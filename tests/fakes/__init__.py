"""Exports for test fakes."""

from .filesystem import InMemoryFileSystem
from .http import FakeJsonApiClient
from .resilience import FakeCircuitBreaker, FakeRateLimiter
from .stores import FailingRatingStore, InMemoryRatingStore, InMemoryUserDirectory

__all__ = [
    "FailingRatingStore",
    "FakeCircuitBreaker",
    "FakeJsonApiClient",
    "FakeRateLimiter",
    "InMemoryFileSystem",
    "InMemoryRatingStore",
    "InMemoryUserDirectory",
]
