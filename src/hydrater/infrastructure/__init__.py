"""Concrete infrastructure implementations and shared helpers."""

from .io.filesystem import LocalFileSystem
from .io.http import ResilientHttpClient, build_supabase_client, parse_retry_after
from .resilience import CircuitBreaker, RateLimiter, RetryPolicy
from .snapshot import JsonSnapshotStore
from .supabase import SupabaseRatingStore, SupabaseUserDirectory

__all__ = [
    "CircuitBreaker",
    "JsonSnapshotStore",
    "LocalFileSystem",
    "RateLimiter",
    "ResilientHttpClient",
    "RetryPolicy",
    "SupabaseRatingStore",
    "SupabaseUserDirectory",
    "build_supabase_client",
    "parse_retry_after",
]
