"""Composition root for wiring CLI dependencies."""

from __future__ import annotations

from pathlib import Path

from .cli import CliDependencies, create_app
from .config import MatchingConfig
from .exceptions import MissingSupabaseCredentialsError
from .infrastructure import (
    JsonSnapshotStore,
    LocalFileSystem,
    SupabaseRatingStore,
    SupabaseUserDirectory,
    build_supabase_client,
)


def build_cli_dependencies(*, config: MatchingConfig) -> CliDependencies:
    """Build concrete dependencies for CLI commands.

    Args:
        config: Matching configuration (selects the snapshot or Supabase source).

    Raises:
        MissingSupabaseCredentialsError: If the API source lacks a URL or key.
    """
    fs = LocalFileSystem()
    if config.source_type == "file":
        store = JsonSnapshotStore(path=Path(config.snapshot_path), fs=fs)
        return CliDependencies(fs=fs, rating_store=store, directory=store)

    if not config.supabase_url or not config.supabase_key:
        raise MissingSupabaseCredentialsError()

    client = build_supabase_client(
        api_key=config.supabase_key,
        max_rpm=config.max_rpm,
        min_delay_seconds=config.min_delay_seconds,
        circuit_breaker_threshold=config.circuit_breaker_threshold,
        circuit_breaker_timeout_seconds=config.circuit_breaker_timeout_seconds,
        max_retries=config.max_retries,
        backoff_factor=config.backoff_factor,
        max_backoff_seconds=config.backoff_max_seconds,
        jitter_seconds=config.backoff_jitter_seconds,
        timeout_seconds=config.timeout_seconds,
    )
    return CliDependencies(
        fs=fs,
        rating_store=SupabaseRatingStore(client=client, base_url=config.supabase_url),
        directory=SupabaseUserDirectory(client=client, base_url=config.supabase_url),
    )


app = create_app(build_cli_dependencies, LocalFileSystem())
