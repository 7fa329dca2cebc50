"""CLI for the hyDATEr matching engine.

Commands:
- matches: Rank compatible users for one user (optionally export CSV)
- compatibility: Show the score breakdown for two users
- plan-date: Suggest a meeting fountain for two users
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Annotated, Protocol

import pandas as pd
import typer
from rich import print as rprint
from rich.console import Console
from rich.table import Table

from . import __version__
from .application.date_plan import plan_date
from .application.matches import get_user_matches
from .config import MatchingConfig
from .config_file import load_matching_config_file
from .domain.compatibility import compute_compatibility
from .domain.matching import Match, compatibility_label, format_percentage
from .protocols import FileSystem, RatingStore, UserDirectory


class DependenciesBuilder(Protocol):
    """Protocol for constructing CLI dependencies."""

    def __call__(self, *, config: MatchingConfig) -> CliDependencies:
        """Build dependencies for CLI commands."""
        ...


@dataclass(frozen=True)
class CliDependencies:
    """Concrete dependencies required by the CLI."""

    fs: FileSystem
    rating_store: RatingStore
    directory: UserDirectory


@dataclass(frozen=True)
class CliContext:
    """Runtime CLI context for a single command invocation."""

    config: MatchingConfig
    deps_builder: DependenciesBuilder

    def build_dependencies(self, config: MatchingConfig | None = None) -> CliDependencies:
        """Return dependencies using the configured builder."""
        return self.deps_builder(config=config or self.config)


class CliContextNotInitialisedError(typer.BadParameter):
    """Raised when CLI context is missing."""

    def __init__(self) -> None:
        super().__init__("CLI context is not initialised. Use the hydrater entry point.")


MATCH_EXPORT_COLUMNS = (
    "user_id",
    "display_name",
    "compatibility_score",
    "confidence_score",
    "shared_fountains_count",
    "correlation_score",
    "weighted_similarity_score",
    "label",
)


def _get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        raise CliContextNotInitialisedError()
    return ctx.obj


def _load_config(config_path: Path | None, fs: FileSystem) -> MatchingConfig:
    config = MatchingConfig.from_env()
    path = config_path or (Path(config.config_file_path) if config.config_file_path else None)
    if path is None:
        return config
    return config.with_file_overrides(load_matching_config_file(path=path, fs=fs))


def _version_callback(value: bool) -> None:
    if value:
        rprint(f"hydrater {__version__}")
        raise typer.Exit()


def matches_frame(matches: list[Match]) -> pd.DataFrame:
    """Tabulate matches for export."""
    rows = [
        {
            "user_id": match.user_id,
            "display_name": match.profile.display_name or "",
            "compatibility_score": match.compatibility_score,
            "confidence_score": match.confidence_score,
            "shared_fountains_count": match.shared_fountains_count,
            "correlation_score": match.compatibility.correlation_score,
            "weighted_similarity_score": match.compatibility.weighted_similarity_score,
            "label": match.label,
        }
        for match in matches
    ]
    return pd.DataFrame(rows, columns=list(MATCH_EXPORT_COLUMNS))


def _matches_table(matches: list[Match]) -> Table:
    table = Table(title="hyDATEr matches")
    table.add_column("#", justify="right")
    table.add_column("User")
    table.add_column("Compatibility", justify="right")
    table.add_column("Confidence", justify="right")
    table.add_column("Shared", justify="right")
    table.add_column("Match")
    for rank, match in enumerate(matches, start=1):
        table.add_row(
            str(rank),
            match.profile.display_name or match.user_id,
            format_percentage(match.compatibility_score),
            format_percentage(match.confidence_score),
            str(match.shared_fountains_count),
            match.label,
        )
    return table


def create_app(deps_builder: DependenciesBuilder, fs: FileSystem) -> typer.Typer:
    """Create a Typer app wired with the provided dependencies builder.

    Args:
        deps_builder: Builds stores for the resolved configuration.
        fs: Filesystem used to read the config file before stores exist.
    """
    app = typer.Typer(
        add_completion=False,
        help="hyDATEr: match fountain raters by rating-pattern similarity",
    )
    console = Console()

    @app.callback()
    def main(
        ctx: typer.Context,
        config_path: Annotated[
            Path | None,
            typer.Option(
                "--config",
                "-c",
                help="TOML config file (overrides environment values)",
            ),
        ] = None,
        version: Annotated[
            bool,
            typer.Option(
                "--version",
                callback=_version_callback,
                is_eager=True,
                help="Show the package version and exit",
            ),
        ] = False,
    ) -> None:
        """Initialise CLI context."""
        _ = version
        ctx.obj = CliContext(config=_load_config(config_path, fs), deps_builder=deps_builder)

    @app.command()
    def matches(
        ctx: typer.Context,
        user_id: Annotated[str, typer.Argument(help="User to find matches for")],
        min_compatibility: Annotated[
            float | None,
            typer.Option(
                "--min-compatibility",
                min=0.0,
                max=1.0,
                help="Override minimum overall compatibility (default: 0.3)",
            ),
        ] = None,
        min_confidence: Annotated[
            float | None,
            typer.Option(
                "--min-confidence",
                min=0.0,
                max=1.0,
                help="Override minimum confidence (default: 0.2)",
            ),
        ] = None,
        max_workers: Annotated[
            int | None,
            typer.Option(
                "--max-workers",
                min=1,
                help="Maximum concurrent rating fetches",
            ),
        ] = None,
        output: Annotated[
            Path | None,
            typer.Option(
                "--output",
                "-o",
                help="Write ranked matches to this CSV file",
            ),
        ] = None,
    ) -> None:
        """Rank compatible users for USER_ID."""
        state = _get_context(ctx)
        config = state.config.with_overrides(
            min_compatibility=min_compatibility,
            min_confidence=min_confidence,
            max_workers=max_workers,
        )
        deps = state.build_dependencies(config)
        result = get_user_matches(
            user_id,
            directory=deps.directory,
            rating_store=deps.rating_store,
            config=config,
        )
        found = list(result.matches)

        if found:
            console.print(_matches_table(found))
        else:
            rprint("[yellow]No matches yet. Rate more fountains to find your hyDATEr.[/yellow]")

        summary = result.summary
        rprint(
            f"[green]✓ {summary.matched:,} matches[/green] from {summary.candidates:,} candidates"
        )
        if summary.failed:
            rprint(f"[yellow]  {summary.failed:,} candidates skipped (ratings unavailable)[/yellow]")

        if output is not None:
            deps.fs.write_csv(matches_frame(found), output)
            rprint(f"  Exported: {output}")

    @app.command()
    def compatibility(
        ctx: typer.Context,
        user_id: Annotated[str, typer.Argument(help="First user")],
        other_user_id: Annotated[str, typer.Argument(help="Second user")],
    ) -> None:
        """Show the compatibility breakdown for two users."""
        state = _get_context(ctx)
        deps = state.build_dependencies()
        score = compute_compatibility(
            deps.rating_store.get_ratings_for_user(user_id),
            deps.rating_store.get_ratings_for_user(other_user_id),
            state.config.compatibility_weights,
        )
        rprint(
            f"[bold]{format_percentage(score.overall_compatibility)}[/bold] "
            f"{compatibility_label(score.overall_compatibility)}"
        )
        rprint(f"  Shared fountains: {score.shared_fountains_count}")
        rprint(f"  Correlation: {score.correlation_score:.3f}")
        rprint(f"  Weighted similarity: {score.weighted_similarity_score:.3f}")
        rprint(f"  Confidence: {format_percentage(score.confidence_score)}")

    @app.command(name="plan-date")
    def plan_date_command(
        ctx: typer.Context,
        user_id: Annotated[str, typer.Argument(help="User planning the date")],
        partner_id: Annotated[str, typer.Argument(help="Matched partner")],
    ) -> None:
        """Suggest a meeting fountain for USER_ID and PARTNER_ID."""
        state = _get_context(ctx)
        deps = state.build_dependencies()
        plan = plan_date(
            user_id,
            partner_id,
            rating_store=deps.rating_store,
            directory=deps.directory,
            config=state.config,
        )
        partner_name = plan.partner_display_name or partner_id
        rprint(
            f"[bold]Date with {partner_name}[/bold]: "
            f"{format_percentage(plan.compatibility_score)} hydration compatibility"
        )
        if plan.suggested_fountain is None:
            rprint("[yellow]Neither of you has rated a fountain yet.[/yellow]")
        else:
            rprint(
                f"[green]✓ Suggested fountain:[/green] {plan.suggested_fountain.fountain_id} "
                f"({plan.suggested_fountain.average_rating:.1f}/5)"
            )
        for label, fountains in (
            ("Your top fountains", plan.user_top_fountains),
            (f"{partner_name}'s top fountains", plan.partner_top_fountains),
        ):
            rprint(f"  {label}:")
            for fountain in fountains:
                rprint(f"    {fountain.fountain_id} ({fountain.average_rating:.1f}/5)")

    _ = (main, matches, compatibility, plan_date_command)

    return app
