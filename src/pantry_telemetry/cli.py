"""
Command-line interface for the Pantry Telemetry package.

This module provides commands for reconstructing door cycles from a saved
telemetry payload and printing a summary of the pantry's recent activity.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

import click

from .exceptions import PantryTelemetryError
from .models import ActivityKind, RecentActivity, TelemetrySummary
from .pipeline import Pipeline
from .settings import load_settings

PLACEHOLDER = "—"


# Configure basic logging
def configure_logging(verbose: bool = False) -> None:
    """Configure logging with appropriate level."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


def format_kg_delta(delta: float | None) -> str:
    """Format a mass delta with an explicit sign for gains."""
    if delta is None:
        return PLACEHOLDER
    sign = "+" if delta > 0 else ""
    return f"{sign}{delta:.2f} kg"


def format_activity(activity: RecentActivity) -> str:
    """Render one recent activity as a single line."""
    cycle = activity.cycle
    delta = cycle.delta_kg
    if activity.kind is ActivityKind.ADDED:
        label = f"Added {abs(delta):.2f} kg"
    elif activity.kind is ActivityKind.REMOVED:
        label = f"Removed {abs(delta):.2f} kg"
    else:
        label = "No measurable change" if delta is not None else PLACEHOLDER
    duration = (
        f"{cycle.duration_minutes} min"
        if cycle.duration_minutes is not None
        else PLACEHOLDER
    )
    return (
        f"{activity.display_time}  {label} · door open {duration}  "
        f"({format_kg_delta(delta)})"
    )


def echo_summary(summary: TelemetrySummary) -> None:
    """Print the summary block."""
    click.echo("\nPantry Telemetry Summary")
    click.echo("=" * 40)
    if not summary.has_data:
        click.echo("No telemetry records found for this pantry yet.")
        return

    last_updated = (
        summary.last_updated.strftime("%Y-%m-%d %H:%M")
        if summary.last_updated
        else PLACEHOLDER
    )
    latest_weight = (
        f"{summary.latest_weight_kg:.2f} kg"
        if summary.latest_weight_kg is not None
        else PLACEHOLDER
    )
    latest_door = (
        summary.latest_door_state.value if summary.latest_door_state else PLACEHOLDER
    )
    click.echo(f"Last updated: {last_updated}")
    click.echo(f"Latest weight: {latest_weight}")
    click.echo(f"Latest door event: {latest_door}")
    click.echo(f"Records loaded: {summary.record_count}")

    if summary.weight_range_kg is not None:
        low, high = summary.weight_range_kg
        click.echo(f"Weight range: Min {low:.2f} kg · Max {high:.2f} kg")


def echo_recent_activity(summary: TelemetrySummary) -> None:
    """Print the recent activity block."""
    click.echo("\nRecent Activity")
    click.echo("-" * 20)
    if not summary.recent_activity:
        click.echo("No recent activity recorded.")
        return
    for activity in summary.recent_activity:
        click.echo(format_activity(activity))
    click.echo(
        f"{summary.total_cycles} cycles · {len(summary.recent_activity)} shown"
    )


def _window_options(func):
    """Shared options for commands that read a payload."""
    options = [
        click.argument(
            "payload",
            required=False,
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
        ),
        click.option(
            "--config",
            type=click.Path(exists=True, dir_okay=False, path_type=Path),
            help="Path to configuration file",
        ),
        click.option(
            "--from-date",
            type=click.DateTime(),
            help="Ignore records before this time (YYYY-MM-DD)",
        ),
        click.option(
            "--to-date",
            type=click.DateTime(),
            help="Ignore records after this time (YYYY-MM-DD)",
        ),
        click.option(
            "--limit",
            type=click.IntRange(min=1),
            help="Number of recent cycles to show (overrides config)",
        ),
        click.option(
            "--json",
            "as_json",
            is_flag=True,
            default=False,
            help="Print JSON instead of text",
        ),
        click.option(
            "--verbose/--quiet",
            default=False,
            help="Enable verbose output",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@click.group()
def main():
    """
    Reconstruct pantry door activity from sensor telemetry.

    This tool reads a saved telemetry payload, pairs door openings with
    closings, and reports how much weight was added or removed each time.
    """


@main.command()
@_window_options
def reconstruct(
    payload: Path | None,
    config: Path | None,
    from_date: datetime | None,
    to_date: datetime | None,
    limit: int | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Reconstruct door cycles from a telemetry payload.

    Prints the summary and the most recent cycles, or the full
    weightSamples/doorSamples/cycles contract with --json.
    """
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(config)
        pipeline = Pipeline(settings)
        result, summary = pipeline.run_file(
            payload, start=from_date, end=to_date, limit=limit
        )

        if as_json:
            click.echo(
                json.dumps(result.model_dump(mode="json", by_alias=True), indent=2)
            )
            return

        echo_summary(summary)
        echo_recent_activity(summary)

    except PantryTelemetryError as e:
        logger.error(f"Reconstruction failed: {str(e)}")
        raise click.Abort() from e
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        raise click.Abort() from e


@main.command()
@_window_options
def summarize(
    payload: Path | None,
    config: Path | None,
    from_date: datetime | None,
    to_date: datetime | None,
    limit: int | None,
    as_json: bool,
    verbose: bool,
) -> None:
    """
    Print only the summary of a telemetry payload.

    With --json the summary model is printed, including recent activity and
    chart points.
    """
    configure_logging(verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = load_settings(config)
        pipeline = Pipeline(settings)
        _, summary = pipeline.run_file(
            payload, start=from_date, end=to_date, limit=limit
        )

        if as_json:
            click.echo(
                json.dumps(summary.model_dump(mode="json", by_alias=True), indent=2)
            )
            return

        echo_summary(summary)

    except PantryTelemetryError as e:
        logger.error(f"Summary generation failed: {str(e)}")
        raise click.Abort() from e
    except Exception as e:
        logger.error(f"Unexpected error: {str(e)}")
        raise click.Abort() from e


if __name__ == "__main__":
    main()
