"""
drillcore: terminal front-end for review scheduling and analytics.

Commands:
- drillcore rate      - Record a self-rated exercise attempt
- drillcore review    - Record a raw SM-2 quality score
- drillcore due       - List exercises due for review
- drillcore queue     - Build a practice session queue
- drillcore report    - Show the competence report
- drillcore trend     - Show stored daily snapshots
- drillcore export    - Write a backup file
- drillcore import    - Restore from a backup file
"""
from __future__ import annotations

import sys
from datetime import date
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from drillcore.analytics import AnalyticsReport, TrendComparison
from drillcore.config import configure_logging
from drillcore.core.keys import prettify_key
from drillcore.srs import SelfRating
from drillcore.storage import BackupError, export_backup, import_backup
from drillcore.study import Difficulty, SessionMode

from .engine import CourseEngine

# =============================================================================
# CLI Setup
# =============================================================================

app = typer.Typer(
    name="drillcore",
    help="drillcore: spaced-repetition scheduling and progress analytics",
    no_args_is_help=True,
)
console = Console()


RATING_NAMES = {
    SelfRating.NONE: "no rating",
    SelfRating.GOT_IT: "got it",
    SelfRating.STRUGGLED: "struggled",
    SelfRating.NEEDED_SOLUTION: "needed solution",
}


def _engine() -> CourseEngine:
    return CourseEngine.from_settings()


def _signed(value: int) -> str:
    if value > 0:
        return f"[green]+{value}[/green]"
    if value < 0:
        return f"[red]{value}[/red]"
    return "0"


# =============================================================================
# Display Helpers
# =============================================================================


def display_trend(trend: TrendComparison) -> None:
    """Show week-over-week deltas."""
    # Lower is better for weak items
    weak = trend.weak_delta
    weak_str = f"[green]{weak}[/green]" if weak < 0 else (f"[red]+{weak}[/red]" if weak else "0")
    console.print(
        f"[dim]vs {trend.days_ago} days ago ({trend.baseline_date}):[/dim] "
        f"tracked {_signed(trend.tracked_delta)}, "
        f"mastered {_signed(trend.mastered_delta)}, weak {weak_str}"
    )


def display_report(report: AnalyticsReport) -> None:
    """Render the analytics report as tables."""
    console.print(Panel(
        f"Exercises tracked: [bold]{report.total_tracked}[/bold]\n"
        f"Mastered: [green]{report.mastered_count}[/green]\n"
        f"Weak: [red]{report.weak_count}[/red]\n"
        f"Modules rated: {report.modules_rated}/{len(report.modules)}",
        title="Progress",
        border_style="cyan",
    ))

    if report.trend:
        display_trend(report.trend)

    if report.modules:
        table = Table(title="Modules")
        table.add_column("Module")
        table.add_column("Avg ease", justify="right")
        table.add_column("Items", justify="right")
        table.add_column("Mastered", justify="right")
        table.add_column("Strength")
        for m in report.modules:
            table.add_row(
                escape(m.name),
                f"{m.avg_ease:.2f}",
                str(m.count),
                str(m.mastered),
                f"[{m.label.color}]{m.label.value}[/{m.label.color}]",
            )
        console.print(table)

    if report.concepts:
        table = Table(title="Concepts")
        table.add_column("Module", justify="right")
        table.add_column("Concept")
        table.add_column("Avg ease", justify="right")
        table.add_column("Items", justify="right")
        table.add_column("Strength")
        for c in report.concepts:
            table.add_row(
                str(c.module),
                f"{escape(c.concept)} [dim]#{escape(c.link)}[/dim]" if c.link else escape(c.concept),
                f"{c.avg_ease:.2f}",
                str(c.count),
                f"[{c.label.color}]{c.label.value}[/{c.label.color}]",
            )
        console.print(table)

    if report.weakest:
        table = Table(title="Weakest exercises")
        table.add_column("Exercise")
        table.add_column("Ease", justify="right")
        table.add_column("Reps", justify="right")
        table.add_column("Next review")
        for w in report.weakest:
            table.add_row(
                escape(w.name),
                f"{w.ease_factor:.2f}",
                str(w.repetitions),
                w.due_status(report.generated_on),
            )
        console.print(table)

    ratings = report.ratings
    if ratings.total:
        console.print(
            f"Self-ratings: [green]{ratings.got_it} got it[/green], "
            f"[yellow]{ratings.struggled} struggled[/yellow], "
            f"[red]{ratings.needed_solution} needed solution[/red]"
        )


# =============================================================================
# Commands
# =============================================================================


@app.command()
def rate(
    key: str = typer.Argument(..., help="Exercise key, e.g. m2_warmup_1"),
    rating: int = typer.Argument(
        ...,
        min=0,
        max=3,
        help="0 none, 1 got it, 2 struggled, 3 needed solution",
    ),
    hints: bool = typer.Option(False, "--hints", help="Hints were used"),
    solution: bool = typer.Option(False, "--solution", help="The solution was revealed"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Display label"),
) -> None:
    """Record a self-rated exercise attempt."""
    engine = _engine()
    result = engine.record_attempt(
        key, rating, hints_used=hints, solution_viewed=solution, label=label
    )
    engine.close()

    name = prettify_key(key, result.review.label, engine.catalog.module_names)
    console.print(
        f"[green]Recorded[/green] {escape(name)}: {RATING_NAMES[SelfRating(rating)]} "
        f"-> quality {result.quality}"
    )
    console.print(
        f"[dim]Next review {result.review.next_review} "
        f"(interval {result.review.interval}d, ease {result.review.ease_factor:.2f})[/dim]"
    )


@app.command()
def review(
    key: str = typer.Argument(..., help="Exercise key"),
    quality: int = typer.Argument(..., min=0, max=5, help="SM-2 quality 0-5"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Display label"),
) -> None:
    """Record a raw SM-2 quality score."""
    engine = _engine()
    record = engine.reviews.record_review(key, quality, label=label)
    engine.close()

    console.print(
        f"[green]Recorded[/green] {key}: next review {record.next_review} "
        f"(interval {record.interval}d, ease {record.ease_factor:.2f}, reps {record.repetitions})"
    )


@app.command()
def due() -> None:
    """List exercises due for review."""
    engine = _engine()
    records = engine.reviews.get_due_exercises()
    engine.close()

    if not records:
        console.print("[green]Nothing due today.[/green]")
        return

    table = Table(title=f"Due for review ({len(records)})")
    table.add_column("Key")
    table.add_column("Exercise")
    table.add_column("Due")
    table.add_column("Ease", justify="right")
    for r in records:
        table.add_row(
            escape(r.key),
            escape(prettify_key(r.key, r.label, engine.catalog.module_names)),
            str(r.next_review),
            f"{r.ease_factor:.2f}",
        )
    console.print(table)


@app.command()
def queue(
    mode: Optional[SessionMode] = typer.Option(
        None,
        "--mode", "-m",
        help="Selection mode (picked automatically if omitted)",
    ),
    count: Optional[int] = typer.Option(
        None,
        "--count", "-n",
        min=1,
        help="Number of items (defaults to the configured session size)",
    ),
    prefix: Optional[str] = typer.Option(
        None,
        "--prefix", "-p",
        help="Only keys starting with this prefix, e.g. m2_",
    ),
    difficulty: Difficulty = typer.Option(
        Difficulty.MIXED,
        "--difficulty", "-d",
        help="Difficulty filter for discover mode",
    ),
) -> None:
    """Build a practice session queue."""
    engine = _engine()
    if mode is None:
        mode = engine.queues.preselect_best_mode(
            candidate_filter=(lambda k: k.startswith(prefix)) if prefix else None
        )
        console.print(f"[dim]Mode: {mode.value}[/dim]")

    session = engine.build_queue(mode, count, prefix=prefix, difficulty=difficulty)
    engine.close()

    if session.is_empty:
        console.print(f"[yellow]No exercises available for {session.mode.value} mode.[/yellow]")
        return

    for i, key in enumerate(session.keys, 1):
        console.print(f"{i:>3}. {escape(key)}")

    if session.is_short:
        console.print(
            f"[yellow]Only {len(session)} of {session.requested} requested items available.[/yellow]"
        )


@app.command()
def report() -> None:
    """Show the competence report."""
    engine = _engine()
    result = engine.report()
    engine.close()

    if result is None:
        console.print("[yellow]No reviews yet. Complete some exercises first.[/yellow]")
        return

    display_report(result)


@app.command()
def trend() -> None:
    """Show stored daily snapshots."""
    engine = _engine()
    snapshots = engine.trends.get_snapshots()
    today = date.today()
    comparison = None
    if today in snapshots:
        comparison = engine.trends.compare(snapshots[today], today=today)
    engine.close()

    if not snapshots:
        console.print("[yellow]No snapshots yet. Run 'drillcore report' to record one.[/yellow]")
        return

    table = Table(title="Snapshots")
    table.add_column("Date")
    table.add_column("Tracked", justify="right")
    table.add_column("Mastered", justify="right")
    table.add_column("Weak", justify="right")
    for day in sorted(snapshots):
        s = snapshots[day]
        table.add_row(str(day), str(s.total_tracked), str(s.mastered_count), str(s.weak_count))
    console.print(table)

    if comparison:
        display_trend(comparison)


@app.command("export")
def export_cmd(
    path: Path = typer.Argument(..., help="Backup file to write"),
) -> None:
    """Write all collections to a backup file."""
    engine = _engine()
    count = export_backup(engine.store, path)
    engine.close()

    if count == 0:
        console.print("[yellow]Nothing to export.[/yellow]")
        return
    console.print(f"[green]Exported {count} collections to {path}[/green]")


@app.command("import")
def import_cmd(
    path: Path = typer.Argument(..., help="Backup file to restore"),
) -> None:
    """Restore collections from a backup file (overwrites current data)."""
    engine = _engine()
    try:
        count = import_backup(engine.store, path)
    except BackupError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)
    finally:
        engine.close()

    console.print(f"[green]Restored {count} collections from {path}[/green]")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    configure_logging()
    logger.debug(f"drillcore started with args {sys.argv[1:]}")

    app()


if __name__ == "__main__":
    main()
