"""Typer CLI definition for jaap."""

import asyncio
import logging
from datetime import datetime
from typing import NoReturn

import typer

from .config import load_config
from .core import Tracker, build_tracker
from .sync.models import SyncStatus

app = typer.Typer(help="Log mantra recitations and keep them in sync")


def configure_logging(debug: bool) -> None:
    """Enable verbose logging when --debug is given."""
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )


def get_tracker() -> Tracker:
    """Load configuration and build the component graph."""
    return build_tracker(load_config())


def format_ms(value: int | None) -> str:
    """Render an epoch-millisecond timestamp for display."""
    if value is None:
        return "never"
    when = datetime.fromtimestamp(value / 1000)
    return when.isoformat(sep=" ", timespec="seconds")


def format_status(status: SyncStatus) -> str:
    state = "syncing" if status.syncing else "idle"
    return f"{status.pending} pending ({state})"


def fail(message: str, error: Exception, debug: bool) -> NoReturn:
    """Report an error the way every command does and exit 1."""
    if debug:
        typer.echo(f"Debug - {message}: {error!r}", err=True)
    else:
        typer.echo(f"Error: {message}: {error}", err=True)
    raise typer.Exit(1)


@app.command()
def catalog(
    refresh: bool = typer.Option(False, "--refresh", help="Ignore cached catalogs"),
    debug: bool = typer.Option(False, "--debug", help="Show verbose logging"),
) -> None:
    """List every mantra in the catalog."""
    configure_logging(debug)
    tracker = get_tracker()

    if refresh:
        entries = asyncio.run(tracker.catalog.refresh())
    else:
        entries = asyncio.run(tracker.catalog.get_all_entries())

    for entry in entries:
        count = f" [{entry.traditional_count}]" if entry.traditional_count else ""
        category = f" ({entry.category})" if entry.category else ""
        typer.echo(f"{entry.id}: {entry.name}{category}{count} <{entry.source.value}>")


@app.command("add-mantra")
def add_mantra(
    name: str = typer.Argument(..., help="Mantra name"),
    category: str | None = typer.Option(None, "-c", "--category", help="Category"),
    gurmukhi: str | None = typer.Option(None, "--gurmukhi", help="Gurmukhi text"),
    sanskrit: str | None = typer.Option(None, "--sanskrit", help="Sanskrit text"),
    translation: str | None = typer.Option(None, "--translation", help="Translation"),
    count: int | None = typer.Option(
        None, "--count", help="Traditional target count"
    ),
    submitted_by: str | None = typer.Option(None, "--by", help="Submitter name"),
    submit: bool = typer.Option(
        False, "--submit", help="Also submit the mantra for review"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose logging"),
) -> None:
    """Add a mantra to your personal catalog."""
    configure_logging(debug)
    if not name.strip():
        typer.echo("Error: Mantra name cannot be empty", err=True)
        raise typer.Exit(1)

    tracker = get_tracker()
    partial = {
        "name": name.strip(),
        "category": category,
        "gurmukhi": gurmukhi,
        "sanskrit": sanskrit,
        "translation": translation,
        "traditional_count": count,
        "submitted_by": submitted_by,
    }
    entry = tracker.catalog.add_user_entry(partial)
    typer.echo(f"Added {entry.name} as {entry.id}")

    if submit:
        if asyncio.run(tracker.catalog.submit_for_review(entry)):
            typer.echo("Submitted for review")
        else:
            typer.echo("Review submission unavailable or failed")


@app.command("delete-mantra")
def delete_mantra(
    entry_id: str = typer.Argument(..., help="Id of a user-added mantra"),
) -> None:
    """Remove a mantra you added."""
    tracker = get_tracker()
    if not tracker.catalog.delete_user_entry(entry_id):
        typer.echo(f"No user mantra with id {entry_id}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Deleted {entry_id}")


@app.command()
def log(
    mantra: str = typer.Argument(..., help="Mantra name"),
    count: int = typer.Argument(..., help="Number of repetitions"),
    duration: float = typer.Option(0, "-d", "--duration", help="Minutes spent"),
    mantra_id: str | None = typer.Option(None, "--id", help="Catalog id of the mantra"),
    notes: str | None = typer.Option(None, "-n", "--notes", help="Session notes"),
    debug: bool = typer.Option(False, "--debug", help="Show verbose logging"),
) -> None:
    """Log a recitation; it is saved locally and queued for upload."""
    configure_logging(debug)
    tracker = get_tracker()
    try:
        saved, queue_id = tracker.log_recitation(
            mantra_name=mantra,
            count=count,
            duration_minutes=duration,
            mantra_id=mantra_id,
            notes=notes,
        )
    except ValueError as e:
        fail("Invalid recitation", e, debug)

    typer.echo(f"Logged {count} x {mantra} ({saved.id})")
    typer.echo(f"Sync: {format_status(tracker.queue.get_status())}")
    if debug:
        typer.echo(f"Debug - queued as {queue_id}", err=True)


async def watch_queue(tracker: Tracker, interval: float, duration: float) -> None:
    """Run background sync for duration seconds, echoing status changes."""
    unsubscribe = tracker.queue.subscribe(
        lambda status: typer.echo(f"Sync: {format_status(status)}")
    )
    tracker.queue.start_auto_sync(interval)
    try:
        await asyncio.sleep(duration)
    finally:
        tracker.queue.stop_auto_sync()
        await tracker.queue.wait_for_flush()
        unsubscribe()


@app.command()
def sync(
    watch: float | None = typer.Option(
        None, "--watch", help="Keep syncing in the background for this many seconds"
    ),
    interval: float | None = typer.Option(
        None, "--interval", help="Seconds between syncs while watching"
    ),
    debug: bool = typer.Option(False, "--debug", help="Show verbose logging"),
) -> None:
    """Upload queued recitations to the backend."""
    configure_logging(debug)
    tracker = get_tracker()

    if watch is not None:
        period = interval if interval is not None else load_config().sync.interval
        asyncio.run(watch_queue(tracker, period, watch))
        return

    report = asyncio.run(tracker.queue.flush())
    if report.skipped == "empty":
        typer.echo("Nothing to sync")
    elif report.skipped == "unreachable":
        typer.echo("Backend not available, recitations kept for later")
    else:
        typer.echo(
            f"Synced {len(report.delivered)}, "
            f"{len(report.retained)} remaining, {len(report.dropped)} dropped"
        )


@app.command()
def status() -> None:
    """Show the sync queue status."""
    tracker = get_tracker()
    current = tracker.queue.get_status()
    typer.echo("=== Sync Status ===")
    typer.echo(f"Pending: {current.pending}")
    typer.echo(f"Syncing: {'yes' if current.syncing else 'no'}")
    typer.echo(f"Last attempt: {format_ms(current.last_sync_attempt)}")
    typer.echo(f"Last success: {format_ms(current.last_successful_sync)}")

    for item in tracker.queue.get_queue()[:5]:
        typer.echo(
            f"  {item.queue_id}: {item.recitation.count} x "
            f"{item.recitation.mantra_name} (retries: {item.retries})"
        )


@app.command()
def stats(
    daily: bool = typer.Option(False, "--daily", help="Show per-day totals"),
) -> None:
    """Show totals across all logged recitations."""
    tracker = get_tracker()
    totals = tracker.stats()
    typer.echo(f"Total recitations: {totals.total_recitations}")
    typer.echo(f"Total count: {totals.total_count}")
    typer.echo(f"Total minutes: {totals.total_duration:g}")
    typer.echo(f"Average count: {totals.average_count}")
    typer.echo(f"Average minutes: {totals.average_duration}")
    typer.echo(f"Most recited: {totals.most_recited_mantra or 'N/A'}")

    if daily:
        for day in tracker.daily_stats():
            typer.echo(
                f"{day.date}: {day.count} in {day.recitations} session(s), "
                f"{day.duration:g} min"
            )


@app.command("check-sheets")
def check_sheets(
    debug: bool = typer.Option(False, "--debug", help="Show verbose logging"),
) -> None:
    """Sign in to Google Sheets and list the available tabs."""
    configure_logging(debug)
    config = load_config()
    if not config.sheets.enabled:
        typer.echo(
            "Google Sheets is not configured. Set JAAP_SHEETS_CLIENT_ID, "
            "JAAP_SHEETS_API_KEY and JAAP_SHEET_ID.",
            err=True,
        )
        raise typer.Exit(1)

    from .sheets.session import GoogleSheetsSession

    session = GoogleSheetsSession(
        client_id=config.sheets.client_id or "",
        client_secret=config.sheets.client_secret,
        api_key=config.sheets.api_key,
        sheet_id=config.sheets.sheet_id or "",
    )
    result = asyncio.run(session.test_connection())
    if not result["success"]:
        typer.echo(f"Error: {result['message']}", err=True)
        raise typer.Exit(1)

    typer.echo(result["message"])
    for name in result["sheet_names"]:
        typer.echo(f"  {name}")
