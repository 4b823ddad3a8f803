"""
TTM CLI - record, browse and replay terminal sessions.

Commands:
    ttm start                   - Start a recorded shell prompt
    ttm stop                    - Stop the active recording
    ttm history                 - List session logs
    ttm show [--date]           - Print a day's raw log
    ttm inputs [--date]         - Print only the commands typed
    ttm search PATTERN [--date] - Commands containing PATTERN
    ttm search-all PATTERN      - Same, across every day
    ttm export [--date]         - Write a Markdown copy of a day's log
    ttm export-all              - Markdown copies of every log
    ttm replay FILE [--fast]    - Play a log back
    ttm summarize [--date]      - AI summary of a day's log
    ttm version                 - Show version
"""

import re
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from ttm.config import Settings, today
from ttm.logging import TTM_THEME, setup_logging

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def _validate_date(ctx, param, value: Optional[str]) -> str:
    """Default to today; reject anything that is not YYYY-MM-DD."""
    if value is None:
        return today()
    if not DATE_RE.match(value):
        raise click.BadParameter("expected YYYY-MM-DD")
    return value


date_option = click.option(
    "--date", "-d",
    callback=_validate_date,
    help="Date in YYYY-MM-DD (default: today)",
)


@click.group(invoke_without_command=True)
@click.option("--sessions-dir", envvar="TTM_SESSIONS_DIR",
              type=click.Path(file_okay=False), help="Directory holding session logs")
@click.option("--state-file", envvar="TTM_STATE_FILE",
              type=click.Path(dir_okay=False), help="Active session state file")
@click.option("--summary-model", envvar="TTM_SUMMARY_MODEL", help="Model used by summarize")
@click.option("--log-level", envvar="TTM_LOG_LEVEL", default="WARNING",
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
              help="Diagnostic log level (default: WARNING)")
@click.pass_context
def cli(ctx, sessions_dir: Optional[str], state_file: Optional[str],
        summary_model: Optional[str], log_level: str):
    """TTM - terminal time machine. Record and replay shell sessions."""
    setup_logging(level=log_level, force=True)
    ctx.obj = Settings.resolve(
        sessions_dir=sessions_dir,
        state_file=state_file,
        summary_model=summary_model,
    )
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.pass_obj
def start(settings: Settings):
    """
    Start a recorded prompt; commands are appended to today's log.

    Type 'exit' (or press Ctrl-D) to end the session.
    """
    from ttm.record.recorder import SessionRecorder
    from ttm.state import SessionConflict, SessionStateStore

    store = SessionStateStore(settings.state_file)
    recorder = SessionRecorder(settings, store)

    try:
        recorder.record()
    except SessionConflict as e:
        click.secho(f"A session is already active: pid {e.active.pid} ({e.active.log_file})", fg="red")
        sys.exit(1)
    except OSError as e:
        click.secho(str(e), fg="red")
        sys.exit(1)


@cli.command()
@click.pass_obj
def stop(settings: Settings):
    """Stop the currently recording session."""
    from ttm.record.recorder import stop_session
    from ttm.state import SessionStateStore

    result = stop_session(SessionStateStore(settings.state_file))

    if not result.found:
        click.secho("No active session found.", fg="yellow")
        sys.exit(1)

    if result.signalled:
        click.secho(f"Stopped PID {result.session.pid}", fg="green")
    else:
        click.secho(f"Failed to stop PID {result.session.pid}: {result.error} (state cleared)", fg="red")
        sys.exit(1)


@cli.command()
@click.pass_obj
def history(settings: Settings):
    """List session log files, newest first."""
    from ttm.history import list_sessions

    sessions = list_sessions(settings)
    if not sessions:
        click.secho("No sessions yet.", fg="bright_black")
        return

    for item in sessions:
        click.echo(
            click.style(item.path.name, fg="cyan")
            + "  "
            + click.style(
                f"{item.modified.strftime('%Y-%m-%d %H:%M:%S')}  {item.sessions} session(s)",
                fg="bright_black",
            )
        )


@cli.command()
@date_option
@click.pass_obj
def show(settings: Settings, date: str):
    """Print the raw session log for a date."""
    from ttm.history import read_log

    text = read_log(settings, date)
    if text is None:
        click.secho(f"No log for {date}", fg="yellow")
        return
    click.echo(text, nl=False)


@cli.command()
@date_option
@click.pass_obj
def inputs(settings: Settings, date: str):
    """Print only the commands typed on a date."""
    from ttm.history import read_log
    from ttm.record.codec import scan_commands

    text = read_log(settings, date)
    if text is None:
        click.secho(f"No log for {date}", fg="yellow")
        return
    for command in scan_commands(text):
        click.echo(command)


@cli.command()
@click.argument("pattern")
@date_option
@click.pass_obj
def search(settings: Settings, pattern: str, date: str):
    """Print commands on a date that contain PATTERN."""
    from ttm.history import read_log, search_entries
    from ttm.record.codec import decode

    text = read_log(settings, date)
    if text is None:
        click.secho(f"No log for {date}", fg="yellow")
        return
    for entry in search_entries(decode(text), pattern):
        click.echo(entry.command)


@cli.command("search-all")
@click.argument("pattern")
@click.pass_obj
def search_all(settings: Settings, pattern: str):
    """Print commands containing PATTERN across every session log."""
    from ttm.history import search_all as search_all_logs

    if not settings.list_session_files():
        click.secho("No sessions found.", fg="yellow")
        return
    for date, entry in search_all_logs(settings, pattern):
        click.echo(f"{click.style(date, fg='cyan')}  {entry.command}")


@cli.command()
@date_option
@click.pass_obj
def export(settings: Settings, date: str):
    """Export a day's session log to Markdown."""
    from ttm.export import export_markdown

    path = export_markdown(settings, date)
    if path is None:
        click.secho(f"No log file for {date}", fg="yellow")
        return
    click.secho(f"Exported {path}", fg="green")


@cli.command("export-all")
@click.pass_obj
def export_all(settings: Settings):
    """Export every session log to Markdown."""
    from ttm.export import export_all as export_all_logs

    written = export_all_logs(settings)
    if not written:
        click.secho("No session logs to export.", fg="yellow")
        return
    for path in written:
        click.secho(f"Exported {path}", fg="green")


@cli.command()
@click.argument("session_file")
@click.option("--fast", is_flag=True, help="Replay instantly with no delays")
@click.option("--speed", default=1.0, type=click.FloatRange(min=0.01),
              help="Playback speed multiplier (default: 1.0)")
@click.pass_obj
def replay(settings: Settings, session_file: str, fast: bool, speed: float):
    """
    Replay a past session log.

    SESSION_FILE is a path, or a file name inside the sessions directory.

    Example:
        ttm replay session-2026-10-18.log --fast
    """
    from ttm.record.codec import decode
    from ttm.replay import ReplayEngine

    path = Path(session_file)
    if not path.is_file():
        path = settings.sessions_dir / session_file
    if not path.is_file():
        click.secho(f"Session file not found: {path}", fg="red")
        return

    entries = list(decode(path.read_text(encoding="utf-8", errors="replace")))
    if not entries:
        click.secho("No commands found in session log.", fg="yellow")
        return

    engine = ReplayEngine(console=Console(theme=TTM_THEME, emoji=False), fast=fast, speed=speed)
    engine.replay(entries)


@cli.command()
@date_option
@click.pass_obj
def summarize(settings: Settings, date: str):
    """Generate an AI summary for a day's session log."""
    from ttm.export import SummaryError, summarize_session

    if not settings.session_file_for_date(date).exists():
        click.secho(f"No log file for {date}", fg="yellow")
        return

    click.echo("Generating AI summary... (this may take a few seconds)")
    try:
        summary = summarize_session(settings, date)
    except SummaryError as e:
        click.secho(f"Error generating summary: {e}", fg="red")
        sys.exit(1)

    click.echo(f"\nSummary:\n{summary}")
    click.secho(f"\nSaved summary to {settings.summary_file_for_date(date)}", fg="green")


@cli.command()
def version():
    """Show TTM version."""
    from ttm import __version__
    click.echo(f"ttm version {__version__}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
