"""Main Typer app definition.

This is the canonical entry point for the CLI. The hook itself is the
`session-start` command; `status` and `outcomes` are offline helpers for
checking what the hook would inject.
"""
from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.markup import escape
from rich.table import Table

from session_continuity import __version__
from session_continuity.cli.common import (
    get_console,
    get_err_console,
    load_config_safe,
    set_project_dir,
)

app = typer.Typer(
    name="session-continuity",
    help="Rebuild session context from continuity ledgers and handoffs",
    add_completion=False,
)

console = get_console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"session-continuity version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    project: Optional[str] = typer.Option(
        None,
        "--project",
        "-p",
        help="Project directory to read from (default: $CLAUDE_PROJECT_DIR or current directory)",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        help="Write debug logs to stderr",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Session continuity for Claude Code.

    Finds the latest continuity ledger and handoff and turns them into
    SessionStart hook output.
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)

    if project:
        project_path = Path(project)
        if not project_path.is_dir():
            get_err_console().print(f"[red]Error: Project directory not found: {project}[/red]")
            raise typer.Exit(1)
        set_project_dir(str(project_path.absolute()))
    else:
        set_project_dir(None)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


@app.command("session-start")
def session_start_command() -> None:
    """
    Run the SessionStart hook.

    Reads the hook payload from stdin and writes the JSON envelope to stdout.

    Example:
        echo '{"source": "compact"}' | session-continuity session-start
    """
    from session_continuity.hooks.session_start import run_session_start

    raw_input = sys.stdin.read()
    config = load_config_safe()
    output = run_session_start(raw_input, config)
    typer.echo(output.to_json())


@app.command("status")
def status_command(
    session_type: str = typer.Option(
        "resume",
        "--type",
        "-t",
        help="Session start reason to simulate: startup, resume, clear or compact",
    ),
) -> None:
    """
    Preview the envelope the hook would produce.

    Example:
        session-continuity status --type clear
    """
    from session_continuity.hooks.session_start import SessionType, run_session_start

    if SessionType.parse(session_type) is None:
        get_err_console().print(f"[red]Error: Unknown session type: {session_type}[/red]")
        raise typer.Exit(1)

    config = load_config_safe()
    output = run_session_start(json.dumps({"source": session_type}), config)
    typer.echo(json.dumps(output.to_dict(), indent=2, ensure_ascii=False))


@app.command("outcomes")
def outcomes_command() -> None:
    """
    List handoffs in the artifact index that have no outcome yet.

    Example:
        session-continuity outcomes
    """
    from session_continuity.continuity.outcomes import OutcomeReporter

    config = load_config_safe()
    reporter = OutcomeReporter(
        index_path=config.index_db_path,
        sqlite_binary=config.sqlite_binary,
        timeout_seconds=config.outcome_timeout_seconds,
        limit=config.outcome_limit,
    )
    result = reporter.query(config.project_root)

    if not result.success:
        console.print(f"[yellow]Outcome index unavailable:[/yellow] {escape(result.error or '')}")
        return

    if not result.records:
        console.print("[green]All indexed handoffs have outcomes.[/green]")
        return

    table = Table(title="Unmarked Session Outcomes")
    table.add_column("ID", style="dim", max_width=12)
    table.add_column("Session", style="cyan")
    table.add_column("Task", style="green")
    table.add_column("Summary", max_width=60)

    for record in result.records:
        table.add_row(
            record.id[:8],
            escape(record.session_name),
            record.task_number or "-",
            escape(record.summary) if record.summary else "(no summary)",
        )

    console.print(table)


def cli_main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "cli_main"]
