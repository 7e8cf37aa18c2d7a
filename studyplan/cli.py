"""
CLI (Command Line Interface).

Starts an interactive session on the active timetable:

    studyplan
    studyplan --data-dir ~/plans --timetable 1
    python -m studyplan --verbose

Each line typed at the prompt is handed to the CommandInterpreter; the
session ends on "bye" (or Ctrl-D / Ctrl-C, which also save).
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Callable, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from studyplan.catalog import CourseCatalog, console_name_resolver
from studyplan.commands import CommandError, CommandInterpreter
from studyplan.config import DEFAULT_DATA_DIR
from studyplan.storage import Session, load_timetable, save_timetable

console = Console()

BANNER = "=== StudyPlan ===\nType 'help' to see the list of commands."


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_time=False, show_path=False)],
        force=True,
    )


def run_session(
    session: Session,
    interpreter: CommandInterpreter,
    read_line: Callable[[], str],
    out: Console = console,
) -> None:
    """
    Read-eval loop. Reloads the timetable whenever the active index changes.
    """
    timetable = load_timetable(session.user_timetable_name, session)
    out.print(f"Loaded timetable {session.timetable_index} ({len(timetable)} courses).")

    while True:
        try:
            line = read_line()
        except (EOFError, KeyboardInterrupt):
            save_timetable(timetable, session)
            out.print("\nBye. Your timetable has been saved.")
            return

        if not line.strip():
            continue

        index_before = session.timetable_index
        try:
            result = interpreter.execute(line, timetable)
        except CommandError as exc:
            out.print(f"[red]{escape(str(exc))}[/]", highlight=False)
            continue
        except (EOFError, KeyboardInterrupt):
            # input interrupted inside a command (e.g. the course name prompt)
            out.print("\n[yellow]Command aborted, nothing was changed.[/]", highlight=False)
            continue

        if result.message:
            style = "green" if result.succeeded else "yellow"
            out.print(f"[{style}]{escape(result.message)}[/]", highlight=False)

        if result.should_exit:
            return

        if session.timetable_index != index_before:
            timetable = load_timetable(session.user_timetable_name, session)
            out.print(f"Loaded timetable {session.timetable_index} ({len(timetable)} courses).")


def build_parser() -> argparse.ArgumentParser:
    """
    Build the argparse CLI parser.
    """
    parser = argparse.ArgumentParser(prog="studyplan", description="StudyPlan CLI")
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DEFAULT_DATA_DIR,
        help="Directory holding your timetables and the course list (default: ./data)",
    )
    parser.add_argument(
        "--timetable",
        type=int,
        default=0,
        help="Index of the timetable to start with (default: 0)",
    )
    parser.add_argument("--verbose", action="store_true", help="Log every processed command")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    """
    CLI entry point. Parses args, runs the interactive session and exits
    via SystemExit with a return code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.timetable < 0:
        parser.error("--timetable must not be negative")

    _setup_logging(args.verbose)

    session = Session(data_dir=args.data_dir, timetable_index=args.timetable)
    catalog = CourseCatalog(session.data_dir, name_resolver=console_name_resolver(console))
    interpreter = CommandInterpreter(session, catalog)

    console.print(BANNER, highlight=False)
    run_session(session, interpreter, read_line=lambda: console.input("> "))
    raise SystemExit(0)
