import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler

from config import SessionConfig, load_config
from lessons import lesson_stats, load_lesson
from markup import parse
from session import DrillSession
from ui import LessonSummary, PhraseMasterUI
from ui.styles import DEFAULT_THEME

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with subcommands."""
    parser = argparse.ArgumentParser(description="Phrase Master")
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    study_parser = subparsers.add_parser("study", help="Practise a lesson (default)")
    _add_lesson_argument(study_parser)
    study_parser.add_argument(
        "--config",
        "-c",
        type=str,
        default=None,
        help="JSON file with session settings",
    )
    study_parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for word scrambling (overrides config)",
    )

    parse_parser = subparsers.add_parser("parse", help="Print the parsed lesson as JSON")
    _add_lesson_argument(parse_parser)
    parse_parser.add_argument(
        "--indent",
        type=int,
        default=2,
        help="JSON indentation (default: 2)",
    )

    stats_parser = subparsers.add_parser("stats", help="Count sentences and drills")
    _add_lesson_argument(stats_parser)

    return parser


def _add_lesson_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--file",
        "-f",
        type=str,
        default=None,
        help="Lesson text file (default: built-in lesson)",
    )


def setup_logging(verbose: bool, console: Console) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _lesson_path(args) -> Path | None:
    file_arg = getattr(args, "file", None)
    return Path(file_arg) if file_arg else None


def run_study(args, console: Console) -> int:
    """Run the interactive study session."""
    ui = PhraseMasterUI(console)

    config_arg = getattr(args, "config", None)
    try:
        config = load_config(Path(config_arg) if config_arg else None)
        text = load_lesson(_lesson_path(args))
    except (OSError, ValidationError) as e:
        ui.show_error(str(e))
        return 1

    seed = getattr(args, "seed", None)
    if seed is not None:
        config = config.model_copy(update={"seed": seed})

    session = DrillSession.from_text(text, config)
    logger.debug("Loaded %d sentences", len(session.sentences))
    try:
        ui.run(session)
    except (KeyboardInterrupt, EOFError):
        ui.show_quit_message()
    return 0


def run_parse(args, console: Console) -> int:
    """Print the parsed lesson as JSON."""
    try:
        text = load_lesson(_lesson_path(args))
    except OSError as e:
        PhraseMasterUI(console).show_error(str(e))
        return 1

    sentences = parse(text, SessionConfig().terminators)
    payload = [sentence.model_dump(mode="json") for sentence in sentences]
    print(json.dumps(payload, indent=args.indent, ensure_ascii=False))
    return 0


def run_stats(args, console: Console) -> int:
    """Show sentence and drill counts."""
    path = _lesson_path(args)
    try:
        text = load_lesson(path)
    except OSError as e:
        PhraseMasterUI(console).show_error(str(e))
        return 1

    stats = lesson_stats(parse(text))
    console.print(LessonSummary(stats, title=path.name if path else "Default lesson"))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point with CLI routing."""
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console(theme=DEFAULT_THEME)
    setup_logging(args.verbose, console)

    if args.command == "parse":
        return run_parse(args, console)
    if args.command == "stats":
        return run_stats(args, console)
    # Default to interactive mode
    return run_study(args, console)


if __name__ == "__main__":
    sys.exit(main())
