from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import yaml

from .app import ConcertMatchApp, load_candidates
from .commands import aliases as cmd_aliases
from .commands import match as cmd_match
from .commands import resolve as cmd_resolve
from .commands import stats as cmd_stats
from .config import MatchConfig, Settings, find_config
from .models import CATEGORIES

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}

PRESETS = {
    "autocomplete": MatchConfig.autocomplete,
    "precision": MatchConfig.precision,
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Match concert artists, venues and cities")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)

    match_parser = subparsers.add_parser("match", help="Rank candidates against a query")
    match_parser.add_argument("target", choices=("artists", "venues"))
    match_parser.add_argument("query")
    match_parser.add_argument(
        "--candidates",
        type=Path,
        required=True,
        help="JSON file with 'artists' and 'venues' lists",
    )
    match_parser.add_argument("--city", default=None, help="Only consider venues in this city")
    match_parser.add_argument("--preset", choices=sorted(PRESETS), default=None)
    match_parser.add_argument("--json", action="store_true", help="Emit machine-readable JSON to stdout")

    resolve_parser = subparsers.add_parser("resolve", help="Resolve an alias to its canonical name")
    resolve_parser.add_argument("input")
    resolve_parser.add_argument("--category", choices=CATEGORIES, default=None)

    aliases_parser = subparsers.add_parser("aliases", help="List aliases for a canonical name")
    aliases_parser.add_argument("canonical")
    aliases_parser.add_argument("--category", choices=CATEGORIES, default=None)

    subparsers.add_parser("stats", help="Show alias and cache statistics")
    return parser


def load_settings(explicit: Optional[Path]) -> Settings:
    try:
        config_path = find_config(explicit)
    except FileNotFoundError:
        logger.debug("No config file found; using defaults")
        return Settings()
    return Settings.load(config_path)


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    warn_buffer = configure_logging(args.log_level)

    try:
        settings = load_settings(args.config)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.error("Failed to load configuration: %s", exc)
        return 2

    app = ConcertMatchApp.create(settings)
    try:
        match args.command:
            case "match":
                try:
                    candidates = load_candidates(args.candidates)
                except (OSError, ValueError, KeyError, TypeError) as exc:
                    logger.error("Could not read candidates from %s: %s", args.candidates, exc)
                    return 2
                if args.preset:
                    app.matcher.update_config(**PRESETS[args.preset]().model_dump())
                return cmd_match.run(
                    app.matcher,
                    candidates,
                    target=args.target,
                    query=args.query,
                    city=args.city,
                    json_output=args.json,
                )
            case "resolve":
                return cmd_resolve.run(app.matcher, args.input, category=args.category)
            case "aliases":
                return cmd_aliases.run(app.matcher, args.canonical, category=args.category)
            case "stats":
                return cmd_stats.run(app.matcher)
            case _:
                parser.error("Unknown command")
    finally:
        app.close()
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.records:
                print(f" - {line}")
    return 1
