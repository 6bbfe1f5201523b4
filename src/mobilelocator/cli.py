from __future__ import annotations

import argparse
from dataclasses import asdict, replace
import logging
from pathlib import Path
import sys
from typing import Any, Callable, Sequence

from . import __version__
from .config import LOG_LEVELS, ToolConfig, default_config_path, resolve_tool_config, save_tool_config
from .models import SELECTOR_STRATEGIES, ParsedSource, SelectorCandidate
from .report import build_selector_report, match_candidate, select_elements
from .response import emit_response, error_response, success_response
from .source_parser import parse_source

PACKAGE_LOGGER_NAME = "mobilelocator"
LOGGER_NAME = "mobilelocator.cli"
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


class CommandFailure(Exception):
    def __init__(self, code: str, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mobilelocator",
        description="Rank Appium locators for elements of a saved page-source dump.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--pretty", action="store_true", default=None, help="Indent JSON output.")
    parser.add_argument("--output", help="Also write the JSON response to this file.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, help="Diagnostic log level (stderr or log_file).")
    parser.add_argument("--config", type=Path, help="Config file to use instead of the default lookup.")

    groups = parser.add_subparsers(dest="group", required=True)

    screen = groups.add_parser("screen", help="Inspect parsed elements.")
    screen_commands = screen.add_subparsers(dest="action", required=True)
    elements = screen_commands.add_parser("elements", help="List parsed elements.")
    _add_source_argument(elements)
    elements.add_argument("--limit", type=int, help="Return at most N elements.")
    elements.add_argument("--only-actionable", action="store_true", help="Keep enabled, visible, tappable elements.")
    elements.set_defaults(handler=_run_screen_elements, command="screen.elements")

    selectors = groups.add_parser("selectors", help="Generate, rank and evaluate locators.")
    selector_commands = selectors.add_subparsers(dest="action", required=True)

    best = selector_commands.add_parser("best", help="Rank locator candidates for one element.")
    _add_source_argument(best)
    best.add_argument("--element-ref", required=True, help="elementRef from `screen elements`.")
    best.add_argument("--limit", type=int, help="Number of top selectors to return.")
    best.set_defaults(handler=_run_selectors_best, command="selectors.best")

    match = selector_commands.add_parser("match", help="Evaluate one locator against the dump.")
    _add_source_argument(match)
    match.add_argument("--strategy", required=True, choices=SELECTOR_STRATEGIES)
    match.add_argument("--value", required=True)
    match.set_defaults(handler=_run_selectors_match, command="selectors.match")

    config_group = groups.add_parser("config", help="Manage the tool config file.")
    config_commands = config_group.add_subparsers(dest="action", required=True)
    save = config_commands.add_parser("save", help="Write the resolved config to the config file.")
    save.add_argument("--top-limit", type=int, help="Default number of top selectors.")
    save.add_argument("--log-file", help="Write diagnostics to this file instead of stderr.")
    save.set_defaults(handler=_run_config_save, command="config.save")

    return parser


def _add_source_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--source", required=True, help="Page-source XML file, or - for stdin.")


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    config = resolve_tool_config(config_path=args.config, pretty=args.pretty, log_level=args.log_level)
    logger = build_logger(config)

    handler: Callable[[argparse.Namespace, ToolConfig], dict[str, Any]] = args.handler
    try:
        result = handler(args, config)
        response = success_response(args.command, result)
    except CommandFailure as exc:
        logger.warning("%s failed: %s", args.command, exc.message)
        response = error_response(args.command, exc.code, exc.message, exc.details)

    try:
        emit_response(response, pretty=config.pretty, output=args.output)
    except OSError as exc:
        logger.error("Could not write output file %s: %s", args.output, exc)
        return 1
    return 0 if response["ok"] else 1


def build_logger(config: ToolConfig) -> logging.Logger:
    """Configure the package logger and return the CLI child logger.

    Level and handler live on ``mobilelocator`` so the core module loggers
    inherit them. Handlers from an earlier run in the same process are
    replaced.
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(getattr(logging, config.log_level, logging.WARNING))
    package_logger.propagate = False
    for old_handler in list(package_logger.handlers):
        package_logger.removeHandler(old_handler)
        old_handler.close()
    package_logger.addHandler(_log_handler(config))
    return logging.getLogger(LOGGER_NAME)


def _log_handler(config: ToolConfig) -> logging.Handler:
    handler: logging.Handler | None = None
    if config.log_file:
        try:
            log_path = Path(config.log_file).expanduser()
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = logging.FileHandler(log_path, encoding="utf-8")
        except OSError:
            handler = None
    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def read_source_text(source: str) -> str:
    if source == "-":
        try:
            return sys.stdin.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise CommandFailure("SOURCE_READ_FAILED", f"Could not read page source from stdin: {exc}") from exc
    path = Path(source).expanduser()
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise CommandFailure("SOURCE_NOT_FOUND", f"Page source file not found: {path}") from exc
    except (OSError, UnicodeDecodeError) as exc:
        raise CommandFailure("SOURCE_READ_FAILED", f"Could not read page source {path}: {exc}") from exc


def _load_source(args: argparse.Namespace) -> ParsedSource:
    parsed = parse_source(read_source_text(args.source))
    logging.getLogger(LOGGER_NAME).info(
        "Parsed %s elements from %s (platform=%s)", len(parsed.elements), args.source, parsed.platform
    )
    return parsed


def _checked_limit(raw: int | None) -> int | None:
    if raw is not None and raw < 1:
        raise CommandFailure("INVALID_ARGUMENT", "--limit must be a positive integer")
    return raw


def _run_screen_elements(args: argparse.Namespace, config: ToolConfig) -> dict[str, Any]:
    limit = _checked_limit(args.limit)
    listing = select_elements(_load_source(args), only_actionable=args.only_actionable, limit=limit)
    return listing.to_payload()


def _run_selectors_best(args: argparse.Namespace, config: ToolConfig) -> dict[str, Any]:
    limit = _checked_limit(args.limit) or config.top_limit
    source = _load_source(args)
    report = build_selector_report(source, args.element_ref, limit=limit)
    if report is None:
        raise CommandFailure(
            "ELEMENT_NOT_FOUND",
            f"Element not found for --element-ref '{args.element_ref}'",
            {"elementCount": len(source.elements)},
        )
    return report.to_payload()


def _run_selectors_match(args: argparse.Namespace, config: ToolConfig) -> dict[str, Any]:
    candidate = SelectorCandidate(strategy=args.strategy, value=args.value, platform="generic")
    return match_candidate(_load_source(args), candidate).to_payload()


def _run_config_save(args: argparse.Namespace, config: ToolConfig) -> dict[str, Any]:
    if args.top_limit is not None:
        if args.top_limit < 1:
            raise CommandFailure("INVALID_ARGUMENT", "--top-limit must be a positive integer")
        config = replace(config, top_limit=args.top_limit)
    if args.log_file is not None:
        config = replace(config, log_file=args.log_file)

    path = args.config or default_config_path()
    ok, error = save_tool_config(config, path)
    if not ok:
        raise CommandFailure("CONFIG_WRITE_FAILED", error or f"Could not write {path}", {"path": str(path)})
    logging.getLogger(LOGGER_NAME).info("Saved config to %s", path)
    return {"path": str(path), "config": asdict(config)}
