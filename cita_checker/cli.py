"""Command line entry point."""

import argparse
import asyncio
import sys
from typing import Any, Dict, List, Optional

from loguru import logger
from pydantic import ValidationError

from cita_checker import __version__
from cita_checker.browser import FormSelectorSet
from cita_checker.constants import ExitCodes
from cita_checker.core.exceptions import ConfigurationError
from cita_checker.core.logger import flush_logging, setup_logging
from cita_checker.core.settings import CheckerSettings
from cita_checker.services.runner import CheckRunner


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Check the DGT cita previa portal for free appointments once and notify via Telegram"
    )
    parser.add_argument("--headed", action="store_true", help="Show the browser window")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override LOG_LEVEL",
    )
    parser.add_argument("--json-logs", action="store_true", help="Write the log file as JSON lines")
    parser.add_argument(
        "--notify-unavailable",
        action="store_true",
        help="Also send a message when no appointments are available",
    )
    parser.add_argument("--selectors-file", help="YAML file overriding form selectors")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def settings_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Settings fields explicitly set on the command line."""
    overrides: Dict[str, Any] = {}
    if args.headed:
        overrides["headless"] = False
    if args.log_level:
        overrides["log_level"] = args.log_level
    if args.json_logs:
        overrides["log_json"] = True
    if args.notify_unavailable:
        overrides["notify_when_unavailable"] = True
    if args.selectors_file:
        overrides["selectors_file"] = args.selectors_file
    return overrides


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = CheckerSettings(**settings_overrides(args))
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}", file=sys.stderr)
        return ExitCodes.CONFIGURATION

    setup_logging(level=settings.log_level, json_format=settings.log_json)

    try:
        selectors = FormSelectorSet.load(settings.selectors_file)
    except ConfigurationError as e:
        logger.error(e.message)
        flush_logging()
        return ExitCodes.CONFIGURATION

    runner = CheckRunner.from_settings(settings, selectors=selectors)
    report = asyncio.run(runner.run())
    logger.info(f"Run finished with exit code {report.exit_code}")
    flush_logging()
    return report.exit_code


if __name__ == "__main__":
    sys.exit(main())
