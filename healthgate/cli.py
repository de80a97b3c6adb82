# ============================================================================
# HEALTHGATE CLI
# ============================================================================
# EPOCH: 1 - HEALTH GATING
# STATUS: Tool - Command-line entry point
# PURPOSE: Await a healthy environment from shell scripts and pipelines
# CREATED: 17 OCT 2026
# ============================================================================
"""
Command-line interface.

Usage:
    # Probes from a file
    healthgate await -f probes.yaml

    # Probes from arguments
    healthgate await --http author=http://localhost:4502/ --host db=localhost:5432

    # Faster retries, don't fail hard
    healthgate await -f probes.yaml --retry-times 10 --retry-delay 1000 --permissive

Exit codes:
    0 - environment healthy
    1 - evaluation failed
    2 - invalid configuration
"""

import argparse
import json
import sys
from typing import List, Optional, Tuple

from pydantic import ValidationError

from healthgate.__version__ import __version__
from healthgate.core.config import EvaluatorDefaults, get_defaults
from healthgate.core.errors import ConfigurationError, EvaluationFailed
from healthgate.core.logging import ComponentType, configure_logging, get_logger
from healthgate.health.evaluator import Evaluator
from healthgate.health.loader import EvaluationPlan, load_plan
from healthgate.health.policy import RetrySettings
from healthgate.health.reporter import LoggingReporter

logger = get_logger("healthgate.cli", ComponentType.CLI)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2


def _split_named(value: str) -> Tuple[str, str]:
    name, sep, target = value.partition("=")
    if not sep or not name or not target:
        raise ConfigurationError(f"Expected NAME=TARGET, got {value!r}")
    return name, target


def _split_host(value: str) -> Tuple[str, str, int]:
    name, target = _split_named(value)
    host, sep, port = target.rpartition(":")
    if not sep or not host:
        raise ConfigurationError(f"Expected NAME=HOST:PORT, got {value!r}")
    try:
        return name, host, int(port)
    except ValueError:
        raise ConfigurationError(f"Invalid port in {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="healthgate",
        description="Evaluate health probes until the environment is reliably healthy",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment Variables:
  HEALTHGATE_RETRY_TIMES        Attempts per round (default: 60)
  HEALTHGATE_RETRY_DELAY        Delay between attempts in ms (default: 5000)
  HEALTHGATE_ASSURANCE_TIMES    Consecutive clean rounds required (default: 2)
  HEALTHGATE_ASSURANCE_DELAY    Delay between clean rounds in ms (default: 1000)
  HEALTHGATE_VERBOSE            Fail hard when attempts run out (default: true)
  HEALTHGATE_WAIT_BEFORE        Wait before first round in ms (default: 0)
  HEALTHGATE_WAIT_AFTER         Wait after last round in ms (default: 0)
  HEALTHGATE_HTTP_*             HTTP probe client settings
  LOG_FORMAT                    Set to 'json' for structured logs
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    wait = subparsers.add_parser("await", help="Wait until all probes are healthy")
    wait.add_argument("-f", "--file", help="YAML probe file")
    wait.add_argument("--http", action="append", default=[], metavar="NAME=URL",
                      help="URL must answer 200 (repeatable)")
    wait.add_argument("--no-http", action="append", default=[], metavar="NAME=URL",
                      help="URL must not answer (repeatable)")
    wait.add_argument("--host", action="append", default=[], metavar="NAME=HOST:PORT",
                      help="Port must accept connections (repeatable)")
    wait.add_argument("--no-host", action="append", default=[], metavar="NAME=HOST:PORT",
                      help="Port must refuse connections (repeatable)")
    wait.add_argument("--retry-times", type=int, help="Attempts per round")
    wait.add_argument("--retry-delay", type=int, metavar="MS", help="Delay between attempts")
    wait.add_argument("--assurance-times", type=int, help="Consecutive clean rounds required")
    wait.add_argument("--assurance-delay", type=int, metavar="MS", help="Delay between clean rounds")
    wait.add_argument("--wait-before", type=int, metavar="MS", help="Wait before first round")
    wait.add_argument("--wait-after", type=int, metavar="MS", help="Wait after last round")
    wait.add_argument("--permissive", action="store_true",
                      help="Log instead of failing when attempts run out")
    wait.add_argument("--json", action="store_true", help="Print the outcome as JSON")
    wait.add_argument("--json-logs", action="store_true", help="Structured JSON logs")
    wait.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _merge_settings(settings: Optional[RetrySettings], times: Optional[int],
                    delay_ms: Optional[int]) -> Optional[RetrySettings]:
    """Apply --*-times / --*-delay on top of a file section, keeping its other fields."""
    update = {
        key: value
        for key, value in (("times", times), ("delay_ms", delay_ms))
        if value is not None
    }
    if not update:
        return settings
    data = settings.model_dump(exclude_none=True) if settings is not None else {}
    data.update(update)
    try:
        return RetrySettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid retry options: {e}") from e


def _register_arguments(evaluator: Evaluator, args: argparse.Namespace) -> None:
    for value in args.http:
        evaluator.http(*_split_named(value))
    for value in args.no_http:
        evaluator.no_http(*_split_named(value))
    for value in args.host:
        evaluator.host(*_split_host(value))
    for value in args.no_host:
        evaluator.no_host(*_split_host(value))


def run_await(args: argparse.Namespace, evaluator: Optional[Evaluator] = None) -> int:
    """Execute the await command."""
    defaults: EvaluatorDefaults = get_defaults()
    plan = load_plan(args.file) if args.file else EvaluationPlan()

    evaluator = evaluator or Evaluator(reporter=LoggingReporter(), defaults=defaults)
    plan.register(evaluator)
    _register_arguments(evaluator, args)

    if not evaluator.probes:
        raise ConfigurationError("No probes defined (use --file, --http, --no-http, --host or --no-host)")

    plan = plan.model_copy(update={
        "retry": _merge_settings(plan.retry, args.retry_times, args.retry_delay),
        "assurance": _merge_settings(plan.assurance, args.assurance_times, args.assurance_delay),
    })
    outcome = plan.evaluate(
        evaluator,
        wait_before=args.wait_before / 1000.0 if args.wait_before is not None else None,
        wait_after=args.wait_after / 1000.0 if args.wait_after is not None else None,
        verbose=False if args.permissive else None,
    )

    if args.json:
        print(json.dumps(outcome.to_dict(), indent=2))
    else:
        print(outcome.report())

    return EXIT_OK if outcome.succeeded else EXIT_FAILED


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_CONFIG

    configure_logging(level="DEBUG" if args.verbose else "INFO", json_output=args.json_logs)

    try:
        return run_await(args)
    except ConfigurationError as e:
        logger.error(str(e))
        return EXIT_CONFIG
    except EvaluationFailed as e:
        if e.outcome is not None:
            if args.json:
                print(json.dumps(e.outcome.to_dict(), indent=2))
            else:
                print(e.outcome.report())
        return EXIT_FAILED


if __name__ == "__main__":
    sys.exit(main())
