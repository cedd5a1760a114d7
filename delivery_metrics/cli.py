#!/usr/bin/env python3
"""
Delivery Metrics - command line

Commands:
    import                Load builds from a JSON file into the build store
    deployment-frequency  Count deployments for one or more pipelines and classify the result

Examples:
    delivery-metrics import builds.json
    delivery-metrics deployment-frequency --pipeline payments=deploy-prod \\
        --start 2026-01-01 --end 2026-03-31T23:59:59Z --period month --json
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any

from delivery_metrics.calculators.deployment_frequency import DeploymentFrequencyCalculator
from delivery_metrics.core.logging_config import get_logger, setup_logging
from delivery_metrics.domain.build import Build
from delivery_metrics.domain.metrics import Metrics, PeriodUnit
from delivery_metrics.secure_config import ConfigurationError, MetricsConfig, validate_config_on_startup
from delivery_metrics.storage.build_store import JSONFileBuildStore
from delivery_metrics.utils.datetime_utils import format_timestamp, parse_timestamp
from delivery_metrics.utils.error_handling import log_and_continue

logger = get_logger(__name__)


def _pipeline_stage(value: str) -> tuple[str, str]:
    pipeline_id, sep, stage = value.partition("=")
    if not sep or not pipeline_id or not stage:
        raise argparse.ArgumentTypeError(f"expected PIPELINE=STAGE, got '{value}'")
    return pipeline_id, stage


def _timestamp(value: str) -> int:
    try:
        return parse_timestamp(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="delivery-metrics",
        description="Engineering delivery metrics from CI/CD build history",
    )
    parser.add_argument("--store", help="Build store JSON file (overrides BUILD_STORE_PATH)")
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser("import", help="Load builds from a JSON file into the store")
    import_parser.add_argument("builds_file", type=Path, help="JSON array of builds, or an object with a 'builds' key")

    freq_parser = subparsers.add_parser("deployment-frequency", help="Count and classify deployments")
    freq_parser.add_argument(
        "--pipeline",
        dest="pipelines",
        action="append",
        type=_pipeline_stage,
        required=True,
        metavar="PIPELINE=STAGE",
        help="Pipeline id and its deployment stage (repeatable)",
    )
    freq_parser.add_argument("--start", type=_timestamp, required=True, help="Window start (epoch seconds or ISO 8601)")
    freq_parser.add_argument("--end", type=_timestamp, required=True, help="Window end, inclusive")
    freq_parser.add_argument(
        "--period", choices=[unit.value.lower() for unit in PeriodUnit], help="Also break the window down per period"
    )
    freq_parser.add_argument("--json", action="store_true", help="Print JSON instead of text")

    return parser


def _load_build_documents(path: Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        document = json.load(f)

    if isinstance(document, dict):
        document = document.get("builds", [])
    if not isinstance(document, list):
        raise ValueError(f"{path} must hold a JSON array of builds")
    return document


def run_import(store: JSONFileBuildStore, builds_file: Path) -> int:
    builds: list[Build] = []
    for raw in _load_build_documents(builds_file):
        try:
            builds.append(Build.from_dict(raw))
        except (KeyError, TypeError, ValueError) as e:
            log_and_continue(logger, e, {"builds_file": str(builds_file), "document": raw}, "Build parsing")

    saved = store.save(builds)
    print(f"[SAVED] {saved} build(s) imported into {store.path}")
    return 0


def _describe(metrics: Metrics) -> str:
    level = metrics.level.value if metrics.level else "-"
    return (
        f"{format_timestamp(metrics.start_timestamp)} .. {format_timestamp(metrics.end_timestamp)}: "
        f"{metrics.value} deployment(s), level {level}"
    )


def run_deployment_frequency(store: JSONFileBuildStore, args: argparse.Namespace) -> int:
    calculator = DeploymentFrequencyCalculator(store)
    pipeline_stages = dict(args.pipelines)

    overall = calculator.calculate_metrics(pipeline_stages, args.start, args.end)
    periods: list[Metrics] = []
    if args.period:
        periods = calculator.calculate_metrics_by_period(
            pipeline_stages, args.start, args.end, PeriodUnit(args.period.upper())
        )

    if args.json:
        output: dict[str, Any] = {"pipelines": pipeline_stages, "metrics": overall.to_dict()}
        if args.period:
            output["periods"] = [m.to_dict() for m in periods]
        print(json.dumps(output, indent=2))
        return 0

    print("Deployment Frequency")
    print("=" * 60)
    for pipeline_id, stage in pipeline_stages.items():
        print(f"  {pipeline_id}: stage '{stage}'")
    print(f"\n  {_describe(overall)}")
    if periods:
        print(f"\n  Per {args.period}:")
        for metrics in periods:
            print(f"    {_describe(metrics)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config: MetricsConfig = validate_config_on_startup()
    except ConfigurationError as e:
        print(f"[ERROR] Invalid configuration: {e}", file=sys.stderr)
        return 1

    setup_logging(level=config.log_level, log_file=config.log_file, json_output=config.log_json)
    store = JSONFileBuildStore(args.store or config.build_store_path)

    try:
        if args.command == "import":
            return run_import(store, args.builds_file)
        return run_deployment_frequency(store, args)
    except (OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}", exc_info=True)
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
