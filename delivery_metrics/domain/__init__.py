"""
Domain Models - Type-safe data structures for delivery metrics

This package contains dataclasses representing business domain concepts:
    - build: Status, Stage, Build
    - metrics: Level, MetricKind, PeriodUnit, Metrics

Usage:
    from delivery_metrics.domain import Build, Stage, Status

    build = Build(pipeline_id="payments", number=7, stages=[Stage("deploy", Status.SUCCESS, completed_time=120)])
    if build.find_stage("deploy"):
        print(f"Build {build.number} has a deploy stage")
"""

# Import domain models for convenient access
from .build import Build, Stage, Status
from .metrics import Level, MetricKind, Metrics, PeriodUnit

__all__ = [
    # Build history
    "Status",
    "Stage",
    "Build",
    # Results
    "Level",
    "MetricKind",
    "PeriodUnit",
    "Metrics",
]
