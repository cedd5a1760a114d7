"""
Delivery Metrics - engineering delivery metrics from CI/CD build history.

Usage:
    from delivery_metrics import DeploymentFrequencyCalculator, InMemoryBuildStore

    calculator = DeploymentFrequencyCalculator(InMemoryBuildStore(builds))
    metrics = calculator.calculate_metrics({"payments": "deploy-prod"}, start, end)
"""

from .calculators import DeploymentFrequencyCalculator, LevelClassifier
from .domain import Build, Level, Metrics, Stage, Status
from .storage import BuildStore, InMemoryBuildStore, JSONFileBuildStore

__version__ = "0.1.0"

__all__ = [
    "Build",
    "BuildStore",
    "DeploymentFrequencyCalculator",
    "InMemoryBuildStore",
    "JSONFileBuildStore",
    "Level",
    "LevelClassifier",
    "Metrics",
    "Stage",
    "Status",
]
