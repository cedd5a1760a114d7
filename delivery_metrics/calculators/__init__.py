"""
Metric calculators over build history.

Sibling calculators (lead time, change failure rate, time to restore) share
the Build/Stage model and the level classifier.
"""

from .deployment_frequency import (
    DeploymentFrequencyCalculator,
    count_deployments,
    is_valid_deployment,
    select_deployments,
)
from .level_classifier import DEFAULT_THRESHOLDS, LevelBand, LevelClassifier, ThresholdTable

__all__ = [
    "DeploymentFrequencyCalculator",
    "count_deployments",
    "is_valid_deployment",
    "select_deployments",
    "DEFAULT_THRESHOLDS",
    "LevelBand",
    "LevelClassifier",
    "ThresholdTable",
]
