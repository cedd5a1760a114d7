#!/usr/bin/env python3
"""
Level Classifier

Maps a metric value over a reporting period to a performance level:
    - LevelBand: One level and the minimum per-day rate that earns it
    - ThresholdTable: Bands for one metric, ordered best to worst
    - DEFAULT_THRESHOLDS: Industry DORA bands keyed by MetricKind
    - LevelClassifier: Pure classify(value, period) over an injected table

The value is normalized to a per-day rate before comparison. A rate exactly on
a cut point resolves to the better level.
"""

import logging
import math
from collections.abc import Mapping
from dataclasses import dataclass

from delivery_metrics.domain.constants import deployment_frequency_bands, time_constants
from delivery_metrics.domain.metrics import Level, MetricKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LevelBand:
    """
    A performance level and the minimum per-day rate that qualifies for it.

    Attributes:
        level: Level awarded when the rate reaches min_rate
        min_rate: Inclusive lower bound, in units per day
    """

    level: Level
    min_rate: float


@dataclass(frozen=True)
class ThresholdTable:
    """
    Ordered bands for one metric, best level first.

    Raises:
        ValueError: If the table is empty, contains INVALID, or the cut points
            are not strictly decreasing

    Example:
        >>> table = ThresholdTable(bands=(LevelBand(Level.HIGH, 2.0), LevelBand(Level.LOW, 0.0)))
        >>> table.level_for(2.0)
        <Level.HIGH: 'HIGH'>
    """

    bands: tuple[LevelBand, ...]

    def __post_init__(self) -> None:
        if not isinstance(self.bands, tuple):
            object.__setattr__(self, "bands", tuple(self.bands))

        if not self.bands:
            raise ValueError("ThresholdTable needs at least one band")

        if any(band.level is Level.INVALID for band in self.bands):
            raise ValueError("INVALID cannot be used as a threshold band")

        rates = [band.min_rate for band in self.bands]
        if any(later >= earlier for earlier, later in zip(rates, rates[1:])):
            raise ValueError(f"Band cut points must be strictly decreasing, got {rates}")

    def level_for(self, rate: float) -> Level:
        """Return the first (best) level whose cut point the rate reaches, else INVALID."""
        for band in self.bands:
            if rate >= band.min_rate:
                return band.level
        return Level.INVALID


DEPLOYMENT_FREQUENCY_THRESHOLDS = ThresholdTable(
    bands=(
        LevelBand(Level.ELITE, deployment_frequency_bands.ELITE_PER_DAY),
        LevelBand(Level.HIGH, deployment_frequency_bands.HIGH_PER_DAY),
        LevelBand(Level.MEDIUM, deployment_frequency_bands.MEDIUM_PER_DAY),
        LevelBand(Level.LOW, deployment_frequency_bands.LOW_PER_DAY),
    )
)

DEFAULT_THRESHOLDS: Mapping[MetricKind, ThresholdTable] = {
    MetricKind.DEPLOYMENT_FREQUENCY: DEPLOYMENT_FREQUENCY_THRESHOLDS,
}


class LevelClassifier:
    """
    Classify metric values against per-metric threshold tables.

    The table mapping is copied at construction, so a classifier never changes
    its answers during a run.

    Example:
        classifier = LevelClassifier()
        classifier.classify(14, reporting_period_seconds=7 * 86400)  # Level.ELITE (2/day)
        classifier.classify(1, reporting_period_seconds=0)  # Level.INVALID
    """

    def __init__(self, thresholds: Mapping[MetricKind, ThresholdTable] | None = None):
        self._thresholds: dict[MetricKind, ThresholdTable] = dict(
            DEFAULT_THRESHOLDS if thresholds is None else thresholds
        )

    def thresholds_for(self, kind: MetricKind) -> ThresholdTable | None:
        return self._thresholds.get(kind)

    def classify(
        self,
        value: float,
        reporting_period_seconds: float,
        kind: MetricKind = MetricKind.DEPLOYMENT_FREQUENCY,
    ) -> Level:
        """
        Classify a value observed over a reporting period.

        Args:
            value: Metric value over the whole period (e.g., deployment count)
            reporting_period_seconds: Length of the period
            kind: Metric whose threshold table applies

        Returns:
            The matching Level, or Level.INVALID when no rate can be computed
            (non-positive period, negative or NaN value, no table for kind)
        """
        table = self._thresholds.get(kind)
        if table is None:
            logger.debug(f"No threshold table for {kind.value}, level is INVALID")
            return Level.INVALID

        if reporting_period_seconds <= 0 or value < 0 or math.isnan(value):
            return Level.INVALID

        rate_per_day = value / (reporting_period_seconds / time_constants.SECONDS_PER_DAY)
        return table.level_for(rate_per_day)
