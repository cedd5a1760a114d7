"""
Metric result domain models

Provides the values every calculator returns:
    - Level: Qualitative performance tier (ELITE ... LOW, plus INVALID)
    - MetricKind: Which metric a value belongs to (keys the threshold table)
    - PeriodUnit: Granularity for per-period reporting
    - Metrics: A computed value together with the window it covers
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class Level(str, Enum):
    """
    Engineering performance tier, ordered best to worst.

    INVALID means no meaningful classification exists (zero-length window,
    no data to normalize against). It is not a worse tier than LOW.
    """

    ELITE = "ELITE"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"
    INVALID = "INVALID"

    @property
    def is_classified(self) -> bool:
        """True for every level except INVALID."""
        return self is not Level.INVALID


class MetricKind(str, Enum):
    """Metric families that carry a classification scale."""

    DEPLOYMENT_FREQUENCY = "DEPLOYMENT_FREQUENCY"


class PeriodUnit(str, Enum):
    """Sub-window granularity for per-period metrics."""

    WEEK = "WEEK"
    MONTH = "MONTH"


@dataclass(frozen=True)
class Metrics:
    """
    Result of one metric calculation.

    The window is always echoed back so consumers never have to track which
    window produced which value.

    Attributes:
        value: Numeric result (count, duration or ratio depending on the metric)
        start_timestamp: Inclusive window start (epoch seconds)
        end_timestamp: Inclusive window end (epoch seconds)
        level: Performance tier, or None when classification does not apply

    Example:
        >>> metrics = Metrics(value=12, start_timestamp=0, end_timestamp=604800, level=Level.ELITE)
        >>> metrics.to_dict()["value"]
        12
    """

    value: int | float
    start_timestamp: int
    end_timestamp: int
    level: Level | None = None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-ready dictionary.

        Integer values stay integers and fractional values stay floats, so the
        value serializes without precision loss.
        """
        return {
            "value": self.value,
            "level": self.level.value if self.level is not None else None,
            "startTimestamp": self.start_timestamp,
            "endTimestamp": self.end_timestamp,
        }

    def __str__(self) -> str:
        level = self.level.value if self.level is not None else "-"
        return f"Metrics(value={self.value}, level={level}, window=[{self.start_timestamp}, {self.end_timestamp}])"
