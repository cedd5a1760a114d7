#!/usr/bin/env python3
"""
Application Constants

Centralized constants for level classification, time arithmetic and build
synchronization. Provides type-safe, immutable values used across calculators
and stores.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DeploymentFrequencyBands:
    """
    Deployment frequency cut points, in deployments per day.

    Follows the industry DORA performance bands. A rate exactly on a cut
    point belongs to the better level.

    Attributes:
        ELITE_PER_DAY: At least one deployment per day (on demand)
        HIGH_PER_DAY: At least one deployment per week
        MEDIUM_PER_DAY: At least one deployment per calendar month
        LOW_PER_DAY: Anything less, including zero deployments

    Example:
        >>> bands = deployment_frequency_bands
        >>> print(bands.ELITE_PER_DAY)
        1.0
    """

    ELITE_PER_DAY: float = 1.0
    """At least one deployment per day"""

    HIGH_PER_DAY: float = 1 / 7
    """At least one deployment per week"""

    MEDIUM_PER_DAY: float = 1 / 31
    """At least one deployment per calendar month (longest month: 31 days)"""

    LOW_PER_DAY: float = 0.0
    """Fewer than one deployment per month"""


@dataclass(frozen=True)
class TimeConstants:
    """
    Epoch-second arithmetic constants.

    Attributes:
        SECONDS_PER_DAY: Seconds in one day (86400)
        SECONDS_PER_WEEK: Seconds in seven days (604800)
    """

    SECONDS_PER_DAY: int = 86400
    """Seconds in one day"""

    SECONDS_PER_WEEK: int = 7 * 86400
    """Seconds in seven days"""


@dataclass(frozen=True)
class SyncConfig:
    """
    Build synchronization constants.

    Attributes:
        IN_PROGRESS_RESYNC_DAYS: In-progress builds started within this many days are fetched again (14 days)
    """

    IN_PROGRESS_RESYNC_DAYS: int = 14
    """In-progress builds younger than this are re-synchronized"""


# Singleton instances for easy import
deployment_frequency_bands = DeploymentFrequencyBands()
time_constants = TimeConstants()
sync_config = SyncConfig()
