"""
Build domain models - pipeline executions and their stages

Represents CI/CD pipeline history for delivery metrics:
    - Status: Outcome of a build or a stage
    - Stage: Named phase within a build (e.g., "build", "deploy-prod")
    - Build: One execution of a pipeline with its ordered stages

Builds and stages are read-only snapshots. The build store reconstructs them
on every query and the calculators never mutate them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


def _optional_int(value: Any) -> int | None:
    """Coerce a stored time field to int; None stays None, anything non-numeric raises."""
    if value is None:
        return None
    return int(value)


class Status(str, Enum):
    """Outcome of a build or one of its stages."""

    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    IN_PROGRESS = "IN_PROGRESS"
    ABORTED = "ABORTED"
    OTHER = "OTHER"

    @classmethod
    def parse(cls, raw: str | None) -> "Status":
        """
        Parse a status string, tolerating unknown or missing values.

        Args:
            raw: Status string from stored data (case-insensitive), or None

        Returns:
            Matching Status, or Status.OTHER when the value is unknown

        Example:
            >>> Status.parse("success")
            <Status.SUCCESS: 'SUCCESS'>
            >>> Status.parse(None)
            <Status.OTHER: 'OTHER'>
        """
        if not raw:
            return cls.OTHER
        try:
            return cls(str(raw).upper())
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Stage:
    """
    A named phase within a build.

    All times are integer epoch seconds.

    Attributes:
        name: Stage identifier (e.g., "deploy-prod")
        status: Outcome of this stage
        start_time: When the stage started, or None if unknown
        duration: Running time of the stage, or None if unknown
        pause_duration: Time spent paused (manual approval, queueing)
        completed_time: When the stage reached a terminal state, if recorded

    Example:
        stage = Stage(name="deploy", status=Status.SUCCESS, start_time=100, duration=20)
        stage.stage_done_time  # 120
    """

    name: str
    status: Status
    start_time: int | None = None
    duration: int | None = None
    pause_duration: int = 0
    completed_time: int | None = None

    @property
    def stage_done_time(self) -> int | None:
        """
        Instant at which the stage reached a terminal state.

        Prefers the recorded completion time. Without one, a finished stage's
        done time is its start time plus running and paused durations.

        Returns:
            Epoch seconds, or None if the stage is in progress or never finished
        """
        if self.completed_time is not None:
            return self.completed_time
        if self.status == Status.IN_PROGRESS:
            return None
        if self.start_time is None or self.duration is None:
            return None
        return self.start_time + self.duration + (self.pause_duration or 0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Stage":
        """
        Create a Stage from its stored JSON document.

        Raises:
            TypeError: If the document is not an object or a time field has the wrong type
            ValueError: If a time field is not an integer
        """
        if not isinstance(data, dict):
            raise TypeError(f"stage must be a JSON object, got {type(data).__name__}")

        return cls(
            name=str(data.get("name", "")),
            status=Status.parse(data.get("status")),
            start_time=_optional_int(data.get("startTime")),
            duration=_optional_int(data.get("duration")),
            pause_duration=_optional_int(data.get("pauseDuration")) or 0,
            completed_time=_optional_int(data.get("completedTime")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "startTime": self.start_time,
            "duration": self.duration,
            "pauseDuration": self.pause_duration,
            "completedTime": self.completed_time,
        }


@dataclass(frozen=True)
class Build:
    """
    One execution of a pipeline.

    The overall status is tracked independently of the stage statuses and is
    never derived from them.

    Attributes:
        pipeline_id: Identifier of the owning pipeline
        number: Build number, unique and increasing within a pipeline
        status: Overall build status
        timestamp: Build start time (epoch seconds)
        duration: Overall build duration in seconds, if known
        url: Link to the build in the CI system, if known
        stages: Stages in execution order

    Example:
        build = Build(
            pipeline_id="payments",
            number=42,
            status=Status.SUCCESS,
            timestamp=1_700_000_000,
            stages=(Stage(name="deploy", status=Status.SUCCESS, completed_time=1_700_000_600),),
        )

        deploy = build.find_stage("deploy")
    """

    pipeline_id: str
    number: int
    status: Status = Status.OTHER
    timestamp: int = 0
    duration: int | None = None
    url: str | None = None
    stages: tuple[Stage, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        # Accept any sequence of stages but store an immutable tuple
        if not isinstance(self.stages, tuple):
            object.__setattr__(self, "stages", tuple(self.stages))

    def find_stage(self, name: str) -> Stage | None:
        """
        Find a stage by exact, case-sensitive name.

        When several stages share the name, the first one in execution order
        is returned.

        Args:
            name: Stage name to look up

        Returns:
            The first matching Stage, or None if the build has no such stage
        """
        return next((stage for stage in self.stages if stage.name == name), None)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Build":
        """
        Create a Build from its stored JSON document.

        Args:
            data: Build document with camelCase keys (pipelineId, number, result, ...)

        Returns:
            Build instance with its stages

        Raises:
            KeyError: If pipelineId or number is missing
            TypeError: If the document, or one of its stages, is not an object
            ValueError: If the number or a time field is not an integer
        """
        if not isinstance(data, dict):
            raise TypeError(f"build must be a JSON object, got {type(data).__name__}")

        stages = data.get("stages") or []
        if not isinstance(stages, list):
            raise TypeError(f"stages must be a JSON array, got {type(stages).__name__}")

        return cls(
            pipeline_id=str(data["pipelineId"]),
            number=int(data["number"]),
            status=Status.parse(data.get("result")),
            timestamp=_optional_int(data.get("timestamp")) or 0,
            duration=_optional_int(data.get("duration")),
            url=data.get("url"),
            stages=tuple(Stage.from_dict(stage) for stage in stages),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "pipelineId": self.pipeline_id,
            "number": self.number,
            "result": self.status.value,
            "timestamp": self.timestamp,
            "duration": self.duration,
            "url": self.url,
            "stages": [stage.to_dict() for stage in self.stages],
        }

    def __str__(self) -> str:
        return f"Build(pipeline={self.pipeline_id}, number={self.number}, status={self.status.value})"
