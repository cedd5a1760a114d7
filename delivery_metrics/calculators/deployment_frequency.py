#!/usr/bin/env python3
"""
Deployment Frequency Calculator

Counts deployments from pipeline build history:
- A build is a deployment when its target stage succeeded and finished
  inside the inclusive window [start_timestamp, end_timestamp]
- The target stage is matched by exact, case-sensitive name; the first
  stage in execution order with that name is the one evaluated
- Builds without the target stage, or whose stage has not finished, are
  not deployments

The calculator owns all filtering; the build store is only asked for the
complete build history. Store failures propagate to the caller unchanged.
"""

from collections import defaultdict
from collections.abc import Iterable, Mapping

from delivery_metrics.calculators.level_classifier import LevelClassifier
from delivery_metrics.core.logging_config import get_logger, log_with_context
from delivery_metrics.domain.build import Build, Status
from delivery_metrics.domain.metrics import Level, MetricKind, Metrics, PeriodUnit
from delivery_metrics.storage.build_store import BuildStore
from delivery_metrics.utils.datetime_utils import split_window
from delivery_metrics.utils.error_handling import log_and_raise

logger = get_logger(__name__)


def is_valid_deployment(build: Build, target_stage: str, start_timestamp: int, end_timestamp: int) -> bool:
    """
    Check whether a build counts as a deployment inside the window.

    Args:
        build: Build to check
        target_stage: Name of the stage that represents deployment
        start_timestamp: Inclusive window start (epoch seconds)
        end_timestamp: Inclusive window end (epoch seconds)

    Returns:
        True if the target stage exists, succeeded, and finished inside the window

    Example:
        >>> build = Build("p", 1, stages=[Stage("deploy", Status.SUCCESS, completed_time=100)])
        >>> is_valid_deployment(build, "deploy", 90, 160)
        True
    """
    stage = build.find_stage(target_stage)
    if stage is None:
        return False

    done_time = stage.stage_done_time
    if done_time is None or not start_timestamp <= done_time <= end_timestamp:
        return False

    return stage.status == Status.SUCCESS


def select_deployments(
    builds: Iterable[Build], target_stage: str, start_timestamp: int, end_timestamp: int
) -> list[Build]:
    """
    Return the builds that count as deployments, ordered by build timestamp.

    The sort is stable, so builds sharing a timestamp keep their input order
    and each one counts on its own.
    """
    ordered = sorted(builds, key=lambda build: build.timestamp)
    return [build for build in ordered if is_valid_deployment(build, target_stage, start_timestamp, end_timestamp)]


def count_deployments(builds: Iterable[Build], target_stage: str, start_timestamp: int, end_timestamp: int) -> int:
    """Count the builds that count as deployments inside the window."""
    return len(select_deployments(builds, target_stage, start_timestamp, end_timestamp))


class DeploymentFrequencyCalculator:
    """
    Deployment frequency over a build store.

    Stateless apart from its two collaborators, so one instance can serve
    concurrent calculations.

    Attributes:
        build_store: Source of build history
        classifier: Level classifier for Metrics results

    Example:
        calculator = DeploymentFrequencyCalculator(JSONFileBuildStore(".tmp/builds.json"))

        count = calculator.get_deployment_count("payments", "deploy-prod", start, end)
        metrics = calculator.calculate_metrics({"payments": "deploy-prod"}, start, end)
        print(f"{metrics.value} deployments, level {metrics.level.value}")
    """

    def __init__(self, build_store: BuildStore, classifier: LevelClassifier | None = None):
        self.build_store = build_store
        self.classifier = classifier or LevelClassifier()

    def _fetch_builds(self, pipeline_ids: str | set[str]) -> list[Build]:
        try:
            return list(self.build_store.get_all_builds(pipeline_ids))
        except Exception as e:
            ids = sorted(pipeline_ids) if isinstance(pipeline_ids, set) else [pipeline_ids]
            log_and_raise(logger, e, {"pipeline_ids": ids}, "Build store query")

    def get_deployments(
        self, pipeline_id: str, target_stage: str, start_timestamp: int, end_timestamp: int
    ) -> list[Build]:
        """
        List the builds of one pipeline that count as deployments.

        Returns:
            Qualifying builds ordered by build timestamp

        Raises:
            Exception: Whatever the build store raised, unchanged
        """
        builds = self._fetch_builds(pipeline_id)
        deployments = select_deployments(builds, target_stage, start_timestamp, end_timestamp)

        logger.debug(
            f"Pipeline {pipeline_id}: {len(deployments)} of {len(builds)} builds deployed "
            f"stage '{target_stage}' in [{start_timestamp}, {end_timestamp}]"
        )
        return deployments

    def get_deployment_count(
        self, pipeline_id: str, target_stage: str, start_timestamp: int, end_timestamp: int
    ) -> int:
        """
        Count successful deployments of one pipeline inside an inclusive window.

        A pipeline with no builds and a window with start > end both give 0.

        Args:
            pipeline_id: Pipeline identifier
            target_stage: Stage name that represents deployment
            start_timestamp: Inclusive window start (epoch seconds)
            end_timestamp: Inclusive window end (epoch seconds)

        Returns:
            Non-negative deployment count

        Raises:
            Exception: Whatever the build store raised, unchanged
        """
        return len(self.get_deployments(pipeline_id, target_stage, start_timestamp, end_timestamp))

    def get_deployment_count_for_pipelines(
        self, pipeline_stages: Mapping[str, str], start_timestamp: int, end_timestamp: int
    ) -> int:
        """
        Count deployments across several pipelines with one store query.

        Args:
            pipeline_stages: Pipeline id -> target stage name for that pipeline
            start_timestamp: Inclusive window start (epoch seconds)
            end_timestamp: Inclusive window end (epoch seconds)

        Returns:
            Sum of the per-pipeline deployment counts
        """
        by_pipeline = self._builds_by_pipeline(pipeline_stages)
        return self._count_for_window(by_pipeline, pipeline_stages, start_timestamp, end_timestamp)

    def calculate_metrics(
        self, pipeline_stages: Mapping[str, str], start_timestamp: int, end_timestamp: int
    ) -> Metrics:
        """
        Deployment frequency for a window, classified into a level.

        The level is computed over the window length (end - start); a zero or
        negative length, or an empty pipeline mapping, gives Level.INVALID.

        Returns:
            Metrics echoing the window, with the deployment count as value
        """
        count = self.get_deployment_count_for_pipelines(pipeline_stages, start_timestamp, end_timestamp)
        metrics = self._to_metrics(pipeline_stages, count, start_timestamp, end_timestamp)

        log_with_context(
            logger,
            "info",
            f"Deployment frequency: {count} deployments, level {metrics.level.value}",
            pipelines=sorted(pipeline_stages),
            start_timestamp=start_timestamp,
            end_timestamp=end_timestamp,
            count=count,
            performance_level=metrics.level.value,
        )
        return metrics

    def calculate_metrics_by_period(
        self,
        pipeline_stages: Mapping[str, str],
        start_timestamp: int,
        end_timestamp: int,
        unit: PeriodUnit,
    ) -> list[Metrics]:
        """
        Deployment frequency per week or per calendar month.

        One store query serves every sub-window, so all periods see the same
        snapshot.

        Args:
            pipeline_stages: Pipeline id -> target stage name
            start_timestamp: Inclusive window start (epoch seconds)
            end_timestamp: Inclusive window end (epoch seconds)
            unit: WEEK for 7-day chunks from the start, MONTH for UTC calendar months

        Returns:
            One classified Metrics per sub-window, in time order; empty when start > end
        """
        windows = split_window(start_timestamp, end_timestamp, unit)
        if not windows:
            return []

        by_pipeline = self._builds_by_pipeline(pipeline_stages)
        results = [
            self._to_metrics(
                pipeline_stages, self._count_for_window(by_pipeline, pipeline_stages, start, end), start, end
            )
            for start, end in windows
        ]

        logger.info(
            f"Deployment frequency by {unit.value.lower()}: {len(results)} periods, "
            f"{sum(int(m.value) for m in results)} deployments"
        )
        return results

    def _builds_by_pipeline(self, pipeline_stages: Mapping[str, str]) -> dict[str, list[Build]]:
        if not pipeline_stages:
            return {}

        by_pipeline: defaultdict[str, list[Build]] = defaultdict(list)
        for build in self._fetch_builds(set(pipeline_stages)):
            by_pipeline[build.pipeline_id].append(build)
        return by_pipeline

    @staticmethod
    def _count_for_window(
        by_pipeline: Mapping[str, list[Build]],
        pipeline_stages: Mapping[str, str],
        start_timestamp: int,
        end_timestamp: int,
    ) -> int:
        return sum(
            count_deployments(by_pipeline.get(pipeline_id, []), stage, start_timestamp, end_timestamp)
            for pipeline_id, stage in pipeline_stages.items()
        )

    def _to_metrics(
        self, pipeline_stages: Mapping[str, str], count: int, start_timestamp: int, end_timestamp: int
    ) -> Metrics:
        # No pipelines means nothing was measured
        if not pipeline_stages:
            level = Level.INVALID
        else:
            level = self.classifier.classify(count, end_timestamp - start_timestamp, MetricKind.DEPLOYMENT_FREQUENCY)
        return Metrics(value=count, start_timestamp=start_timestamp, end_timestamp=end_timestamp, level=level)
