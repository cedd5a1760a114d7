"""Build store backends.

The calculators depend only on the ``BuildStore`` protocol. Two backends ship
with the package: an in-memory store (tests, embedding) and a JSON file store
(command line, development).
"""

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Protocol

from delivery_metrics.domain.build import Build, Status
from delivery_metrics.domain.constants import sync_config, time_constants
from delivery_metrics.utils.atomic_json import atomic_json_save, load_json_with_recovery
from delivery_metrics.utils.error_handling import log_and_continue

logger = logging.getLogger(__name__)


def _as_id_set(pipeline_ids: str | Iterable[str]) -> set[str]:
    if isinstance(pipeline_ids, str):
        return {pipeline_ids}
    return set(pipeline_ids)


class BuildStore(Protocol):
    """Read interface the calculators need."""

    def get_all_builds(self, pipeline_ids: str | Iterable[str]) -> list[Build]:
        """Return every build of one pipeline (or a set of pipelines), in any order.

        Each build must carry all of its stages.
        """
        ...


class InMemoryBuildStore:
    """Build store kept in a dict keyed by ``(pipeline_id, number)``."""

    def __init__(self, builds: Iterable[Build] = ()):
        self._builds: dict[tuple[str, int], Build] = {}
        self.save(builds)

    def save(self, builds: Iterable[Build]) -> int:
        """Insert builds, overwriting any stored build with the same pipeline and number.

        Returns:
            Number of builds written
        """
        written = 0
        for build in builds:
            self._builds[(build.pipeline_id, build.number)] = build
            written += 1
        if written:
            self._persist()
        return written

    def clear(self, pipeline_id: str) -> int:
        """Remove every build of a pipeline; returns how many were removed."""
        keys = [key for key in self._builds if key[0] == pipeline_id]
        for key in keys:
            del self._builds[key]
        if keys:
            self._persist()
        return len(keys)

    def get_all_builds(self, pipeline_ids: str | Iterable[str]) -> list[Build]:
        wanted = _as_id_set(pipeline_ids)
        return [build for (pipeline_id, _), build in self._builds.items() if pipeline_id in wanted]

    def get_by_build_number(self, pipeline_id: str, number: int) -> Build | None:
        return self._builds.get((pipeline_id, number))

    def get_by_build_status(self, pipeline_id: str, status: Status) -> list[Build]:
        return [build for build in self.get_all_builds(pipeline_id) if build.status == status]

    def get_max_build(self, pipeline_id: str) -> Build | None:
        """Return the stored build with the highest number, or None for an unknown pipeline."""
        builds = self.get_all_builds(pipeline_id)
        return max(builds, key=lambda build: build.number, default=None)

    def get_build_numbers_need_sync(
        self, pipeline_id: str, most_recent_number: int, now: datetime | None = None
    ) -> list[int]:
        """
        Work out which build numbers must be fetched again from the CI system.

        Two kinds of builds need a sync: recent builds still marked in progress
        (their outcome may have changed upstream), and every build number above
        the highest one stored, up to the most recent number upstream.

        Args:
            pipeline_id: Pipeline to check
            most_recent_number: Highest build number reported by the CI system
            now: Reference time for the in-progress lookback (default: now in UTC)

        Returns:
            Ascending, de-duplicated build numbers

        Example:
            Stored builds 1, 2 (done), 3 (in progress, 15 days old), 4 (in progress,
            13 days old) with most_recent_number=8 give [4, 5, 6, 7, 8].
        """
        reference = now or datetime.now(UTC)
        cutoff = int(reference.timestamp()) - sync_config.IN_PROGRESS_RESYNC_DAYS * time_constants.SECONDS_PER_DAY

        pending = {
            build.number
            for build in self.get_by_build_status(pipeline_id, Status.IN_PROGRESS)
            if build.timestamp >= cutoff
        }

        max_build = self.get_max_build(pipeline_id)
        max_stored = max_build.number if max_build else 0

        return sorted(pending | set(range(max_stored + 1, most_recent_number + 1)))

    def _persist(self) -> None:
        """Hook for durable subclasses; the in-memory store keeps nothing."""


class JSONFileBuildStore(InMemoryBuildStore):
    """Build store persisted to a single JSON document.

    The document is re-read on every query so each call returns a fresh
    snapshot. Writes go through an atomic temp-file-and-move.
    """

    def __init__(self, path: str):
        self.path = path
        super().__init__()

    def _reload(self) -> None:
        document = load_json_with_recovery(self.path, default_value={"builds": []})
        builds: dict[tuple[str, int], Build] = {}

        documents = document.get("builds", [])
        if not isinstance(documents, list):
            log_and_continue(
                logger,
                TypeError(f"builds must be a JSON array, got {type(documents).__name__}"),
                {"file_path": self.path},
                "Build store loading",
            )
            documents = []

        for raw in documents:
            try:
                build = Build.from_dict(raw)
            except (KeyError, TypeError, ValueError) as e:
                log_and_continue(logger, e, {"file_path": self.path, "document": raw}, "Build parsing")
                continue
            builds[(build.pipeline_id, build.number)] = build

        self._builds = builds

    def save(self, builds: Iterable[Build]) -> int:
        self._reload()
        return super().save(builds)

    def clear(self, pipeline_id: str) -> int:
        self._reload()
        return super().clear(pipeline_id)

    def get_all_builds(self, pipeline_ids: str | Iterable[str]) -> list[Build]:
        self._reload()
        return super().get_all_builds(pipeline_ids)

    def get_by_build_number(self, pipeline_id: str, number: int) -> Build | None:
        self._reload()
        return super().get_by_build_number(pipeline_id, number)

    def _persist(self) -> None:
        atomic_json_save({"builds": [build.to_dict() for build in self._builds.values()]}, self.path)
        logger.debug(f"Saved {len(self._builds)} builds to {self.path}")
