"""
Pytest configuration and shared fixtures

Provides build history builders and stores shared across test modules.
"""

import pytest

from delivery_metrics.domain.build import Build, Stage, Status
from delivery_metrics.storage.build_store import InMemoryBuildStore

# ===== Build History Fixtures =====


def make_build(
    number: int,
    stages: list[Stage] | None = None,
    pipeline_id: str = "P",
    status: Status = Status.SUCCESS,
    timestamp: int | None = None,
) -> Build:
    """Build factory with sensible defaults (timestamp defaults to the build number)."""
    return Build(
        pipeline_id=pipeline_id,
        number=number,
        status=status,
        timestamp=number if timestamp is None else timestamp,
        stages=tuple(stages or ()),
    )


def deploy_stage(done_at: int | None, status: Status = Status.SUCCESS, name: str = "deploy") -> Stage:
    """Stage with an explicit completion time."""
    return Stage(name=name, status=status, completed_time=done_at)


@pytest.fixture
def scenario_builds():
    """Pipeline P: deploy succeeded at 100, deploy failed at 150, and a build with no deploy stage."""
    return [
        make_build(1, [Stage("build", Status.SUCCESS, completed_time=80), deploy_stage(100)]),
        make_build(2, [Stage("build", Status.SUCCESS, completed_time=130), deploy_stage(150, Status.FAILED)]),
        make_build(3, [Stage("build", Status.SUCCESS, completed_time=155)]),
    ]


@pytest.fixture
def scenario_store(scenario_builds):
    """In-memory store holding the scenario builds"""
    return InMemoryBuildStore(scenario_builds)


@pytest.fixture
def empty_store():
    """In-memory store with no builds"""
    return InMemoryBuildStore()


@pytest.fixture(name="make_build")
def make_build_fixture():
    """Factory fixture for Build objects"""
    return make_build


@pytest.fixture(name="deploy_stage")
def deploy_stage_fixture():
    """Factory fixture for deploy stages"""
    return deploy_stage
