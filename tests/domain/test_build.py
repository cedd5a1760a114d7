"""
Tests for build history domain models
"""

import pytest

from delivery_metrics.domain.build import Build, Stage, Status


class TestStatus:
    """Test Status parsing"""

    def test_parse_known_value(self):
        assert Status.parse("SUCCESS") is Status.SUCCESS

    def test_parse_is_case_insensitive(self):
        assert Status.parse("in_progress") is Status.IN_PROGRESS

    def test_parse_unknown_value(self):
        """Unknown statuses degrade to OTHER instead of raising"""
        assert Status.parse("UNSTABLE") is Status.OTHER

    def test_parse_missing_value(self):
        assert Status.parse(None) is Status.OTHER
        assert Status.parse("") is Status.OTHER


class TestStageDoneTime:
    """Test Stage.stage_done_time derivation"""

    def test_completed_time_wins(self):
        stage = Stage("deploy", Status.SUCCESS, start_time=100, duration=50, completed_time=120)
        assert stage.stage_done_time == 120

    def test_derived_from_start_duration_and_pause(self):
        stage = Stage("deploy", Status.SUCCESS, start_time=100, duration=50, pause_duration=10)
        assert stage.stage_done_time == 160

    def test_derived_without_pause(self):
        stage = Stage("deploy", Status.FAILED, start_time=100, duration=50)
        assert stage.stage_done_time == 150

    def test_in_progress_has_no_done_time(self):
        stage = Stage("deploy", Status.IN_PROGRESS, start_time=100, duration=50)
        assert stage.stage_done_time is None

    def test_missing_duration_has_no_done_time(self):
        stage = Stage("deploy", Status.SUCCESS, start_time=100)
        assert stage.stage_done_time is None

    def test_missing_start_has_no_done_time(self):
        stage = Stage("deploy", Status.SUCCESS, duration=50)
        assert stage.stage_done_time is None

    def test_stage_is_immutable(self):
        stage = Stage("deploy", Status.SUCCESS)
        with pytest.raises(AttributeError):
            stage.status = Status.FAILED  # type: ignore[misc]


class TestBuild:
    """Test Build model"""

    def test_stages_stored_as_tuple(self):
        build = Build("P", 1, stages=[Stage("deploy", Status.SUCCESS)])
        assert isinstance(build.stages, tuple)

    def test_find_stage_exact_match(self):
        build = Build("P", 1, stages=[Stage("build", Status.SUCCESS), Stage("deploy", Status.FAILED)])
        assert build.find_stage("deploy").status is Status.FAILED

    def test_find_stage_is_case_sensitive(self):
        build = Build("P", 1, stages=[Stage("Deploy", Status.SUCCESS)])
        assert build.find_stage("deploy") is None

    def test_find_stage_missing(self):
        build = Build("P", 1)
        assert build.find_stage("deploy") is None

    def test_find_stage_returns_first_in_execution_order(self):
        """Duplicate stage names resolve to the first occurrence"""
        first = Stage("deploy", Status.FAILED, completed_time=100)
        second = Stage("deploy", Status.SUCCESS, completed_time=200)
        build = Build("P", 1, stages=[first, second])

        assert build.find_stage("deploy") is first

    def test_build_is_immutable(self):
        build = Build("P", 1)
        with pytest.raises(AttributeError):
            build.number = 2  # type: ignore[misc]

    def test_str(self):
        assert str(Build("P", 7, Status.FAILED)) == "Build(pipeline=P, number=7, status=FAILED)"


class TestBuildSerialization:
    """Test Build.from_dict / to_dict"""

    @pytest.fixture
    def build_document(self):
        return {
            "pipelineId": "payments",
            "number": 12,
            "result": "SUCCESS",
            "timestamp": 1000,
            "duration": 300,
            "url": "https://ci.example.com/payments/12",
            "stages": [
                {"name": "build", "status": "SUCCESS", "startTime": 1000, "duration": 120, "pauseDuration": 0},
                {"name": "deploy", "status": "SUCCESS", "startTime": 1120, "duration": 60, "completedTime": 1190},
            ],
        }

    def test_from_dict(self, build_document):
        build = Build.from_dict(build_document)

        assert build.pipeline_id == "payments"
        assert build.number == 12
        assert build.status is Status.SUCCESS
        assert build.timestamp == 1000
        assert [stage.name for stage in build.stages] == ["build", "deploy"]
        assert build.find_stage("deploy").stage_done_time == 1190
        assert build.find_stage("build").stage_done_time == 1120

    def test_to_dict_round_trips(self, build_document):
        build = Build.from_dict(build_document)
        assert Build.from_dict(build.to_dict()) == build

    def test_from_dict_stage_without_status(self):
        """Malformed stage data parses instead of crashing"""
        build = Build.from_dict({"pipelineId": "P", "number": 1, "stages": [{"name": "deploy"}]})

        assert build.find_stage("deploy").status is Status.OTHER
        assert build.find_stage("deploy").stage_done_time is None

    def test_from_dict_missing_stages(self):
        build = Build.from_dict({"pipelineId": "P", "number": 1})
        assert build.stages == ()

    def test_from_dict_requires_pipeline_id(self):
        with pytest.raises(KeyError):
            Build.from_dict({"number": 1})

    def test_from_dict_coerces_numeric_time_strings(self):
        build = Build.from_dict(
            {
                "pipelineId": "P",
                "number": "3",
                "timestamp": "50",
                "stages": [{"name": "deploy", "completedTime": "100"}],
            }
        )

        assert build.number == 3
        assert build.timestamp == 50
        assert build.stages[0].completed_time == 100

    @pytest.mark.parametrize("field", ["startTime", "duration", "pauseDuration", "completedTime"])
    def test_from_dict_rejects_non_integer_stage_times(self, field):
        with pytest.raises(ValueError):
            Stage.from_dict({"name": "deploy", field: "2026-01-01"})

    def test_from_dict_rejects_non_integer_timestamp(self):
        with pytest.raises(ValueError):
            Build.from_dict({"pipelineId": "P", "number": 1, "timestamp": "2026-01-01"})

    def test_from_dict_rejects_non_object_stage(self):
        with pytest.raises(TypeError, match="stage must be a JSON object"):
            Build.from_dict({"pipelineId": "P", "number": 1, "stages": ["deploy"]})

    def test_from_dict_rejects_non_list_stages(self):
        with pytest.raises(TypeError, match="stages must be a JSON array"):
            Build.from_dict({"pipelineId": "P", "number": 1, "stages": "deploy"})

    def test_from_dict_rejects_non_object_build(self):
        with pytest.raises(TypeError, match="build must be a JSON object"):
            Build.from_dict(["P", 1])  # type: ignore[arg-type]
