"""Unit tests for wizard option and answer models (svcgen.models)."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from svcgen.engine.flags import AttributeFlagSet, MappingFlagSet
from svcgen.models import DEFAULT_FLAG_OPTIONS, FlagOption, ProjectAnswers, ServiceOptions

pytestmark = pytest.mark.unit


class TestFlagOption:
    def test_question_uses_prompt(self):
        assert FlagOption(name="UseREST", prompt="Include REST?").question == "Include REST?"

    def test_question_falls_back_to_name(self):
        assert FlagOption(name="UseKafka").question == "Include UseKafka?"

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError):
            FlagOption(name="")

    def test_stock_options_match_service_record(self):
        assert [opt.name for opt in DEFAULT_FLAG_OPTIONS] == list(ServiceOptions.model_fields)
        assert all(opt.default is False for opt in DEFAULT_FLAG_OPTIONS)


class TestProjectAnswers:
    def test_flag_set(self):
        answers = ProjectAnswers(project_name="svc", options={"UseREST": True, "UseGRPC": False})
        flags = answers.flag_set()
        assert isinstance(flags, MappingFlagSet)
        assert flags.lookup("UseREST") is True
        assert flags.lookup("UseGRPC") is False
        assert flags.lookup("UseWorkers") is False

    def test_enabled_in_order(self):
        answers = ProjectAnswers(
            project_name="svc",
            options={"UseWorkers": True, "UseREST": False, "UseGRPC": True},
        )
        assert answers.enabled() == ["UseWorkers", "UseGRPC"]

    def test_options_default_empty(self):
        assert ProjectAnswers(project_name="svc").options == {}


class TestServiceOptions:
    def test_from_answers_drops_unknown(self):
        answers = ProjectAnswers(
            project_name="svc", options={"UseREST": True, "UseKafka": True}
        )
        options = ServiceOptions.from_answers(answers)
        assert options.UseREST is True
        assert options.UseGRPC is False
        assert not hasattr(options, "UseKafka")

    def test_to_answers(self):
        answers = ServiceOptions(UseCronJobs=True).to_answers("jobs")
        assert answers.project_name == "jobs"
        assert answers.options["UseCronJobs"] is True
        assert answers.enabled() == ["UseCronJobs"]

    def test_flag_set_is_closed_record(self):
        flags = ServiceOptions(UseGraphQL=True).flag_set()
        assert isinstance(flags, AttributeFlagSet)
        assert flags.lookup("UseGraphQL") is True
        assert flags.lookup("UseKafka") is False
