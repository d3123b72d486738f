"""Pydantic v2 models for wizard options and the answers collected for a run.

``FlagOption`` declares a boolean question the wizard asks and the flag name
templates refer to.  ``ProjectAnswers`` is the open-mapping result of an
interview; ``ServiceOptions`` is the same information for the stock
microservice questions expressed as a closed record.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from svcgen.engine.flags import AttributeFlagSet, MappingFlagSet


# ---------------------------------------------------------------------------
# Flag declarations
# ---------------------------------------------------------------------------

class FlagOption(BaseModel):
    """A yes/no question whose answer becomes a template flag."""
    name: str = Field(..., min_length=1, description="Flag name used in [if ...] directives")
    prompt: str = Field(default="", description="Question shown by the wizard")
    default: bool = Field(default=False, description="Answer used when the user just presses enter")

    @property
    def question(self) -> str:
        return self.prompt or f"Include {self.name}?"


DEFAULT_FLAG_OPTIONS: list[FlagOption] = [
    FlagOption(name="UseREST", prompt="Include REST?"),
    FlagOption(name="UseGRPC", prompt="Include gRPC?"),
    FlagOption(name="UseGraphQL", prompt="Include GraphQL?"),
    FlagOption(name="UsePostgresMig", prompt="Include PostgreSQL migrations?"),
    FlagOption(name="UseMongoMig", prompt="Include MongoDB migrations?"),
    FlagOption(name="UseCronJobs", prompt="Include cron jobs?"),
    FlagOption(name="UseWorkers", prompt="Include workers?"),
]


# ---------------------------------------------------------------------------
# Answers
# ---------------------------------------------------------------------------

class ProjectAnswers(BaseModel):
    """Everything the generator needs from the interview."""
    project_name: str = Field(..., description="Name of the project directory and placeholder value")
    options: dict[str, bool] = Field(default_factory=dict, description="Flag name -> enabled")

    def flag_set(self) -> MappingFlagSet:
        """Return the options as a ``FlagSet`` for the template engine."""
        return MappingFlagSet(self.options)

    def enabled(self) -> list[str]:
        """Names of the options that are switched on, in declaration order."""
        return [name for name, value in self.options.items() if value]


class ServiceOptions(BaseModel):
    """The stock microservice questions as a closed record of booleans."""
    UseREST: bool = False
    UseGRPC: bool = False
    UseGraphQL: bool = False
    UsePostgresMig: bool = False
    UseMongoMig: bool = False
    UseCronJobs: bool = False
    UseWorkers: bool = False

    @classmethod
    def from_answers(cls, answers: ProjectAnswers) -> "ServiceOptions":
        """Pick the known fields out of *answers*; unknown options are dropped."""
        known = {k: v for k, v in answers.options.items() if k in cls.model_fields}
        return cls(**known)

    def to_answers(self, project_name: str) -> ProjectAnswers:
        return ProjectAnswers(project_name=project_name, options=self.model_dump())

    def flag_set(self) -> AttributeFlagSet:
        return AttributeFlagSet(self)
