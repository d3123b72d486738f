"""svcgen -- microservice project generator.

Interviews the user for a project name and a set of boolean feature flags,
then copies a template directory into a new project, replacing placeholders
and resolving ``[if]``/``[else]``/``[endif]`` blocks.

Quick usage::

    from svcgen import Config, ProjectAnswers, ProjectGenerator

    config = Config(template_path="./template", output_dir="/tmp")
    answers = ProjectAnswers(project_name="billing", options={"UseREST": True})
    result = await ProjectGenerator(config, answers).generate()
"""

from svcgen.config import Config
from svcgen.engine import evaluate, render
from svcgen.generator import GenerationError, GenerationResult, ProjectGenerator
from svcgen.models import FlagOption, ProjectAnswers, ServiceOptions

__version__ = "0.1.0"

__all__ = [
    "Config",
    "FlagOption",
    "GenerationError",
    "GenerationResult",
    "ProjectAnswers",
    "ProjectGenerator",
    "ServiceOptions",
    "evaluate",
    "render",
]
