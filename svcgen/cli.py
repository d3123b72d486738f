"""Command-line entry point for svcgen.

Usage::

    svcgen --template-path ./templates/service
    svcgen --template-path ./templates/service --project-name billing \\
        --enable UseREST --enable UseWorkers --no-input
    python -m svcgen --config svcgen.yaml -o ./services
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from svcgen.config import Config
from svcgen.generator import GenerationError, GenerationResult, ProjectGenerator
from svcgen.models import FlagOption, ProjectAnswers
from svcgen.utils import (
    print_error,
    print_success,
    print_summary_table,
    print_warning,
)
from svcgen.wizard import WizardCancelled, run_wizard


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="svcgen",
        description="Generates a microservice project from a template directory",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  svcgen --template-path ./template\n"
            "  svcgen --template-path ./template --project-name api --enable UseREST --no-input\n"
            "  svcgen --config svcgen.yaml -o ./services\n"
        ),
    )
    parser.add_argument(
        "--template-path",
        default=None,
        help="Path to the template directory (required unless set in config/env)",
    )
    parser.add_argument(
        "--output", "-o",
        default=None,
        help="Directory in which the project folder is created (default: .)",
    )
    parser.add_argument("--project-name", default=None, help="Project name")
    parser.add_argument("--config", default=None, help="JSON or YAML configuration file")
    parser.add_argument(
        "--enable",
        action="append",
        default=[],
        metavar="FLAG",
        help="Preset a flag to Yes (repeatable)",
    )
    parser.add_argument(
        "--disable",
        action="append",
        default=[],
        metavar="FLAG",
        help="Preset a flag to No (repeatable)",
    )
    parser.add_argument(
        "--no-input",
        action="store_true",
        help="Skip the interactive wizard and use the presets/defaults",
    )
    parser.add_argument(
        "--force",
        action="store_true",
        help="Generate into an existing project directory",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="List every generated file")
    return parser


def load_config(args: argparse.Namespace) -> Config:
    """Merge config file, environment and command-line options (in that order)."""
    config = Config.load(Path(args.config)) if args.config else Config()
    config = Config.from_env(config)

    update: dict[str, object] = {}
    if args.template_path:
        update["template_path"] = Path(args.template_path)
    if args.output:
        update["output_dir"] = Path(args.output)
    if args.project_name:
        update["project_name"] = args.project_name
    if args.force:
        update["overwrite"] = True
    if args.verbose:
        update["verbose"] = True
    config = config.model_copy(update=update)

    return apply_presets(config, args.enable, args.disable)


def apply_presets(config: Config, enable: list[str], disable: list[str]) -> Config:
    """Set flag defaults from ``--enable`` / ``--disable``.

    Names that are not declared yet are added as new flags, with a warning.
    A name given to both options ends up disabled.
    """
    flags = [opt.model_copy() for opt in config.flags]
    by_name = {opt.name: opt for opt in flags}
    for names, value in ((enable, True), (disable, False)):
        for name in names:
            opt = by_name.get(name)
            if opt is None:
                print_warning(f"Flag {name} is not declared; adding it")
                opt = FlagOption(name=name)
                flags.append(opt)
                by_name[name] = opt
            opt.default = value
    return config.model_copy(update={"flags": flags})


def collect_answers(config: Config, interactive: bool) -> ProjectAnswers:
    if interactive:
        return run_wizard(config)
    if not config.project_name.strip():
        raise GenerationError("A project name is required with --no-input")
    return ProjectAnswers(project_name=config.project_name.strip(), options=config.defaults())


def print_result(result: GenerationResult, answers: ProjectAnswers) -> None:
    print_summary_table(
        {
            "Project": answers.project_name,
            "Location": str(result.project_root),
            "Files rendered": str(len(result.rendered)),
            "Files copied": str(len(result.copied)),
            "Enabled options": ", ".join(answers.enabled()) or "(none)",
        },
        title="Generation summary",
    )
    print_success(f"Project {answers.project_name} generated successfully!")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``svcgen`` / ``python -m svcgen``."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args)
    except (OSError, ValueError) as exc:
        print_error(f"Invalid configuration: {exc}")
        sys.exit(1)

    if config.template_path is None:
        print_error("--template-path is required")
        sys.exit(1)

    try:
        answers = collect_answers(config, interactive=not args.no_input)
        result = asyncio.run(ProjectGenerator(config, answers).generate())
    except WizardCancelled as exc:
        print_error(str(exc))
        sys.exit(1)
    except GenerationError as exc:
        print_error(f"Error generating project: {exc}")
        sys.exit(1)

    print_result(result, answers)


if __name__ == "__main__":
    main()
