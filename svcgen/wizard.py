"""Interactive interview that collects the project name and feature flags.

The wizard asks for a project name, then one yes/no question per declared
flag, shows everything in a summary table and asks for confirmation.  A
negative confirmation offers to start over with the previous answers as
defaults.
"""

from __future__ import annotations

from rich.prompt import Confirm, Prompt

from svcgen.config import Config
from svcgen.models import ProjectAnswers
from svcgen.utils import console, print_header, print_summary_table, print_warning, yes_no


class WizardCancelled(Exception):
    """Raised when the user aborts the interview."""


def run_wizard(config: Config) -> ProjectAnswers:
    """Interview the user and return their answers.

    ``config.project_name`` and each flag's ``default`` pre-fill the
    questions.

    Raises:
        WizardCancelled: If the user declines to start over after rejecting
            the summary, or interrupts the prompt (Ctrl+C / EOF).
    """
    name = config.project_name
    options = config.defaults()

    try:
        while True:
            print_header("Microservice Generator")
            name = _ask_project_name(name)
            options = {
                opt.name: Confirm.ask(
                    opt.question, default=options.get(opt.name, opt.default), console=console
                )
                for opt in config.flags
            }
            answers = ProjectAnswers(project_name=name, options=options)
            _show_summary(answers, config)

            if Confirm.ask("All filled correctly?", default=True, console=console):
                return answers
            if not Confirm.ask("Start over?", default=True, console=console):
                raise WizardCancelled("Generation cancelled")
    except (KeyboardInterrupt, EOFError) as exc:
        raise WizardCancelled("Generation cancelled") from exc


def _ask_project_name(current: str) -> str:
    while True:
        if current:
            value = Prompt.ask("Enter project name", default=current, console=console)
        else:
            value = Prompt.ask("Enter project name", console=console)
        value = (value or "").strip()
        if value:
            return value
        print_warning("Project name is required.")


def _show_summary(answers: ProjectAnswers, config: Config) -> None:
    rows = {"Project name": answers.project_name}
    for opt in config.flags:
        rows[opt.question] = yes_no(answers.options.get(opt.name, False))
    print_summary_table(rows, title="Selected options")
