"""Project generation from a template directory.

Copies every file of the template tree into ``<output_dir>/<project_name>``.
Along the way the literal placeholders (``<CHARTNAME>``, ``project_name`` by
default) are replaced by the project name in both relative paths and file
contents, and ``[if]``/``[else]``/``[endif]`` blocks are resolved against the
answers collected by the wizard.  Files that are not UTF-8 text are copied
byte-for-byte.
"""

from __future__ import annotations

import asyncio
import shutil
from pathlib import Path

from pydantic import BaseModel, Field

from svcgen.config import Config
from svcgen.engine import DirectiveBlockProcessor
from svcgen.models import ProjectAnswers
from svcgen.utils import ensure_dir, print_detail


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class GenerationError(Exception):
    """Raised when the project cannot be generated."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class GenerationResult(BaseModel):
    """What a ``ProjectGenerator.generate`` run produced."""

    project_root: Path
    rendered: list[Path] = Field(default_factory=list, description="Text files rendered")
    copied: list[Path] = Field(default_factory=list, description="Binary files copied verbatim")
    directories: list[Path] = Field(default_factory=list)

    @property
    def file_count(self) -> int:
        return len(self.rendered) + len(self.copied)


# ---------------------------------------------------------------------------
# Placeholder substitution
# ---------------------------------------------------------------------------


def substitute_placeholders(text: str, placeholders: list[str], value: str) -> str:
    """Replace every occurrence of each placeholder in *text* with *value*.

    Placeholders are applied in order; empty placeholders are skipped.
    """
    for placeholder in placeholders:
        if placeholder:
            text = text.replace(placeholder, value)
    return text


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Render a template directory into a new project tree.

    Args:
        config: Run configuration (template path, output dir, placeholders).
        answers: Project name and flag values from the wizard or the CLI.
    """

    def __init__(self, config: Config, answers: ProjectAnswers) -> None:
        self.config = config
        self.answers = answers
        self.processor = DirectiveBlockProcessor(answers.flag_set())

    @property
    def project_name(self) -> str:
        return self.answers.project_name.strip()

    # -- Public API --------------------------------------------------------

    async def generate(self) -> GenerationResult:
        """Generate the project.

        Returns:
            A ``GenerationResult`` listing everything that was written.

        Raises:
            GenerationError: If the template path is invalid, the project name
                is empty, the target directory already exists (and
                ``overwrite`` is off) or a file cannot be read or written.
        """
        template_root = self._validate_template_path()
        if not self.project_name:
            raise GenerationError("Project name is required")

        project_root = self.config.output_dir / self.project_name
        await asyncio.to_thread(self._create_project_root, project_root)

        result = GenerationResult(project_root=project_root)
        sources = await asyncio.to_thread(lambda: sorted(template_root.rglob("*")))

        for source in sources:
            rel = source.relative_to(template_root).as_posix()
            target_rel = self.substitute(rel)
            target = project_root / target_rel

            if source.is_dir():
                await asyncio.to_thread(self._make_dir, target)
                result.directories.append(target)
                continue

            is_text = await asyncio.to_thread(self._write_file, source, target)
            if is_text:
                result.rendered.append(target)
            else:
                result.copied.append(target)
            if self.config.verbose:
                print_detail(f"  {'rendered' if is_text else 'copied'} {target_rel}")

        return result

    def substitute(self, text: str) -> str:
        """Apply the configured placeholders to *text*."""
        return substitute_placeholders(text, self.config.placeholders, self.project_name)

    def render_text(self, text: str) -> str:
        """Substitute placeholders, then resolve conditional blocks."""
        return self.processor.render(self.substitute(text))

    # -- Helpers -----------------------------------------------------------

    def _validate_template_path(self) -> Path:
        template_path = self.config.template_path
        if template_path is None:
            raise GenerationError("Template path is required")
        template_root = Path(template_path)
        if not template_root.exists():
            raise GenerationError(f"Template path not found: {template_root}", template_root)
        if not template_root.is_dir():
            raise GenerationError(
                f"Template path must be a directory: {template_root}", template_root
            )
        return template_root

    def _create_project_root(self, project_root: Path) -> None:
        if project_root.exists() and not self.config.overwrite:
            raise GenerationError(
                f"Target directory already exists: {project_root}", project_root
            )
        self._make_dir(project_root)

    def _make_dir(self, path: Path) -> None:
        try:
            ensure_dir(path)
        except OSError as exc:
            raise GenerationError(f"Cannot create directory {path}: {exc}", path) from exc

    def _write_file(self, source: Path, target: Path) -> bool:
        """Render or copy *source* to *target*.

        Returns ``True`` when the file was rendered as text and ``False`` when
        it was copied verbatim.
        """
        try:
            raw = source.read_bytes()
        except OSError as exc:
            raise GenerationError(f"Cannot read template file {source}: {exc}", source) from exc

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError:
            text = None

        self._make_dir(target.parent)
        try:
            if text is None:
                shutil.copyfile(source, target)
            else:
                target.write_bytes(self.render_text(text).encode("utf-8"))
            shutil.copymode(source, target)
        except OSError as exc:
            raise GenerationError(f"Cannot write {target}: {exc}", target) from exc
        return text is not None
