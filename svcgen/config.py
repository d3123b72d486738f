"""svcgen configuration.

Centralised, typed configuration for a generation run. All settings use
Pydantic v2 models so they can be validated at construction time and
serialised to/from JSON, YAML or environment variables without boiler-plate.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from svcgen.models import DEFAULT_FLAG_OPTIONS, FlagOption
from svcgen.utils import ensure_dir

DEFAULT_PLACEHOLDERS: list[str] = ["<CHARTNAME>", "project_name"]

_TRUTHY = {"1", "true", "yes", "on"}


class Config(BaseModel):
    """Global svcgen configuration.

    Holds the template location, the target directory, the questions the
    wizard asks and the literal placeholders replaced by the project name.
    Instances are typically created once by the CLI entry point and then
    passed to the wizard and the generator.
    """

    project_name: str = Field(default="")
    template_path: Path | None = Field(default=None, description="Template directory to copy")
    output_dir: Path = Field(default=Path("."), description="Parent of the generated project")
    flags: list[FlagOption] = Field(
        default_factory=lambda: [opt.model_copy() for opt in DEFAULT_FLAG_OPTIONS]
    )
    placeholders: list[str] = Field(
        default_factory=lambda: list(DEFAULT_PLACEHOLDERS),
        description="Literal tokens replaced by the project name in paths and contents",
    )
    overwrite: bool = Field(default=False, description="Reuse an existing project directory")
    verbose: bool = Field(default=False)

    @field_validator("flags")
    @classmethod
    def _unique_flag_names(cls, flags: list[FlagOption]) -> list[FlagOption]:
        seen: set[str] = set()
        for opt in flags:
            if opt.name in seen:
                raise ValueError(f"duplicate flag name: {opt.name}")
            seen.add(opt.name)
        return flags

    @field_validator("placeholders")
    @classmethod
    def _non_empty_placeholders(cls, placeholders: list[str]) -> list[str]:
        return [p for p in placeholders if p]

    # ------------------------------------------------------------------
    # Derived values (read-only properties)
    # ------------------------------------------------------------------

    @property
    def project_path(self) -> Path:
        """Directory the project is generated into."""
        return self.output_dir / self.project_name

    @property
    def flag_names(self) -> list[str]:
        return [opt.name for opt in self.flags]

    def defaults(self) -> dict[str, bool]:
        """Return ``{flag_name: default}`` for every declared flag."""
        return {opt.name: opt.default for opt in self.flags}

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to *path* (JSON, or YAML by extension).

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        ensure_dir(target.parent)
        if target.suffix.lower() in (".yaml", ".yml"):
            data = json.loads(self.model_dump_json())
            target.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        else:
            target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a configuration file.

        ``.json`` files are parsed as JSON; ``.yaml`` / ``.yml`` files with
        PyYAML.  Relative ``template_path`` / ``output_dir`` values are kept
        as written (resolved against the working directory when used).

        Raises:
            FileNotFoundError: If *path* does not exist.
            ValueError: If the extension is not supported or the YAML is
                malformed.
            pydantic.ValidationError: If the content does not validate.
        """
        file_path = Path(path)
        suffix = file_path.suffix.lower()
        if suffix not in (".json", ".yaml", ".yml"):
            raise ValueError(f"Unsupported config file type: {file_path.name}")
        raw = file_path.read_text(encoding="utf-8")
        if suffix == ".json":
            return cls.model_validate_json(raw)
        try:
            data = yaml.safe_load(raw) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {file_path.name}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {file_path.name}")
        return cls.model_validate(data)

    @classmethod
    def from_env(cls, base: "Config | None" = None) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            SVCGEN_PROJECT_NAME, SVCGEN_TEMPLATE_PATH, SVCGEN_OUTPUT_DIR,
            SVCGEN_OVERWRITE, SVCGEN_VERBOSE.

        Values found in the environment override the matching fields of
        *base* (or of a default ``Config``).
        """
        overrides: dict[str, Any] = {}
        if os.environ.get("SVCGEN_PROJECT_NAME"):
            overrides["project_name"] = os.environ["SVCGEN_PROJECT_NAME"]
        if os.environ.get("SVCGEN_TEMPLATE_PATH"):
            overrides["template_path"] = Path(os.environ["SVCGEN_TEMPLATE_PATH"])
        if os.environ.get("SVCGEN_OUTPUT_DIR"):
            overrides["output_dir"] = Path(os.environ["SVCGEN_OUTPUT_DIR"])
        if os.environ.get("SVCGEN_OVERWRITE"):
            overrides["overwrite"] = os.environ["SVCGEN_OVERWRITE"].strip().lower() in _TRUTHY
        if os.environ.get("SVCGEN_VERBOSE"):
            overrides["verbose"] = os.environ["SVCGEN_VERBOSE"].strip().lower() in _TRUTHY

        source = base or cls()
        return source.model_copy(update=overrides)
