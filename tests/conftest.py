"""Shared pytest fixtures for the svcgen test suite.

Provides reusable fixtures for:
- A small microservice template tree (text, nested, binary, executable files)
- Configs pointing at that template with a temporary output directory
- Clean ``SVCGEN_*`` environment
"""

from __future__ import annotations

import os
import stat
import textwrap
from pathlib import Path

import pytest

from svcgen.config import Config
from svcgen.models import ProjectAnswers


# ---------------------------------------------------------------------------
# Template tree
# ---------------------------------------------------------------------------

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\xff\xfe\xfd"

MAIN_GO = textwrap.dedent("""\
    package main

    import (
        "fmt"
    [if UseREST]
        "net/http"
    [endif]
    )

    func main() {
        fmt.Println("starting project_name")
        [if UseREST]
        http.ListenAndServe(":8080", nil)
        [else]
        select {}
        [endif]
    }
    """)

COMPOSE_YML = textwrap.dedent("""\
    services:
      project_name:
        image: project_name:latest
    [if UseWorkers]
      project_name-worker:
        image: project_name-worker:latest
    [endif]
    [if UsePostgresMig OR UseMongoMig]
      migrate:
        image: project_name-migrate:latest
    [endif]
    """)

CHART_YAML = textwrap.dedent("""\
    apiVersion: v2
    name: <CHARTNAME>
    description: Helm chart for <CHARTNAME>
    """)

README_MD = textwrap.dedent("""\
    # project_name

    [if UseGRPC AND UseREST]
    Serves both gRPC and REST.
    [else]
    Serves a single protocol.
    [endif]

    Done.
    """)

RUN_SH = "#!/bin/sh\n[if UseCronJobs]\nexec cron -f\n[else]\nexec ./project_name\n[endif]\n"


@pytest.fixture
def template_dir(tmp_path: Path) -> Path:
    """A template tree exercising placeholders, directives and binary files."""
    root = tmp_path / "template"
    files = {
        "cmd/project_name/main.go": MAIN_GO,
        "docker-compose.yml": COMPOSE_YML,
        "charts/<CHARTNAME>/Chart.yaml": CHART_YAML,
        "README.md": README_MD,
        "scripts/run.sh": RUN_SH,
    }
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")

    logo = root / "assets" / "logo.png"
    logo.parent.mkdir(parents=True)
    logo.write_bytes(PNG_BYTES)

    (root / "migrations").mkdir()

    script = root / "scripts" / "run.sh"
    script.chmod(script.stat().st_mode | stat.S_IXUSR)
    return root


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    out = tmp_path / "out"
    out.mkdir()
    return out


@pytest.fixture
def config(template_dir: Path, output_dir: Path) -> Config:
    """Config pointing at ``template_dir`` and writing into ``output_dir``."""
    return Config(template_path=template_dir, output_dir=output_dir)


@pytest.fixture
def rest_answers() -> ProjectAnswers:
    return ProjectAnswers(
        project_name="billing",
        options={"UseREST": True, "UseGRPC": False, "UseWorkers": True, "UseMongoMig": True},
    )


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def clean_svcgen_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no ``SVCGEN_*`` variable from the host leaks into a test."""
    for key in list(os.environ):
        if key.startswith("SVCGEN_"):
            monkeypatch.delenv(key, raising=False)
