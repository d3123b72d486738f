"""Tests for the command-line entry point (svcgen.cli)."""

from __future__ import annotations

import argparse
from pathlib import Path
from unittest.mock import patch

import pytest

from svcgen.cli import apply_presets, build_parser, collect_answers, load_config, main
from svcgen.config import Config
from svcgen.generator import GenerationError
from svcgen.models import FlagOption, ProjectAnswers
from svcgen.wizard import WizardCancelled


def _args(*argv: str) -> argparse.Namespace:
    return build_parser().parse_args(list(argv))


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------


class TestLoadConfig:
    @pytest.mark.unit
    def test_defaults(self):
        config = load_config(_args())
        assert config.template_path is None
        assert config.output_dir == Path(".")

    @pytest.mark.unit
    def test_command_line_overrides(self, tmp_path: Path):
        config = load_config(
            _args(
                "--template-path", str(tmp_path),
                "-o", "out",
                "--project-name", "billing",
                "--force",
                "-v",
            )
        )
        assert config.template_path == tmp_path
        assert config.output_dir == Path("out")
        assert config.project_name == "billing"
        assert config.overwrite is True
        assert config.verbose is True

    @pytest.mark.unit
    def test_config_file_then_env_then_flags(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        cfg = tmp_path / "svcgen.yaml"
        cfg.write_text("project_name: from-file\noutput_dir: file-out\n", encoding="utf-8")
        monkeypatch.setenv("SVCGEN_OUTPUT_DIR", "env-out")
        config = load_config(_args("--config", str(cfg), "--project-name", "from-cli"))
        assert config.project_name == "from-cli"
        assert config.output_dir == Path("env-out")


class TestApplyPresets:
    @pytest.mark.unit
    def test_enable_and_disable(self):
        config = Config(flags=[FlagOption(name="A"), FlagOption(name="B", default=True)])
        updated = apply_presets(config, enable=["A"], disable=["B"])
        assert updated.defaults() == {"A": True, "B": False}
        assert config.defaults() == {"A": False, "B": True}

    @pytest.mark.unit
    def test_unknown_flag_added_with_warning(self):
        config = Config(flags=[FlagOption(name="A")])
        with patch("svcgen.cli.print_warning") as mock_warning:
            updated = apply_presets(config, enable=["UseKafka"], disable=[])
        assert updated.flag_names == ["A", "UseKafka"]
        assert updated.defaults()["UseKafka"] is True
        mock_warning.assert_called_once()

    @pytest.mark.unit
    def test_disable_wins(self):
        config = Config(flags=[FlagOption(name="A")])
        assert apply_presets(config, ["A"], ["A"]).defaults() == {"A": False}


class TestCollectAnswers:
    @pytest.mark.unit
    def test_non_interactive_uses_defaults(self):
        config = Config(project_name=" billing ", flags=[FlagOption(name="A", default=True)])
        answers = collect_answers(config, interactive=False)
        assert answers == ProjectAnswers(project_name="billing", options={"A": True})

    @pytest.mark.unit
    def test_non_interactive_requires_name(self):
        with pytest.raises(GenerationError):
            collect_answers(Config(), interactive=False)

    @pytest.mark.unit
    def test_interactive_runs_wizard(self):
        expected = ProjectAnswers(project_name="x")
        with patch("svcgen.cli.run_wizard", return_value=expected) as mock_wizard:
            assert collect_answers(Config(), interactive=True) is expected
        mock_wizard.assert_called_once()


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    @pytest.mark.integration
    def test_generates_project(self, template_dir: Path, output_dir: Path):
        main([
            "--template-path", str(template_dir),
            "-o", str(output_dir),
            "--project-name", "billing",
            "--enable", "UseWorkers",
            "--no-input",
        ])
        compose = (output_dir / "billing" / "docker-compose.yml").read_text(encoding="utf-8")
        assert "billing-worker" in compose
        assert "migrate" not in compose

    @pytest.mark.integration
    def test_reports_success(self, template_dir: Path, output_dir: Path, capsys):
        main([
            "--template-path", str(template_dir),
            "-o", str(output_dir),
            "--project-name", "billing",
            "--no-input",
        ])
        assert "generated successfully" in capsys.readouterr().out

    @pytest.mark.unit
    def test_missing_template_path_exits(self):
        with pytest.raises(SystemExit) as exc_info:
            main(["--project-name", "billing", "--no-input"])
        assert exc_info.value.code == 1

    @pytest.mark.unit
    def test_bad_config_file_exits(self, tmp_path: Path):
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(tmp_path / "missing.yaml")])
        assert exc_info.value.code == 1

    @pytest.mark.unit
    def test_malformed_yaml_config_exits(self, tmp_path: Path, capsys):
        cfg = tmp_path / "svcgen.yaml"
        cfg.write_text("flags: [unclosed\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(cfg)])
        assert exc_info.value.code == 1
        assert "Invalid YAML" in capsys.readouterr().out

    @pytest.mark.integration
    def test_existing_target_exits(self, template_dir: Path, output_dir: Path):
        (output_dir / "billing").mkdir()
        with pytest.raises(SystemExit) as exc_info:
            main([
                "--template-path", str(template_dir),
                "-o", str(output_dir),
                "--project-name", "billing",
                "--no-input",
            ])
        assert exc_info.value.code == 1

    @pytest.mark.unit
    def test_wizard_cancel_exits(self, template_dir: Path, output_dir: Path):
        with patch("svcgen.cli.run_wizard", side_effect=WizardCancelled("Generation cancelled")):
            with pytest.raises(SystemExit) as exc_info:
                main(["--template-path", str(template_dir), "-o", str(output_dir)])
        assert exc_info.value.code == 1
        assert not (output_dir / "billing").exists()

    @pytest.mark.integration
    def test_wizard_answers_used(self, template_dir: Path, output_dir: Path):
        answers = ProjectAnswers(project_name="orders", options={"UseCronJobs": True})
        with patch("svcgen.cli.run_wizard", return_value=answers):
            main(["--template-path", str(template_dir), "-o", str(output_dir)])
        script = (output_dir / "orders" / "scripts" / "run.sh").read_text(encoding="utf-8")
        assert script == "#!/bin/sh\nexec cron -f\n"
