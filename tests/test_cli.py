"""Tests for the CLI commands using Click's CliRunner."""

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import yaml
from click.testing import CliRunner

from llmdoc.cli.commands import cli
from llmdoc.generators.llm_client import GenerationError, LLMClient


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner."""
    return CliRunner()


@pytest.fixture
def sample_project(tmp_path: Path) -> Path:
    """Create a small TypeScript project with a config file."""
    (tmp_path / "src" / "core").mkdir(parents=True)
    (tmp_path / "src" / "core" / "a.ts").write_text("import { b } from './b';\n")
    (tmp_path / "src" / "core" / "b.ts").write_text("export const b = 1;\n")
    (tmp_path / "src" / "main.ts").write_text("import './core/a';\n")
    config = {
        "llm": {"provider": "anthropic", "model": "claude-sonnet-4-20250514"},
        "include": ["**/*.ts"],
        "exclude": ["node_modules/**"],
        "subfolders": [{"path": "src/core"}],
        "logging": {"level": "WARNING"},
    }
    with open(tmp_path / "llmdoc.config.yaml", "w") as f:
        yaml.dump(config, f)
    return tmp_path


@pytest.fixture
def mock_llm() -> MagicMock:
    """LLM client returning canned Markdown."""
    llm = MagicMock(spec=LLMClient)
    llm.generate_documentation.return_value = "# Core"
    llm.generate_api_reference.return_value = "# API"
    llm.generate_readme.return_value = "# Project"
    return llm


class TestCliGroup:
    """Tests for the main command group."""

    def test_help(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "generate" in result.output
        assert "estimate" in result.output
        assert "init" in result.output

    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestGenerateCommand:
    """Tests for the 'generate' command."""

    def test_dry_run(self, runner: CliRunner, sample_project: Path) -> None:
        with patch("llmdoc.cli.commands.create_llm_client") as mock_factory:
            result = runner.invoke(
                cli, ["generate", "--root", str(sample_project), "--dry-run"]
            )

        assert result.exit_code == 0, result.output
        mock_factory.assert_not_called()
        assert "Found 3 files" in result.output
        assert "[DRY RUN] Skipping LLM initialization" in result.output
        assert "Generated 3 documentation file(s)" in result.output
        assert "[DRY RUN] No files were written" in result.output
        assert "src/core/README.md (2 source files)" in result.output
        assert not (sample_project / "README.md").exists()

    def test_generate_writes_docs(
        self, runner: CliRunner, sample_project: Path, mock_llm: MagicMock
    ) -> None:
        with patch("llmdoc.cli.commands.create_llm_client", return_value=mock_llm):
            result = runner.invoke(cli, ["generate", "-r", str(sample_project)])

        assert result.exit_code == 0, result.output
        assert "Initializing anthropic LLM..." in result.output
        assert "Documentation generation complete!" in result.output
        assert (sample_project / "src/core/README.md").read_text() == "# Core"
        assert (sample_project / "docs/api-reference.md").read_text() == "# API"
        assert (sample_project / "README.md").read_text() == "# Project"

    def test_generation_error_exits(
        self, runner: CliRunner, sample_project: Path, mock_llm: MagicMock
    ) -> None:
        mock_llm.generate_documentation.side_effect = GenerationError("LLM generation failed: boom")
        with patch("llmdoc.cli.commands.create_llm_client", return_value=mock_llm):
            result = runner.invoke(cli, ["generate", "-r", str(sample_project)])

        assert result.exit_code == 1
        assert "Error: LLM generation failed: boom" in result.output

    def test_missing_api_key_exits(self, runner: CliRunner, sample_project: Path) -> None:
        with patch.dict("os.environ", {}, clear=True):
            result = runner.invoke(cli, ["generate", "-r", str(sample_project)])

        assert result.exit_code == 1
        assert "ANTHROPIC_API_KEY" in result.output

    def test_missing_config_exits(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["generate", "-r", str(tmp_path)])
        assert result.exit_code == 1
        assert "No config file found" in result.output

    def test_no_matching_files(self, runner: CliRunner, sample_project: Path) -> None:
        (sample_project / "llmdoc.config.yaml").write_text(
            "llm:\n  provider: openai\n  model: gpt-4o\ninclude:\n  - '**/*.rs'\n"
        )
        result = runner.invoke(cli, ["generate", "-r", str(sample_project)])

        assert result.exit_code == 0
        assert "No files found to process" in result.output

    def test_custom_config_path(self, runner: CliRunner, sample_project: Path) -> None:
        (sample_project / "llmdoc.config.yaml").rename(sample_project / "docs.yaml")
        result = runner.invoke(
            cli,
            ["generate", "-r", str(sample_project), "-c", "docs.yaml", "--dry-run"],
        )
        assert result.exit_code == 0, result.output


class TestEstimateCommand:
    """Tests for the 'estimate' command."""

    def test_estimate(self, runner: CliRunner, sample_project: Path) -> None:
        result = runner.invoke(cli, ["estimate", "-r", str(sample_project)])

        assert result.exit_code == 0, result.output
        assert "Requests: 3" in result.output
        assert "Estimated tokens: ~" in result.output
        assert "Model: claude-sonnet-4-20250514" in result.output
        assert not (sample_project / "README.md").exists()


class TestInitCommand:
    """Tests for the 'init' command."""

    def test_creates_config(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["init", "-r", str(tmp_path)])

        assert result.exit_code == 0, result.output
        data = yaml.safe_load((tmp_path / "llmdoc.config.yaml").read_text())
        assert data["llm"]["provider"] == "anthropic"
        assert data["llm"]["model"] == "claude-sonnet-4-20250514"

    def test_provider_option(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            cli, ["init", "-r", str(tmp_path), "--provider", "google-genai"]
        )

        assert result.exit_code == 0, result.output
        content = (tmp_path / "llmdoc.config.yaml").read_text()
        assert "model: gemini-2.5-flash" in content
        assert "GOOGLE_API_KEY" in content

    def test_refuses_to_overwrite(self, runner: CliRunner, sample_project: Path) -> None:
        before = (sample_project / "llmdoc.config.yaml").read_text()
        result = runner.invoke(cli, ["init", "-r", str(sample_project)])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert (sample_project / "llmdoc.config.yaml").read_text() == before
