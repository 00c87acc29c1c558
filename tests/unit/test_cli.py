"""
Unit tests for the command-line interface.
"""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from regexflow import __version__
from regexflow.cli import app

PROJECT_ROOT = Path(__file__).parent.parent.parent

runner = CliRunner()


def test_cli_files_exist():
    """Test that all CLI files exist."""
    cli_dir = PROJECT_ROOT / "regexflow" / "cli"

    for filename in ["__init__.py", "main.py", "commands.py", "display.py"]:
        assert (cli_dir / filename).exists(), f"Missing CLI file: {filename}"


def test_console_script_declared():
    """Test that pyproject.toml exposes the console script."""
    content = (PROJECT_ROOT / "pyproject.toml").read_text()

    assert "[project.scripts]" in content
    assert 'regexflow = "regexflow.cli.main:cli"' in content


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"regexflow version {__version__}" in result.output


def test_no_command_shows_help():
    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "rewrite" in result.output
    assert "validate" in result.output


class TestRewriteCommand:
    """Test `regexflow rewrite`."""

    @pytest.fixture
    def quotes_json(self, fixtures_dir):
        return str(fixtures_dir / "machines" / "quotes.json")

    def test_stdin_to_stdout(self, quotes_json):
        result = runner.invoke(app, ["rewrite", "-m", quotes_json], input="a <quote>b</quote> c\n")

        assert result.exit_code == 0
        assert result.stdout == "a B c\n"

    def test_small_chunks(self, quotes_json):
        result = runner.invoke(
            app,
            ["rewrite", "-m", quotes_json, "--chunk-size", "1"],
            input="<quote>split\nacross</quote> reads",
        )

        assert result.exit_code == 0
        assert result.stdout == "SPLIT\nACROSS reads"

    def test_file_to_file(self, quotes_json, fixtures_dir, tmp_path):
        output = tmp_path / "out.txt"
        result = runner.invoke(app, [
            "rewrite", "-m", quotes_json,
            "-i", str(fixtures_dir / "sample.txt"),
            "-o", str(output),
            "--stats",
        ])

        assert result.exit_code == 0
        assert output.read_text(encoding="utf-8") == "He said HELLO THERE and left.\n"
        assert "Output written to" in result.output
        assert "Transitions" in result.output

    def test_initial_state_override(self, quotes_json):
        result = runner.invoke(
            app, ["rewrite", "-m", quotes_json, "--initial", "QUOTED"], input="x</quote> y"
        )

        assert result.exit_code == 0
        assert result.stdout == "X y"

    def test_invalid_machine(self, fixtures_dir):
        result = runner.invoke(
            app, ["rewrite", "-m", str(fixtures_dir / "machines" / "broken.json")], input="x"
        )

        assert result.exit_code == 1
        assert "Failed to load machine" in result.output

    def test_missing_machine_file(self, tmp_path):
        result = runner.invoke(app, ["rewrite", "-m", str(tmp_path / "nope.json")], input="x")

        assert result.exit_code != 0


class TestValidateCommand:
    """Test `regexflow validate`."""

    def test_valid_machine(self, fixtures_dir):
        result = runner.invoke(app, ["validate", "-m", str(fixtures_dir / "machines" / "parens.json")])

        assert result.exit_code == 0
        assert "Validation passed!" in result.output
        assert "Machine 'parens'" in result.output

    def test_show_config(self, fixtures_dir):
        result = runner.invoke(
            app, ["validate", "-m", str(fixtures_dir / "machines" / "quotes.json"), "--show-config"]
        )

        assert result.exit_code == 0
        assert "upper_group" in result.output

    def test_invalid_machine(self, fixtures_dir):
        result = runner.invoke(app, ["validate", "-m", str(fixtures_dir / "machines" / "broken.json")])

        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert "duplicate state name 'START'" in result.output
