"""
Integration tests for the CLI commands.
"""

import logging
import os

import pytest
from typer.testing import CliRunner
from unittest.mock import AsyncMock, patch

from web_commander import __version__
from web_commander.main import app


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run every command in an empty directory without credentials."""
    for name in list(os.environ):
        if name.startswith("WEB_COMMANDER__") or name == "OPENAI_API_KEY":
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield tmp_path
    root.handlers[:] = handlers
    root.setLevel(level)


class TestCLIRun:
    """Test the 'run' CLI command."""

    def test_run_help(self, runner):
        """Test help for run command."""
        result = runner.invoke(app, ["run", "--help"])
        assert result.exit_code == 0
        assert "Plan a goal into browser commands" in result.stdout

    def test_run_options(self, runner):
        """Test run options exist."""
        result = runner.invoke(app, ["run", "--help"])
        assert "--headless" in result.stdout
        assert "--model" in result.stdout
        assert "--config" in result.stdout

    def test_run_without_api_key(self, runner):
        """Test a missing key stops before the browser starts."""
        with patch("web_commander.main._run_async", new=AsyncMock()) as run_async:
            result = runner.invoke(app, ["run", "find sushi"])

        assert result.exit_code == 1
        assert "Missing API key" in result.stdout
        run_async.assert_not_called()

    def test_run_with_goal(self, runner, monkeypatch):
        """Test the goal and CLI overrides reach the session runner."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch("web_commander.main._run_async", new=AsyncMock()) as run_async:
            result = runner.invoke(app, ["run", "find sushi", "--headless", "--model", "gpt-4o"])

        assert result.exit_code == 0
        goal, settings, api_key = run_async.call_args.args
        assert goal == "find sushi"
        assert settings.browser.headless is True
        assert settings.llm.model == "gpt-4o"
        assert api_key == "sk-test"

    def test_run_prompts_for_goal(self, runner, monkeypatch):
        """Test the default goal is offered when none is given."""
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        with patch("web_commander.main._run_async", new=AsyncMock()) as run_async:
            result = runner.invoke(app, ["run"], input="\n")

        assert result.exit_code == 0
        assert run_async.call_args.args[0] == "what is the best omakase sushi experience in NYC?"

    def test_run_missing_config(self, runner, tmp_path):
        """Test an explicit config path must exist."""
        result = runner.invoke(app, ["run", "x", "--config", str(tmp_path / "nope.yaml")])
        assert result.exit_code == 1
        assert "not found" in result.stdout


class TestCLITemplates:
    """Test the 'templates' CLI command."""

    def test_bundled_templates(self, runner):
        """Test the bundled templates validate."""
        result = runner.invoke(app, ["templates"])
        assert result.exit_code == 0
        assert "5 templates valid" in result.stdout

    def test_broken_template_dir(self, runner, tmp_path):
        """Test a broken template fails the command."""
        (tmp_path / "broken.yaml").write_text("- not a template\n")
        result = runner.invoke(app, ["templates", "--dir", str(tmp_path)])
        assert result.exit_code == 1
        assert "broken.yaml" in result.stdout


class TestCLISimplify:
    """Test the 'simplify' CLI command."""

    def test_simplify_file(self, runner, tmp_path):
        """Test a saved page is simplified into one fragment."""
        page = tmp_path / "page.html"
        page.write_text("<html><body><p class='price'>$5</p></body></html>")

        result = runner.invoke(app, ["simplify", str(page)])

        assert result.exit_code == 0
        assert "<price>$5</price>" in result.stdout
        assert "Fragment 1 of 1" in result.stdout

    def test_simplify_with_metadata(self, runner, tmp_path):
        """Test title and URL are added to the output."""
        page = tmp_path / "page.html"
        page.write_text("<p>x</p>")

        result = runner.invoke(app, ["simplify", str(page), "--url", "https://e.com/", "--title", "E"])

        assert result.exit_code == 0
        assert "og:title" in result.stdout

    def test_simplify_nonexistent_file(self, runner, tmp_path):
        """Test error on nonexistent file."""
        result = runner.invoke(app, ["simplify", str(tmp_path / "missing.html")])
        assert result.exit_code == 1
        assert "File not found" in result.stdout


class TestCLIVersion:
    """Test the 'version' CLI command."""

    def test_version(self, runner):
        """Test version command."""
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout
