"""Tests for the command line interface."""

import json

import pytest
from typer.testing import CliRunner

from review_agent import __version__
from review_agent.ai_backends.factory import BackendFactory
from review_agent.cli import app
from review_agent.errors import ProviderError


runner = CliRunner()


@pytest.fixture
def chain(monkeypatch):
    """Replace the Gemini fallback chain with scripted backends."""
    installed = []

    def install(*backends):
        installed.extend(backends)
        monkeypatch.setattr(BackendFactory, "create_fallback_chain", lambda settings: list(installed))
        return installed

    return install


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_review_streams_output(chain, fake_backend):
    chain(fake_backend("gemini-2.5-flash", ["Looks ", "great!"]))

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "Looks great!" in result.output
    assert "completed successfully" in result.output


def test_review_falls_back_to_next_model(chain, fake_backend):
    backends = chain(
        fake_backend("gemini-2.5-flash", ProviderError("The model is overloaded.", status_code=503)),
        fake_backend("gemini-1.5-flash", ["Second model review"]),
    )

    result = runner.invoke(app, [])

    assert result.exit_code == 0
    assert "Second model review" in result.output
    assert [b.calls for b in backends] == [1, 1]


def test_all_models_failing_exits_with_status_1(chain, fake_backend):
    chain(
        fake_backend("gemini-2.5-flash", ProviderError("overloaded", status_code=503)),
        fake_backend("gemini-1.5-flash", ProviderError("still overloaded", status_code=503)),
    )

    result = runner.invoke(app, [])

    assert result.exit_code == 1
    assert "All models failed" in result.output
    assert "still overloaded" in result.output
    assert "Suggestions" in result.output


def test_tools_command(git_repo, tmp_path):
    (git_repo / "src/app.py").write_text("def main():\n    return 2\n")
    output = tmp_path / "reports" / "review.md"

    result = runner.invoke(app, ["tools", "--dir", str(git_repo), "--style", "simple", "--output", str(output)])

    assert result.exit_code == 0
    assert "src/app.py" in result.output
    assert "Modified 1 file(s)" in result.output
    content = output.read_text(encoding="utf-8")
    assert content.startswith("# Code Review Report")
    assert "- `src/app.py`" in content


def test_tools_command_outside_repository(tmp_path):
    plain = tmp_path / "plain"
    plain.mkdir()

    result = runner.invoke(app, ["tools", "--dir", str(plain)])

    assert result.exit_code == 1
    assert "Not a Git repository" in result.output


def test_tools_command_rejects_unknown_style(git_repo):
    result = runner.invoke(app, ["tools", "--dir", str(git_repo), "--style", "fancy"])

    assert result.exit_code == 1
    assert "Invalid style" in result.output


def test_config_show():
    result = runner.invoke(app, ["config", "--show"])

    assert result.exit_code == 0
    assert "gemini-2.5-flash" in result.output


def test_config_save(tmp_path):
    result = runner.invoke(app, ["config", "-m", "gemini-1.5-flash", "-m", "gemini-2.5-flash", "--retries", "5", "--save"])

    assert result.exit_code == 0
    saved = json.loads((tmp_path / "config" / "review-agent" / "config.json").read_text())
    assert saved["ai"]["models"] == ["gemini-1.5-flash", "gemini-2.5-flash"]
    assert saved["retry"]["attempts_per_model"] == 5
    assert "api_key" not in saved["ai"]
