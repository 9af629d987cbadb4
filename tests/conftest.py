"""Shared fixtures for Review Agent tests."""

from pathlib import Path
from typing import Dict

import pytest
from git import Repo

from review_agent.ai_backends.base import AIBackend


def write_files(root: Path, files: Dict[str, str]) -> None:
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)


@pytest.fixture
def git_repo(tmp_path):
    """A git repository with one initial commit."""
    repo_path = tmp_path / "project"
    repo_path.mkdir()
    repo = Repo.init(repo_path)
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")

    write_files(repo_path, {
        "src/app.py": "def main():\n    return 1\n",
        "src/bug_handler.py": "x = 1\n",
        "README.md": "# Project\n",
        "old.py": "a = 1\nb = 2\n",
        "dist": "bundle v1\n",
        "bun.lock": "lock v1\n",
    })
    repo.git.add(A=True)
    repo.index.commit("initial commit")
    return repo_path


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Keep config, cache and API keys out of the developer's environment."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "cache"))
    for var in ("GOOGLE_GENERATIVE_AI_API_KEY", "GEMINI_API_KEY", "RA_AI__API_KEY"):
        monkeypatch.delenv(var, raising=False)


class FakeBackend(AIBackend):
    """Backend replaying scripted outcomes: a list of chunks or an exception."""

    def __init__(self, model, *outcomes):
        super().__init__("http://fake", model)
        self.outcomes = list(outcomes)
        self.calls = 0

    async def stream_text(self, prompt, system, tools, max_steps=10):
        self.calls += 1
        outcome = self.outcomes[min(self.calls, len(self.outcomes)) - 1]
        if isinstance(outcome, BaseException):
            raise outcome
        for chunk in outcome:
            yield chunk

    async def health_check(self):
        return True


@pytest.fixture
def fake_backend():
    return FakeBackend
