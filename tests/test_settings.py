"""Tests for configuration loading."""

import json

from review_agent.config.settings import DEFAULT_MODELS, Settings
from review_agent.orchestrator import RetryPolicy


def test_defaults():
    settings = Settings()

    assert settings.ai.models == DEFAULT_MODELS
    assert settings.ai.max_steps == 10
    assert settings.retry.attempts_per_model == 1
    assert settings.retry.switch_delay == 2.0
    assert settings.review.exclude_files == ["dist", "bun.lock"]
    assert settings.review.output_path == "code-review-report.md"
    assert settings.review.build_prompt() == (
        "Review the code changes in the current directory, generate a commit message, "
        "and save the review to a markdown file called 'code-review-report.md'"
    )


def test_prompt_follows_review_settings():
    settings = Settings(review={"root_dir": "services/api", "output_path": "reports/api.md"})

    prompt = settings.review.build_prompt()

    assert "the directory 'services/api'" in prompt
    assert "'reports/api.md'" in prompt

    settings.review.prompt = "Only review tests"
    assert settings.review.build_prompt() == "Only review tests"


def test_api_key_from_google_env(monkeypatch):
    monkeypatch.setenv("GOOGLE_GENERATIVE_AI_API_KEY", "from-env")

    assert Settings().ai.api_key == "from-env"


def test_prefixed_api_key_wins_over_google_env(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "from-google")
    monkeypatch.setenv("RA_AI__API_KEY", "from-prefix")

    assert Settings().ai.api_key == "from-prefix"


def test_nested_env_overrides(monkeypatch):
    monkeypatch.setenv("RA_RETRY__ATTEMPTS_PER_MODEL", "5")
    monkeypatch.setenv("RA_RETRY__SWITCH_DELAY", "3")

    settings = Settings()

    assert settings.retry.attempts_per_model == 5
    assert settings.retry.switch_delay == 3.0


def test_round_trip_through_file(tmp_path):
    path = tmp_path / "settings.json"
    settings = Settings(ai={"models": ["gemini-1.5-pro"], "api_key": "secret"}, ui={"log_level": "debug"})

    settings.save_to_file(path)
    loaded = Settings.from_file(path)

    assert json.loads(path.read_text())["ai"].get("api_key") is None
    assert loaded.ai.models == ["gemini-1.5-pro"]
    assert loaded.ui.log_level == "DEBUG"


def test_default_config_file_is_loaded(tmp_path):
    config_dir = tmp_path / "config" / "review-agent"
    config_dir.mkdir(parents=True)
    (config_dir / "config.json").write_text(json.dumps({"retry": {"switch_delay": 3.0}}))

    assert Settings().retry.switch_delay == 3.0


def test_retry_policy_from_settings():
    settings = Settings(retry={"attempts_per_model": 5, "switch_delay": 3.0})

    policy = RetryPolicy.from_settings(settings.retry)

    assert policy.attempts_per_model == 5
    assert policy.switch_delay == 3.0
    assert policy.backoff_base == 1.0
