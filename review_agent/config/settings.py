"""
Configuration management with Pydantic validation and environment variable support.
"""

import json
import os
from pathlib import Path
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings
import platform


DEFAULT_MODELS = [
    "gemini-2.5-flash",
    "gemini-1.5-flash",
    "gemini-1.5-pro",
]

DEFAULT_PROMPT = (
    "Review the code changes in {location}, generate a commit message, "
    "and save the review to a markdown file called '{output_path}'"
)

API_KEY_ENV_VARS = ["GOOGLE_GENERATIVE_AI_API_KEY", "GEMINI_API_KEY"]


class AISettings(BaseModel):
    """AI backend configuration."""

    backend_type: Literal["gemini"] = Field(
        default="gemini",
        description="AI backend type"
    )
    api_url: str = Field(
        default="https://generativelanguage.googleapis.com",
        description="AI server endpoint"
    )
    api_key: Optional[str] = Field(
        default=None,
        description="API key for the AI provider"
    )
    models: List[str] = Field(
        default_factory=lambda: list(DEFAULT_MODELS),
        min_length=1,
        description="Model identifiers in order of preference"
    )
    timeout: int = Field(
        default=120,
        ge=10,
        le=600,
        description="API request timeout in seconds"
    )
    max_steps: int = Field(
        default=10,
        ge=1,
        le=50,
        description="Maximum model requests (tool-call rounds) per attempt"
    )


class RetrySettings(BaseModel):
    """Model fallback and backoff configuration."""

    attempts_per_model: int = Field(
        default=1,
        ge=1,
        le=10,
        description="Attempts per model before falling through to the next one"
    )
    backoff_base: float = Field(
        default=1.0,
        ge=0,
        description="Base delay in seconds for exponential backoff between attempts"
    )
    jitter: float = Field(
        default=1.0,
        ge=0,
        description="Upper bound in seconds of the random jitter added to backoff"
    )
    switch_delay: float = Field(
        default=2.0,
        ge=0,
        description="Delay in seconds before switching models after a non-overload failure"
    )


class ReviewSettings(BaseModel):
    """Review run configuration."""

    root_dir: str = Field(
        default=".",
        description="Directory whose changes are reviewed"
    )
    output_path: str = Field(
        default="code-review-report.md",
        description="Default markdown report path"
    )
    exclude_files: List[str] = Field(
        default_factory=lambda: ["dist", "bun.lock"],
        description="Paths skipped when collecting diffs"
    )
    prompt: Optional[str] = Field(
        default=None,
        description="Prompt sent to the model (built from root_dir and output_path when unset)"
    )

    def build_prompt(self) -> str:
        """The configured prompt, or the default review instruction."""
        if self.prompt:
            return self.prompt
        location = "the current directory" if self.root_dir == "." else f"the directory '{self.root_dir}'"
        return DEFAULT_PROMPT.format(location=location, output_path=self.output_path)


class UISettings(BaseModel):
    """User interface configuration."""

    use_colors: bool = Field(
        default=True,
        description="Use colored output"
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Logging level"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names."""
        return v.upper() if isinstance(v, str) else v


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    ai: AISettings = Field(default_factory=AISettings)
    retry: RetrySettings = Field(default_factory=RetrySettings)
    review: ReviewSettings = Field(default_factory=ReviewSettings)
    ui: UISettings = Field(default_factory=UISettings)

    model_config = {
        "env_prefix": "RA_",  # Review Agent prefix
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore",
    }

    def __init__(self, **kwargs):
        # Load the default config file when no explicit values are given
        if not kwargs:
            config_path = self._get_default_config_path()
            if config_path.exists():
                try:
                    with open(config_path) as f:
                        kwargs = json.load(f)
                except (json.JSONDecodeError, OSError):
                    pass  # Fall back to defaults

        # Provider key variables used by the Google SDKs, unless RA_AI__API_KEY is set
        explicit_key = any(var.upper() == "RA_AI__API_KEY" and value for var, value in os.environ.items())
        api_key = None if explicit_key else next((os.getenv(var) for var in API_KEY_ENV_VARS if os.getenv(var)), None)
        if api_key and not (kwargs.get("ai") or {}).get("api_key"):
            kwargs["ai"] = dict(kwargs.get("ai") or {})
            kwargs["ai"]["api_key"] = api_key

        super().__init__(**kwargs)

    @staticmethod
    def _get_default_config_path() -> Path:
        """Get the default config file path."""
        if platform.system() == "Windows":
            base = Path(os.environ.get("APPDATA", "~"))
        else:
            base = Path(os.environ.get("XDG_CONFIG_HOME", "~/.config"))

        return (base / "review-agent" / "config.json").expanduser()

    @classmethod
    def from_file(cls, config_path: Path) -> "Settings":
        """Load settings from a configuration file."""
        if config_path.exists():
            with open(config_path) as f:
                config_data = json.load(f)
            return cls(**config_data)
        return cls()

    def save_to_file(self, config_path: Path) -> None:
        """Save current settings to a configuration file."""
        config_path.parent.mkdir(parents=True, exist_ok=True)
        data = self.model_dump()
        data["ai"].pop("api_key", None)  # never persist secrets
        with open(config_path, 'w') as f:
            json.dump(data, f, indent=2)

    @property
    def config_dir(self) -> Path:
        """Get the configuration directory."""
        return self._get_default_config_path().parent

    @property
    def cache_dir(self) -> Path:
        """Get the cache directory."""
        if platform.system() == "Windows":
            base = Path(os.environ.get("LOCALAPPDATA", "~"))
        else:
            base = Path(os.environ.get("XDG_CACHE_HOME", "~/.cache"))

        return (base / "review-agent").expanduser()

    @property
    def log_file(self) -> Path:
        """Get the log file path."""
        return self.cache_dir / "review-agent.log"
