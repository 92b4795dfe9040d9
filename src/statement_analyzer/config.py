"""Configuration management via environment variables.

Reads from .env file (via pydantic-settings) with sensible defaults.
All values can be overridden via environment variables.

Required (checked when the web app is built, not at import):
    ANTHROPIC_API_KEY  — Key for the Claude model that performs the analysis

Optional:
    MODEL        — Claude model name
    TEMPERATURE  — Sampling temperature for the analysis call
    MAX_TOKENS   — Response token cap
    PORT         — Server port
    LOG_LEVEL    — Root logging level
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings


class ConfigError(RuntimeError):
    """Raised at startup when a required setting is missing."""


class Settings(BaseSettings):
    # Claude API for the statement analysis
    anthropic_api_key: str = ""
    model: str = "claude-sonnet-4-20250514"
    temperature: float = 0.2
    max_tokens: int = 4096

    port: int = 8877
    log_level: str = "INFO"

    # Strip whitespace from string fields — the .env file often has
    # trailing spaces or quotes around the key
    @field_validator("anthropic_api_key", "model", "log_level", mode="before")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        if isinstance(v, str):
            return v.strip().strip('"').strip("'").strip()
        return v

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


_config: Settings | None = None


def get_config() -> Settings:
    """Get or create the shared Settings singleton."""
    global _config
    if _config is None:
        _config = Settings()
    return _config


def require_api_key(config: Settings) -> str:
    """Return the Anthropic key or fail with a ConfigError."""
    if not config.anthropic_api_key:
        raise ConfigError(
            "ANTHROPIC_API_KEY is not set. "
            "Add it to your .env file or the environment before starting the app."
        )
    return config.anthropic_api_key
