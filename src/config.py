"""
Configuration for MnemoNotes.

Supports loading from:
1. Environment variables (highest priority)
2. YAML config file
3. Default values (fallback)
"""

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from src.utils.exceptions import ConfigurationError


class LLMConfig(BaseModel):
    """LLM provider configuration."""

    provider: str = "openai"  # openai, ollama, none
    model: str = "gpt-4o-mini"
    base_url: str | None = None
    api_key: str | None = None
    timeout: float = 60.0

    @property
    def is_configured(self) -> bool:
        """
        Whether a model is available at all.

        OpenAI needs an API key; a local Ollama server does not.
        """
        if self.provider == "none":
            return False
        if self.provider == "openai":
            return bool(self.api_key)
        return True


class DatabaseConfig(BaseModel):
    """Note store configuration."""

    url: str | None = None  # e.g. sqlite:///data/notes.db


class DecayConfig(BaseModel):
    """Confidence decay job configuration."""

    rate_per_day: float = 0.015
    secret: str | None = None

    @field_validator("rate_per_day")
    @classmethod
    def _non_negative(cls, value: float) -> float:
        if value < 0:
            raise ValueError("decay rate must be non-negative")
        return value


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    log_to_file: bool = True
    log_dir: str = "logs"
    file_rotation: str = "10 MB"
    file_retention: str = "7 days"
    compression: str = "zip"
    serialize: bool = True


class Config(BaseModel):
    """Main configuration."""

    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    decay: DecayConfig = Field(default_factory=DecayConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    def require_database_url(self) -> str:
        """
        Return the store connection string.

        Raises:
            ConfigurationError: If no connection string is configured
        """
        if not self.database.url:
            raise ConfigurationError(
                "MNEMO_DATABASE_URL is not set", context={"setting": "database.url"}
            )
        return self.database.url

    @classmethod
    def from_env(cls, env_file: str | Path | None = None, require_database: bool = True) -> "Config":
        """
        Load configuration from environment variables.

        Priority: .env file -> system environment variables -> defaults

        Args:
            env_file: Optional path to .env file (default: .env in project root)
            require_database: Fail when MNEMO_DATABASE_URL is missing

        Returns:
            Config instance

        Raises:
            ConfigurationError: If required values are missing or invalid

        Environment variables:
            MNEMO_DATABASE_URL: Note store connection string (required)
            MNEMO_LLM_PROVIDER: LLM provider (openai, ollama, none)
            MNEMO_LLM_MODEL: LLM model name
            MNEMO_LLM_BASE_URL: LLM base URL
            MNEMO_LLM_API_KEY: LLM API key (for OpenAI)
            MNEMO_LLM_TIMEOUT: Request timeout in seconds
            MNEMO_DECAY_RATE_PER_DAY: Confidence lost per idle day
            MNEMO_DECAY_SECRET: Shared secret for the decay trigger (alias: CRON_SECRET)
            MNEMO_LOG_*: Logging settings
        """
        # Load .env file if provided or exists
        if env_file:
            load_dotenv(env_file)
        elif Path(".env").exists():
            load_dotenv()

        def get_env(key: str, default: Any = None) -> Any:
            """Get environment variable with type conversion."""
            value = os.getenv(key)
            if value is None:
                return default
            # If value is empty string, return default
            if value == "":
                return default
            try:
                # Convert boolean strings
                if isinstance(default, bool):
                    return str(value).lower() in ("true", "1", "yes")
                # Convert numeric strings
                if isinstance(default, int):
                    return int(value)
                if isinstance(default, float):
                    return float(value)
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid value for {key}: {value!r}", context={"setting": key}
                ) from e
            return value

        try:
            config = cls(
                database=DatabaseConfig(url=get_env("MNEMO_DATABASE_URL")),
                llm=LLMConfig(
                    provider=get_env("MNEMO_LLM_PROVIDER", "openai").lower(),
                    model=get_env("MNEMO_LLM_MODEL", "gpt-4o-mini"),
                    base_url=get_env("MNEMO_LLM_BASE_URL"),
                    api_key=get_env("MNEMO_LLM_API_KEY"),
                    timeout=get_env("MNEMO_LLM_TIMEOUT", 60.0),
                ),
                decay=DecayConfig(
                    rate_per_day=get_env("MNEMO_DECAY_RATE_PER_DAY", 0.015),
                    secret=get_env("MNEMO_DECAY_SECRET", get_env("CRON_SECRET")),
                ),
                logging=LoggingConfig(
                    level=get_env("MNEMO_LOG_LEVEL", "INFO"),
                    log_to_file=get_env("MNEMO_LOG_TO_FILE", True),
                    log_dir=get_env("MNEMO_LOG_DIR", "logs"),
                    file_rotation=get_env("MNEMO_LOG_FILE_ROTATION", "10 MB"),
                    file_retention=get_env("MNEMO_LOG_FILE_RETENTION", "7 days"),
                    compression=get_env("MNEMO_LOG_COMPRESSION", "zip"),
                    serialize=get_env("MNEMO_LOG_SERIALIZE", True),
                ),
            )
        except ValueError as e:
            raise ConfigurationError(f"Invalid configuration: {e}") from e

        if require_database:
            config.require_database_url()

        return config

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            yaml_path: Path to YAML configuration file

        Returns:
            Config instance

        Raises:
            FileNotFoundError: If YAML file doesn't exist
            yaml.YAMLError: If YAML is invalid
        """
        yaml_path = Path(yaml_path)
        if not yaml_path.exists():
            raise FileNotFoundError(f"Config file not found: {yaml_path}")

        with open(yaml_path) as f:
            data = yaml.safe_load(f) or {}

        return cls(**data)
