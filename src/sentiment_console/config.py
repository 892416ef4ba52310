"""
Console configuration management.

This module handles loading and accessing configuration from multiple sources
with a clear priority order:

    1. Environment variables (highest priority) - credentials and endpoints
    2. Config file (config/sentiment.ini) - static settings
    3. Built-in defaults (lowest priority) - sensible fallbacks

Unlike the service credentials, nothing here is read at import time:
``load_config()`` is called once by the CLI before the request loop starts,
and the loop itself only ever sees an already-built translator.

Usage:
    from sentiment_console.config import load_config

    cfg = load_config()
    cfg.model.validate()          # raises ConfigurationError
    print(cfg.model.provider)
    print(cfg.console.prompt)

Environment Variable Mapping:
    OPENAI_API_KEY         -> model.api_key (provider openai)
    OPENAI_ENDPOINT        -> model.endpoint (provider openai)
    OPENAI_MODEL           -> model.model (provider openai / azure)
    OPENAI_ORGANIZATION    -> model.organization
    AZURE_OPENAI_API_KEY   -> model.api_key (provider azure)
    AZURE_OPENAI_ENDPOINT  -> model.endpoint (provider azure)
    OLLAMA_BASE_URL        -> model.endpoint (provider ollama)
    OLLAMA_MODEL           -> model.model (provider ollama)
    SENTIMENT_PROVIDER     -> model.provider
    SENTIMENT_TIMEOUT      -> model.timeout_seconds
    SENTIMENT_LOG_LEVEL    -> logging.level
"""

from __future__ import annotations

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# =============================================================================
# PATH CONFIGURATION
# =============================================================================

# Project root directory (contains src/, config/)
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Config file paths
CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "sentiment.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "sentiment.example.ini"

# Providers the model factory knows how to build.
PROVIDERS = ("openai", "azure", "ollama")

DEFAULT_OPENAI_ENDPOINT = "https://api.openai.com/v1"
DEFAULT_OLLAMA_ENDPOINT = "http://localhost:11434"
DEFAULT_OLLAMA_MODEL = "llama3.2"


class ConfigurationError(Exception):
    """Raised when the completion service cannot be configured.

    This is the only fatal error in the program: it is raised before the
    request loop starts and the CLI turns it into a single diagnostic and a
    non-zero exit status.
    """


# =============================================================================
# CONFIGURATION DATACLASSES
# =============================================================================


@dataclass
class ModelSettings:
    """Completion service configuration."""

    provider: str = "openai"
    api_key: str = ""
    endpoint: str = ""
    model: str = ""
    organization: str = ""
    timeout_seconds: float = 30.0
    max_retry_attempts: int = 3
    retry_pause_seconds: float = 1.0
    temperature: float = 0.0

    @property
    def resolved_endpoint(self) -> str:
        """Endpoint with the provider default filled in."""
        if self.endpoint:
            return self.endpoint
        if self.provider == "ollama":
            return DEFAULT_OLLAMA_ENDPOINT
        if self.provider == "openai":
            return DEFAULT_OPENAI_ENDPOINT
        return ""

    def validate(self) -> None:
        """
        Check that the settings are complete enough to build a model.

        Raises:
            ConfigurationError: Unknown provider, missing credentials,
                missing model name, or a non-positive timeout.
        """
        if self.provider not in PROVIDERS:
            raise ConfigurationError(
                f"Unknown provider {self.provider!r} (expected one of: {', '.join(PROVIDERS)})"
            )
        if self.provider == "openai" and not self.api_key:
            raise ConfigurationError("OPENAI_API_KEY is not set")
        if self.provider == "azure":
            if not self.api_key:
                raise ConfigurationError("AZURE_OPENAI_API_KEY is not set")
            if not self.endpoint:
                raise ConfigurationError("AZURE_OPENAI_ENDPOINT is not set")
        if not self.model:
            raise ConfigurationError(f"No model name configured for provider {self.provider!r}")
        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout_seconds must be a positive number")


@dataclass
class TranslatorSettings:
    """JSON translator configuration."""

    max_repair_attempts: int = 1


@dataclass
class ConsoleSettings:
    """Interactive console configuration."""

    prompt: str = "😀> "


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "WARNING"
    format: Literal["simple", "detailed", "json"] = "simple"


@dataclass
class ConsoleConfig:
    """
    Complete console configuration.

    Aggregates all settings sections. Built by ``load_config()``.
    """

    model: ModelSettings = field(default_factory=ModelSettings)
    translator: TranslatorSettings = field(default_factory=TranslatorSettings)
    console: ConsoleSettings = field(default_factory=ConsoleSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    source_file: Path | None = None


# =============================================================================
# CONFIGURATION LOADING
# =============================================================================


def _parse_float(value: str, name: str) -> float:
    """Parse a float, reporting the offending setting on failure."""
    try:
        return float(value)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {value!r}") from e


def _load_from_ini(parser: configparser.ConfigParser, cfg: ConsoleConfig) -> None:
    """Load configuration from parsed INI file into ConsoleConfig."""
    # Model section
    if parser.has_section("model"):
        if parser.has_option("model", "provider"):
            cfg.model.provider = parser.get("model", "provider").strip().lower()
        if parser.has_option("model", "endpoint"):
            cfg.model.endpoint = parser.get("model", "endpoint")
        if parser.has_option("model", "model"):
            cfg.model.model = parser.get("model", "model")
        if parser.has_option("model", "timeout_seconds"):
            cfg.model.timeout_seconds = parser.getfloat("model", "timeout_seconds")
        if parser.has_option("model", "max_retry_attempts"):
            cfg.model.max_retry_attempts = parser.getint("model", "max_retry_attempts")
        if parser.has_option("model", "retry_pause_seconds"):
            cfg.model.retry_pause_seconds = parser.getfloat("model", "retry_pause_seconds")
        if parser.has_option("model", "temperature"):
            cfg.model.temperature = parser.getfloat("model", "temperature")

    # Translator section
    if parser.has_section("translator"):
        if parser.has_option("translator", "max_repair_attempts"):
            cfg.translator.max_repair_attempts = parser.getint(
                "translator", "max_repair_attempts"
            )

    # Console section
    if parser.has_section("console"):
        if parser.has_option("console", "prompt"):
            cfg.console.prompt = parser.get("console", "prompt")

    # Logging section
    if parser.has_section("logging"):
        if parser.has_option("logging", "level"):
            cfg.logging.level = parser.get("logging", "level").upper()
        if parser.has_option("logging", "format"):
            val = parser.get("logging", "format").lower()
            if val in ("simple", "detailed", "json"):
                cfg.logging.format = val  # type: ignore[assignment]


def _resolve_provider(cfg: ConsoleConfig, provider: str | None = None) -> None:
    """Pick the provider: explicit argument, then environment, then INI value."""
    if provider:
        cfg.model.provider = provider.strip().lower()
        return
    if env_provider := os.getenv("SENTIMENT_PROVIDER"):
        cfg.model.provider = env_provider.strip().lower()
        return
    # Azure credentials alone are enough to switch providers.
    if os.getenv("AZURE_OPENAI_API_KEY") and not os.getenv("OPENAI_API_KEY"):
        cfg.model.provider = "azure"


def _apply_env_overrides(cfg: ConsoleConfig, provider: str | None = None) -> None:
    """Apply environment variable overrides to configuration.

    Credentials, endpoint and model are read for the resolved provider only.
    """
    _resolve_provider(cfg, provider)
    provider = cfg.model.provider

    # Credentials and endpoints, per provider
    if provider == "openai":
        if env_key := os.getenv("OPENAI_API_KEY"):
            cfg.model.api_key = env_key
        if env_endpoint := os.getenv("OPENAI_ENDPOINT"):
            cfg.model.endpoint = env_endpoint
        if env_model := os.getenv("OPENAI_MODEL"):
            cfg.model.model = env_model
    elif provider == "azure":
        if env_key := os.getenv("AZURE_OPENAI_API_KEY"):
            cfg.model.api_key = env_key
        if env_endpoint := os.getenv("AZURE_OPENAI_ENDPOINT"):
            cfg.model.endpoint = env_endpoint
        if env_model := os.getenv("OPENAI_MODEL"):
            cfg.model.model = env_model
    elif provider == "ollama":
        if env_endpoint := os.getenv("OLLAMA_BASE_URL"):
            cfg.model.endpoint = env_endpoint
        if env_model := os.getenv("OLLAMA_MODEL"):
            cfg.model.model = env_model
        if not cfg.model.model:
            cfg.model.model = DEFAULT_OLLAMA_MODEL

    if env_org := os.getenv("OPENAI_ORGANIZATION"):
        cfg.model.organization = env_org
    if env_timeout := os.getenv("SENTIMENT_TIMEOUT"):
        cfg.model.timeout_seconds = _parse_float(env_timeout, "SENTIMENT_TIMEOUT")

    # Logging settings
    if env_log := os.getenv("SENTIMENT_LOG_LEVEL"):
        cfg.logging.level = env_log.upper()


def load_config(
    config_file: Path | str | None = None,
    provider: str | None = None,
) -> ConsoleConfig:
    """
    Load configuration from all sources with proper priority.

    Priority (highest wins):
        1. Environment variables
        2. ``config_file`` if given, else config/sentiment.ini
        3. config/sentiment.example.ini (fallback for development)
        4. Built-in defaults

    Args:
        config_file: Explicit INI file.  Must exist when given.
        provider:    Provider chosen on the command line.  Wins over
                     SENTIMENT_PROVIDER and the INI value, and decides which
                     credential variables are read.

    Returns:
        ConsoleConfig: Fully populated configuration object.  Credentials are
        not checked here; call ``cfg.model.validate()`` for that.

    Raises:
        ConfigurationError: If ``config_file`` is given but missing or
            unreadable, or a numeric setting cannot be parsed.
    """
    cfg = ConsoleConfig()

    # Determine which config file to use
    source: Path | None = None
    if config_file is not None:
        source = Path(config_file)
        if not source.is_file():
            raise ConfigurationError(f"Config file not found: {source}")
    elif CONFIG_FILE.exists():
        source = CONFIG_FILE
    elif CONFIG_EXAMPLE.exists():
        source = CONFIG_EXAMPLE

    # Load from INI file if available
    if source is not None:
        parser = configparser.ConfigParser(interpolation=None)
        try:
            parser.read(source, encoding="utf-8")
            _load_from_ini(parser, cfg)
        except (configparser.Error, ValueError) as e:
            raise ConfigurationError(f"Invalid config file {source}: {e}") from e
        cfg.source_file = source

    # Apply environment variable overrides (highest priority)
    _apply_env_overrides(cfg, provider)

    return cfg


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def _redact(secret: str) -> str:
    """Show only the last four characters of a credential."""
    if not secret:
        return "(not set)"
    if len(secret) <= 4:
        return "****"
    return "****" + secret[-4:]


def print_config_summary(cfg: ConsoleConfig) -> None:
    """Print a summary of the configuration to stdout, credentials redacted."""
    print("\n" + "=" * 60)
    print("SENTIMENT CONSOLE CONFIGURATION")
    print("=" * 60)
    print(f"Config file:  {cfg.source_file or '(none)'}")
    print("-" * 60)
    print(f"Provider:     {cfg.model.provider}")
    print(f"Endpoint:     {cfg.model.resolved_endpoint or '(not set)'}")
    print(f"Model:        {cfg.model.model or '(not set)'}")
    print(f"API key:      {_redact(cfg.model.api_key)}")
    print(f"Timeout:      {cfg.model.timeout_seconds}s")
    print(f"Repairs:      {cfg.translator.max_repair_attempts}")
    print(f"Log level:    {cfg.logging.level}")
    print("=" * 60 + "\n")
