"""
Configuration for the Clinical Note Assistant

This module defines the configuration dataclass used to build the generation
client. Configuration is:
    1. Loaded from environment variables (with .env support)
    2. Validated at startup for static problems (provider name, ranges)
    3. Checked for credentials on every generation call, before any request

Configuration Hierarchy:
    AssistantConfiguration
    ├── LLM Settings (provider, API keys, model names, temperature)
    └── Logging Settings (level)

Usage:
    from clinical_note_assistant.core.config import AssistantConfiguration

    # Load from environment
    config = AssistantConfiguration.from_environment()

    # Or configure programmatically
    config = AssistantConfiguration(gemini_api_key="your-key")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from clinical_note_assistant.core.exceptions import ConfigurationError


# =============================================================================
# STAGE 1: DEFAULT VALUES
# =============================================================================


class ConfigDefaults:
    """Default configuration values."""

    # -------------------------------------------------------------------------
    # 1.1 LLM Provider Defaults
    # -------------------------------------------------------------------------
    DEFAULT_PROVIDER = "gemini"
    DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
    DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
    DEFAULT_TEMPERATURE = 0.7

    # -------------------------------------------------------------------------
    # 1.2 Logging Defaults
    # -------------------------------------------------------------------------
    DEFAULT_LOG_LEVEL = "INFO"


SUPPORTED_PROVIDERS = ("gemini", "openai")


# =============================================================================
# STAGE 2: CONFIGURATION DATACLASS
# =============================================================================


@dataclass
class AssistantConfiguration:
    """
    Configuration for the clinical note assistant.

    What it does:
        Holds everything needed to reach the external generation service.
        A missing key is not an error at construction time: the generation
        client checks it per call so the caller gets a configuration error
        exactly when a request would have been sent.

    Example:
        >>> config = AssistantConfiguration.from_environment()
        >>> config.gemini_model
        'gemini-2.5-flash'
    """

    # -------------------------------------------------------------------------
    # 2.1 LLM Provider Configuration
    # -------------------------------------------------------------------------
    llm_provider: str = ConfigDefaults.DEFAULT_PROVIDER
    """Which LLM provider to use: 'gemini' or 'openai'."""

    gemini_api_key: Optional[str] = None
    """Google Gemini API key. Required when using the Gemini provider."""

    gemini_model: str = ConfigDefaults.DEFAULT_GEMINI_MODEL
    """Gemini model name."""

    openai_api_key: Optional[str] = None
    """OpenAI API key. Required when using the OpenAI provider."""

    openai_model: str = ConfigDefaults.DEFAULT_OPENAI_MODEL
    """OpenAI model name."""

    temperature: float = ConfigDefaults.DEFAULT_TEMPERATURE
    """Sampling temperature passed to the provider."""

    # -------------------------------------------------------------------------
    # 2.2 Logging Configuration
    # -------------------------------------------------------------------------
    log_level: str = ConfigDefaults.DEFAULT_LOG_LEVEL
    """loguru level for the command-line sink."""

    # -------------------------------------------------------------------------
    # 2.3 Validation Methods
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Validate static configuration parameters.

        Checks:
            1. Provider is supported
            2. Temperature is within 0-2

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.llm_provider not in SUPPORTED_PROVIDERS:
            raise ConfigurationError(
                f"Unsupported LLM provider: {self.llm_provider}",
                context={"supported": list(SUPPORTED_PROVIDERS)},
            )

        if not (0.0 <= self.temperature <= 2.0):
            raise ConfigurationError(
                f"Temperature must be 0-2, got {self.temperature}",
                context={"temperature": self.temperature},
            )

    @property
    def active_api_key(self) -> Optional[str]:
        """API key of the active provider (None when not configured)."""
        if self.llm_provider == "openai":
            return self.openai_api_key
        return self.gemini_api_key

    @property
    def active_model(self) -> str:
        """Model name of the active provider."""
        if self.llm_provider == "openai":
            return self.openai_model
        return self.gemini_model

    def require_api_key(self) -> str:
        """
        Return the active provider's key or fail before any request is made.

        Raises:
            ConfigurationError: If no key is configured for the active provider
        """
        key = self.active_api_key
        if not key:
            setting = "OPENAI_API_KEY" if self.llm_provider == "openai" else "API_KEY"
            raise ConfigurationError(
                f"API key is missing. Please set the {setting} environment variable.",
                context={"provider": self.llm_provider},
            )
        return key

    # -------------------------------------------------------------------------
    # 2.4 Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_environment(
        cls, env_file: Optional[str] = None, validate_on_load: bool = True
    ) -> "AssistantConfiguration":
        """
        Load configuration from environment variables.

        STAGE 1: Load .env file (if specified or found in the working directory)
        STAGE 2: Read environment variables
        STAGE 3: Validate configuration (optional)

        Environment variables:
            LLM_PROVIDER, API_KEY / GEMINI_API_KEY / GOOGLE_API_KEY, GEMINI_MODEL,
            OPENAI_API_KEY, OPENAI_MODEL, LLM_TEMPERATURE, LOG_LEVEL

        Raises:
            ConfigurationError: If settings are invalid
        """
        # STAGE 1: Load .env file
        if env_file:
            load_dotenv(env_file)
        else:
            default_env = Path.cwd() / ".env"
            if default_env.exists():
                load_dotenv(default_env)

        # STAGE 2: Read environment variables
        gemini_key = (
            os.getenv("API_KEY") or os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        )
        openai_key = os.getenv("OPENAI_API_KEY")

        llm_provider = os.getenv("LLM_PROVIDER", ConfigDefaults.DEFAULT_PROVIDER).lower()
        if not gemini_key and openai_key and "LLM_PROVIDER" not in os.environ:
            llm_provider = "openai"

        try:
            temperature = float(os.getenv("LLM_TEMPERATURE", ConfigDefaults.DEFAULT_TEMPERATURE))
        except ValueError as e:
            raise ConfigurationError(
                "LLM_TEMPERATURE must be a number", context={"value": os.getenv("LLM_TEMPERATURE")}
            ) from e

        config = cls(
            llm_provider=llm_provider,
            gemini_api_key=gemini_key,
            gemini_model=os.getenv("GEMINI_MODEL", ConfigDefaults.DEFAULT_GEMINI_MODEL),
            openai_api_key=openai_key,
            openai_model=os.getenv("OPENAI_MODEL", ConfigDefaults.DEFAULT_OPENAI_MODEL),
            temperature=temperature,
            log_level=os.getenv("LOG_LEVEL", ConfigDefaults.DEFAULT_LOG_LEVEL).upper(),
        )

        # STAGE 3: Validate
        if validate_on_load:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary (for logging/debugging)."""
        return {
            "llm_provider": self.llm_provider,
            "gemini_model": self.gemini_model,
            "openai_model": self.openai_model,
            "gemini_api_key": "***" if self.gemini_api_key else None,
            "openai_api_key": "***" if self.openai_api_key else None,
            "temperature": self.temperature,
            "log_level": self.log_level,
        }
