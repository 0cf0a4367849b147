"""
Configuration management for landscaper.

This module handles the API key, model selection, endpoint and timeouts.
"""

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from landscaper.logging_config import get_logger
from landscaper.utils.exceptions import ConfigurationError

logger = get_logger(__name__)

# Load environment variables from .env file
load_dotenv()

# Default configuration constants
DEFAULT_GEMINI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_IMAGE_MODEL = "gemini-2.5-flash-image"
DEFAULT_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_ELEMENT_IMAGE_MODEL = "imagen-4.0-generate-001"


@dataclass
class Config:
    """Configuration for the model service connection."""

    # API Configuration (gemini_api_key excluded from repr to avoid leaking secrets)
    gemini_api_key: str = field(default="", repr=False)
    gemini_base_url: str = DEFAULT_GEMINI_BASE_URL

    # Model Configuration
    image_model: str = DEFAULT_IMAGE_MODEL  # redesign + refinement
    text_model: str = DEFAULT_TEXT_MODEL  # suggestions + element info
    element_image_model: str = DEFAULT_ELEMENT_IMAGE_MODEL  # isolated element images

    # Timeout Configuration (seconds)
    generation_timeout: int = 180  # 3 minutes
    text_timeout: int = 60

    # Debug: log raw API payload/response with image data truncated
    debug_api: bool = False


    @classmethod
    def from_env(cls) -> "Config":
        """
        Create a Config instance from environment variables.

        Environment variables:
            GEMINI_API_KEY: Required (API_KEY is accepted as a fallback)
            LANDSCAPER_BASE_URL: Optional API base URL
            LANDSCAPER_IMAGE_MODEL: Optional redesign/refinement model
            LANDSCAPER_TEXT_MODEL: Optional text model for suggestions and info
            LANDSCAPER_ELEMENT_IMAGE_MODEL: Optional isolated element image model
            LANDSCAPER_GENERATION_TIMEOUT / LANDSCAPER_TEXT_TIMEOUT: Optional seconds
            LANDSCAPER_DEBUG_API: "1"/"true"/"yes" to log raw payloads

        Returns:
            Config instance populated from environment
        """
        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY") or ""

        def _int_env(name: str, default: int) -> int:
            val = os.getenv(name)
            if val is None or val == "":
                return default
            try:
                return int(val)
            except ValueError as e:
                raise ConfigurationError(f"{name} must be an integer, got {val!r}.") from e

        debug_api = os.getenv("LANDSCAPER_DEBUG_API", "").strip().lower() in ("1", "true", "yes")

        return cls(
            gemini_api_key=api_key,
            gemini_base_url=os.getenv("LANDSCAPER_BASE_URL", DEFAULT_GEMINI_BASE_URL).rstrip("/"),
            image_model=os.getenv("LANDSCAPER_IMAGE_MODEL", DEFAULT_IMAGE_MODEL),
            text_model=os.getenv("LANDSCAPER_TEXT_MODEL", DEFAULT_TEXT_MODEL),
            element_image_model=os.getenv(
                "LANDSCAPER_ELEMENT_IMAGE_MODEL", DEFAULT_ELEMENT_IMAGE_MODEL
            ),
            generation_timeout=_int_env("LANDSCAPER_GENERATION_TIMEOUT", 180),
            text_timeout=_int_env("LANDSCAPER_TEXT_TIMEOUT", 60),
            debug_api=debug_api,
        )

    def validate(self) -> None:
        """
        Validate the configuration.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        logger.debug("Validating config")

        if not self.gemini_api_key:
            raise ConfigurationError(
                "Gemini API key is required. "
                "Set GEMINI_API_KEY environment variable or provide it explicitly."
            )
        for name in ("image_model", "text_model", "element_image_model"):
            if not getattr(self, name):
                raise ConfigurationError(f"{name} cannot be empty.")
        if self.generation_timeout <= 0 or self.text_timeout <= 0:
            raise ConfigurationError(
                f"Timeouts must be positive, got generation_timeout={self.generation_timeout}, "
                f"text_timeout={self.text_timeout}."
            )

    def set_api_key(self, api_key: str) -> None:
        """
        Set the Gemini API key.

        Raises:
            ConfigurationError: If API key is empty
        """
        if not api_key:
            raise ConfigurationError("API key cannot be empty")

        self.gemini_api_key = api_key
