"""
landscaper - AI landscape redesign

Turns a design configuration and a photo of a property into a redesigned
image plus a plant/feature catalog, using a multimodal Gemini model.

Library usage:
- Build one GeminiClient from a Config (Config.from_env() reads GEMINI_API_KEY)
  and pass it to every operation.
- Operations return a value or a Failure; use unwrap() to raise a
  DesignServiceError instead. get_replacement_suggestions never fails.
- Logging: control verbosity with set_verbosity(0|1|2) or configure_logging(verbose_level, quiet).
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("landscaper")
except PackageNotFoundError:
    # Package is not installed (e.g., running from source in development)
    __version__ = "0.0.0.dev"

__author__ = "codeprimate"

from landscaper.core.catalog import parse_design_catalog
from landscaper.core.composer import compose_redesign_prompt, compose_refinement_prompt
from landscaper.core.config import Config
from landscaper.core.designer import redesign_outdoor_space, refine_redesign
from landscaper.core.elements import (
    FALLBACK_SUGGESTIONS,
    get_element_image,
    get_element_info,
    get_replacement_suggestions,
)
from landscaper.core.gemini import GeminiClient
from landscaper.core.models import (
    DesignCatalog,
    Density,
    FeatureEntry,
    GeneratedResult,
    ImageData,
    PlantEntry,
    RedesignConfiguration,
    RefinementModifications,
    Replacement,
    SourceImage,
)
from landscaper.core.reference import load_source_image
from landscaper.core.styles import LANDSCAPING_STYLES
from landscaper.core.translate import to_error, unwrap
from landscaper.logging_config import configure_logging, set_verbosity
from landscaper.utils.exceptions import (
    APIError,
    ConfigurationError,
    DesignServiceError,
    ErrorKind,
    Failure,
    ImageProcessingError,
    LandscaperError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)

__all__ = [
    "APIError",
    "Config",
    "ConfigurationError",
    "configure_logging",
    "compose_redesign_prompt",
    "compose_refinement_prompt",
    "DesignCatalog",
    "DesignServiceError",
    "Density",
    "ErrorKind",
    "FALLBACK_SUGGESTIONS",
    "Failure",
    "FeatureEntry",
    "GeminiClient",
    "GeneratedResult",
    "ImageData",
    "ImageProcessingError",
    "LANDSCAPING_STYLES",
    "LandscaperError",
    "NetworkError",
    "PlantEntry",
    "RedesignConfiguration",
    "RefinementModifications",
    "Replacement",
    "RequestTimeoutError",
    "SourceImage",
    "ValidationError",
    "get_element_image",
    "get_element_info",
    "get_replacement_suggestions",
    "load_source_image",
    "parse_design_catalog",
    "redesign_outdoor_space",
    "refine_redesign",
    "set_verbosity",
    "to_error",
    "unwrap",
]
