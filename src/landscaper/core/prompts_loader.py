"""
Load prompt text from the bundled prompts.yaml file.

Prompts are defined in src/landscaper/prompts.yaml and loaded once per process.
The structure is validated with pydantic so a broken file fails loudly at the
first prompt lookup instead of producing a half-empty prompt.
"""

import importlib.resources
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from landscaper.utils.exceptions import ConfigurationError

# Module-level cache for parsed prompts
_prompts_data: dict[str, Any] | None = None


class FlagPair(BaseModel):
    """Two mutually exclusive blocks selected by one boolean."""

    allowed: str = Field(..., min_length=1)
    forbidden: str = Field(..., min_length=1)


class ClimatePrompts(BaseModel):
    generic: str = Field(..., min_length=1)
    zone: str = Field(..., min_length=1, description="Must contain {zone}")
    arid: str = Field(..., min_length=1)


class AspectRatioPrompts(BaseModel):
    locked: str = Field(..., min_length=1)
    flexible: str = Field(..., min_length=1)


class DensityPrompts(BaseModel):
    minimal: str = Field(..., min_length=1)
    default: str = Field(..., min_length=1)
    lush: str = Field(..., min_length=1)


class RedesignPrompts(BaseModel):
    template: str = Field(..., min_length=1)
    style_single: str = Field(..., min_length=1)
    style_blend: str = Field(..., min_length=1)
    structural: FlagPair
    objects: FlagPair
    climate: ClimatePrompts
    aspect_ratio: AspectRatioPrompts
    density: DensityPrompts


class RefinementPrompts(BaseModel):
    noop: str = Field(..., min_length=1)
    template: str = Field(..., min_length=1)
    deletions: str = Field(..., min_length=1)
    replacements: str = Field(..., min_length=1)
    replacement_pair: str = Field(..., min_length=1)
    additions: str = Field(..., min_length=1)


class ElementPrompts(BaseModel):
    suggestions: str = Field(..., min_length=1)
    suggestions_style_single: str = Field(..., min_length=1)
    suggestions_style_blend: str = Field(..., min_length=1)
    suggestions_climate: str = Field(..., min_length=1)
    info: str = Field(..., min_length=1)
    image: str = Field(..., min_length=1)


class PromptsSchema(BaseModel):
    """Schema for prompts.yaml."""

    model_config = {"extra": "allow"}  # Allow additional keys for future expansion

    redesign: RedesignPrompts
    refinement: RefinementPrompts
    elements: ElementPrompts


def _load_prompts() -> dict[str, Any]:
    """Load and parse prompts.yaml from the package. Cached after first call.

    Raises:
        ConfigurationError: If YAML is missing, malformed, or fails validation.
    """
    global _prompts_data
    if _prompts_data is not None:
        return _prompts_data

    try:
        with (
            importlib.resources.files("landscaper")
            .joinpath("prompts.yaml")
            .open(encoding="utf-8") as f
        ):
            raw = f.read()
    except FileNotFoundError as e:
        raise ConfigurationError(
            "prompts.yaml not found. This file is required and should be bundled with the package."
        ) from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse prompts.yaml: {e}. Check YAML syntax and formatting."
        ) from e

    if data is None:
        raise ConfigurationError(
            "prompts.yaml is empty. Expected 'redesign', 'refinement' and 'elements' sections."
        )

    try:
        PromptsSchema(**data)
    except ValidationError as e:
        errors = "\n".join(
            [f"  - {'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()]
        )
        raise ConfigurationError(f"Invalid prompts.yaml structure:\n{errors}") from e

    _prompts_data = data
    return _prompts_data


def get_prompt(*path: str) -> str | None:
    """
    Get a prompt string from prompts.yaml by key path.

    Example: get_prompt("redesign", "density", "lush").

    Returns:
        The prompt string, or None if the path does not lead to a string.
    """
    value: Any = _load_prompts()
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value if isinstance(value, str) else None


def require_prompt(*path: str) -> str:
    """
    Like get_prompt, but a missing key is a configuration error.

    Raises:
        ConfigurationError: If the path does not lead to a string.
    """
    value = get_prompt(*path)
    if value is None:
        raise ConfigurationError(f"{'.'.join(path)} not found in prompts.yaml. This key is required.")
    return value
