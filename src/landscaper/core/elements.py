"""
Single-element helper operations: replacement ideas, descriptions and
isolated product-style images for one landscape element.
"""

import json
from collections.abc import Sequence

from landscaper.core.base import GenerationClient
from landscaper.core.models import ImageData, style_tuple
from landscaper.core.prompts_loader import require_prompt
from landscaper.core.reply import interpret_text_reply
from landscaper.core.styles import style_names
from landscaper.logging_config import get_logger
from landscaper.utils.exceptions import ErrorKind, Failure, ValidationError

logger = get_logger(__name__)

MAX_SUGGESTIONS = 3
FALLBACK_SUGGESTIONS = (
    "Try searching online for ideas",
    "Consider a contrasting feature",
    "Consult a local nursery",
)

SUGGESTIONS_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "suggestions": {
            "type": "ARRAY",
            "items": {"type": "STRING"},
        },
    },
    "required": ["suggestions"],
}


def _require_element(element_name: str) -> str:
    if not element_name or not element_name.strip():
        raise ValidationError("Element name cannot be empty", field="element_name")
    return element_name.strip()


def build_suggestions_prompt(
    element_name: str, styles: Sequence[str] | str, climate_zone: str = ""
) -> str:
    names = style_names(style_tuple(styles))
    if len(names) > 1:
        style_phrase = require_prompt("elements", "suggestions_style_blend").format(
            styles=", ".join(f'"{n}"' for n in names)
        )
    else:
        style_phrase = require_prompt("elements", "suggestions_style_single").format(
            style=names[0] if names else ""
        )
    climate_sentence = (
        require_prompt("elements", "suggestions_climate").format(zone=climate_zone)
        if climate_zone
        else ""
    )
    return require_prompt("elements", "suggestions").format(
        element=element_name, style_phrase=style_phrase, climate_sentence=climate_sentence
    )


def get_replacement_suggestions(
    client: GenerationClient,
    element_name: str,
    styles: Sequence[str] | str,
    climate_zone: str = "",
) -> list[str]:
    """
    Ask for up to three short replacement ideas for an element.

    Never fails: any error (including a blocked or empty reply) returns the
    fixed fallback list instead.
    """
    try:
        prompt = build_suggestions_prompt(element_name, styles, climate_zone)
        outcome = interpret_text_reply(client.generate_structured(prompt, SUGGESTIONS_SCHEMA))
        if isinstance(outcome, Failure):
            logger.error("Error getting replacement suggestions: %s", outcome.message)
            return list(FALLBACK_SUGGESTIONS)
        parsed = json.loads(outcome.strip())
    except Exception as e:
        logger.error("Error getting replacement suggestions: %s", e)
        return list(FALLBACK_SUGGESTIONS)

    suggestions = parsed.get("suggestions") if isinstance(parsed, dict) else None
    if isinstance(suggestions, list):
        return [str(s) for s in suggestions[:MAX_SUGGESTIONS]]
    return []


def get_element_image(client: GenerationClient, element_name: str) -> ImageData | Failure:
    """Generate one photorealistic image of the element on a plain white background."""
    name = _require_element(element_name)
    prompt = require_prompt("elements", "image").format(element=name)
    message = f"Failed to generate image for {name}."
    try:
        images = client.generate_images(prompt, number_of_images=1)
    except Exception as e:
        logger.error('Error generating image for "%s": %s', name, e)
        return Failure(kind=ErrorKind.UPSTREAM_UNKNOWN, message=f"{message} {e}".strip())
    if not images:
        logger.error('Image generation for "%s" returned no images', name)
        return Failure(kind=ErrorKind.NO_IMAGE_RETURNED, message=message)
    return images[0]


def get_element_info(client: GenerationClient, element_name: str) -> str | Failure:
    """One concise, homeowner-friendly paragraph describing the element."""
    name = _require_element(element_name)
    prompt = require_prompt("elements", "info").format(element=name)
    try:
        outcome = interpret_text_reply(client.generate_text(prompt))
    except Exception as e:
        logger.error('Error getting info for "%s": %s', name, e)
        return Failure(
            kind=ErrorKind.UPSTREAM_UNKNOWN,
            message=f"Failed to get information for {name}. {e}".strip(),
        )
    if isinstance(outcome, Failure):
        return outcome
    if not outcome.strip():
        return Failure(
            kind=ErrorKind.UPSTREAM_UNKNOWN, message=f"Failed to get information for {name}."
        )
    return outcome.strip()
