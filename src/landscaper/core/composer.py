"""
Prompt composition for redesign and refinement requests.

Pure functions: the same configuration always yields the same text, and
nothing here performs I/O beyond the one-time prompts.yaml load.
"""

import json
import re

from landscaper.core.models import Density, RedesignConfiguration, RefinementModifications
from landscaper.core.prompts_loader import require_prompt
from landscaper.core.styles import style_names

_ARID_PATTERN = re.compile(r"arid|desert", re.IGNORECASE)

CATALOG_SCHEMA = {
    "plants": [{"name": "string", "species": "string"}],
    "features": [{"name": "string", "description": "string"}],
}


def _quoted(names: list[str], sep: str) -> str:
    return sep.join(f"'{n}'" for n in names)


def style_instruction(styles: tuple[str, ...]) -> str:
    """Single style, or a blend of all styles in the given order."""
    names = style_names(styles)
    if len(names) > 1:
        return require_prompt("redesign", "style_blend").format(styles=_quoted(names, " and "))
    return require_prompt("redesign", "style_single").format(style=names[0])


def structural_instruction(allow_structural_changes: bool) -> str:
    key = "allowed" if allow_structural_changes else "forbidden"
    return require_prompt("redesign", "structural", key)


def object_instruction(allow_structural_changes: bool) -> str:
    """People, animals and vehicles: removed and in-filled, or left untouched."""
    key = "allowed" if allow_structural_changes else "forbidden"
    return require_prompt("redesign", "objects", key)


def climate_instruction(climate_zone: str) -> str:
    if not climate_zone.strip():
        return require_prompt("redesign", "climate", "generic")
    text = require_prompt("redesign", "climate", "zone").format(zone=climate_zone)
    if _ARID_PATTERN.search(climate_zone):
        text += " " + require_prompt("redesign", "climate", "arid")
    return text


def aspect_ratio_instruction(lock_aspect_ratio: bool) -> str:
    key = "locked" if lock_aspect_ratio else "flexible"
    return require_prompt("redesign", "aspect_ratio", key)


def density_instruction(density: Density | str) -> str:
    """Unrecognized densities fall back to the balanced (default) paragraph."""
    value = density.value if isinstance(density, Density) else str(density).strip().lower()
    if value not in (Density.MINIMAL.value, Density.LUSH.value):
        value = Density.DEFAULT.value
    return require_prompt("redesign", "density", value)


def compose_redesign_prompt(config: RedesignConfiguration) -> str:
    """
    Build the full redesign instruction for one configuration.

    Clause order is fixed: directive header, style, structural changes, object
    handling, climate, aspect ratio, density, functional access, catalog schema.

    Args:
        config: The user's design choices (guaranteed non-empty style set)

    Returns:
        The prompt text to send alongside the source image
    """
    return require_prompt("redesign", "template").format(
        style_instruction=style_instruction(config.styles),
        structural_instruction=structural_instruction(config.allow_structural_changes),
        object_instruction=object_instruction(config.allow_structural_changes),
        climate_instruction=climate_instruction(config.climate_zone),
        aspect_ratio_instruction=aspect_ratio_instruction(config.lock_aspect_ratio),
        density_instruction=density_instruction(config.density),
        catalog_schema=json.dumps(CATALOG_SCHEMA, indent=2),
    )


def compose_refinement_prompt(modifications: RefinementModifications) -> str:
    """
    Build the refinement instruction.

    With no modifications the result is a fixed "return the image unchanged,
    image only" instruction. Otherwise one bullet per non-empty category, in
    the order deletions, replacements, additions.
    """
    instructions: list[str] = []

    if modifications.deletions:
        instructions.append(
            require_prompt("refinement", "deletions").format(
                items=", ".join(modifications.deletions)
            )
        )

    if modifications.replacements:
        pair = require_prompt("refinement", "replacement_pair")
        replacement_text = "; ".join(
            pair.format(source=r.source, target=r.target) for r in modifications.replacements
        )
        instructions.append(
            require_prompt("refinement", "replacements").format(items=replacement_text)
        )

    if modifications.additions:
        instructions.append(
            require_prompt("refinement", "additions").format(
                items=", ".join(modifications.additions)
            )
        )

    if not instructions:
        return require_prompt("refinement", "noop")

    return require_prompt("refinement", "template").format(
        instructions="- " + "\n- ".join(instructions)
    )


__all__ = [
    "CATALOG_SCHEMA",
    "compose_redesign_prompt",
    "compose_refinement_prompt",
]
