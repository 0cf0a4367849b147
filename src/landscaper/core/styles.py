"""
Landscaping style catalog.

Style identifiers are what callers store and pass around; display names are
what goes into prompts. Unknown identifiers are used verbatim.
"""

from collections.abc import Iterable

LANDSCAPING_STYLES: dict[str, str] = {
    "modern": "Modern",
    "minimalist": "Minimalist",
    "japanese-zen": "Japanese Zen",
    "english-cottage": "English Cottage",
    "mediterranean": "Mediterranean",
    "tropical": "Tropical",
    "desert-xeriscape": "Desert Xeriscape",
    "farmhouse": "Farmhouse",
    "formal-french": "Formal French",
    "woodland": "Woodland",
    "coastal": "Coastal",
    "prairie": "Prairie Meadow",
}


def style_name(style_id: str) -> str:
    """Return the display name for a style id, or the id itself if unknown."""
    return LANDSCAPING_STYLES.get(style_id, style_id)


def style_names(style_ids: Iterable[str]) -> list[str]:
    """Display names for style ids, preserving order."""
    return [style_name(s) for s in style_ids]
