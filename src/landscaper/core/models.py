"""
Data model for landscape redesign requests and results.

All types here are per-call values: created by the caller (or by an operation
for its result) and never shared or mutated across calls.
"""

import base64
import io
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from PIL import Image

from landscaper.utils.exceptions import ImageProcessingError, ValidationError


class Density(str, Enum):
    """How visually full a generated design should be."""

    MINIMAL = "minimal"
    DEFAULT = "default"  # shown to users as "Balanced"
    LUSH = "lush"


@dataclass(frozen=True)
class ImageData:
    """Encoded image bytes plus their media type (e.g. 'image/png')."""

    data: bytes
    media_type: str = "image/png"

    @classmethod
    def from_base64(cls, b64: str, media_type: str = "image/png") -> "ImageData":
        """Decode a base64 payload. Raises ValueError (binascii.Error) if invalid."""
        return cls(data=base64.b64decode(b64, validate=True), media_type=media_type)

    @property
    def base64(self) -> str:
        """Base64 (ASCII) encoding of the bytes, as sent on the wire."""
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        """RFC 2397 data URL (data:<media_type>;base64,<data>)."""
        return f"data:{self.media_type};base64,{self.base64}"

    @property
    def extension(self) -> str:
        """File extension for the media type (jpeg -> jpg)."""
        subtype = self.media_type.split("/", 1)[-1].split(";")[0].strip().lower()
        if subtype == "jpeg":
            return "jpg"
        return subtype or "png"

    def to_pil(self) -> Image.Image:
        """Decode into a PIL Image."""
        try:
            image = Image.open(io.BytesIO(self.data))
            image.load()
            return image
        except Exception as e:
            raise ImageProcessingError(f"Failed to decode {self.media_type} image: {e}") from e


# The user's uploaded photo; same shape as any other image.
SourceImage = ImageData


@dataclass(frozen=True)
class PlantEntry:
    name: str
    species: str


@dataclass(frozen=True)
class FeatureEntry:
    name: str
    description: str


def _entries(raw: Any, second_key: str) -> list[tuple[str, str]]:
    if not isinstance(raw, list):
        return []
    pairs = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        pairs.append((str(item.get("name", "")), str(item.get(second_key, ""))))
    return pairs


@dataclass
class DesignCatalog:
    """Plants and features shown in a generated design. Either list may be empty."""

    plants: list[PlantEntry] = field(default_factory=list)
    features: list[FeatureEntry] = field(default_factory=list)

    @classmethod
    def from_parsed(cls, parsed: Any) -> "DesignCatalog":
        """
        Build a catalog from a parsed JSON value.

        ``None`` (no catalog found) and values that are not JSON objects give an
        empty catalog; entries that are not objects are skipped.
        """
        if not isinstance(parsed, dict):
            return cls()
        return cls(
            plants=[PlantEntry(n, s) for n, s in _entries(parsed.get("plants"), "species")],
            features=[
                FeatureEntry(n, d) for n, d in _entries(parsed.get("features"), "description")
            ],
        )

    def to_dict(self) -> dict[str, list[dict[str, str]]]:
        """Return the catalog in its wire format."""
        return {
            "plants": [{"name": p.name, "species": p.species} for p in self.plants],
            "features": [{"name": f.name, "description": f.description} for f in self.features],
        }

    def is_empty(self) -> bool:
        return not self.plants and not self.features


@dataclass
class GeneratedResult:
    """Result of a successful redesign. Ownership passes to the caller."""

    image: ImageData
    catalog: DesignCatalog
    catalog_found: bool  # False when the reply carried no parseable catalog


@dataclass(frozen=True)
class RedesignConfiguration:
    """A user's design choices for one redesign call."""

    styles: tuple[str, ...]
    allow_structural_changes: bool = False
    climate_zone: str = ""
    lock_aspect_ratio: bool = True
    density: Density | str = Density.DEFAULT

    def __post_init__(self) -> None:
        # Accept any sequence of style ids but keep an immutable, ordered copy.
        styles = style_tuple(self.styles)
        if not styles:
            raise ValidationError("At least one style must be selected", field="styles")
        object.__setattr__(self, "styles", styles)
        object.__setattr__(self, "climate_zone", self.climate_zone or "")


@dataclass(frozen=True)
class Replacement:
    source: str  # element to replace
    target: str  # element to put in its place


@dataclass
class RefinementModifications:
    """Requested edits to an existing design."""

    deletions: list[str] = field(default_factory=list)
    replacements: list[Replacement] = field(default_factory=list)
    additions: list[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        """True when no edit of any kind was requested."""
        return not self.deletions and not self.replacements and not self.additions


def style_tuple(styles: Sequence[str] | str) -> tuple[str, ...]:
    """Normalize a style id or sequence of style ids to a tuple."""
    if isinstance(styles, str):
        return (styles,)
    return tuple(styles)
