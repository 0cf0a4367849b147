"""
Source image handling for landscaper.

Loads the user's photo from a file path, raw bytes or a data URL, checks that
Pillow can decode it, and determines its media type for the outbound request.
"""

import base64
import io
from pathlib import Path

from PIL import Image

from landscaper.core.models import ImageData
from landscaper.logging_config import get_logger
from landscaper.utils.exceptions import ImageProcessingError, ValidationError

logger = get_logger(__name__)

# Supported formats -> media type sent to the model service
SUPPORTED_FORMATS = {"PNG": "image/png", "JPEG": "image/jpeg", "WEBP": "image/webp"}


def _infer_format_from_magic(data: bytes) -> str | None:
    """Infer image format from magic bytes. Returns format name (e.g. PNG, JPEG) or None."""
    if len(data) < 12:
        return None
    if data[:8] == b"\x89PNG\r\n\x1a\n":
        return "PNG"
    if data[:2] == b"\xff\xd8":
        return "JPEG"
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "WEBP"
    return None


def _normalize_format(fmt: str | None) -> str | None:
    """Normalize to a SUPPORTED_FORMATS key (e.g. JPG -> JPEG, image/jpeg -> JPEG)."""
    if not fmt:
        return None
    s = fmt.strip().lower()
    if s.startswith("image/"):
        s = s.split("/", 1)[1]
    u = s.split(";")[0].strip().upper()
    if u == "JPG":
        u = "JPEG"
    return u if u in SUPPORTED_FORMATS else None


def _parse_data_url(data_url: str) -> tuple[bytes, str | None]:
    """Split a data URL (data:image/xxx;base64,yyy) into bytes and a format hint."""
    data_url = data_url.strip()
    idx = data_url.find(";base64,")
    if idx == -1:
        raise ValidationError("Data URL missing ;base64, part", field="image")
    try:
        payload = base64.b64decode(data_url[idx + 8 :], validate=True)
    except ValueError as e:
        raise ValidationError(f"Invalid base64 in data URL: {e}", field="image") from e
    return payload, _normalize_format(data_url[5:idx])


def _verify(data: bytes, source: str) -> None:
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.verify()
    except Exception as e:
        raise ImageProcessingError(f"Failed to load image: {e}", image_path=source) from e


def load_source_image(
    source: str | Path | bytes,
    media_type: str | None = None,
) -> ImageData:
    """
    Load and validate the photo to redesign (or a design to refine).

    Args:
        source: File path, raw image bytes, or a ``data:`` URL string
        media_type: Optional hint when ``source`` is bytes (e.g. 'image/jpeg')

    Returns:
        ImageData with the original bytes and the detected media type

    Raises:
        ValidationError: If the format is unsupported or cannot be determined
        ImageProcessingError: If the bytes cannot be decoded as an image
        FileNotFoundError: If a path does not exist
    """
    label = "<bytes>"
    hint = media_type
    if isinstance(source, str) and source.startswith("data:"):
        data, url_hint = _parse_data_url(source)
        hint = hint or url_hint
        label = "<data URL>"
    elif isinstance(source, bytes):
        data = source
    else:
        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")
        data = path.read_bytes()
        label = str(path)
        hint = hint or path.suffix.lstrip(".")

    if not data:
        raise ValidationError("Image data is empty", field="image")

    fmt = _normalize_format(_infer_format_from_magic(data)) or _normalize_format(hint)
    if not fmt:
        raise ValidationError(
            "Unsupported or unrecognized image format. "
            f"Supported formats: {', '.join(sorted(SUPPORTED_FORMATS))}",
            field="image_format",
        )
    _verify(data, label)
    logger.debug("Loaded source image %s format=%s bytes=%d", label, fmt, len(data))
    return ImageData(data=data, media_type=SUPPORTED_FORMATS[fmt])
