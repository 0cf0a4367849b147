"""
Multimodal reply record and interpretation.

The model service returns loosely-shaped JSON. It is validated once, at
ingestion, into a fixed RawMultimodalReply record; unrecognized shapes raise
APIError there instead of failing later on attribute access. The interpret_*
functions then walk the record in a fixed order and return either the
extracted content or a typed Failure.
"""

import binascii
import json
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from landscaper.core.models import ImageData
from landscaper.logging_config import get_logger
from landscaper.utils.exceptions import APIError, ErrorKind, Failure

logger = get_logger(__name__)

_DEBUG_TRUNCATE_THRESHOLD = 200
_DEBUG_NEVER_TRUNCATE_KEYS = frozenset({"text", "message", "blockReasonMessage"})

NO_CANDIDATES_MESSAGE = (
    "The model returned no content. This could be due to a safety policy or an unknown model error."
)
NO_REFINEMENT_CANDIDATES_MESSAGE = "The model returned no content for refinement."
NO_IMAGE_MESSAGE = "The model did not return a redesigned image."
NO_REFINED_IMAGE_MESSAGE = "The model did not return a refined image."


def truncate_image_data_for_log(obj: Any, parent_key: str | None = None) -> Any:
    """Recursively replace long base64 strings with placeholders for safe logging."""
    if isinstance(obj, dict):
        return {k: truncate_image_data_for_log(v, k) for k, v in obj.items()}
    if isinstance(obj, list):
        return [truncate_image_data_for_log(v, None) for v in obj]
    if isinstance(obj, str) and len(obj) >= _DEBUG_TRUNCATE_THRESHOLD:
        if parent_key in _DEBUG_NEVER_TRUNCATE_KEYS:
            return obj
        if obj.startswith("data:"):
            return f"<data URL, {len(obj)} chars>"
        return f"<string, {len(obj)} chars>"
    return obj


# Wire shapes (camelCase JSON). Unknown keys are ignored.


class _Wire(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class _WireInlineData(_Wire):
    mime_type: str = "image/png"
    data: str = ""


class _WirePart(_Wire):
    text: str | None = None
    inline_data: _WireInlineData | None = None


class _WireContent(_Wire):
    parts: list[_WirePart] | None = None


class _WireCandidate(_Wire):
    content: _WireContent | None = None
    finish_reason: str | None = None


class _WirePromptFeedback(_Wire):
    block_reason: str | None = None
    block_reason_message: str | None = None


class _WireResponse(_Wire):
    prompt_feedback: _WirePromptFeedback | None = None
    candidates: list[_WireCandidate] | None = None


@dataclass(frozen=True)
class ReplyPart:
    """One reply segment: image-bearing, text-bearing, or neither.

    Image data stays base64-encoded until read through ``image``, so an
    undecodable payload only matters for a part that is actually used.
    """

    text: str | None = None
    image_base64: str | None = None
    mime_type: str = "image/png"

    @property
    def has_image(self) -> bool:
        return bool(self.image_base64)

    @property
    def image(self) -> ImageData | None:
        """The decoded image, or None if the part has none or it is not valid base64."""
        if not self.image_base64:
            return None
        try:
            return ImageData.from_base64(self.image_base64, self.mime_type)
        except (binascii.Error, ValueError) as e:
            logger.warning("Skipping reply part with invalid %s data: %s", self.mime_type, e)
            return None


@dataclass(frozen=True)
class ReplyCandidate:
    parts: tuple[ReplyPart, ...] = ()
    finish_reason: str | None = None


@dataclass(frozen=True)
class RawMultimodalReply:
    """A validated model reply. Exists only for the duration of one call."""

    candidates: tuple[ReplyCandidate, ...] = ()
    block_reason: str | None = None
    block_reason_message: str | None = None
    raw: dict[str, Any] | None = field(default=None, repr=False, compare=False)

    @classmethod
    def from_wire(cls, payload: Any) -> "RawMultimodalReply":
        """
        Validate a decoded JSON reply into the fixed record.

        Raises:
            APIError: If the payload does not have a recognizable reply shape.
        """
        if not isinstance(payload, dict):
            raise APIError(
                f"Unrecognized reply shape: expected a JSON object, got {type(payload).__name__}",
                response=str(payload)[:500],
            )
        try:
            wire = _WireResponse.model_validate(payload)
        except PydanticValidationError as e:
            raise APIError(
                f"Unrecognized reply shape: {e.error_count()} validation error(s)",
                response=json.dumps(truncate_image_data_for_log(payload), default=str)[:2000],
            ) from e

        candidates = []
        for wire_candidate in wire.candidates or []:
            parts = []
            wire_parts = (wire_candidate.content.parts if wire_candidate.content else None) or []
            for wire_part in wire_parts:
                inline = wire_part.inline_data
                parts.append(
                    ReplyPart(
                        text=wire_part.text,
                        image_base64=inline.data if inline is not None else None,
                        mime_type=inline.mime_type if inline is not None else "image/png",
                    )
                )
            candidates.append(
                ReplyCandidate(parts=tuple(parts), finish_reason=wire_candidate.finish_reason)
            )

        feedback = wire.prompt_feedback
        return cls(
            candidates=tuple(candidates),
            block_reason=feedback.block_reason if feedback else None,
            block_reason_message=feedback.block_reason_message if feedback else None,
            raw=payload,
        )


@dataclass(frozen=True)
class InterpretedReply:
    image: ImageData
    text: str


def _log_reply(label: str, reply: RawMultimodalReply) -> None:
    shown = reply.raw if reply.raw is not None else repr(reply)
    logger.error(
        "Full API Response (%s): %s",
        label,
        json.dumps(truncate_image_data_for_log(shown), indent=2, default=str),
    )


def _check_blocked_or_empty(
    reply: RawMultimodalReply, no_candidates_message: str
) -> Failure | None:
    """Steps shared by every interpreter: safety block, then empty candidate list."""
    if reply.block_reason:
        message = reply.block_reason_message or "No additional details provided."
        logger.error(
            "Gemini API request blocked. Reason: %s. Message: %s", reply.block_reason, message
        )
        return Failure(
            kind=ErrorKind.CONTENT_BLOCKED,
            message=(
                f"Request blocked by AI safety filters: {reply.block_reason}. "
                "Please modify the image or request."
            ),
            block_reason=reply.block_reason,
            block_reason_message=message,
        )
    if not reply.candidates:
        _log_reply("No Candidates", reply)
        return Failure(kind=ErrorKind.NO_CANDIDATES, message=no_candidates_message)
    return None


def interpret_redesign_reply(reply: RawMultimodalReply) -> InterpretedReply | Failure:
    """
    Extract the redesigned image and the reply text.

    The first image-bearing part of the first candidate wins; later image
    parts are discarded without being decoded. A part whose image data is
    not valid base64 is skipped. All text parts are concatenated in order with no
    separator.
    """
    failure = _check_blocked_or_empty(reply, NO_CANDIDATES_MESSAGE)
    if failure is not None:
        return failure

    image: ImageData | None = None
    text = ""
    for part in reply.candidates[0].parts:
        if part.has_image:
            if image is None:
                image = part.image
        elif part.text:
            text += part.text

    if image is None:
        _log_reply("No Image Part", reply)
        return Failure(kind=ErrorKind.NO_IMAGE_RETURNED, message=NO_IMAGE_MESSAGE)
    return InterpretedReply(image=image, text=text)


def interpret_refinement_reply(reply: RawMultimodalReply) -> ImageData | Failure:
    """Extract the first image part; text parts are ignored entirely."""
    failure = _check_blocked_or_empty(reply, NO_REFINEMENT_CANDIDATES_MESSAGE)
    if failure is not None:
        return failure

    for part in reply.candidates[0].parts:
        image = part.image
        if image is not None:
            return image

    _log_reply("No Image Part for Refinement", reply)
    return Failure(kind=ErrorKind.NO_REFINED_IMAGE_RETURNED, message=NO_REFINED_IMAGE_MESSAGE)


def interpret_text_reply(reply: RawMultimodalReply) -> str | Failure:
    """Concatenate the first candidate's text parts (text-only requests)."""
    failure = _check_blocked_or_empty(reply, NO_CANDIDATES_MESSAGE)
    if failure is not None:
        return failure
    return "".join(part.text for part in reply.candidates[0].parts if part.text)
