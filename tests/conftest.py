"""
Pytest configuration: default runs most tests; use --run-slow to include slow tests.

Also provides small builders for Gemini-shaped replies and a fake
GenerationClient so operations can be tested without HTTP.
"""

import base64
import io
from typing import Any

import pytest
from PIL import Image

from landscaper.core.models import ImageData
from landscaper.core.reply import RawMultimodalReply


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Run slow tests (live Gemini API calls). Default: skip them.",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-slow", False):
        return
    skip_slow = pytest.mark.skip(reason="Slow test; run with --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip_slow)


def make_png(color: tuple[int, int, int] = (0, 0, 0)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (2, 2), color=color).save(buf, format="PNG")
    return buf.getvalue()


def image_wire_part(data: bytes, mime_type: str = "image/png") -> dict[str, Any]:
    return {"inlineData": {"mimeType": mime_type, "data": base64.b64encode(data).decode("ascii")}}


def text_wire_part(text: str) -> dict[str, Any]:
    return {"text": text}


def wire_reply(*parts: dict[str, Any], block_reason: str | None = None) -> dict[str, Any]:
    """Gemini generateContent JSON with one candidate holding ``parts``."""
    payload: dict[str, Any] = {}
    if block_reason is not None:
        payload["promptFeedback"] = {"blockReason": block_reason}
        return payload
    payload["candidates"] = [{"content": {"role": "model", "parts": list(parts)}}]
    return payload


def reply(*parts: dict[str, Any]) -> RawMultimodalReply:
    return RawMultimodalReply.from_wire(wire_reply(*parts))


class FakeClient:
    """GenerationClient test double: returns canned replies and records calls."""

    def __init__(
        self,
        reply: RawMultimodalReply | None = None,
        images: list[ImageData] | None = None,
        error: Exception | None = None,
    ) -> None:
        self.reply = reply
        self.images = images or []
        self.error = error
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _respond(self, name: str, *args: Any) -> Any:
        self.calls.append((name, args))
        if self.error is not None:
            raise self.error
        return self.reply

    def generate(self, config, image):
        return self._respond("generate", config, image)

    def generate_refinement(self, image, modifications):
        return self._respond("generate_refinement", image, modifications)

    def generate_structured(self, prompt, schema):
        return self._respond("generate_structured", prompt, schema)

    def generate_text(self, prompt):
        return self._respond("generate_text", prompt)

    def generate_images(self, prompt, number_of_images=1):
        self._respond("generate_images", prompt, number_of_images)
        return self.images


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()
