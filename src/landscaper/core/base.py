"""
Client protocol for the upstream generative model service.

Operations in core.designer and core.elements take a GenerationClient
argument; GeminiClient is the built-in implementation and tests pass a fake.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from landscaper.core.models import ImageData, RedesignConfiguration, RefinementModifications
    from landscaper.core.reply import RawMultimodalReply


class GenerationClient(Protocol):
    """Protocol for model service clients.

    Each method issues exactly one outbound request and returns the validated
    reply. Methods may raise APIError, NetworkError or RequestTimeoutError;
    they never retry.
    """

    def generate(self, config: RedesignConfiguration, image: ImageData) -> RawMultimodalReply:
        """Redesign request; asks for image and text output."""
        ...

    def generate_refinement(
        self, image: ImageData, modifications: RefinementModifications
    ) -> RawMultimodalReply:
        """Refinement request; asks for image output only."""
        ...

    def generate_structured(self, prompt: str, schema: dict[str, Any]) -> RawMultimodalReply:
        """Text-only request whose reply text is JSON matching ``schema``."""
        ...

    def generate_text(self, prompt: str) -> RawMultimodalReply:
        """Plain text-only request."""
        ...

    def generate_images(self, prompt: str, number_of_images: int = 1) -> list[ImageData]:
        """Text-to-image request; returns the decoded images (possibly none)."""
        ...
