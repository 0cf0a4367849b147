"""
Gemini model service client.

Handles HTTP communication with the Gemini REST API: building multimodal
payloads, mapping HTTP and transport failures to landscaper exceptions, and
validating replies into RawMultimodalReply records.
"""

import json
import time
from typing import Any

import requests
from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from landscaper.core.composer import compose_redesign_prompt, compose_refinement_prompt
from landscaper.core.config import Config
from landscaper.core.models import ImageData, RedesignConfiguration, RefinementModifications
from landscaper.core.reply import RawMultimodalReply, truncate_image_data_for_log
from landscaper.logging_config import get_logger, log_payloads, log_prompts
from landscaper.utils.exceptions import (
    APIError,
    NetworkError,
    RequestTimeoutError,
    ValidationError,
)

logger = get_logger(__name__)

_PROMPT_LOG_MAX = 50_000

MODALITIES_IMAGE_TEXT = ["IMAGE", "TEXT"]
MODALITIES_IMAGE = ["IMAGE"]


class _Prediction(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    bytes_base64_encoded: str | None = None
    mime_type: str = "image/png"


class _PredictResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    predictions: list[_Prediction] | None = None


def image_part(image: ImageData) -> dict[str, Any]:
    return {"inlineData": {"mimeType": image.media_type, "data": image.base64}}


def text_part(text: str) -> dict[str, Any]:
    return {"text": text}


class GeminiClient:
    """One long-lived handle to the Gemini API, tied to one credential.

    Construct it once and pass it to every operation. It holds no per-call
    state, so concurrent calls from different threads are independent.
    """

    def __init__(self, config: Config) -> None:
        if not config.gemini_api_key:
            raise ValidationError(
                "Gemini API key is required. Set it via config or environment variable.",
                field="api_key",
            )
        self.config = config

    def _headers(self) -> dict[str, str]:
        return {
            "x-goog-api-key": self.config.gemini_api_key,
            "Content-Type": "application/json",
        }

    def _log_prompt(self, prompt: str) -> None:
        if log_prompts():
            truncated = (
                prompt if len(prompt) <= _PROMPT_LOG_MAX else prompt[:_PROMPT_LOG_MAX] + "..."
            )
            logger.info("Prompt (used): %s", truncated)

    def _dump_payloads(self) -> bool:
        return self.config.debug_api or log_payloads()

    def _do_request(
        self, model: str, method: str, payload: dict[str, Any], timeout: int
    ) -> dict[str, Any]:
        """POST payload and return decoded JSON. Maps status codes to exceptions."""
        url = f"{self.config.gemini_base_url}/models/{model}:{method}"
        logger.debug("API request url=%s model=%s timeout=%s", url, model, timeout)
        if self._dump_payloads():
            logger.info(
                "API request payload (image data truncated): %s",
                json.dumps(truncate_image_data_for_log(payload), indent=2, default=str),
            )
        start_time = time.time()
        try:
            response = requests.post(url, headers=self._headers(), json=payload, timeout=timeout)
        except requests.exceptions.Timeout as e:
            raise RequestTimeoutError(
                f"Request timed out after {timeout} seconds. "
                "The generation may be taking longer than expected."
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError(
                "Failed to connect to the Gemini API. Please check your internet connection.",
                original_error=e,
            ) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(
                f"Network error during API request: {str(e)}", original_error=e
            ) from e
        elapsed = time.time() - start_time
        logger.debug(
            "API response status=%s content_type=%s time=%.2fs",
            response.status_code,
            response.headers.get("content-type", ""),
            elapsed,
        )

        if response.status_code == 400:
            raise APIError(
                f"Request rejected by the Gemini API: {response.text}",
                status_code=400,
                response=response.text,
            )
        if response.status_code in (401, 403):
            raise APIError(
                "Authentication failed. Please check your Gemini API key.",
                status_code=response.status_code,
                response=response.text,
            )
        if response.status_code == 404:
            raise APIError(
                f"Model not found or endpoint unavailable: {model}",
                status_code=404,
                response=response.text,
            )
        if response.status_code == 429:
            raise APIError(
                "Rate limit exceeded. Please wait before making more requests.",
                status_code=429,
                response=response.text,
            )
        if response.status_code >= 500:
            raise APIError(
                f"Gemini service error: {response.status_code}",
                status_code=response.status_code,
                response=response.text,
            )
        if response.status_code != 200:
            raise APIError(
                f"API request failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
                response=response.text,
            )

        try:
            result = response.json()
        except ValueError as e:
            raise APIError(
                f"Failed to parse API response as JSON: {str(e)}",
                response=response.text,
            ) from e
        if self._dump_payloads():
            logger.info(
                "API response (image data truncated): %s",
                json.dumps(truncate_image_data_for_log(result), indent=2, default=str),
            )
        logger.info("Model %s replied in %.1fs", model, elapsed)
        return result

    def _generate_content(
        self,
        model: str,
        parts: list[dict[str, Any]],
        generation_config: dict[str, Any] | None,
        timeout: int,
    ) -> RawMultimodalReply:
        payload: dict[str, Any] = {"contents": [{"role": "user", "parts": parts}]}
        if generation_config:
            payload["generationConfig"] = generation_config
        return RawMultimodalReply.from_wire(
            self._do_request(model, "generateContent", payload, timeout)
        )

    def generate(self, config: RedesignConfiguration, image: ImageData) -> RawMultimodalReply:
        """Send the source image and composed redesign prompt; ask for image + text."""
        prompt = compose_redesign_prompt(config)
        logger.info(
            "Requesting redesign model=%s styles=%s density=%s",
            self.config.image_model,
            ",".join(config.styles),
            getattr(config.density, "value", config.density),
        )
        self._log_prompt(prompt)
        return self._generate_content(
            self.config.image_model,
            [image_part(image), text_part(prompt)],
            {"responseModalities": MODALITIES_IMAGE_TEXT},
            self.config.generation_timeout,
        )

    def generate_refinement(
        self, image: ImageData, modifications: RefinementModifications
    ) -> RawMultimodalReply:
        """Send the existing design and refinement prompt; ask for an image only."""
        prompt = compose_refinement_prompt(modifications)
        logger.info(
            "Requesting refinement model=%s deletions=%d replacements=%d additions=%d",
            self.config.image_model,
            len(modifications.deletions),
            len(modifications.replacements),
            len(modifications.additions),
        )
        self._log_prompt(prompt)
        return self._generate_content(
            self.config.image_model,
            [image_part(image), text_part(prompt)],
            {"responseModalities": MODALITIES_IMAGE},
            self.config.generation_timeout,
        )

    def generate_structured(self, prompt: str, schema: dict[str, Any]) -> RawMultimodalReply:
        """Text-only request constrained to a JSON response schema."""
        self._log_prompt(prompt)
        return self._generate_content(
            self.config.text_model,
            [text_part(prompt)],
            {"responseMimeType": "application/json", "responseSchema": schema},
            self.config.text_timeout,
        )

    def generate_text(self, prompt: str) -> RawMultimodalReply:
        """Plain text-only request."""
        self._log_prompt(prompt)
        return self._generate_content(
            self.config.text_model, [text_part(prompt)], None, self.config.text_timeout
        )

    def generate_images(self, prompt: str, number_of_images: int = 1) -> list[ImageData]:
        """Text-to-image request (1:1 PNG). Returns an empty list when none came back."""
        self._log_prompt(prompt)
        payload = {
            "instances": [{"prompt": prompt}],
            "parameters": {
                "sampleCount": number_of_images,
                "aspectRatio": "1:1",
                "outputOptions": {"mimeType": "image/png"},
            },
        }
        result = self._do_request(
            self.config.element_image_model, "predict", payload, self.config.generation_timeout
        )
        try:
            predictions = _PredictResponse.model_validate(result).predictions or []
        except PydanticValidationError as e:
            raise APIError(
                f"Unrecognized image reply shape: {e.error_count()} validation error(s)",
                response=json.dumps(truncate_image_data_for_log(result), default=str)[:2000],
            ) from e
        images = []
        for prediction in predictions:
            if not prediction.bytes_base64_encoded:
                continue
            try:
                images.append(
                    ImageData.from_base64(prediction.bytes_base64_encoded, prediction.mime_type)
                )
            except ValueError as e:
                raise APIError(f"Reply image data is not valid base64: {e}") from e
        return images
