from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping

from thumbly.errors import GenerationError, ValidationError
from thumbly.models import GenerationResult, ImageAttachment
from thumbly.prompts import DEFAULT_POLICY, PromptPolicy, build_generation_request, build_regeneration_request
from thumbly.providers.base import ImageModel
from thumbly.validation import validate_generate_input, validate_regenerate_input

logger = logging.getLogger(__name__)


class ThumbnailService:
    """
    Validates raw form input, builds the request, and calls the image model
    exactly once. Every outcome comes back as a GenerationResult; nothing
    raises past `generate` / `regenerate`.
    """

    def __init__(
        self,
        model: ImageModel,
        policy: PromptPolicy = DEFAULT_POLICY,
        timeout_s: float | None = 120.0,
    ) -> None:
        self.model = model
        self.policy = policy
        self.timeout_s = timeout_s

    async def generate(self, raw: Mapping[str, Any] | None) -> GenerationResult:
        try:
            params, upload = validate_generate_input(raw)
        except ValidationError as exc:
            return GenerationResult.failure(exc.message)

        request = build_generation_request(params, upload, policy=self.policy)
        try:
            image = await self._call(request.instruction_text, request.attachments)
        except GenerationError as exc:
            logger.warning("thumbnail generation failed: %s", exc.message)
            return GenerationResult.failure(f"Failed to generate thumbnail. {exc.message}")
        return GenerationResult.ok(image.to_data_uri())

    async def regenerate(self, raw: Mapping[str, Any] | None) -> GenerationResult:
        try:
            params, previous, upload = validate_regenerate_input(raw)
        except ValidationError as exc:
            return GenerationResult.failure(exc.message)

        request = build_regeneration_request(params, previous, upload, policy=self.policy)
        try:
            image = await self._call(request.instruction_text, request.attachments)
        except GenerationError as exc:
            logger.warning("thumbnail regeneration failed: %s", exc.message)
            return GenerationResult.failure(f"Failed to regenerate thumbnail. {exc.message}")
        return GenerationResult.ok(image.to_data_uri())

    async def _call(self, prompt: str, attachments: tuple[ImageAttachment, ...]) -> ImageAttachment:
        # One attempt only; the user retries from the UI.
        try:
            if self.timeout_s:
                return await asyncio.wait_for(self.model.generate_image(prompt, attachments), self.timeout_s)
            return await self.model.generate_image(prompt, attachments)
        except GenerationError:
            raise
        except asyncio.TimeoutError as exc:
            raise GenerationError(f"The image model did not respond within {self.timeout_s:g}s.") from exc
        except Exception as exc:
            logger.exception("unexpected error from image model %s", getattr(self.model, "name", "?"))
            raise GenerationError(str(exc) or exc.__class__.__name__) from exc
