from __future__ import annotations

from typing import Protocol, Sequence

from thumbly.errors import GenerationError
from thumbly.models import ImageAttachment


class ImageModel(Protocol):
    """
    A multimodal generative model: instruction text plus ordered image
    attachments in, one image out. Implementations raise GenerationError
    when the call fails or the response carries no image.
    """

    name: str
    model: str

    async def generate_image(
        self,
        prompt: str,
        attachments: Sequence[ImageAttachment],
    ) -> ImageAttachment: ...


class UnconfiguredModel:
    """Used when no model credential is configured; every call fails."""

    name = "unconfigured"

    def __init__(self, reason: str, model: str = "") -> None:
        self.reason = reason
        self.model = model

    async def generate_image(
        self,
        prompt: str,
        attachments: Sequence[ImageAttachment],
    ) -> ImageAttachment:
        raise GenerationError(self.reason)
