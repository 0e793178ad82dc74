from __future__ import annotations

import base64
import logging
from typing import Any, Sequence

from thumbly.config import settings
from thumbly.errors import GenerationError
from thumbly.models import ImageAttachment

logger = logging.getLogger(__name__)


class GeminiProvider:
    name = "gemini"

    def __init__(
        self,
        api_key: str,
        model: str | None = None,
        timeout_s: float | None = None,
        client: Any = None,
    ) -> None:
        self.model = model or settings.gemini_image_model
        if client is not None:
            self.client = client
            return

        # Imported lazily so the app can start without the dependency installed.
        from google import genai  # type: ignore
        from google.genai import types  # type: ignore

        http_options = None
        if timeout_s:
            http_options = types.HttpOptions(timeout=int(timeout_s * 1000))
        self.client = genai.Client(api_key=api_key, http_options=http_options)

    async def generate_image(
        self,
        prompt: str,
        attachments: Sequence[ImageAttachment],
    ) -> ImageAttachment:
        """
        Send the attachments in order, followed by the instruction text, and
        ask for both text and image modalities. The prose in `prompt` refers
        to attachments by position, so their order must not change here.
        """
        from google.genai import types  # type: ignore

        contents: list[Any] = [types.Part.from_bytes(data=a.data, mime_type=a.mime_type) for a in attachments]
        contents.append(prompt)

        logger.info("calling %s model=%s attachments=%d", self.name, self.model, len(attachments))
        try:
            resp = await self.client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=types.GenerateContentConfig(response_modalities=["TEXT", "IMAGE"]),
            )
        except Exception as exc:
            raise GenerationError(str(exc) or exc.__class__.__name__) from exc

        image = _extract_image_from_generate_content(resp)
        if image is None:
            text = (getattr(resp, "text", None) or "").strip()
            detail = f" Model said: {text[:200]}" if text else ""
            raise GenerationError(f"The model response did not contain an image.{detail}")
        return image


def _extract_image_from_generate_content(resp: Any) -> ImageAttachment | None:
    for cand in getattr(resp, "candidates", []) or []:
        content = getattr(cand, "content", None)
        parts = getattr(content, "parts", None) or []
        for part in parts:
            inline = getattr(part, "inline_data", None)
            if not inline:
                continue
            mime = getattr(inline, "mime_type", None) or "image/png"
            data = getattr(inline, "data", None)
            if not data:
                continue
            if not mime.startswith("image/"):
                continue
            if isinstance(data, str):
                try:
                    data = base64.b64decode(data)
                except ValueError:
                    continue
            return ImageAttachment(mime_type=mime, data=data)
    return None
