from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# Raster formats only; Pillow and the image model cannot take SVG.
_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>image/(?:png|jpe?g|webp|gif));base64,(?P<payload>.+)$", re.DOTALL | re.IGNORECASE
)


def parse_data_uri(uri: str) -> tuple[str, bytes]:
    """
    Split `data:<mime>;base64,<payload>` into (mime_type, raw bytes).
    Raises ValueError if the URI is not a well-formed base64 image URI.
    """
    m = _DATA_URI_RE.match((uri or "").strip())
    if not m:
        raise ValueError("expected 'data:image/<png|jpeg|webp|gif>;base64,<payload>'")
    payload = re.sub(r"\s+", "", m.group("payload"))
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"payload is not valid base64: {exc}") from exc
    if not data:
        raise ValueError("payload is empty")
    return m.group("mime").lower(), data


@dataclass(frozen=True)
class ThumbnailParameters:
    video_topic: str
    color_scheme: str
    font_pairing: str
    style: str


@dataclass(frozen=True)
class ImageAttachment:
    mime_type: str
    data: bytes = field(repr=False)

    @classmethod
    def from_data_uri(cls, uri: str) -> ImageAttachment:
        mime, data = parse_data_uri(uri)
        return cls(mime_type=mime, data=data)

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"


@dataclass(frozen=True)
class GenerationRequest:
    parameters: ThumbnailParameters
    attachments: tuple[ImageAttachment, ...]
    instruction_text: str


@dataclass(frozen=True)
class RegenerationRequest:
    parameters: ThumbnailParameters
    attachments: tuple[ImageAttachment, ...]
    instruction_text: str


@dataclass(frozen=True)
class ExportResolution:
    width: int
    height: int
    label: str

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("resolution dimensions must be positive")

    @property
    def size(self) -> tuple[int, int]:
        return (self.width, self.height)

    @property
    def aspect_ratio(self) -> str:
        a, b = self.width, self.height
        while b:
            a, b = b, a % b
        return f"{self.width // a}:{self.height // a}"


class FitMode(str, Enum):
    CONTAIN = "contain"
    COVER = "cover"


@dataclass(frozen=True)
class GenerationResult:
    """Tagged result: exactly one of image_data_uri / error_message is set."""

    image_data_uri: str | None = None
    error_message: str | None = None

    def __post_init__(self) -> None:
        if (self.image_data_uri is None) == (self.error_message is None):
            raise ValueError("GenerationResult must carry exactly one of image_data_uri or error_message")

    @classmethod
    def ok(cls, image_data_uri: str) -> GenerationResult:
        return cls(image_data_uri=image_data_uri)

    @classmethod
    def failure(cls, error_message: str) -> GenerationResult:
        return cls(error_message=error_message)

    @property
    def is_ok(self) -> bool:
        return self.image_data_uri is not None

    def to_payload(self, key: str = "thumbnailDataUri") -> dict[str, Any]:
        if self.is_ok:
            return {key: self.image_data_uri}
        return {"error": self.error_message}
