from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from io import BytesIO

from PIL import Image, UnidentifiedImageError

from thumbly.errors import DecodeError
from thumbly.models import ExportResolution, FitMode, parse_data_uri

logger = logging.getLogger(__name__)

BACKGROUND = (0, 0, 0)


@dataclass(frozen=True)
class Placement:
    """
    Where the source lands on the target canvas.
    `source_box` is the (left, top, right, bottom) region of the source that is
    drawn; `dest_box` is the (left, top, right, bottom) region it is drawn into.
    """

    source_box: tuple[float, float, float, float]
    dest_box: tuple[int, int, int, int]

    @property
    def dest_size(self) -> tuple[int, int]:
        return (self.dest_box[2] - self.dest_box[0], self.dest_box[3] - self.dest_box[1])


def compute_placement(src_size: tuple[int, int], target: ExportResolution, mode: FitMode) -> Placement:
    iw, ih = src_size
    if iw <= 0 or ih <= 0:
        raise DecodeError(f"image has invalid dimensions {iw}x{ih}")
    tw, th = target.size

    if mode == FitMode.COVER:
        # Centered source sub-rectangle with the target's aspect ratio, stretched to fill.
        if iw * th > ih * tw:
            cw, ch = ih * tw / th, float(ih)
        else:
            cw, ch = float(iw), iw * th / tw
        left = (iw - cw) / 2
        top = (ih - ch) / 2
        return Placement(source_box=(left, top, left + cw, top + ch), dest_box=(0, 0, tw, th))

    scale = min(tw / iw, th / ih)
    nw = min(tw, max(1, int(round(iw * scale))))
    nh = min(th, max(1, int(round(ih * scale))))
    dx = (tw - nw) // 2
    dy = (th - nh) // 2
    return Placement(source_box=(0.0, 0.0, float(iw), float(ih)), dest_box=(dx, dy, dx + nw, dy + nh))


def fit_image(img: Image.Image, target: ExportResolution, mode: FitMode = FitMode.COVER) -> Image.Image:
    """
    Rasterize `img` onto an opaque canvas of exactly target.width x target.height.
    CONTAIN letterboxes with black; COVER center-crops. The source is not modified.
    """
    placement = compute_placement(img.size, target, mode)
    src = img if img.mode == "RGBA" else img.convert("RGBA")
    resized = src.resize(placement.dest_size, Image.Resampling.LANCZOS, box=placement.source_box)

    canvas = Image.new("RGB", target.size, BACKGROUND)
    canvas.paste(resized, placement.dest_box[:2], resized)
    return canvas


def decode_image(data_uri: str) -> Image.Image:
    try:
        _, data = parse_data_uri(data_uri)
    except ValueError as exc:
        raise DecodeError(f"Could not load thumbnail image: {exc}") from exc
    try:
        img = Image.open(BytesIO(data))
        img.load()
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as exc:
        raise DecodeError("Could not load thumbnail image: data is not a supported image") from exc
    w, h = img.size
    if w <= 0 or h <= 0:
        raise DecodeError(f"Could not load thumbnail image: invalid dimensions {w}x{h}")
    return img


def export_thumbnail(data_uri: str, target: ExportResolution, mode: FitMode = FitMode.COVER) -> bytes:
    img = decode_image(data_uri)
    out = fit_image(img, target, mode)
    logger.info("exported %dx%d source to %s (%s)", img.size[0], img.size[1], target.label, mode.value)
    buf = BytesIO()
    out.save(buf, format="PNG")
    return buf.getvalue()


def export_filename(topic: str, target: ExportResolution) -> str:
    safe = re.sub(r"[^a-z0-9]", "_", topic or "", flags=re.IGNORECASE).lower()
    return f"thumbly-ai-{safe}-{target.width}x{target.height}.png"
