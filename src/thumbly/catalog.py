from __future__ import annotations

from thumbly.models import ExportResolution

# Options offered by the form. Validation only requires non-empty values,
# so these are suggestions rather than a closed set.
COLOR_SCHEMES: list[str] = [
    "Bright & Punchy",
    "Dark & Moody",
    "Pastel & Soft",
    "Monochrome",
    "Neon Glow",
    "Earthy Tones",
    "Oceanic Blues",
    "Sunset Gradients",
]

FONT_PAIRINGS: list[str] = [
    "Modern Sans Serif Duo",
    "Classic Serif & Sans",
    "Playful & Bold Display",
    "Minimalist & Clean",
    "Tech & Futuristic",
    "Elegant Script & Sans",
    "Handwritten & Friendly",
]

STYLES: list[str] = [
    "Minimalist Clean",
    "Bold & Impactful",
    "Illustrated / Cartoonish",
    "Photorealistic",
    "Abstract & Artsy",
    "Retro / Vintage",
    "3D Render",
    "Gradient Focused",
]

RESOLUTIONS: dict[str, ExportResolution] = {
    "FHD": ExportResolution(width=1920, height=1080, label="1920x1080 (FHD)"),
    "HD": ExportResolution(width=1280, height=720, label="1280x720 (HD)"),
}
