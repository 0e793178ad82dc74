from __future__ import annotations

from dataclasses import dataclass

from thumbly.catalog import RESOLUTIONS
from thumbly.models import (
    ExportResolution,
    GenerationRequest,
    ImageAttachment,
    RegenerationRequest,
    ThumbnailParameters,
)


@dataclass(frozen=True)
class PromptPolicy:
    """
    Knobs for the instruction text. `strict_literal_guard` adds the explicit
    rule that option names must never be rendered as on-image text.
    """

    target: ExportResolution = RESOLUTIONS["FHD"]
    strict_literal_guard: bool = True


DEFAULT_POLICY = PromptPolicy()


def _parameter_summary(params: ThumbnailParameters) -> str:
    return (
        f'Video Topic ("{params.video_topic}"), Color Scheme ("{params.color_scheme}"), '
        f'Font Pairing ("{params.font_pairing}"), and Style ("{params.style}")'
    )


def _literal_guard(policy: PromptPolicy) -> str:
    if policy.strict_literal_guard:
        return (
            "IMPORTANT: Do NOT include the literal names of the color scheme, font pairing, or style "
            "as text on the thumbnail image itself. Instead, use these selections only to guide the "
            "visual design choices like color palettes, font choices, and overall aesthetic. "
            "Any text on the thumbnail must be derived from the Video Topic only."
        )
    return (
        "Use the color scheme, font pairing, and style only as design guidance. "
        "Any text on the thumbnail must be derived from the Video Topic only."
    )


def _output_format(policy: PromptPolicy) -> str:
    t = policy.target
    return (
        f"Output format: a {t.aspect_ratio} landscape image composed for a {t.width}x{t.height} "
        "YouTube thumbnail. Keep key text and subjects away from the edges."
    )


def _base_brief(params: ThumbnailParameters, policy: PromptPolicy) -> str:
    return "\n".join(
        [
            "Generate a high-quality, modern YouTube thumbnail in the style of top creators.",
            "The thumbnail must be:",
            "- Visually Striking: Clean, minimalist, yet eye-catching.",
            f'- Clear & Legible: Feature bold, easy-to-read text that is directly related to the video topic: "{params.video_topic}".',
            f'- High Contrast: Use colors effectively for readability and visual pop, guided by the color scheme: "{params.color_scheme}".',
            "- Professional: Look polished and high-quality.",
            "- Engaging: Designed to maximize click-through rates.",
            "- Relevant: Accurately reflects the video's content.",
            f'- Typographic Style: Apply a font style inspired by "{params.font_pairing}".',
            f'- Overall Aesthetic: Adhere to the style: "{params.style}".',
            "",
            _literal_guard(policy),
            "",
            "The main text from the video topic should be prominent. Avoid visual clutter. "
            "Focus on a single, clear message or visual.",
            _output_format(policy),
        ]
    )


def _refinement_brief(params: ThumbnailParameters, policy: PromptPolicy) -> str:
    return "\n".join(
        [
            "Regenerate the thumbnail to be significantly more modern, engaging, and professional.",
            "Focus on:",
            "- Improved Visual Appeal: Make it cleaner, more minimalist yet eye-catching.",
            f'- Bolder & Clearer Typography: Ensure text derived from the video topic ("{params.video_topic}") is highly legible and impactful.',
            f'- Enhanced Contrast & Colors: Optimize color usage for pop and readability based on the selected color scheme: "{params.color_scheme}".',
            "- Increased Click-Worthiness: Design for maximum engagement.",
            f'- Typographic Style: Apply a font style inspired by "{params.font_pairing}".',
            f'- Overall Aesthetic: Adhere to the style: "{params.style}".',
            "",
            _literal_guard(policy),
            "",
            "Aim for a clear upgrade, featuring strong, legible text and a clean, uncluttered layout.",
            _output_format(policy),
        ]
    )


def build_generation_request(
    params: ThumbnailParameters,
    uploaded_image: ImageAttachment | None = None,
    policy: PromptPolicy = DEFAULT_POLICY,
) -> GenerationRequest:
    text = _base_brief(params, policy)
    attachments: tuple[ImageAttachment, ...] = ()
    if uploaded_image is not None:
        attachments = (uploaded_image,)
        text += (
            "\n\nINSTRUCTION (User Image Provided): The attached image was provided by the user. "
            "Use it as the dominant visual foundation of the thumbnail, as the main subject or the background. "
            f"Integrate it naturally with the {_parameter_summary(params)} specified. "
            "The thumbnail text should be about the video topic."
        )
    else:
        text += (
            "\n\nINSTRUCTION (No User Image): Generate all visual elements for the thumbnail based on the "
            f"{_parameter_summary(params)}. The thumbnail text should be about the video topic."
        )
    return GenerationRequest(parameters=params, attachments=attachments, instruction_text=text)


def build_regeneration_request(
    params: ThumbnailParameters,
    previous_result: ImageAttachment,
    new_upload: ImageAttachment | None = None,
    policy: PromptPolicy = DEFAULT_POLICY,
) -> RegenerationRequest:
    text = _refinement_brief(params, policy)
    attachments: tuple[ImageAttachment, ...] = (previous_result,)
    if new_upload is not None:
        attachments = (previous_result, new_upload)
        text += (
            "\n\nINSTRUCTION FOR REGENERATION (MULTI-IMAGE CONTEXT):\n"
            "The FIRST image provided in the context is the previous thumbnail.\n"
            "The SECOND image provided in the context is a newly uploaded image by the user.\n"
            "Build the new thumbnail around the NEWLY UPLOADED IMAGE (second image) as the dominant visual "
            "element or background. The PREVIOUS THUMBNAIL (first image) may only have a minor influence, "
            "such as layout or color cues that complement the new image.\n"
            f"The result must follow the {_parameter_summary(params)}."
        )
    else:
        text += (
            "\n\nINSTRUCTION FOR REGENERATION (SINGLE-IMAGE CONTEXT):\n"
            "The image provided in the context is the previous thumbnail.\n"
            "Refine this design to make it significantly better, keeping the same "
            f"{_parameter_summary(params)}."
        )
    return RegenerationRequest(parameters=params, attachments=attachments, instruction_text=text)
