from __future__ import annotations

import logging
from typing import Any, Mapping, cast

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError

from thumbly.errors import FieldProblem, ValidationError
from thumbly.models import ImageAttachment, ThumbnailParameters, parse_data_uri

logger = logging.getLogger(__name__)

TOPIC_MIN_LENGTH = 3
TOPIC_MAX_LENGTH = 100


def _blank_to_none(value: Any) -> Any:
    # A cleared file input arrives as "", which means "no image".
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_data_uri(value: str, message: str) -> str:
    try:
        parse_data_uri(value)
    except ValueError:
        raise PydanticCustomError("data_uri", message)
    return value.strip()


class GenerateForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True, frozen=True)

    video_topic: str = Field(alias="videoTopic")
    color_scheme: str = Field(alias="colorScheme")
    font_pairing: str = Field(alias="fontPairing")
    style: str
    uploaded_image_data_uri: str | None = Field(default=None, alias="uploadedImageDataUri")

    @field_validator("video_topic")
    @classmethod
    def _topic_length(cls, v: str) -> str:
        if len(v) < TOPIC_MIN_LENGTH:
            raise PydanticCustomError(
                "topic_too_short", "Video topic must be at least {n} characters long.", {"n": TOPIC_MIN_LENGTH}
            )
        if len(v) > TOPIC_MAX_LENGTH:
            raise PydanticCustomError("topic_too_long", "Video topic is too long.")
        return v

    @field_validator("color_scheme")
    @classmethod
    def _color_scheme_present(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("required", "Please select a color scheme.")
        return v

    @field_validator("font_pairing")
    @classmethod
    def _font_pairing_present(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("required", "Please select a font pairing.")
        return v

    @field_validator("style")
    @classmethod
    def _style_present(cls, v: str) -> str:
        if not v:
            raise PydanticCustomError("required", "Please select a style.")
        return v

    @field_validator("uploaded_image_data_uri", mode="before")
    @classmethod
    def _upload_blank(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("uploaded_image_data_uri")
    @classmethod
    def _upload_uri(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return _check_data_uri(v, "Invalid uploaded image data URI")

    def parameters(self) -> ThumbnailParameters:
        return ThumbnailParameters(
            video_topic=self.video_topic,
            color_scheme=self.color_scheme,
            font_pairing=self.font_pairing,
            style=self.style,
        )

    def uploaded_image(self) -> ImageAttachment | None:
        if self.uploaded_image_data_uri is None:
            return None
        return ImageAttachment.from_data_uri(self.uploaded_image_data_uri)


class RegenerateForm(GenerateForm):
    previous_thumbnail: str = Field(alias="previousThumbnail")

    @field_validator("previous_thumbnail")
    @classmethod
    def _previous_uri(cls, v: str) -> str:
        return _check_data_uri(v, "Invalid previous thumbnail data URI")

    def previous_result(self) -> ImageAttachment:
        return ImageAttachment.from_data_uri(self.previous_thumbnail)


def _problems_from(exc: pydantic.ValidationError) -> list[FieldProblem]:
    problems: list[FieldProblem] = []
    for err in exc.errors():
        loc = err.get("loc") or ("input",)
        name = str(loc[0])
        if err.get("type") == "missing":
            msg = f"{name} is required"
        elif err.get("type") == "string_type":
            msg = f"{name} must be a string"
        else:
            msg = err.get("msg") or f"{name} is invalid"
        problems.append(FieldProblem(field=name, message=msg))
    return problems


def _parse(form_cls: type[GenerateForm], raw: Mapping[str, Any] | None) -> GenerateForm:
    if not isinstance(raw, Mapping):
        raise ValidationError([FieldProblem(field="input", message="Request body must be an object")])
    try:
        return form_cls.model_validate(dict(raw))
    except pydantic.ValidationError as exc:
        problems = _problems_from(exc)
        logger.info("rejected %s input: fields=%s", form_cls.__name__, [p.field for p in problems])
        raise ValidationError(problems) from exc


def validate_generate_input(raw: Mapping[str, Any] | None) -> tuple[ThumbnailParameters, ImageAttachment | None]:
    form = _parse(GenerateForm, raw)
    return form.parameters(), form.uploaded_image()


def validate_regenerate_input(
    raw: Mapping[str, Any] | None,
) -> tuple[ThumbnailParameters, ImageAttachment, ImageAttachment | None]:
    form = cast(RegenerateForm, _parse(RegenerateForm, raw))
    return form.parameters(), form.previous_result(), form.uploaded_image()
