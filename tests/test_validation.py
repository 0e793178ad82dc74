import pytest

from thumbly.errors import ValidationError
from thumbly.validation import validate_generate_input, validate_regenerate_input


@pytest.mark.parametrize("topic", ["abc", "x" * 100])
def test_topic_length_bounds_accepted(form, topic):
    params, upload = validate_generate_input({**form, "videoTopic": topic})
    assert params.video_topic == topic
    assert upload is None


@pytest.mark.parametrize("topic", ["ab", "x" * 101])
def test_topic_length_bounds_rejected(form, topic):
    with pytest.raises(ValidationError) as exc:
        validate_generate_input({**form, "videoTopic": topic})
    assert exc.value.fields == ["videoTopic"]


def test_errors_are_aggregated(form):
    with pytest.raises(ValidationError) as exc:
        validate_generate_input({**form, "videoTopic": "ab", "colorScheme": ""})
    assert sorted(exc.value.fields) == ["colorScheme", "videoTopic"]
    assert "Video topic must be at least 3 characters long." in exc.value.message
    assert "Please select a color scheme." in exc.value.message


def test_missing_fields_are_reported():
    with pytest.raises(ValidationError) as exc:
        validate_generate_input({})
    assert sorted(exc.value.fields) == ["colorScheme", "fontPairing", "style", "videoTopic"]


def test_non_mapping_input_is_rejected():
    with pytest.raises(ValidationError) as exc:
        validate_generate_input(None)
    assert exc.value.fields == ["input"]


def test_empty_upload_is_absent(form):
    _, upload = validate_generate_input({**form, "uploadedImageDataUri": ""})
    assert upload is None


def test_valid_upload_is_parsed(form, red_uri):
    _, upload = validate_generate_input({**form, "uploadedImageDataUri": red_uri})
    assert upload is not None
    assert upload.mime_type == "image/png"
    assert upload.to_data_uri() == red_uri


@pytest.mark.parametrize(
    "bad",
    [
        "https://example.com/a.png",
        "data:image/png;base64,",
        "data:text/plain;base64,aGVsbG8=",
        "data:image/png;base64,@@not-base64@@",
        "data:image/png,rawbytes",
    ],
)
def test_malformed_upload_is_rejected(form, bad):
    with pytest.raises(ValidationError) as exc:
        validate_generate_input({**form, "uploadedImageDataUri": bad})
    assert exc.value.fields == ["uploadedImageDataUri"]
    assert "Invalid uploaded image data URI" in exc.value.message


def test_regenerate_requires_previous_thumbnail(form):
    with pytest.raises(ValidationError) as exc:
        validate_regenerate_input(form)
    assert exc.value.fields == ["previousThumbnail"]


def test_regenerate_rejects_malformed_previous(form):
    with pytest.raises(ValidationError) as exc:
        validate_regenerate_input({**form, "previousThumbnail": "data:image/png;base64"})
    assert "Invalid previous thumbnail data URI" in exc.value.message


def test_regenerate_parses_all_images(form, red_uri, green_uri):
    params, previous, upload = validate_regenerate_input(
        {**form, "previousThumbnail": red_uri, "uploadedImageDataUri": green_uri}
    )
    assert params.style == "Minimalist Clean"
    assert previous.to_data_uri() == red_uri
    assert upload.to_data_uri() == green_uri


@pytest.mark.parametrize("mime", ["image/svg+xml", "image/tiff", "image/x-icon"])
def test_non_raster_upload_is_rejected(form, mime):
    with pytest.raises(ValidationError) as exc:
        validate_generate_input({**form, "uploadedImageDataUri": f"data:{mime};base64,PHN2Zz48L3N2Zz4="})
    assert exc.value.fields == ["uploadedImageDataUri"]


@pytest.mark.parametrize("mime", ["image/png", "image/jpeg", "image/jpg", "image/webp", "image/gif"])
def test_raster_mime_types_are_accepted(form, mime):
    _, upload = validate_generate_input({**form, "uploadedImageDataUri": f"data:{mime};base64,AAAA"})
    assert upload.mime_type == mime
