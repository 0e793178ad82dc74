from types import SimpleNamespace

import pytest

from thumbly.errors import GenerationError
from thumbly.models import ImageAttachment
from thumbly.providers.gemini_provider import GeminiProvider, _extract_image_from_generate_content


def _response(*parts, text=None):
    content = SimpleNamespace(parts=list(parts))
    return SimpleNamespace(candidates=[SimpleNamespace(content=content)], text=text)


def _inline(data, mime="image/png"):
    return SimpleNamespace(inline_data=SimpleNamespace(data=data, mime_type=mime))


class FakeModels:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    async def generate_content(self, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if self.error is not None:
            raise self.error
        return self.response


def _provider(models):
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiProvider(api_key="test", model="gemini-test", client=client)


def test_extract_skips_text_parts():
    resp = _response(SimpleNamespace(inline_data=None, text="here you go"), _inline(b"\x89PNGdata"))
    image = _extract_image_from_generate_content(resp)
    assert image == ImageAttachment(mime_type="image/png", data=b"\x89PNGdata")


def test_extract_ignores_non_image_inline_data():
    resp = _response(_inline(b"{}", mime="application/json"))
    assert _extract_image_from_generate_content(resp) is None


def test_extract_handles_empty_response():
    assert _extract_image_from_generate_content(SimpleNamespace(candidates=None)) is None


async def test_generate_image_sends_attachments_before_text(red_uri, green_uri):
    models = FakeModels(response=_response(_inline(b"out", mime="image/jpeg")))
    provider = _provider(models)
    first = ImageAttachment.from_data_uri(red_uri)
    second = ImageAttachment.from_data_uri(green_uri)

    image = await provider.generate_image("make it pop", [first, second])

    assert image.mime_type == "image/jpeg"
    assert image.data == b"out"
    call = models.calls[0]
    assert call["model"] == "gemini-test"
    contents = call["contents"]
    assert contents[0].inline_data.data == first.data
    assert contents[1].inline_data.data == second.data
    assert contents[2] == "make it pop"
    modalities = [str(m).upper() for m in call["config"].response_modalities]
    assert any("TEXT" in m for m in modalities)
    assert any("IMAGE" in m for m in modalities)


async def test_generate_image_without_image_in_response():
    models = FakeModels(response=_response(SimpleNamespace(inline_data=None), text="I cannot draw that"))
    with pytest.raises(GenerationError) as exc:
        await _provider(models).generate_image("prompt", [])
    assert "did not contain an image" in exc.value.message
    assert "I cannot draw that" in exc.value.message


async def test_generate_image_wraps_client_errors():
    models = FakeModels(error=RuntimeError("503 UNAVAILABLE"))
    with pytest.raises(GenerationError) as exc:
        await _provider(models).generate_image("prompt", [])
    assert exc.value.message == "503 UNAVAILABLE"
