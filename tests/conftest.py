"""
Shared fixtures for thumbly tests.
"""

import asyncio
import base64
import io
import os
import tempfile

# Settings are read at import time; keep preference files out of the repo.
os.environ.setdefault("DATA_DIR", tempfile.mkdtemp(prefix="thumbly-test-"))

import pytest
from PIL import Image

from thumbly.errors import GenerationError
from thumbly.models import ImageAttachment


def png_data_uri(size=(64, 36), color=(255, 0, 0)) -> str:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, "PNG")
    return "data:image/png;base64," + base64.b64encode(buf.getvalue()).decode("ascii")


class FakeModel:
    """Records every call; returns a fixed image or raises what it was given."""

    name = "fake"
    model = "fake-image-model"

    def __init__(self, result=None, error=None, delay=0.0):
        self.result = result or ImageAttachment.from_data_uri(png_data_uri(color=(0, 0, 255)))
        self.error = error
        self.delay = delay
        self.calls = []

    async def generate_image(self, prompt, attachments):
        self.calls.append((prompt, tuple(attachments)))
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def red_uri():
    return png_data_uri(color=(255, 0, 0))


@pytest.fixture
def green_uri():
    return png_data_uri(color=(0, 255, 0))


@pytest.fixture
def fake_model():
    return FakeModel()


@pytest.fixture
def failing_model():
    return FakeModel(error=GenerationError("quota exceeded"))


@pytest.fixture
def form():
    return {
        "videoTopic": "How to invest in stocks",
        "colorScheme": "Bright & Punchy",
        "fontPairing": "Modern Sans Serif Duo",
        "style": "Minimalist Clean",
    }
