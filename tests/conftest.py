import numpy as np
import pytest
import requests

from pixelporter.models.image_source import ImageSource
from tests.helpers import BOTTOM_LEFT, BOTTOM_RIGHT, TOP_LEFT, TOP_RIGHT, encode, gradient


@pytest.fixture
def corners_pixels() -> np.ndarray:
    return np.array(
        [[TOP_LEFT, TOP_RIGHT], [BOTTOM_LEFT, BOTTOM_RIGHT]],
        dtype=np.uint8,
    )


@pytest.fixture
def corners_source(corners_pixels) -> ImageSource:
    return ImageSource(pixels=corners_pixels, origin="corners")


@pytest.fixture
def png_bytes():
    def _make(width: int, height: int) -> bytes:
        return encode(gradient(width, height), "PNG")
    return _make


@pytest.fixture
def jpeg_bytes():
    def _make(width: int, height: int) -> bytes:
        return encode(gradient(width, height), "JPEG")
    return _make


@pytest.fixture
def fake_get(monkeypatch):
    """
    Route requests.get to a canned response (or exception).
    Returns the list of (url, kwargs) calls made.
    """
    calls = []

    def install(response=None, exc: Exception | None = None):
        def _get(url, **kwargs):
            calls.append((url, kwargs))
            if exc is not None:
                raise exc
            return response
        monkeypatch.setattr(requests, "get", _get)
        return calls

    return install


@pytest.fixture
def unreachable(fake_get):
    return fake_get(exc=requests.ConnectionError("Name or service not known"))
