from io import BytesIO
from typing import Dict, Iterable

import numpy as np
from PIL import Image as PILImage

TOP_LEFT = (255, 0, 0)
TOP_RIGHT = (0, 255, 0)
BOTTOM_LEFT = (0, 0, 255)
BOTTOM_RIGHT = (255, 255, 0)


def encode(pixels: np.ndarray, fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    PILImage.fromarray(pixels).save(buffer, format=fmt)
    return buffer.getvalue()


def gradient(width: int, height: int) -> np.ndarray:
    """(H, W, 3) uint8 image whose red follows x and green follows y."""
    xs = np.linspace(0, 255, width, dtype=np.float64)
    ys = np.linspace(0, 255, height, dtype=np.float64)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = xs[None, :].astype(np.uint8)
    arr[:, :, 1] = ys[:, None].astype(np.uint8)
    arr[:, :, 2] = 128
    return arr


class FakeResponse:
    """Just enough of requests.Response for ImageRepository.fetch."""

    def __init__(self, body: bytes = b"", status_code: int = 200, headers: Dict[str, str] | None = None):
        self.body = body
        self.status_code = status_code
        self.headers = {"Content-Type": "image/png"} if headers is None else headers
        self.closed = False

    def iter_content(self, chunk_size: int = 1) -> Iterable[bytes]:
        for start in range(0, len(self.body), chunk_size):
            yield self.body[start:start + chunk_size]

    def close(self):
        self.closed = True
