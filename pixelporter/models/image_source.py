from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import numpy as np


@dataclass
class ImageSource:
    """
    Decoded image handed from the loader to the extractor.
    No OpenCV logic outside the repository layer.
    """
    pixels: np.ndarray # Shape (H, W, 3), dtype uint8, RGB order.
    origin: str | None = None # Where the bytes came from (filename, URL), bookkeeping only.

    @property
    def native_width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def native_height(self) -> int:
        return int(self.pixels.shape[0])

    def sample(self, x: int, y: int) -> Tuple[int, int, int]:
        """Return the (R, G, B) triple at column *x*, row *y*."""
        if not (0 <= x < self.native_width and 0 <= y < self.native_height):
            raise IndexError(
                f"({x}, {y}) outside {self.native_width}x{self.native_height} image"
            )
        r, g, b = self.pixels[y, x, :3]
        return int(r), int(g), int(b)
