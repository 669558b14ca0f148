from typing import Callable
import logging
import numpy as np
from pixelporter.models.image_source import ImageSource
from pixelporter.models.pixel_grid import PixelGrid
from pixelporter.models.resize_target import DEFAULT_MAX_DIM, ResizeTarget
from pixelporter.repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)

Resampler = Callable[[ImageSource, int, int], ImageSource]


class PixelExtractionService:
    """
    Bounded downscale + row-major RGB extraction.

    The resampler is injectable so the policy can be exercised on synthetic
    in-memory sources without OpenCV in the loop.
    """

    def __init__(self, resample: Resampler | None = None) -> None:
        self.resample = resample or ImageRepository().resample

    @staticmethod
    def compute_target(source: ImageSource, max_dim: int = DEFAULT_MAX_DIM) -> ResizeTarget:
        return ResizeTarget.fit(source.native_width, source.native_height, max_dim)

    @staticmethod
    def _to_rgb8(pixels: np.ndarray) -> np.ndarray:
        """
        Coerce any (H, W), (H, W, 1|3|4) array to (H, W, 3) uint8.
        Alpha is dropped, wider integer types keep their top 8 bits,
        floats are taken as [0, 1].
        """
        if pixels.ndim == 2:
            pixels = pixels[:, :, None]
        if pixels.shape[2] == 1:
            pixels = np.repeat(pixels, 3, axis=2)
        pixels = pixels[:, :, :3]

        if pixels.dtype == np.uint8:
            return pixels
        if np.issubdtype(pixels.dtype, np.floating):
            return (np.clip(pixels, 0.0, 1.0) * 255.0 + 0.5).astype(np.uint8)
        if pixels.dtype == np.uint16:
            return (pixels >> 8).astype(np.uint8)
        return np.clip(pixels, 0, 255).astype(np.uint8)

    def extract(self, source: ImageSource, max_dim: int = DEFAULT_MAX_DIM) -> PixelGrid:
        """
        Args:
            source (ImageSource): A decoded image.
            max_dim (int): Upper bound for either output side.

        Returns:
            (PixelGrid): At most max_dim x max_dim, same aspect ratio, never upscaled.
        """
        target = self.compute_target(source, max_dim)

        if target.is_identity(source.native_width, source.native_height):
            resized = source
        else:
            logger.debug(
                f"Resizing {source.native_width}x{source.native_height} -> "
                f"{target.width}x{target.height}"
            )
            resized = self.resample(source, target.width, target.height)

        rgb = self._to_rgb8(resized.pixels)
        if rgb.shape[:2] != (target.height, target.width):
            raise ValueError(
                f"Resampler returned {rgb.shape[1]}x{rgb.shape[0]}, "
                f"expected {target.width}x{target.height}"
            )

        # (H, W, 3) in C order flattens row by row, left to right
        pixels = np.ascontiguousarray(rgb).reshape(-1, 3).tolist()
        return PixelGrid(height=target.height, width=target.width, pixels=pixels)
