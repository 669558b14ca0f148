from pathlib import Path
from typing import Union
import logging
import numpy as np
from PIL import Image as PILImage
from pixelporter.models.image_source import ImageSource
from pixelporter.models.pixel_grid import PixelGrid
from pixelporter.repositories.image_repository import ImageRepository

logger = logging.getLogger(__name__)

ImageInput = Union[bytes, bytearray, str, Path]


class ImageService:
    """Loading helpers.  Decoding and network I/O live in the repository."""
    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    def load(self, source: ImageInput, *, name: str | None = None) -> ImageSource:
        """
        Decode any supported input into an ImageSource.

        Args:
            source: Encoded image bytes, an http(s)/data URL string, or a local Path.
            name: Optional display name (e.g. the uploaded filename).

        Returns:
            ImageSource with RGB uint8 pixels.

        Raises:
            DecodeFailed: the bytes are not a decodable image.
            FetchFailed: the URL or file could not be retrieved.
        """
        if isinstance(source, (bytes, bytearray)):
            return self.load_bytes(bytes(source), name=name)
        if isinstance(source, Path):
            return self.load_path(source)
        if isinstance(source, str):
            return self.load_url(source)
        raise TypeError(f"Unsupported image source type: {type(source).__name__}")

    def load_bytes(self, data: bytes, *, name: str | None = None) -> ImageSource:
        source = self.image_repository.decode(data, origin=name)
        logger.info(f"Decoded {name or 'upload'}: {source.native_width}x{source.native_height}")
        return source

    def load_url(self, url: str) -> ImageSource:
        url = url.strip()
        data = self.image_repository.fetch(url)
        # data: URLs can be megabytes long, keep the log readable
        label = url if not url.startswith("data:") else url[:32] + "..."
        source = self.image_repository.decode(data, origin=label)
        logger.info(f"Decoded {label}: {source.native_width}x{source.native_height}")
        return source

    def load_path(self, path: Union[str, Path]) -> ImageSource:
        path = Path(path)
        data = self.image_repository.read_file(path)
        return self.load_bytes(data, name=path.name)

    @staticmethod
    def grid_to_pil(grid: PixelGrid) -> PILImage.Image:
        """
        Rebuild a PIL image from a PixelGrid, the same way the Roblox side
        does: flat index -> (index % Width, index // Width).
        """
        arr = np.asarray(grid.pixels, dtype=np.uint8).reshape(grid.height, grid.width, 3)
        return PILImage.fromarray(np.ascontiguousarray(arr))
