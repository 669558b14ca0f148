# pipeline/convert.py
import logging
import os

from dotenv import load_dotenv

from pixelporter.models.conversion_result import ConversionResult
from pixelporter.models.errors import ConversionError, NoInputProvided
from pixelporter.services.image_service import ImageService
from pixelporter.services.pixel_extraction_service import PixelExtractionService

# ------------------------------------------------------------------
# env‑vars
load_dotenv()
MAX_DIM = int(os.getenv("MAX_DIM", "512"))
URL_SOURCE_NAME = "Image from URL"

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
def convert_image(
    file_bytes: bytes | None = None,
    url: str | None = None,
    *,
    filename: str | None = None,
    max_dim: int | None = None,
    image_service: ImageService | None = None,
    extraction_service: PixelExtractionService | None = None,
) -> ConversionResult:
    """
    Top-level conversion entry point.

        • file bytes win over a URL when both are given
        • decode → bounded resize → row-major RGB grid
        • every ConversionError is caught and returned, never raised

    Returns a ConversionResult holding either the PixelGrid or the error.
    Raises ValueError up front, before any I/O, if max_dim is not positive.
    """
    image_service = image_service or ImageService()
    extraction_service = extraction_service or PixelExtractionService(
        image_service.image_repository.resample
    )
    max_dim = MAX_DIM if max_dim is None else max_dim
    if max_dim < 1:
        raise ValueError(f"max_dim must be positive, got {max_dim}")

    if file_bytes is not None:
        source_name = filename or "upload"
    elif url is not None and url.strip():
        source_name = URL_SOURCE_NAME
    else:
        logger.warning("Conversion requested without a file or URL")
        return ConversionResult(source_name="", error=NoInputProvided())

    try:
        if file_bytes is not None:
            source = image_service.load_bytes(file_bytes, name=filename)
        else:
            source = image_service.load_url(url)
        grid = extraction_service.extract(source, max_dim=max_dim)
    except ConversionError as err:
        logger.error(f"Conversion of {source_name} failed ({err.kind}): {err.message}")
        return ConversionResult(source_name=source_name, error=err)

    result = ConversionResult(source_name=source_name, grid=grid)
    logger.info(f"Conversion complete for {source_name}: {result.summary}")
    return result
