from pathlib import Path
from typing import Union
import base64
import binascii
import logging
import os
import numpy as np
import cv2
import requests
from dotenv import load_dotenv
from pixelporter.models.image_source import ImageSource
from pixelporter.models.errors import BackendUnavailable, DecodeFailed, FetchFailed

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

# Resampling filters by config name. Bilinear is the documented default.
RESAMPLE_FILTERS = {
    "bilinear": cv2.INTER_LINEAR,
    "nearest": cv2.INTER_NEAREST,
    "area": cv2.INTER_AREA,
}


class ImageRepository:
    """
    Handles byte I/O, decoding and resampling for ImageSource entities.
    The only place that talks to OpenCV or the network.
    """
    def __init__(self):
        self.FETCH_TIMEOUT_S = float(os.getenv("FETCH_TIMEOUT_S", "10"))
        self.MAX_FETCH_BYTES = int(float(os.getenv("MAX_FETCH_SIZE_MB", "25")) * 1024 * 1024)
        self.USER_AGENT = os.getenv("FETCH_USER_AGENT", "pixelporter/1.0")

        filter_name = os.getenv("RESAMPLE_FILTER", "bilinear").strip().lower()
        if filter_name not in RESAMPLE_FILTERS:
            raise ValueError(
                f"Unknown RESAMPLE_FILTER {filter_name!r}, expected one of {sorted(RESAMPLE_FILTERS)}"
            )
        self.resample_filter = filter_name

    # ---------- decoding ----------
    @staticmethod
    def decode(data: bytes, origin: str | None = None) -> ImageSource:
        """
        Decode PNG/JPEG/... bytes into an RGB ImageSource.
        IMREAD_COLOR drops alpha and reduces 16-bit samples to 8 bits.
        """
        if not data:
            raise DecodeFailed(f"No image data to decode{_label(origin)}")

        buf = np.frombuffer(data, dtype=np.uint8)
        try:
            arr_bgr = cv2.imdecode(buf, cv2.IMREAD_COLOR)
        except cv2.error as err:
            raise DecodeFailed(f"Failed to load image{_label(origin)}: {err}") from err

        if arr_bgr is None or arr_bgr.size == 0:
            raise DecodeFailed(f"Failed to load image{_label(origin)}: not a supported image format")

        arr = np.ascontiguousarray(arr_bgr[:, :, ::-1])
        return ImageSource(pixels=arr, origin=origin)

    # ---------- fetching ----------
    @staticmethod
    def read_file(path: Union[str, Path]) -> bytes:
        path = Path(path)
        try:
            return path.read_bytes()
        except OSError as err:
            raise FetchFailed(f"Could not read {path}: {err.strerror or err}") from err

    def fetch(self, url: str) -> bytes:
        """
        Download the raw bytes behind *url* (http, https or data:).
        Any failure surfaces as FetchFailed; nothing is retried.
        """
        if url.startswith("data:"):
            return self._decode_data_url(url)

        scheme = url.split(":", 1)[0].lower() if ":" in url else ""
        if scheme not in ("http", "https"):
            raise FetchFailed(f"Unsupported URL scheme: {url}")

        try:
            response = requests.get(
                url,
                timeout=self.FETCH_TIMEOUT_S,
                headers={"User-Agent": self.USER_AGENT, "Accept": "image/*"},
                stream=True,
            )
        except requests.RequestException as err:
            raise FetchFailed(f"Failed to load image from {url}: {err}") from err

        try:
            if not 200 <= response.status_code < 300:
                raise FetchFailed(f"Failed to load image from {url}: HTTP {response.status_code}")

            content_type = response.headers.get("Content-Type", "")
            if content_type and not content_type.lower().startswith("image/"):
                raise FetchFailed(f"URL does not point to an image ({content_type}): {url}")

            chunks = []
            received = 0
            for chunk in response.iter_content(chunk_size=64 * 1024):
                received += len(chunk)
                if received > self.MAX_FETCH_BYTES:
                    raise FetchFailed(
                        f"Image at {url} exceeds {self.MAX_FETCH_BYTES // (1024 * 1024)}MB download limit"
                    )
                chunks.append(chunk)
        except requests.RequestException as err:
            raise FetchFailed(f"Failed to load image from {url}: {err}") from err
        finally:
            response.close()

        logger.debug(f"Fetched {received} bytes from {url}")
        return b"".join(chunks)

    @staticmethod
    def _decode_data_url(url: str) -> bytes:
        header, sep, payload = url.partition(",")
        if not sep:
            raise FetchFailed("Malformed data URL")
        media_type = header[len("data:"):].split(";", 1)[0].lower()
        if media_type and not media_type.startswith("image/"):
            raise FetchFailed(f"Data URL is not an image ({media_type})")
        if not header.endswith(";base64"):
            raise FetchFailed("Only base64 data URLs are supported")
        try:
            return base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as err:
            raise FetchFailed(f"Malformed data URL: {err}") from err

    # ---------- resampling ----------
    def resample(self, source: ImageSource, width: int, height: int) -> ImageSource:
        """Resize *source* to exactly width x height with the configured filter."""
        try:
            resized = cv2.resize(
                source.pixels,
                (width, height),
                interpolation=RESAMPLE_FILTERS[self.resample_filter],
            )
        except cv2.error as err:
            raise BackendUnavailable(f"Image resampling failed: {err}") from err
        return ImageSource(pixels=resized, origin=source.origin)


def _label(origin: str | None) -> str:
    return f" ({origin})" if origin else ""
