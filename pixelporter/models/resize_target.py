from __future__ import annotations
from dataclasses import dataclass

DEFAULT_MAX_DIM = 512


@dataclass(frozen=True)
class ResizeTarget:
    """
    Output size for one conversion.
    Never larger than the source, never larger than max_dim on either side.
    """
    width: int
    height: int

    @classmethod
    def fit(cls, native_width: int, native_height: int, max_dim: int = DEFAULT_MAX_DIM) -> "ResizeTarget":
        if native_width < 1 or native_height < 1:
            raise ValueError(f"Image dimensions must be positive, got {native_width}x{native_height}")
        if max_dim < 1:
            raise ValueError(f"max_dim must be positive, got {max_dim}")

        # scale = min(1.0, max_dim / w, max_dim / h); the 1.0 cap means no upscaling
        longest = max(native_width, native_height)
        if longest <= max_dim:
            return cls(width=native_width, height=native_height)

        # floor(side * max_dim / longest) in integers, float scaling can land one pixel short
        return cls(
            width=max(1, native_width * max_dim // longest),
            height=max(1, native_height * max_dim // longest),
        )

    def is_identity(self, native_width: int, native_height: int) -> bool:
        return self.width == native_width and self.height == native_height
