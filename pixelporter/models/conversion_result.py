from __future__ import annotations
from dataclasses import dataclass
from pixelporter.models.errors import ConversionError
from pixelporter.models.pixel_grid import PixelGrid


@dataclass(frozen=True)
class ConversionResult:
    """
    Outcome of one conversion: exactly one of grid / error is set.
    """
    source_name: str
    grid: PixelGrid | None = None
    error: ConversionError | None = None

    def __post_init__(self):
        if (self.grid is None) == (self.error is None):
            raise ValueError("ConversionResult needs exactly one of grid or error")

    @property
    def ok(self) -> bool:
        return self.grid is not None

    @property
    def summary(self) -> str:
        if self.grid is None:
            return self.error.message
        return f"{self.grid.width}×{self.grid.height} • {self.grid.pixel_count:,} pixels"
