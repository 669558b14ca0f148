from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List
import json


@dataclass
class PixelGrid:
    """
    Wire format consumed by the Roblox side:
        {"Height": h, "Width": w, "Pixels": [[R, G, B], ...]}
    Pixels are row-major, the consumer recovers (x, y) from the flat
    index as (i % Width, i // Width).
    """
    height: int
    width: int
    pixels: List[List[int]] = field(repr=False)

    def __post_init__(self):
        if self.height < 1 or self.width < 1:
            raise ValueError(f"Grid dimensions must be positive, got {self.width}x{self.height}")
        if len(self.pixels) != self.width * self.height:
            raise ValueError(
                f"Expected {self.width * self.height} pixels for a "
                f"{self.width}x{self.height} grid, got {len(self.pixels)}"
            )

    @property
    def pixel_count(self) -> int:
        return len(self.pixels)

    def to_dict(self) -> Dict[str, Any]:
        # Key names and order are fixed by the consumer
        return {"Height": self.height, "Width": self.width, "Pixels": self.pixels}

    def to_json(self, indent: int | None = None) -> str:
        if indent is None:
            return json.dumps(self.to_dict(), separators=(",", ":"))
        return json.dumps(self.to_dict(), indent=indent)

