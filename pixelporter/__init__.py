"""PixelPorter: turn images into bounded RGB pixel grids for Roblox."""

__version__ = "1.0.0"
