from dataclasses import dataclass
from typing import Tuple

import numpy as np


@dataclass
class RasterImage:
    """RGBA raster held as a (height, width, 4) uint8 array."""

    pixels: np.ndarray

    def __post_init__(self):
        if not isinstance(self.pixels, np.ndarray):
            raise TypeError(f"Expected numpy array for pixels, got {type(self.pixels)}")
        if self.pixels.ndim != 3 or self.pixels.shape[2] != 4:
            raise ValueError(f"Pixels must have shape (height, width, 4), got {self.pixels.shape}")
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Pixels must be uint8, got {self.pixels.dtype}")

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def copy(self) -> "RasterImage":
        return RasterImage(self.pixels.copy())

    @classmethod
    def blank(cls, width: int, height: int, color: Tuple[int, int, int, int] = (255, 255, 255, 255)) -> "RasterImage":
        pixels = np.empty((height, width, 4), dtype=np.uint8)
        pixels[:] = color
        return cls(pixels)
