from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import numpy as np


@dataclass(frozen=True)
class Image:
    """
    Simple data object: RGB pixels (+ optional source path for bookkeeping).
    An Image with no pixels is how a failed load is reported.
    """
    pixels: np.ndarray # Shape (H, W, 3), dtype uint8, RGB order.
    path: Path | None = None # Source of the image.

    @classmethod
    def empty(cls, path: str | Path | None = None) -> "Image":
        return cls(pixels=np.empty((0, 0, 3), dtype=np.uint8),
                   path=Path(path) if path is not None else None)

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def is_empty(self) -> bool:
        return self.pixels.size == 0
