from __future__ import annotations
from dataclasses import dataclass
import numpy as np


@dataclass(frozen=True)
class LuminanceMap:
    """
    Single-channel brightness of an image, one uint8 sample per source pixel.
    """
    values: np.ndarray # Shape (H, W), dtype uint8.

    @property
    def height(self) -> int:
        return int(self.values.shape[0])

    @property
    def width(self) -> int:
        return int(self.values.shape[1])
