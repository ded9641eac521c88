from __future__ import annotations
import numpy as np

from ..models.image import Image
from ..models.luminance import LuminanceMap

# ITU-R BT.709 luma weights, scaled by 10000 so the weighted sum can be
# floored in integer arithmetic. The weights sum to exactly 10000.
_WEIGHT_SCALE = 10000
_BT709_WEIGHTS = np.array([2126, 7152, 722], dtype=np.int64)


class GrayscaleService:
    """
    RGB → luminance conversion.
    *   Pure: never mutates the input pixels.
    *   L = 0.2126 R + 0.7152 G + 0.0722 B, truncated to uint8.
    """

    @staticmethod
    def to_luminance(pixels: np.ndarray) -> np.ndarray:
        """
        Args:
            pixels (np.ndarray): (H, W, 3) uint8 RGB pixels.

        Returns:
            (np.ndarray): (H, W) uint8 luminance.
        """
        if pixels.ndim != 3 or pixels.shape[2] != 3:
            raise ValueError(f"Expected (H, W, 3) RGB pixels, got shape {pixels.shape}")

        weighted = pixels.astype(np.int64) @ _BT709_WEIGHTS
        return (weighted // _WEIGHT_SCALE).astype(np.uint8)

    def to_grayscale(self, img: Image) -> LuminanceMap:
        return LuminanceMap(values=self.to_luminance(img.pixels))
