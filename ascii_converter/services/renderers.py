"""
Character-grid renderers.

A renderer samples a LuminanceMap on a grid whose height is derived from the
requested width, buckets every sample into a glyph of the ramp and returns
the rows as an AsciiArt.  Variants differ only in how a row of glyphs is
turned into text.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Dict, List, Tuple, Type
import logging
import os

import numpy as np
from dotenv import load_dotenv

from ..models.ascii_art import AsciiArt
from ..models.image import Image
from ..models.luminance import LuminanceMap

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_RAMP = "@%#*+=-:. "   # darkest → brightest
ANSI_RESET = "\x1b[0m"


def target_height_for(width: int, height: int, target_width: int, cell_aspect: int = 2) -> int:
    """
    Rows needed to keep the source proportions when glyph cells are
    `cell_aspect` times taller than wide. May be 0 for wide, short images.
    """
    return height * target_width // (width * cell_aspect)


def sample_grid(width: int, height: int, target_width: int,
                cell_aspect: int = 2) -> Tuple[np.ndarray, np.ndarray]:
    """
    Nearest-pixel sample coordinates.

    Returns:
        (ys, xs): source row index per output row, source column index per
        output column. `ys` is empty when the derived height is 0.
    """
    target_height = target_height_for(width, height, target_width, cell_aspect)
    xs = np.arange(target_width, dtype=np.int64) * width // target_width
    if target_height == 0:
        return np.empty(0, dtype=np.int64), xs
    ys = np.arange(target_height, dtype=np.int64) * height // target_height
    return ys, xs


class Renderer(ABC):
    """
    Base class for luminance → text renderers.
    """
    name: str = ""

    def __init__(self, ramp: str | None = None, cell_aspect: int | None = None):
        self.ramp = ramp if ramp is not None else os.getenv("ASCII_RAMP", DEFAULT_RAMP)
        self.cell_aspect = cell_aspect if cell_aspect is not None else int(os.getenv("CELL_ASPECT", "2"))
        if len(self.ramp) < 2:
            raise ValueError(f"Character ramp needs at least two glyphs, got {self.ramp!r}")
        if self.cell_aspect <= 0:
            raise ValueError(f"Cell aspect must be positive, got {self.cell_aspect}")
        self._glyphs = np.array(list(self.ramp))

    def bucket(self, values: np.ndarray) -> np.ndarray:
        """
        Map luminance to ramp indices: value * len(ramp) // 255, clamped so
        that 255 lands on the last glyph.
        """
        n = len(self.ramp)
        return np.minimum(values.astype(np.int64) * n // 255, n - 1)

    def render(self, luminance: LuminanceMap, target_width: int,
               image: Image | None = None) -> AsciiArt:
        if target_width <= 0:
            raise ValueError(f"Target width must be positive, got {target_width}")
        if luminance.width == 0 or luminance.height == 0:
            raise ValueError("Cannot render an empty luminance map")

        ys, xs = sample_grid(luminance.width, luminance.height, target_width, self.cell_aspect)
        if ys.size == 0:
            logger.debug(f"Derived height is 0 for {luminance.width}x{luminance.height} at width {target_width}")
            return AsciiArt(width=target_width)

        sampled = luminance.values[ys[:, None], xs[None, :]]
        glyphs = self._glyphs[self.bucket(sampled)]
        rows = self._compose_rows(glyphs, ys, xs, image)
        return AsciiArt(width=target_width, rows=rows)

    @abstractmethod
    def _compose_rows(self, glyphs: np.ndarray, ys: np.ndarray, xs: np.ndarray,
                      image: Image | None) -> List[str]:
        ...


class BasicAsciiRenderer(Renderer):
    """Plain glyphs, one character per sampled cell."""
    name = "basic"

    def _compose_rows(self, glyphs, ys, xs, image):
        return ["".join(row) for row in glyphs]


class AnsiColorRenderer(Renderer):
    """
    Same glyphs as the basic renderer, each prefixed with the 24-bit ANSI
    foreground colour of the sampled source pixel.
    """
    name = "ansi"

    def _compose_rows(self, glyphs, ys, xs, image):
        if image is None or image.is_empty:
            raise ValueError("ANSI colour rendering needs the source RGB image")

        colours = image.pixels[ys[:, None], xs[None, :]]
        rows = []
        for glyph_row, colour_row in zip(glyphs, colours):
            cells = [f"\x1b[38;2;{r};{g};{b}m{ch}" for ch, (r, g, b) in zip(glyph_row, colour_row)]
            rows.append("".join(cells) + ANSI_RESET)
        return rows


RENDERERS: Dict[str, Type[Renderer]] = {
    BasicAsciiRenderer.name: BasicAsciiRenderer,
    AnsiColorRenderer.name: AnsiColorRenderer,
}


def create_renderer(name: str | None = None, **kwargs) -> Renderer:
    """
    Build a renderer by name ("basic" or "ansi"); defaults to RENDER_MODE.
    """
    name = (name or os.getenv("RENDER_MODE", BasicAsciiRenderer.name)).strip().lower()
    try:
        cls = RENDERERS[name]
    except KeyError:
        raise ValueError(f"Unknown render mode {name!r}; expected one of {sorted(RENDERERS)}") from None
    return cls(**kwargs)
