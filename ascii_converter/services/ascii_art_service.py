from __future__ import annotations
from pathlib import Path
from typing import TextIO, Union
import logging
import sys

from ..models.ascii_art import AsciiArt
from ..models.image import Image
from ..models.luminance import LuminanceMap
from .renderers import Renderer, create_renderer

logger = logging.getLogger(__name__)


class AsciiArtService:
    """
    Business layer for turning luminance into text and emitting it.
    The rendering strategy is injected; defaults to RENDER_MODE.
    """

    def __init__(self, renderer: Renderer | None = None):
        self.renderer = renderer or create_renderer()

    def render(self, luminance: LuminanceMap, target_width: int,
               image: Image | None = None) -> AsciiArt:
        art = self.renderer.render(luminance, target_width, image=image)
        logger.info(f"Rendered {art.width}x{art.height} cells with '{self.renderer.name}' renderer")
        return art

    @staticmethod
    def write(art: AsciiArt, stream: TextIO | None = None) -> None:
        """
        Emit every row followed by a line break. Zero rows writes nothing.
        """
        stream = stream or sys.stdout
        for row in art.rows:
            stream.write(row + "\n")
        stream.flush()

    @staticmethod
    def save(art: AsciiArt, path: Union[str, Path]) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        text = art.to_text()
        path.write_text(text + "\n" if text else "", encoding="utf-8")
        return path
