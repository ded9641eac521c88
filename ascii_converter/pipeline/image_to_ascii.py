"""
Image → ASCII pipeline.
Loads a file, converts it to BT.709 luminance and renders a character grid.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from ..models.ascii_art import AsciiArt
from ..models.image import Image
from ..services.ascii_art_service import AsciiArtService
from ..services.grayscale_service import GrayscaleService
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def convert_image(
    img: Image,
    target_width: int,
    *,
    grayscale_service: GrayscaleService | None = None,
    ascii_art_service: AsciiArtService | None = None,
) -> AsciiArt:
    """
    Grayscale + render steps for an already loaded Image.

    Args:
        img: Non-empty RGB Image
        target_width: Number of output columns (> 0)

    Returns:
        AsciiArt: The rendered grid. Has zero rows when the image is too
        short for the requested width.
    """
    grayscale_service = grayscale_service or GrayscaleService()
    ascii_art_service = ascii_art_service or AsciiArtService()

    luminance = grayscale_service.to_grayscale(img)
    return ascii_art_service.render(luminance, target_width, image=img)


def image_to_ascii(
    path: Union[str, Path],
    target_width: int,
    *,
    image_service: ImageService | None = None,
    grayscale_service: GrayscaleService | None = None,
    ascii_art_service: AsciiArtService | None = None,
) -> Optional[AsciiArt]:
    """
    Full pipeline for one file.

    Returns:
        AsciiArt, or None when the image could not be loaded.
    """
    image_service = image_service or ImageService()

    img = image_service.load(path)
    if img.is_empty:
        return None

    logger.info(f"Converting {path} ({img.width}x{img.height}) at width {target_width}")
    return convert_image(img, target_width,
                         grayscale_service=grayscale_service,
                         ascii_art_service=ascii_art_service)
