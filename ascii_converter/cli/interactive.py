#!/usr/bin/env python3
"""
Interactive ASCII art shell.
Asks for an image path and an output width, prints the rendering, repeats
until the quit sentinel is entered.
"""
from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Optional, TextIO

from dotenv import load_dotenv

from ..pipeline.image_to_ascii import convert_image
from ..services.ascii_art_service import AsciiArtService
from ..services.image_service import ImageService

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)

PATH_PROMPT = "Enter the path to the image file (or '{quit}' to quit): "
WIDTH_PROMPT = "Enter the desired width for the ASCII art: "


def configure_logging() -> None:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "WARNING").upper(),
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )


def _parse_width(answer: str) -> Optional[int]:
    """Returns None for anything not a positive int."""
    try:
        width = int(answer)
    except ValueError:
        return None
    return width if width > 0 else None


def run(
    input_fn: Callable[[str], str] = input,
    out: TextIO | None = None,
    err: TextIO | None = None,
    *,
    image_service: ImageService | None = None,
    ascii_art_service: AsciiArtService | None = None,
    quit_sentinel: str | None = None,
    default_width: int | str | None = None,
) -> int:
    """
    Drive the load → grayscale → render loop.

    Returns:
        Number of images rendered before quitting.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    image_service = image_service or ImageService()
    ascii_art_service = ascii_art_service or AsciiArtService()
    quit_sentinel = quit_sentinel or os.getenv("QUIT_SENTINEL", "q")
    if default_width is None:
        default_width = os.getenv("DEFAULT_ASCII_WIDTH", "100")

    rendered = 0
    while True:
        try:
            path = input_fn(PATH_PROMPT.format(quit=quit_sentinel)).strip()
        except EOFError:
            break
        if path == quit_sentinel:
            break
        if not path:
            continue

        img = image_service.load(path)
        if img.is_empty:
            print("Failed to load image!", file=err)
            continue

        try:
            answer = input_fn(WIDTH_PROMPT)
        except EOFError:
            break
        # an empty answer falls back to the default, which is checked the same way
        answer = answer.strip() or str(default_width).strip()
        width = _parse_width(answer)
        if width is None:
            print(f"Invalid width {answer!r}: expected a positive integer.", file=err)
            continue

        print(f"Converting grayscale image to ASCII art (width = {width}):", file=out)
        art = convert_image(img, width, ascii_art_service=ascii_art_service)
        if art.height == 0:
            print(f"Image {img.width}x{img.height} is too short to render at width {width}; "
                  f"no rows produced.", file=err)
        ascii_art_service.write(art, out)
        print(file=out)
        rendered += 1

    return rendered


def main() -> int:
    configure_logging()
    try:
        run()
    except KeyboardInterrupt:
        print(file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
