#!/usr/bin/env python3
"""
Batch conversion: every image in a folder becomes a .txt rendering.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

from ..pipeline.image_to_ascii import convert_image
from ..services.ascii_art_service import AsciiArtService
from ..services.image_service import ImageService
from ..services.renderers import RENDERERS, create_renderer
from .interactive import configure_logging

# Load environment variables first
load_dotenv()

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert a folder of images to ASCII art text files")
    parser.add_argument("folder", help="Directory containing images")
    parser.add_argument("--width", type=int, default=int(os.getenv("DEFAULT_ASCII_WIDTH", "100")),
                        help="Output width in characters")
    parser.add_argument("--out-dir", default=None,
                        help="Where to write .txt files (default: next to each image)")
    parser.add_argument("--recursive", action="store_true", help="Descend into sub-directories")
    parser.add_argument("--mode", choices=sorted(RENDERERS), default=None,
                        help="Renderer to use (default: RENDER_MODE or basic)")
    return parser


def _unique_target(target_dir: Path, source: Path, taken: set) -> Path:
    """
    <stem>.txt, or <stem>_<ext>[_n].txt when an earlier image of this run
    already claimed that name (a.png next to a.jpg, same name in two
    sub-folders with --out-dir).
    """
    target = target_dir / f"{source.stem}.txt"
    if target not in taken:
        return target

    base = f"{source.stem}_{source.suffix.lstrip('.').lower()}"
    candidate = target_dir / f"{base}.txt"
    n = 1
    while candidate in taken:
        n += 1
        candidate = target_dir / f"{base}_{n}.txt"
    logger.warning(f"{source}: {target.name} already written, using {candidate.name}")
    return candidate


def convert_folder(
    folder: str | Path,
    width: int,
    *,
    out_dir: str | Path | None = None,
    recursive: bool = False,
    mode: str | None = None,
    image_service: ImageService | None = None,
) -> List[Path]:
    """
    Render each readable image under `folder` and save it as <stem>.txt.

    Returns:
        Paths of the written text files.
    """
    if width <= 0:
        raise ValueError(f"Width must be positive, got {width}")

    image_service = image_service or ImageService()
    ascii_art_service = AsciiArtService(create_renderer(mode))

    written = []
    taken = set()
    for img in tqdm(image_service.stream_gallery(folder, recursive=recursive),
                    desc="ascii", unit="img", ncols=70):
        art = convert_image(img, width, ascii_art_service=ascii_art_service)
        if art.height == 0:
            logger.warning(f"{img.path.name}: too short for width {width}, writing empty file")

        target_dir = Path(out_dir) if out_dir else img.path.parent
        target = _unique_target(target_dir, img.path, taken)
        taken.add(target)
        written.append(ascii_art_service.save(art, target))

    logger.info(f"Wrote {len(written)} file(s)")
    return written


def main(argv: Optional[List[str]] = None) -> int:
    configure_logging()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.width <= 0:
        parser.error("--width must be a positive integer")

    try:
        written = convert_folder(args.folder, args.width, out_dir=args.out_dir,
                                 recursive=args.recursive, mode=args.mode)
    except NotADirectoryError as err:
        print(f"Error: not a directory: {err}", file=sys.stderr)
        return 1

    for path in written:
        print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
