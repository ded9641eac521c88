from __future__ import annotations
from pathlib import Path
from typing import Union, Iterable, Iterator
import logging
import os
import signal
import threading

import numpy as np
import cv2
from PIL import Image as PILImage
from dotenv import load_dotenv

from ..models.image import Image

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_EXTENSIONS = ".png,.jpg,.jpeg,.bmp,.gif,.tif,.tiff,.webp"


class ImageLoadError(FileNotFoundError):
    """Raised when a file is missing, unreadable or cannot be decoded."""


class ImageRepository:
    """
    Handles file I/O for Image entities.
    Decoded pixels are always 3-channel RGB uint8, whatever the source had.
    """
    def __init__(self, timeout: int | None = None):
        exts = os.getenv("VALID_IMAGE_EXTENSIONS", DEFAULT_IMAGE_EXTENSIONS)
        self.VALID_EXTS = {ext.strip().lower() for ext in exts.split(",") if ext.strip()}
        self.timeout = timeout if timeout is not None else int(os.getenv("LOAD_TIMEOUT", "5"))

    @staticmethod
    def _decode_pillow(path: Path) -> np.ndarray:
        """Fallback for formats OpenCV does not read (GIF and friends)."""
        with PILImage.open(path) as pil_img:
            return np.array(pil_img.convert("RGB"), dtype=np.uint8)

    def _decode(self, path: Path) -> np.ndarray:
        """
        cv2.imread with IMREAD_COLOR: alpha is dropped and grayscale is
        expanded. Returns an owned, contiguous (H, W, 3) RGB copy.
        """
        arr_bgr = None
        try:
            arr_bgr = cv2.imread(str(path), cv2.IMREAD_COLOR)
            if arr_bgr is not None:
                return np.ascontiguousarray(arr_bgr[:, :, ::-1])
        finally:
            arr_bgr = None  # decoder buffer dropped on every path

        logger.debug(f"OpenCV could not decode {path}, trying Pillow")
        return self._decode_pillow(path)

    def _decode_with_timeout(self, path: Path) -> np.ndarray:
        use_alarm = (
            self.timeout > 0
            and hasattr(signal, "SIGALRM")
            and threading.current_thread() is threading.main_thread()
        )
        if not use_alarm:
            return self._decode(path)

        # ─── timeout wrapper (covers both decoders) ───────────────────────
        def _handler(signum, frame):
            raise TimeoutError(f"Decoding timed-out after {self.timeout}s: {path}")

        previous = signal.signal(signal.SIGALRM, _handler)
        signal.alarm(self.timeout)
        try:
            return self._decode(path)
        finally:
            signal.alarm(0)  # always disarm
            signal.signal(signal.SIGALRM, previous)

    def load(self, path: Union[str, Path]) -> Image:
        path = Path(path)
        if not path.is_file():
            raise ImageLoadError(f"Image not found: {path}")

        try:
            rgb = self._decode_with_timeout(path)
        except TimeoutError as err:
            raise ImageLoadError(str(err)) from err
        except (OSError, ValueError, cv2.error, PILImage.DecompressionBombError) as err:
            raise ImageLoadError(f"Image unreadable: {path} ({err})") from err

        if rgb.ndim != 3 or rgb.shape[2] != 3 or rgb.size == 0:
            raise ImageLoadError(f"Image has no RGB pixel data: {path}")

        logger.debug(f"Loaded {path}: {rgb.shape[1]}x{rgb.shape[0]}")
        return Image(pixels=rgb, path=path)

    def iter_dir(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Image]:
        """
        Yield Image objects one at a time.  Nothing accumulates in memory.
        """
        folder = Path(folder)
        if not folder.is_dir():
            raise NotADirectoryError(folder)

        allowed = {e.lower() for e in (exts or self.VALID_EXTS)}
        pattern = "**/*" if recursive else "*"

        for p in sorted(folder.glob(pattern)):
            if p.suffix.lower() not in allowed:
                logger.debug(f"Skipping due to extension: {p}")
                continue
            if not p.is_file():
                logger.debug(f"Skipping because not file: {p}")
                continue
            try:
                yield self.load(p)
            except ImageLoadError as err:
                logger.warning(f"Skipping {p.name}: {err}")

