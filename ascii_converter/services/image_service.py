from pathlib import Path
from typing import Iterable, Union, Iterator
import logging

from ..models.image import Image
from ..repositories.image_repository import ImageRepository, ImageLoadError

logger = logging.getLogger(__name__)


class ImageService:
    """I/O helpers.  No conversion logic, no rendering."""
    def __init__(self, image_repository: ImageRepository | None = None):
        self.image_repository = image_repository or ImageRepository()

    def load(self, path: Union[str, Path]) -> Image:
        """
        Load a single image from disk into an Image object.

        Returns:
            The decoded Image, or an empty Image if the file could not be read.
        """
        try:
            return self.image_repository.load(path)
        except ImageLoadError as err:
            logger.warning(f"Load failed: {err}")
            return Image.empty(path)

    def stream_gallery(
        self,
        folder: Union[str, Path],
        *,
        recursive: bool = False,
        exts: Iterable[str] | None = None,
    ) -> Iterator[Image]:
        """
        Yield images lazily instead of returning a gigantic list.
        """
        return self.image_repository.iter_dir(folder,
                                              recursive=recursive,
                                              exts=exts)