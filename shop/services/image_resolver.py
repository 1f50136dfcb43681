import logging
from enum import Enum
from typing import Any, Optional, Union

from shop.core.exceptions import InvalidArgumentTypeError, UnexpectedValueError
from shop.services.hashing import Hasher
from shop.services.images import ImageStorage, UploadedImage

logger = logging.getLogger(__name__)


class ImageMode(str, Enum):
    DEFAULT = "default"
    BROWSE = "browse"
    UPLOAD = "upload"


class ImageResolver:
    """
    Turns an (image mode, payload) pair into the image name stored on an item.

      default -> None (use the default image), payload ignored
      browse  -> payload is a filename already in storage, returned as-is
      upload  -> payload is an UploadedImage; stored as "<content hash>.<ext>"

    Uploads are content-addressed: the same bytes always land under the same
    name, so re-uploading overwrites instead of piling up copies.
    """

    def __init__(self, hasher: Hasher, storage: ImageStorage):
        self.hasher = hasher
        self.storage = storage

    def resolve(self, mode: Union[ImageMode, str], file_or_name: Any) -> Optional[str]:
        try:
            mode = ImageMode(mode)
        except ValueError:
            raise UnexpectedValueError(f"Unexpected value ({mode}) of argument mode") from None

        if mode is ImageMode.DEFAULT:
            logger.debug("Default image requested")
            return None

        if mode is ImageMode.BROWSE:
            if not isinstance(file_or_name, str) or not file_or_name:
                raise InvalidArgumentTypeError("file_or_name", str, file_or_name)
            return file_or_name

        if not isinstance(file_or_name, UploadedImage):
            raise InvalidArgumentTypeError("file_or_name", UploadedImage, file_or_name)
        return self._move_and_get_name(file_or_name)

    def _move_and_get_name(self, upload: UploadedImage) -> str:
        digest = self.hasher.make(upload.source)
        filename = f"{digest}.{upload.extension()}"
        self.storage.move(upload, filename)
        return filename
