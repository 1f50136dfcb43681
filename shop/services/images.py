# shop/services/images.py
import logging
import os
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, List, Optional, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)

# safe image extensions we allow, without the dot
ALLOWED_EXT = {"jpg", "jpeg", "png", "webp", "gif"}
DEFAULT_EXT = "jpg"


def _safe_ext(filename: str) -> str:
    _, ext = os.path.splitext(filename or "")
    return ext.lstrip(".").lower()


@dataclass
class UploadedImage:
    """
    An uploaded file: the client's original filename plus either an open
    binary stream or a path on disk holding the bytes.
    """
    filename: str
    file: Optional[BinaryIO] = None
    path: Optional[Path] = None

    def __post_init__(self):
        if self.file is None and self.path is None:
            raise ValueError("UploadedImage needs either a file stream or a path")
        if self.path is not None:
            self.path = Path(self.path)

    @classmethod
    def from_upload_file(cls, upload_file) -> "UploadedImage":
        """Wrap a starlette UploadFile without reading it into memory."""
        return cls(filename=upload_file.filename or "", file=upload_file.file)

    @classmethod
    def from_path(cls, path: Union[str, Path], filename: Optional[str] = None) -> "UploadedImage":
        path = Path(path)
        return cls(filename=filename or path.name, path=path)

    @property
    def source(self) -> Union[Path, BinaryIO]:
        return self.path if self.path is not None else self.file

    @property
    def client_extension(self) -> str:
        return _safe_ext(self.filename)

    def extension(self) -> str:
        """
        Extension used for the stored name. The client's extension wins when it is
        a known image type; otherwise the format is detected from the bytes.
        """
        ext = self.client_extension
        # the bytes are not checked against a known client extension
        if ext in ALLOWED_EXT:
            return ext
        return detect_extension(self.source)


def detect_extension(source: Union[Path, BinaryIO]) -> str:
    stream = None if isinstance(source, Path) else source
    try:
        with Image.open(source) as im:
            fmt = im.format
    except UnidentifiedImageError:
        fmt = None
    finally:
        if stream is not None and hasattr(stream, "seek"):
            stream.seek(0)
    return fmt.lower() if fmt else DEFAULT_EXT


class ImageStorage:
    """
    Canonical directory for item images. Names are flat filenames; moving onto an
    existing name overwrites it.
    """

    def __init__(self, base_dir: Union[str, Path]):
        self.base_dir = Path(base_dir)

    def absolute_path(self) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self.base_dir.resolve()

    def path_for(self, filename: str) -> Path:
        if not filename or Path(filename).name != filename:
            raise ValueError(f"Invalid image filename: {filename!r}")
        return self.absolute_path() / filename

    def move(self, upload: UploadedImage, filename: str) -> Path:
        target = self.path_for(filename)
        if upload.path is not None:
            shutil.move(str(upload.path), str(target))
        else:
            # write beside the target, then swap in atomically
            fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=".upload-")
            try:
                with os.fdopen(fd, "wb") as out:
                    if hasattr(upload.file, "seek"):
                        upload.file.seek(0)
                    shutil.copyfileobj(upload.file, out)
                os.replace(tmp_name, target)
            except Exception:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        logger.info("Stored image %s (client name %r)", filename, upload.filename)
        return target

    def exists(self, filename: str) -> bool:
        try:
            return self.path_for(filename).is_file()
        except ValueError:
            return False

    def list_images(self) -> List[str]:
        if not self.base_dir.exists():
            return []
        return [
            p.name
            for p in sorted(self.base_dir.iterdir())
            if p.is_file() and not p.name.startswith(".")
        ]

    def delete(self, filename: str) -> bool:
        try:
            path = self.path_for(filename)
        except ValueError:
            return False
        if not path.exists():
            return False
        path.unlink()
        return True
