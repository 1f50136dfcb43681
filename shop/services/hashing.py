import hashlib
import os
from typing import BinaryIO, Protocol, Union

HashSource = Union[str, "os.PathLike[str]", BinaryIO]


class Hasher(Protocol):
    def make(self, source: HashSource) -> str:
        ...


class FileHasher:
    """
    Content hasher used to name stored images. Identical bytes always give
    the same hex digest, whatever the original filename or upload time.

    `source` may be a filesystem path or a readable binary stream. Seekable
    streams are rewound before and after hashing so callers can still copy them.
    """

    def __init__(self, algorithm: str = "sha256", chunk_size: int = 64 * 1024):
        algorithm = algorithm.lower()
        if algorithm not in hashlib.algorithms_available or algorithm.startswith("shake_"):
            raise ValueError(f"Unsupported hash algorithm: {algorithm}")
        self.algorithm = algorithm
        self.chunk_size = chunk_size

    def make(self, source: HashSource) -> str:
        hasher = hashlib.new(self.algorithm)
        if isinstance(source, (str, os.PathLike)):
            with open(source, "rb") as f:
                self._feed(hasher, f)
        else:
            seekable = hasattr(source, "seek") and (not hasattr(source, "seekable") or source.seekable())
            if seekable:
                source.seek(0)
            self._feed(hasher, source)
            if seekable:
                source.seek(0)
        return hasher.hexdigest()

    def _feed(self, hasher, stream: BinaryIO) -> None:
        for chunk in iter(lambda: stream.read(self.chunk_size), b""):
            hasher.update(chunk)
