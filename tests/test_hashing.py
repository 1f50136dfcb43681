import hashlib
import io

import pytest

from shop.services.hashing import FileHasher


def test_same_bytes_same_digest_regardless_of_filename(tmp_path):
    a = tmp_path / "first.png"
    b = tmp_path / "renamed-later.jpg"
    a.write_bytes(b"identical content")
    b.write_bytes(b"identical content")

    hasher = FileHasher()
    assert hasher.make(a) == hasher.make(str(b))
    assert hasher.make(a) == hashlib.sha256(b"identical content").hexdigest()


def test_different_bytes_differ(tmp_path):
    hasher = FileHasher()
    assert hasher.make(io.BytesIO(b"one")) != hasher.make(io.BytesIO(b"two"))


def test_stream_is_rewound_after_hashing():
    stream = io.BytesIO(b"x" * 200_000)
    stream.read(10)
    digest = FileHasher(chunk_size=1024).make(stream)
    assert digest == hashlib.sha256(b"x" * 200_000).hexdigest()
    assert stream.tell() == 0


def test_digest_is_filename_safe():
    digest = FileHasher("md5").make(io.BytesIO(b"abc"))
    assert digest == "900150983cd24fb0d6963f7d28e17f72"
    assert "/" not in digest and "\\" not in digest


def test_unknown_algorithm_rejected():
    with pytest.raises(ValueError):
        FileHasher("not-a-hash")
    with pytest.raises(ValueError):
        FileHasher("shake_128")


def test_missing_file_propagates_os_error(tmp_path):
    with pytest.raises(OSError):
        FileHasher().make(tmp_path / "missing.png")
