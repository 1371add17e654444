import struct
import zlib

import pytest
from fastapi.testclient import TestClient

from mediadrop.core.config import Settings
from mediadrop.main import create_app


def _chunk(kind: bytes, data: bytes) -> bytes:
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", zlib.crc32(kind + data) & 0xFFFFFFFF)


def make_png(size: int = 1024, seed: int = 0) -> bytes:
    """A PNG-signed payload of exactly `size` bytes; `seed` varies the content."""
    head = b"\x89PNG\r\n\x1a\n" + _chunk(b"IHDR", struct.pack(">IIBBBBB", 1, 1, 8, 2, 0, 0, 0))
    tail = _chunk(b"IEND", b"")
    filler = bytes((seed + i) % 256 for i in range(size - len(head) - len(tail) - 12))
    return head + _chunk(b"IDAT", filler) + tail


@pytest.fixture
def upload_dir(tmp_path):
    d = tmp_path / "uploads"
    d.mkdir()
    return d


@pytest.fixture
def settings(upload_dir):
    return Settings(tmp_dir=str(upload_dir))


@pytest.fixture
def client(settings):
    return TestClient(create_app(settings))


@pytest.fixture
def png():
    return make_png()


class BrokenFile:
    """Stand-in for an opened artifact whose write or close fails."""

    def __init__(self, fail_on):
        self.fail_on = fail_on
        self.closed = False

    def write(self, data):
        if self.fail_on == "write":
            raise OSError(28, "No space left on device")
        return len(data)

    def flush(self):
        pass

    def close(self):
        self.closed = True
        if self.fail_on == "close":
            raise OSError(5, "Input/output error")
