import sys
from pathlib import Path

import pytest
from PIL import Image

ROOT = Path(__file__).resolve().parent.parent

# Ensure `import previewer...` and `import cli...` work without installing
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def _binary_payload(length: int) -> bytes:
    """Bytes 1..250 cycling, with CR/LF swapped for underscores."""
    data = bytearray((i % 250) + 1 for i in range(length))
    for idx, value in enumerate(data):
        if value in (0x0D, 0x0A):
            data[idx] = ord("_")
    return bytes(data)


@pytest.fixture
def binary_payload():
    return _binary_payload


@pytest.fixture
def make_file(tmp_path):
    def _make(name: str, content: bytes | str = b"") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            content = content.encode("utf-8")
        path.write_bytes(content)
        return path

    return _make


@pytest.fixture
def make_image(tmp_path):
    def _make(name: str = "picture.png", size=(12, 8), mode: str = "RGB", fmt: str | None = None) -> Path:
        path = tmp_path / name
        Image.new(mode, size, color=0).save(path, format=fmt)
        return path

    return _make
