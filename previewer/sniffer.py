"""
Cheap content sniffing: decide how a file should be previewed from its
extension and, failing that, from a short prefix of its bytes.

The result depends only on the extension and the first SNIFF_PREFIX_BYTES
bytes, so every call re-reads the file; nothing is cached.
"""
from __future__ import annotations

import os
from pathlib import Path

from .models import ContentKind
from .utils import log

IMAGE_SUFFIXES = {
    ".jpeg",
    ".jpg",
    ".gif",
    ".bmp",
    ".png",
}

SNIFF_PREFIX_BYTES = 200

_LINE_BREAK_BYTES = (b"\r", b"\n")


def file_extension(path: str | Path) -> str:
    """Lower-cased extension including the dot, or "" when there is none.

    A name that ends with a dot has no extension; a dot-file such as
    ".png" counts its whole name as the extension.
    """
    name = os.path.basename(os.fspath(path))
    idx = name.rfind(".")
    if idx == -1 or idx == len(name) - 1:
        return ""
    return name[idx:].lower()


def is_image_path(path: str | Path | None) -> bool:
    text = _as_text(path)
    if text is None:
        return False
    return file_extension(text) in IMAGE_SUFFIXES


def _as_text(path) -> str | None:
    try:
        text = os.fspath(path)
    except TypeError:
        return None
    return text if isinstance(text, str) else None


def classify(path: str | Path | None) -> ContentKind:
    text = _as_text(path)
    if text is None or not text.strip():
        return ContentKind.UNKNOWN

    # Extension wins even when the file is missing or holds something else
    if is_image_path(text):
        return ContentKind.IMAGE

    try:
        if not os.path.isfile(text):
            return ContentKind.UNKNOWN
        if os.path.getsize(text) == 0:
            return ContentKind.TEXT
        with open(text, "rb") as handle:
            prefix = handle.read(SNIFF_PREFIX_BYTES)
    except OSError as e:
        log.warning("sniff_failed", path=text, error=str(e))
        return ContentKind.UNKNOWN
    except Exception as e:
        log.warning("sniff_unexpected_error", path=text, error=str(e))
        return ContentKind.UNKNOWN

    # Shrunk to nothing between the size check and the read
    if not prefix:
        return ContentKind.TEXT
    if any(marker in prefix for marker in _LINE_BREAK_BYTES):
        return ContentKind.TEXT
    return ContentKind.BINARY


__all__ = ["IMAGE_SUFFIXES", "SNIFF_PREFIX_BYTES", "classify", "file_extension", "is_image_path"]
