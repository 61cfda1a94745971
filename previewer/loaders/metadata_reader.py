from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

from ..exceptions import FileMissingError, PreviewError
from ..models import FileMetadata, PreviewFailure
from ..utils import log, safe_file_op

_SIZE_UNITS = (
    ("GB", 1024 ** 3),
    ("MB", 1024 ** 2),
    ("KB", 1024),
)


def format_size(size_bytes: int) -> str:
    """Human readable size using base-1024 units up to GB.

    A value equal to a unit threshold is shown in that unit, so exactly
    1024**3 bytes is "1 GB". At most two fractional digits are kept.
    """
    if size_bytes < 0:
        raise ValueError(f"size cannot be negative: {size_bytes}")
    for unit, threshold in _SIZE_UNITS:
        if size_bytes >= threshold:
            return f"{_trim_number(size_bytes / threshold)} {unit}"
    return f"{size_bytes} Bytes"


def _trim_number(value: float) -> str:
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return text or "0"


def _created_timestamp(stat: os.stat_result) -> float:
    # st_ctime is inode change time on Linux; prefer the real birth time when reported
    birth = getattr(stat, "st_birthtime", None)
    if birth:
        return birth
    return stat.st_ctime


class MetadataReader:
    """Builds the properties summary shown for binary files."""

    def describe(self, path: str | Path | None) -> FileMetadata | PreviewFailure:
        if not path or not os.path.isfile(path):
            return PreviewFailure.from_error(FileMissingError(f"File not found at '{path}'"))
        try:
            return self._read(os.fspath(path))
        except PreviewError as exc:
            return PreviewFailure.from_error(exc)

    def _read(self, path: str) -> FileMetadata:
        stat = safe_file_op(lambda: os.stat(path), path)
        absolute = os.path.abspath(os.path.normpath(path))
        meta = FileMetadata(
            name=os.path.basename(absolute),
            absolute_path=absolute,
            size_bytes=stat.st_size,
            created_utc=datetime.fromtimestamp(_created_timestamp(stat), timezone.utc),
            modified_utc=datetime.fromtimestamp(stat.st_mtime, timezone.utc),
        )
        log.debug("metadata_read", path=absolute, size=meta.size_bytes)
        return meta


def build() -> MetadataReader:
    return MetadataReader()


__all__ = ["MetadataReader", "format_size", "build"]
