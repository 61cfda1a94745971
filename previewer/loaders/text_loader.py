from __future__ import annotations

import os
from pathlib import Path
from typing import List

from ..config import config
from ..exceptions import FileMissingError, FileOperationError, InvalidInputError, PreviewError
from ..models import PreviewFailure, TextPreview
from ..utils import log, safe_file_op

DEFAULT_MAX_LINES = 100


class TextLoader:
    """Reads the first lines of a text file.

    The file is opened read-only so other processes can keep it open or
    keep writing to it. Lines are returned without their terminators;
    CRLF, CR and LF all end a line.
    """

    def __init__(self, encoding: str | None = None):
        self._encoding = encoding or config.TEXT_ENCODING

    def load(self, path: str | Path | None, max_lines: int = DEFAULT_MAX_LINES) -> TextPreview | PreviewFailure:
        if isinstance(max_lines, bool) or not isinstance(max_lines, int) or max_lines < 1:
            return PreviewFailure.from_error(
                InvalidInputError(f"max_lines must be a positive integer, got {max_lines!r}")
            )
        if not path or not os.path.isfile(path):
            return PreviewFailure.from_error(FileMissingError(f"File not found at '{path}'"))
        try:
            lines, truncated = safe_file_op(lambda: self._read_lines(os.fspath(path), max_lines), path)
        except PreviewError as exc:
            return PreviewFailure.from_error(exc)
        except LookupError as exc:
            # Unknown codec name in TEXT_ENCODING
            log.warning("text_read_failed", path=str(path), error=str(exc))
            return PreviewFailure.from_error(FileOperationError(f"IO Error reading file '{path}': {exc}"))
        log.debug("text_loaded", path=str(path), lines=len(lines), truncated=truncated)
        return TextPreview(lines=tuple(lines), truncated=truncated)

    def _read_lines(self, path: str, max_lines: int) -> tuple[List[str], bool]:
        lines: List[str] = []
        with open(path, "r", encoding=self._encoding, errors="replace", newline=None) as handle:
            for line in handle:
                lines.append(line.rstrip("\n"))
                if len(lines) >= max_lines:
                    break
            truncated = len(lines) >= max_lines and handle.readline() != ""
        return lines, truncated


def build(encoding: str | None = None) -> TextLoader:
    return TextLoader(encoding)


__all__ = ["DEFAULT_MAX_LINES", "TextLoader", "build"]
