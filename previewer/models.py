from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Tuple, Union

if TYPE_CHECKING:
    from .exceptions import PreviewError

_DISPLAY_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ContentKind(str, Enum):
    """Outcome of sniffing a file."""

    IMAGE = "image"
    TEXT = "text"
    BINARY = "binary"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class ErrorKind(str, Enum):
    INVALID_INPUT = "invalid_input"
    NOT_FOUND = "not_found"
    IO_ERROR = "io_error"
    DECODE_ERROR = "decode_error"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNEXPECTED = "unexpected"
    CANCELLED = "cancelled"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class FileMetadata:
    """Filesystem facts about one file, read fresh for every request."""

    name: str
    absolute_path: str
    size_bytes: int
    created_utc: datetime
    modified_utc: datetime

    @property
    def formatted_size(self) -> str:
        from .loaders.metadata_reader import format_size

        return format_size(self.size_bytes)

    def to_display(self) -> Dict[str, str]:
        """Strings shown in a file properties panel."""
        return {
            "File Name": self.name,
            "File Path": self.absolute_path,
            "File Size": self.formatted_size,
            "Created": self.created_utc.strftime(_DISPLAY_TIME_FORMAT),
            "Last Modified": self.modified_utc.strftime(_DISPLAY_TIME_FORMAT),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "absolute_path": self.absolute_path,
            "size_bytes": self.size_bytes,
            "size": self.formatted_size,
            "created_utc": self.created_utc.isoformat(),
            "modified_utc": self.modified_utc.isoformat(),
        }


@dataclass(frozen=True)
class TextPreview:
    lines: Tuple[str, ...]
    truncated: bool = False

    failed = False

    @property
    def text(self) -> str:
        return "\n".join(self.lines)

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "text", "lines": list(self.lines), "truncated": self.truncated}


@dataclass(frozen=True)
class ImagePreview:
    """Wraps the decoded image handle returned by the codec.

    The handle is opaque here; with the default codec it is a Pillow image.
    """

    image: Any
    path: str

    failed = False

    @property
    def size(self) -> Tuple[int, int] | None:
        size = getattr(self.image, "size", None)
        if isinstance(size, tuple) and len(size) == 2:
            return size
        return None

    def to_dict(self) -> Dict[str, Any]:
        size = self.size
        return {
            "kind": "image",
            "path": self.path,
            "width": size[0] if size else None,
            "height": size[1] if size else None,
            "mode": getattr(self.image, "mode", None),
        }


@dataclass(frozen=True)
class BinaryPreview:
    metadata: FileMetadata

    failed = False

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "binary", "metadata": self.metadata.to_dict()}


@dataclass(frozen=True)
class PreviewFailure:
    kind: ErrorKind
    message: str

    failed = True

    def __str__(self) -> str:
        return f"Error: {self.message}"

    @classmethod
    def from_error(cls, error: "PreviewError") -> "PreviewFailure":
        return cls(kind=error.kind, message=str(error))

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": "failure", "error": self.kind.value, "message": self.message}


PreviewResult = Union[ImagePreview, TextPreview, BinaryPreview, PreviewFailure]


__all__ = [
    "ContentKind",
    "ErrorKind",
    "FileMetadata",
    "TextPreview",
    "ImagePreview",
    "BinaryPreview",
    "PreviewFailure",
    "PreviewResult",
]
