from __future__ import annotations

import threading
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ImageCodec(Protocol):
    """Interface for turning an image file into a decoded pixel buffer."""

    def decode(self, path: str, cancel: threading.Event | None = None) -> Any:
        """Return an opaque decoded-image handle.

        Raise DecodeCancelled when `cancel` is set before the work is done;
        any other exception is treated as a decode failure by the caller.
        """


__all__ = ["ImageCodec"]
