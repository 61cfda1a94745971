from __future__ import annotations

import os
import threading
import time
from concurrent.futures import Executor, Future, wait
from pathlib import Path
from typing import Any

from PIL import Image

from ..config import config
from ..exceptions import DecodeCancelled, DecodeError, FileMissingError, FileOperationError
from ..models import ImagePreview, PreviewFailure
from ..utils import image_pool, log
from .interface import ImageCodec


def _check_cancel(cancel: threading.Event | None, path: str) -> None:
    if cancel is not None and cancel.is_set():
        raise DecodeCancelled(f"Image decode cancelled for '{path}'")


class PillowCodec:
    """Decodes with Pillow and hands back an in-memory copy.

    Pixel data is loaded while the file is open, then copied so the handle
    can be closed. No mode or color conversion happens here.
    """

    def decode(self, path: str, cancel: threading.Event | None = None) -> Image.Image:
        _check_cancel(cancel, path)
        with Image.open(path) as img:
            img.load()
            _check_cancel(cancel, path)
            return img.copy()


class ImageLoader:
    """Runs the codec on a worker thread and waits for it in short polls.

    Between polls the caller's cancel event is checked; once it is set the
    loader returns a CANCELLED failure straight away and the pending decode
    is abandoned.
    """

    def __init__(
        self,
        codec: ImageCodec | None = None,
        *,
        executor: Executor | None = None,
        poll_seconds: float | None = None,
        timeout_seconds: float | None = None,
    ):
        self._codec = codec or PillowCodec()
        self._executor = executor or image_pool
        self._poll = poll_seconds if poll_seconds and poll_seconds > 0 else config.DECODE_POLL_SECONDS
        timeout = config.DECODE_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
        self._timeout = timeout if timeout and timeout > 0 else None

    def load(self, path: str | Path | None, cancel: threading.Event | None = None) -> ImagePreview | PreviewFailure:
        if not path or not os.path.isfile(path):
            return PreviewFailure.from_error(FileMissingError(f"Image file not found at '{path}'"))
        text = os.fspath(path)
        if cancel is not None and cancel.is_set():
            return PreviewFailure.from_error(DecodeCancelled(f"Image decode cancelled for '{text}'"))

        future = self._executor.submit(self._codec.decode, text, cancel)
        try:
            image = self._await(future, text, cancel)
        except DecodeCancelled as exc:
            future.cancel()
            log.info("image_decode_cancelled", path=text, reason=str(exc))
            return PreviewFailure.from_error(exc)
        except (FileNotFoundError, PermissionError) as exc:
            log.warning("image_read_failed", path=text, error=str(exc))
            return PreviewFailure.from_error(FileOperationError(f"IO Error reading image '{text}': {exc}"))
        except Exception as exc:
            log.warning("image_decode_failed", path=text, error=str(exc))
            return PreviewFailure.from_error(
                DecodeError(
                    f"Could not load image from '{text}'. "
                    f"File might be corrupted or not a valid image format. ({exc})"
                )
            )
        log.debug("image_decoded", path=text, size=getattr(image, "size", None))
        return ImagePreview(image=image, path=text)

    def _await(self, future: Future, path: str, cancel: threading.Event | None) -> Any:
        deadline = time.monotonic() + self._timeout if self._timeout else None
        while True:
            done, _ = wait([future], timeout=self._poll)
            if done:
                return future.result()
            _check_cancel(cancel, path)
            if deadline is not None and time.monotonic() >= deadline:
                raise DecodeCancelled(f"Image decode timed out after {self._timeout:g}s for '{path}'")


def build(codec: ImageCodec | None = None, executor: Executor | None = None) -> ImageLoader:
    return ImageLoader(codec, executor=executor)


__all__ = ["ImageLoader", "PillowCodec", "build"]
