"""
Single entry point for callers: take a path, sniff it, run exactly one
loader and hand back one immutable PreviewResult.

Every request carries its own state; the dispatcher itself holds only
collaborators configured at construction, so independent requests can run
concurrently from different threads.
"""
from __future__ import annotations

import os
import threading
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, List

from .config import AppConfig, config as default_config
from .loaders.image_loader import ImageLoader
from .loaders.metadata_reader import MetadataReader
from .loaders.text_loader import TextLoader
from .models import BinaryPreview, ContentKind, ErrorKind, PreviewFailure, PreviewResult
from .sniffer import classify
from .utils import log


class PreviewState(str, Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    IMAGE_LOADING = "image_loading"
    TEXT_LOADING = "text_loading"
    DESCRIBING_BINARY = "describing_binary"
    DONE = "done"


_TRANSITIONS = {
    PreviewState.IDLE: {PreviewState.CLASSIFYING, PreviewState.DONE},
    PreviewState.CLASSIFYING: {
        PreviewState.IMAGE_LOADING,
        PreviewState.TEXT_LOADING,
        PreviewState.DESCRIBING_BINARY,
        PreviewState.DONE,
    },
    PreviewState.IMAGE_LOADING: {PreviewState.DONE},
    PreviewState.TEXT_LOADING: {PreviewState.DONE},
    PreviewState.DESCRIBING_BINARY: {PreviewState.DONE},
    PreviewState.DONE: set(),
}

_LOADING_STATES = {
    ContentKind.IMAGE: PreviewState.IMAGE_LOADING,
    ContentKind.TEXT: PreviewState.TEXT_LOADING,
    ContentKind.BINARY: PreviewState.DESCRIBING_BINARY,
}


@dataclass
class _PreviewRequest:
    path: str
    cancel: threading.Event | None
    state: PreviewState = PreviewState.IDLE

    def advance(self, state: PreviewState) -> None:
        if state not in _TRANSITIONS[self.state]:
            raise RuntimeError(f"illegal preview transition {self.state.value} -> {state.value}")
        log.debug("preview_state", path=self.path, previous=self.state.value, state=state.value)
        self.state = state


def _path_text(path) -> str | None:
    if path is None:
        return None
    try:
        text = os.fspath(path)
    except TypeError:
        return None
    if not isinstance(text, str) or not text:
        return None
    return text


class PreviewDispatcher:
    """Routes a file to the image, text or binary-properties preview."""

    def __init__(
        self,
        cfg: AppConfig | None = None,
        *,
        image_loader: ImageLoader | None = None,
        text_loader: TextLoader | None = None,
        metadata_reader: MetadataReader | None = None,
        classifier: Callable[[str], ContentKind] = classify,
    ):
        self.cfg = cfg or default_config
        self.image_loader = image_loader or ImageLoader(
            poll_seconds=self.cfg.DECODE_POLL_SECONDS,
            timeout_seconds=self.cfg.DECODE_TIMEOUT_SECONDS,
        )
        self.text_loader = text_loader or TextLoader(self.cfg.TEXT_ENCODING)
        self.metadata_reader = metadata_reader or MetadataReader()
        self.classifier = classifier

    def preview(self, path: str | Path | None, cancel: threading.Event | None = None) -> PreviewResult:
        text = _path_text(path)
        if text is None:
            return PreviewFailure(ErrorKind.INVALID_INPUT, "No file path provided")
        request = _PreviewRequest(path=text, cancel=cancel)
        if not os.path.isfile(text):
            request.advance(PreviewState.DONE)
            return PreviewFailure(ErrorKind.NOT_FOUND, f"File not found at '{text}'")

        try:
            result = self._run(request)
        except Exception as exc:
            log.exception("preview_unexpected_error", path=text, state=request.state.value, error=str(exc))
            result = PreviewFailure(
                ErrorKind.UNEXPECTED,
                f"An unexpected error occurred while processing '{os.path.basename(text)}': {exc}",
            )
        log.info(
            "preview_done",
            path=text,
            result=type(result).__name__,
            error=result.kind.value if isinstance(result, PreviewFailure) else None,
        )
        return result

    def preview_many(
        self, paths: Iterable[str | Path | None], cancel: threading.Event | None = None
    ) -> List[PreviewResult]:
        """Preview each selected path in turn; one failure never stops the rest."""
        return [self.preview(path, cancel) for path in paths]

    def _run(self, request: _PreviewRequest) -> PreviewResult:
        request.advance(PreviewState.CLASSIFYING)
        kind = self.classifier(request.path)
        log.debug("preview_classified", path=request.path, kind=kind.value)

        loading_state = _LOADING_STATES.get(kind)
        if loading_state is None:
            request.advance(PreviewState.DONE)
            return PreviewFailure(
                ErrorKind.UNSUPPORTED_TYPE,
                f"Cannot preview file. Unknown or unsupported file type at '{request.path}'",
            )

        request.advance(loading_state)
        if kind is ContentKind.IMAGE:
            result = self.image_loader.load(request.path, request.cancel)
        elif kind is ContentKind.TEXT:
            result = self.text_loader.load(request.path, self.cfg.TEXT_MAX_LINES)
        else:
            described = self.metadata_reader.describe(request.path)
            result = described if isinstance(described, PreviewFailure) else BinaryPreview(described)
        request.advance(PreviewState.DONE)
        return result


_default_dispatcher: PreviewDispatcher | None = None
_default_lock = threading.Lock()


def default_dispatcher() -> PreviewDispatcher:
    global _default_dispatcher
    with _default_lock:
        if _default_dispatcher is None:
            _default_dispatcher = PreviewDispatcher()
        return _default_dispatcher


def preview(path: str | Path | None, cancel: threading.Event | None = None) -> PreviewResult:
    return default_dispatcher().preview(path, cancel)


__all__ = ["PreviewDispatcher", "PreviewState", "default_dispatcher", "preview"]
