import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from PIL import Image

from previewer.exceptions import DecodeCancelled
from previewer.loaders.image_loader import ImageLoader, PillowCodec
from previewer.loaders.interface import ImageCodec
from previewer.models import ErrorKind, ImagePreview, PreviewFailure


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=2)
    yield pool
    pool.shutdown(wait=False, cancel_futures=True)


class RecordingCodec:
    def __init__(self, result=None, error: BaseException | None = None):
        self.calls = []
        self.threads = []
        self._result = result
        self._error = error

    def decode(self, path, cancel=None):
        self.calls.append(path)
        self.threads.append(threading.get_ident())
        if self._error is not None:
            raise self._error
        return self._result


class BlockingCodec:
    """Simulates a long decode; optionally fires the caller's cancel mid-way."""

    def __init__(self, cancel_midway: bool = False):
        self.started = threading.Event()
        self.release = threading.Event()
        self._cancel_midway = cancel_midway

    def decode(self, path, cancel=None):
        self.started.set()
        if self._cancel_midway and cancel is not None:
            cancel.set()
        self.release.wait(timeout=5)
        return object()


def test_decodes_png(make_image, executor):
    path = make_image("photo.png", size=(12, 8))

    result = ImageLoader(executor=executor).load(str(path))

    assert isinstance(result, ImagePreview)
    assert isinstance(result.image, Image.Image)
    assert result.size == (12, 8)
    assert result.image.mode == "RGB"
    assert result.path == str(path)


def test_no_mode_conversion(make_image, executor):
    path = make_image("palette.gif", size=(4, 4), mode="P")
    result = ImageLoader(executor=executor).load(str(path))
    assert result.image.mode == "P"


def test_corrupt_image_is_decode_error(make_file, executor):
    path = make_file("photo.PNG", b"definitely not a png")

    result = ImageLoader(executor=executor).load(str(path))

    assert isinstance(result, PreviewFailure)
    assert result.kind is ErrorKind.DECODE_ERROR
    assert "Could not load image" in result.message


def test_truncated_image_is_decode_error(make_image, executor):
    path = make_image("cut.png", size=(64, 64))
    data = path.read_bytes()
    path.write_bytes(data[: len(data) // 2])

    result = ImageLoader(executor=executor).load(str(path))

    assert result.kind is ErrorKind.DECODE_ERROR


def test_missing_file_skips_codec(tmp_path, executor):
    codec = RecordingCodec()
    result = ImageLoader(codec, executor=executor).load(str(tmp_path / "missing.png"))
    assert result.kind is ErrorKind.NOT_FOUND
    assert codec.calls == []


@pytest.mark.parametrize("value", [None, ""])
def test_empty_path_is_not_found(value, executor):
    assert ImageLoader(RecordingCodec(), executor=executor).load(value).kind is ErrorKind.NOT_FOUND


def test_pre_cancelled_skips_codec(make_image, executor):
    codec = RecordingCodec()
    cancel = threading.Event()
    cancel.set()

    result = ImageLoader(codec, executor=executor).load(str(make_image()), cancel)

    assert result.kind is ErrorKind.CANCELLED
    assert codec.calls == []


def test_cancel_during_decode_returns_promptly(make_image, executor):
    codec = BlockingCodec(cancel_midway=True)
    loader = ImageLoader(codec, executor=executor, poll_seconds=0.01)

    started = time.monotonic()
    result = loader.load(str(make_image()), threading.Event())
    elapsed = time.monotonic() - started
    codec.release.set()

    assert result.kind is ErrorKind.CANCELLED
    assert elapsed < 2


def test_decode_timeout_is_cancelled(make_image, executor):
    codec = BlockingCodec()
    loader = ImageLoader(codec, executor=executor, poll_seconds=0.01, timeout_seconds=0.05)

    result = loader.load(str(make_image()))
    codec.release.set()

    assert result.kind is ErrorKind.CANCELLED
    assert "timed out" in result.message


def test_decode_runs_off_calling_thread(make_image, executor):
    codec = RecordingCodec(result=object())
    result = ImageLoader(codec, executor=executor).load(str(make_image()))
    assert isinstance(result, ImagePreview)
    assert codec.threads and codec.threads[0] != threading.get_ident()


def test_file_vanishing_during_decode_is_io_error(make_image, executor):
    codec = RecordingCodec(error=FileNotFoundError(2, "No such file or directory"))
    result = ImageLoader(codec, executor=executor).load(str(make_image()))
    assert result.kind is ErrorKind.IO_ERROR


def test_codec_cancellation_is_cancelled(make_image, executor):
    codec = RecordingCodec(error=DecodeCancelled("stopped"))
    result = ImageLoader(codec, executor=executor).load(str(make_image()))
    assert result.kind is ErrorKind.CANCELLED


def test_codec_crash_does_not_escape(make_image, executor):
    codec = RecordingCodec(error=RuntimeError("codec exploded"))
    result = ImageLoader(codec, executor=executor).load(str(make_image()))
    assert result.kind is ErrorKind.DECODE_ERROR
    assert "codec exploded" in result.message


def test_pillow_codec_honours_cancel(make_image):
    cancel = threading.Event()
    cancel.set()
    with pytest.raises(DecodeCancelled):
        PillowCodec().decode(str(make_image()), cancel)


def test_pillow_codec_matches_protocol():
    assert isinstance(PillowCodec(), ImageCodec)
