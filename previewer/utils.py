import logging
import structlog
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar, Union
from pathlib import Path
from datetime import datetime, timezone

from .config import config
from .exceptions import FileOperationError

# Setup structured logging
_level_name = config.effective_log_level

logging.basicConfig(level=_level_name)


def _iso_timestamp(_, __, event_dict):
    """Use timezone-aware UTC timestamps to avoid datetime.utcnow deprecation warnings."""
    event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,  # Filter based on log level BEFORE processing
        _iso_timestamp,
        structlog.stdlib.add_log_level,
        structlog.processors.format_exc_info,
        structlog.dev.ConsoleRenderer(colors=True)
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
)

log = structlog.get_logger("previewer")

# Set the level on the underlying stdlib logger that structlog wraps
# This ensures log.debug() calls are actually filtered at the source
logging.getLogger("previewer").setLevel(_level_name)

# Pillow logs every plugin probe at DEBUG; only show it for TRACE
if config.LOG_LEVEL != "TRACE":
    logging.getLogger("PIL").setLevel(logging.WARNING)

T = TypeVar('T')

def safe_file_op(operation: Callable[[], T],
                 path: Union[str, Path],
                 log_error: bool = True) -> T:
    """Run a filesystem call on a file already known to exist.

    Any OSError, including the file vanishing in between, becomes a
    FileOperationError.
    """
    try:
        return operation()
    except FileNotFoundError as e:
        if log_error:
            log.warning("file_not_found", path=str(path), error=str(e))
        raise FileOperationError(f"File disappeared while reading '{path}': {e}") from e
    except PermissionError as e:
        if log_error:
            log.warning("permission_error", path=str(path), error=str(e))
        raise FileOperationError(f"Permission denied reading '{path}': {e}") from e
    except OSError as e:
        if log_error:
            log.error("io_error", path=str(path), error=str(e))
        raise FileOperationError(f"IO Error reading file '{path}': {e}") from e

# Image decoding is the only step that leaves the caller's thread
image_pool = ThreadPoolExecutor(max_workers=config.IMAGE_WORKERS, thread_name_prefix="image-decode")
