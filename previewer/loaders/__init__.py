from .interface import ImageCodec
from .image_loader import ImageLoader, PillowCodec
from .metadata_reader import MetadataReader, format_size
from .text_loader import DEFAULT_MAX_LINES, TextLoader

__all__ = [
    "ImageCodec",
    "ImageLoader",
    "PillowCodec",
    "MetadataReader",
    "format_size",
    "DEFAULT_MAX_LINES",
    "TextLoader",
]
