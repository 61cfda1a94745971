from .models import ErrorKind


class PreviewError(Exception):
    """Base class for preview errors; `kind` maps it onto a PreviewFailure"""
    kind = ErrorKind.UNEXPECTED

class InvalidInputError(PreviewError):
    """Empty or malformed request"""
    kind = ErrorKind.INVALID_INPUT

class FileMissingError(PreviewError):
    """Path does not resolve to an existing file"""
    kind = ErrorKind.NOT_FOUND

class FileOperationError(PreviewError):
    """Read or stat failure after the file was found"""
    kind = ErrorKind.IO_ERROR

class DecodeError(PreviewError):
    """Image bytes present but not decodable"""
    kind = ErrorKind.DECODE_ERROR

class DecodeCancelled(PreviewError):
    """Decode abandoned on the caller's signal"""
    kind = ErrorKind.CANCELLED

class ConfigurationError(ValueError):
    """Error in configuration"""
    pass
