
from .common import CompressionAttempt, CompressionOutcome, UploadedFile
from .compress import CompressionResult, UploadResponse, format_kib, to_kib

__all__ = [
    "CompressionAttempt",
    "CompressionOutcome",
    "CompressionResult",
    "UploadResponse",
    "UploadedFile",
    "format_kib",
    "to_kib",
]
