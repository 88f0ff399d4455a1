from enum import Enum
from pathlib import Path
from typing import Optional

from pydantic import BaseModel


class CompressionOutcome(str, Enum):
    kept_original = "kept-original"
    kept_compressed = "kept-compressed"


class UploadedFile(BaseModel):
    filename: str
    path: Path
    size_bytes: int
    content_type: str


class CompressionAttempt(BaseModel):
    input_path: Path
    output_path: Path
    succeeded: bool = False
    return_code: Optional[int] = None
    stderr: str = ""
