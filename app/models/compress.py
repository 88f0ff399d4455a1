from pydantic import BaseModel, ConfigDict, Field

from .common import CompressionOutcome

BYTES_PER_KIB = 1024


def to_kib(size_bytes: int) -> float:
    """تحويل الحجم من البايت إلى الكيبيبايت مقربًا لخانتين عشريتين."""
    return round(size_bytes / BYTES_PER_KIB, 2)


def format_kib(size_bytes: int) -> str:
    return f"{size_bytes / BYTES_PER_KIB:.2f} KB"


class CompressionResult(BaseModel):
    original_size: int = Field(..., description="حجم الملف الأصلي بالبايت.")
    compressed_size: int = Field(..., description="حجم ناتج الضغط بالبايت.")
    final_size: int = Field(..., description="حجم الملف المحتفظ به بالبايت.")
    final_name: str
    final_path: str
    outcome: CompressionOutcome

    @property
    def original_kib(self) -> float:
        return to_kib(self.original_size)

    @property
    def compressed_kib(self) -> float:
        return to_kib(self.compressed_size)

    @property
    def final_kib(self) -> float:
        return to_kib(self.final_size)


class UploadResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    original_size: str = Field(..., alias="originalSize")
    compressed_size: str = Field(..., alias="compressedSize")
    final_size: str = Field(..., alias="finalSize")
    pdf_name: str = Field(..., alias="pdfName")
    final_path: str = Field(..., alias="finalPath")

    @classmethod
    def from_result(cls, result: CompressionResult, message: str) -> "UploadResponse":
        return cls(
            message=message,
            original_size=format_kib(result.original_size),
            compressed_size=format_kib(result.compressed_size),
            final_size=format_kib(result.final_size),
            pdf_name=result.final_name,
            final_path=result.final_path,
        )
