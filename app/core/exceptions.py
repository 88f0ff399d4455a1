from __future__ import annotations

from typing import Optional

from fastapi import status

PROCESSING_FAILED_MESSAGE = "Failed to process PDF"


class PDFProcessingError(Exception):
    """الخطأ الأساسي لمسار الرفع والضغط.

    يحمل رمز حالة HTTP ورسالة عامة تُعاد للعميل، أما التفاصيل الداخلية
    (مخرجات stderr، رمز الخروج، أخطاء النظام) فتبقى في السجلات فقط.
    """

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = PROCESSING_FAILED_MESSAGE

    def __init__(self, detail: Optional[str] = None) -> None:
        self.detail = detail or self.public_message
        super().__init__(self.detail)


class MissingInput(PDFProcessingError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "No file uploaded"


class InvalidFileType(PDFProcessingError):
    status_code = status.HTTP_400_BAD_REQUEST
    public_message = "Only PDFs are allowed"


class CompressionFailed(PDFProcessingError):
    """فشل تشغيل أداة الضغط أو خروجها برمز غير صفري أو تجاوزها المهلة."""

    def __init__(
        self,
        detail: Optional[str] = None,
        *,
        return_code: Optional[int] = None,
        stderr: str = "",
    ) -> None:
        super().__init__(detail)
        self.return_code = return_code
        self.stderr = stderr


class IOFailure(PDFProcessingError):
    """فشل قراءة حجم ملف أو حذفه بعد نجاح عملية الضغط."""
