from typing import Optional

from fastapi import UploadFile

from app.core.exceptions import InvalidFileType, MissingInput

PDF_CONTENT_TYPE = "application/pdf"


def ensure_pdf(upload: Optional[UploadFile]) -> UploadFile:
    """التحقق من وجود ملف مرفوع وأن نوعه PDF قبل حفظه أو ضغطه."""
    if upload is None or not upload.filename:
        raise MissingInput()

    content_type = (upload.content_type or "").split(";", 1)[0].strip().lower()
    if content_type != PDF_CONTENT_TYPE:
        raise InvalidFileType(f"نوع الملف غير مدعوم: {upload.content_type}")
    return upload
