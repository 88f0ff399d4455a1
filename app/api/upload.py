from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile

from app.core.logging import configure_logging
from app.models import UploadResponse
from app.services.compression_service import CompressionService
from app.storage.local import LocalStorage
from app.utils.file_utils import ensure_pdf

router = APIRouter(tags=["PDF Compression"])

SUCCESS_MESSAGE = "File uploaded and processed successfully"


def get_storage(request: Request) -> LocalStorage:
    return request.app.state.storage


def get_compression_service(request: Request) -> CompressionService:
    return request.app.state.compression_service


@router.post(
    "/upload",
    summary="رفع ملف PDF وضغطه والاحتفاظ بالنسخة الأصغر",
    response_model=UploadResponse,
    response_model_by_alias=True,
)
async def upload_pdf(
    request: Request,
    pdf: Optional[UploadFile] = File(default=None),
    storage: LocalStorage = Depends(get_storage),
    compression_service: CompressionService = Depends(get_compression_service),
) -> UploadResponse:
    logger = configure_logging(request.app.state.settings, "upload")
    upload = ensure_pdf(pdf)

    stored = storage.save_upload(upload)
    logger.info("تم استلام الملف %s (%s بايت) في %s", stored.filename, stored.size_bytes, stored.path.name)

    result = await compression_service.process(stored.path)
    logger.info(
        "اكتملت معالجة الملف %s: %s (%.2f KB -> %.2f KB)",
        stored.filename,
        result.outcome.value,
        result.original_kib,
        result.final_kib,
    )
    return UploadResponse.from_result(result, SUCCESS_MESSAGE)
