import shutil
import time
from pathlib import Path
from typing import IO, Iterable, Optional
from uuid import uuid4

from fastapi import UploadFile

from app.core.config import Settings, get_settings
from app.core.exceptions import IOFailure
from app.core.logging import configure_logging
from app.models import UploadedFile

COMPRESSED_PREFIX = "compressed-"
DEFAULT_UPLOAD_NAME = "upload.pdf"


class LocalStorage:
    """تخزين محلي مسطح يجمع الملفات المرفوعة ونواتج ضغطها في مجلد واحد."""

    def __init__(self, settings: Optional[Settings] = None) -> None:
        settings = settings or get_settings()
        self.base_dir = Path(settings.base_dir)
        self.upload_dir = Path(settings.upload_dir or (self.base_dir / "uploads"))
        self.logger = configure_logging(settings, "storage")

        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _generate_filename(original_name: Optional[str]) -> str:
        # طابع زمني بالمللي ثانية مع رمز عشوائي قصير لضمان التفرد بين الطلبات المتزامنة
        base_name = Path(original_name or "").name or DEFAULT_UPLOAD_NAME
        return f"{int(time.time() * 1000)}-{uuid4().hex[:8]}-{base_name}"

    def save_upload(self, upload: UploadFile) -> UploadedFile:
        target_path = self.upload_dir / self._generate_filename(upload.filename)
        try:
            upload.file.seek(0)
            self._save_stream(upload.file, target_path)
            upload.file.seek(0)
            size_bytes = target_path.stat().st_size
        except OSError as exc:
            self.discard([target_path])
            raise IOFailure(f"تعذر حفظ الملف المرفوع {target_path.name}: {exc}") from exc

        return UploadedFile(
            filename=upload.filename or target_path.name,
            path=target_path,
            size_bytes=size_bytes,
            content_type=upload.content_type or "",
        )

    @staticmethod
    def _save_stream(stream: IO[bytes], target_path: Path) -> None:
        with target_path.open("wb") as buffer:
            shutil.copyfileobj(stream, buffer)

    @staticmethod
    def compressed_path_for(path: Path) -> Path:
        return path.with_name(f"{COMPRESSED_PREFIX}{path.name}")

    @staticmethod
    def size_of(path: Path) -> int:
        try:
            return path.stat().st_size
        except OSError as exc:
            raise IOFailure(f"تعذر قراءة حجم الملف {path}: {exc}") from exc

    @staticmethod
    def delete(path: Path) -> None:
        try:
            path.unlink()
        except OSError as exc:
            raise IOFailure(f"تعذر حذف الملف {path}: {exc}") from exc

    def discard(self, paths: Iterable[Path]) -> None:
        """حذف الملفات الجزئية أو المؤقتة دون إيقاف مسار معالجة الخطأ الأصلي."""
        for path in paths:
            try:
                path.unlink(missing_ok=True)
            except OSError:
                self.logger.exception("تعذر حذف الملف %s أثناء التنظيف", path)

    def relative_path(self, path: Path) -> str:
        try:
            return path.resolve().relative_to(self.base_dir.resolve()).as_posix()
        except ValueError:
            return str(path)
