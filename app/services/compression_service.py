from __future__ import annotations

import asyncio
import contextlib
from pathlib import Path
from typing import List, Optional

from app.core.config import Settings, get_settings
from app.core.exceptions import CompressionFailed, IOFailure, MissingInput
from app.core.logging import configure_logging
from app.models import CompressionAttempt, CompressionOutcome, CompressionResult
from app.storage.local import LocalStorage

# عند تساوي الحجمين يُحتفظ بالأصل ويُحذف ناتج الضغط
KEEP_ORIGINAL_ON_TIE = True


class GhostscriptCompressor:
    """تشغيل Ghostscript كعملية خارجية لإعادة كتابة PDF بجودة "screen"."""

    def __init__(self, settings: Settings | None = None, storage: LocalStorage | None = None) -> None:
        settings = settings or get_settings()
        self.binary = settings.ghostscript_binary
        self.pdf_settings = settings.pdf_settings
        self.compatibility_level = settings.compatibility_level
        self.storage = storage or LocalStorage(settings)
        self.logger = configure_logging(settings, "ghostscript")

    def build_command(self, input_path: Path, output_path: Path) -> List[str]:
        # تُمرَّر الوسائط كقائمة دون shell، لذلك لا تحتاج المسارات ذات المسافات إلى اقتباس
        return [
            self.binary,
            "-sDEVICE=pdfwrite",
            f"-dCompatibilityLevel={self.compatibility_level}",
            f"-dPDFSETTINGS={self.pdf_settings}",
            "-dNOPAUSE",
            "-dQUIET",
            "-dBATCH",
            f"-sOutputFile={output_path}",
            str(input_path),
        ]

    async def run(self, input_path: Path, output_path: Path, timeout: Optional[float] = None) -> CompressionAttempt:
        attempt = CompressionAttempt(input_path=input_path, output_path=output_path)
        command = self.build_command(input_path, output_path)

        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as exc:
            self.logger.error("تعذر تشغيل أداة الضغط %s: %s", self.binary, exc)
            raise CompressionFailed(f"spawn error: {exc}") from exc

        try:
            _, stderr = await asyncio.wait_for(process.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            self.logger.error("تجاوزت أداة الضغط المهلة (%ss) للملف %s", timeout, input_path.name)
            await self._kill(process)
            self.storage.discard([output_path])
            raise CompressionFailed(f"timed out after {timeout}s") from None
        except asyncio.CancelledError:
            self.logger.warning("أُلغي ضغط الملف %s", input_path.name)
            await self._kill(process)
            self.storage.discard([output_path])
            raise

        attempt.return_code = process.returncode
        attempt.stderr = (stderr or b"").decode("utf-8", errors="replace").strip()

        if process.returncode != 0:
            self.logger.error(
                "فشل ضغط الملف %s (رمز الخروج %s): %s",
                input_path.name,
                process.returncode,
                attempt.stderr,
            )
            self.storage.discard([output_path])
            raise CompressionFailed(
                f"exit code {process.returncode}",
                return_code=process.returncode,
                stderr=attempt.stderr,
            )

        if not output_path.is_file():
            self.logger.error("انتهت أداة الضغط بنجاح دون إنشاء الملف %s", output_path.name)
            raise CompressionFailed("no output produced", return_code=process.returncode)

        attempt.succeeded = True
        return attempt

    @staticmethod
    async def _kill(process: asyncio.subprocess.Process) -> None:
        if process.returncode is None:
            with contextlib.suppress(ProcessLookupError):
                process.kill()
        await process.wait()


class CompressionService:
    """ضغط ملف PDF مرفوع والاحتفاظ بالأصغر حجمًا بين الأصل وناتج الضغط."""

    def __init__(
        self,
        storage: LocalStorage | None = None,
        compressor: GhostscriptCompressor | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()
        self.storage = storage or LocalStorage(settings)
        self.compressor = compressor or GhostscriptCompressor(settings, self.storage)
        self.timeout = settings.compression_timeout
        self.logger = configure_logging(settings, "compression")

    @staticmethod
    def should_keep_original(original_size: int, compressed_size: int) -> bool:
        if KEEP_ORIGINAL_ON_TIE:
            return compressed_size >= original_size
        return compressed_size > original_size

    async def process(self, input_path: Optional[Path]) -> CompressionResult:
        if input_path is None:
            raise MissingInput()

        output_path = self.storage.compressed_path_for(input_path)
        self.logger.info("بدء ضغط الملف %s", input_path.name)
        attempt = await self.compressor.run(input_path, output_path, timeout=self.timeout)
        if not attempt.succeeded:
            raise CompressionFailed(
                f"compressor did not succeed for {input_path.name}",
                return_code=attempt.return_code,
            )
        self.logger.debug("انتهت أداة الضغط للملف %s برمز الخروج %s", input_path.name, attempt.return_code)

        try:
            original_size = self.storage.size_of(input_path)
            compressed_size = self.storage.size_of(output_path)

            if self.should_keep_original(original_size, compressed_size):
                outcome = CompressionOutcome.kept_original
                winner, loser, final_size = input_path, output_path, original_size
            else:
                outcome = CompressionOutcome.kept_compressed
                winner, loser, final_size = output_path, input_path, compressed_size

            self.logger.info(
                "مقارنة الأحجام للملف %s: الأصل %s بايت، بعد الضغط %s بايت (%s)",
                input_path.name,
                original_size,
                compressed_size,
                outcome.value,
            )
            self.storage.delete(loser)
        except IOFailure:
            self.logger.exception("خطأ في نظام الملفات بعد ضغط الملف %s", input_path.name)
            # يبقى الأصل هو الملف الوحيد المتبقي ما دام موجودًا
            if input_path.exists():
                self.storage.discard([output_path])
            raise

        return CompressionResult(
            original_size=original_size,
            compressed_size=compressed_size,
            final_size=final_size,
            final_name=winner.name,
            final_path=self.storage.relative_path(winner),
            outcome=outcome,
        )
