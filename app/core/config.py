from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """إعدادات الخدمة مع تحميل القيم من متغيرات البيئة أو ملف .env عند توفره."""

    model_config = SettingsConfigDict(
        env_file=Path(__file__).resolve().parents[2] / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "PDF Shrink API"
    app_version: str = "0.1.0"

    base_dir: Path = Field(default_factory=lambda: Path(__file__).resolve().parents[2])
    upload_dir: Optional[Path] = None
    static_prefix: str = "/uploads"

    host: str = "0.0.0.0"
    port: int = 5000

    allow_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    allow_methods: list[str] = Field(default_factory=lambda: ["POST", "GET"])

    log_level: str = "INFO"

    # أداة الضغط الخارجية (Ghostscript)
    ghostscript_binary: str = "gs"
    pdf_settings: str = "/screen"
    compatibility_level: str = "1.4"
    compression_timeout: float = Field(default=120.0, gt=0)

    def configure_paths(self) -> None:
        """تهيئة مجلد الرفع وإنشاؤه في حال غيابه."""
        self.base_dir = self.base_dir.resolve()
        self.upload_dir = (self.upload_dir or (self.base_dir / "uploads")).resolve()
        self.upload_dir.mkdir(parents=True, exist_ok=True)


@lru_cache()
def get_settings() -> Settings:
    settings = Settings()
    settings.configure_paths()
    return settings
