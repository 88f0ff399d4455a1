# app/main.py
from __future__ import annotations

from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from app.api import routers
from app.core.config import Settings, get_settings
from app.core.exceptions import PROCESSING_FAILED_MESSAGE, MissingInput, PDFProcessingError
from app.core.logging import configure_logging
from app.services.compression_service import CompressionService
from app.storage.local import LocalStorage


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """بناء تطبيق FastAPI بإعدادات صريحة بدل الثوابت على مستوى الوحدة."""
    if settings is None:
        settings = get_settings()
    else:
        settings.configure_paths()
    logger = configure_logging(settings)

    app = FastAPI(title=settings.app_name, version=settings.app_version)

    # === الخدمات ===
    storage = LocalStorage(settings)
    app.state.settings = settings
    app.state.storage = storage
    app.state.compression_service = CompressionService(storage=storage, settings=settings)

    # === CORS ===
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allow_origins,
        allow_methods=settings.allow_methods,
        allow_headers=["*"],
    )

    # === الأخطاء ===
    @app.exception_handler(PDFProcessingError)
    async def pdf_processing_error_handler(request: Request, exc: PDFProcessingError) -> JSONResponse:
        if exc.status_code >= 500:
            logger.error("فشل معالجة الطلب %s %s: %s", request.method, request.url.path, exc.detail)
        else:
            logger.warning("رُفض الطلب %s %s: %s", request.method, request.url.path, exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.public_message})

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # حقل pdf المرسل كنص عادي لا يُعد ملفًا مرفوعًا
        logger.warning("طلب غير صالح %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse(status_code=MissingInput.status_code, content={"error": MissingInput.public_message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("خطأ غير متوقع في الطلب %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": PROCESSING_FAILED_MESSAGE})

    # === Routers ===
    for router in routers:
        app.include_router(router)

    # === الملفات المخزنة (قراءة فقط) ===
    app.mount(settings.static_prefix, StaticFiles(directory=str(storage.upload_dir)), name="uploads")

    # === Basic endpoints ===
    @app.get("/")
    async def root() -> dict:
        logger.debug("Root endpoint accessed")
        return {"message": f"Welcome to {settings.app_name}"}

    @app.get("/health")
    async def health_check() -> dict:
        logger.debug("Health check invoked")
        return {"status": "ok", "message": f"{settings.app_name} is running"}

    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("app.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
