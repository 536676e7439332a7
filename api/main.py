#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
FastAPI Web Server - REST API for Prompt Exporter.

Usage:
    # Start server
    uvicorn api.main:app --host 0.0.0.0 --port 3000

    # Or run directly
    python -m api.main

API Documentation:
    - OpenAPI docs: http://localhost:3000/docs

Key Endpoints:
    POST /api/export - Export one prompt
    POST /api/batch - Export every prompt of an input folder
    GET /api/platforms - Supported target platforms
    GET /api/formats - Supported export formats
    GET /api/health - Health check

Errors:
    400 {"error": message} for input errors and malformed bodies
    404 {"error": "Not found"} for unknown routes
    500 {"error": "Server error"} for everything else
"""

import time
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from config.constants import APP_VERSION
from config.logging_config import get_logger, set_debug
from config.settings import get_settings
from core.errors import ExportError, InputError
from core.exporter import PromptExporter, create_exporter

from .models import (
    BatchExportRequest,
    ExportPromptRequest,
    ExportResponse,
    FormatsResponse,
    HealthResponse,
    PlatformsResponse,
)

logger = get_logger(__name__)


# ==================== EXPORTER SINGLETON ====================

_exporter: Optional[PromptExporter] = None


def get_exporter() -> PromptExporter:
    """Get or create the exporter singleton."""
    global _exporter
    if _exporter is None:
        settings = get_settings()
        if settings.debug:
            set_debug(True)
        logger.info(f"Creating exporter: {settings.summary()}")
        _exporter = create_exporter(settings)
    return _exporter


def reset_exporter():
    """Drop the singleton so the next request rebuilds it from settings."""
    global _exporter
    _exporter = None


# ==================== APPLICATION ====================

app = FastAPI(
    title="Prompt Exporter API",
    description="Convert free-form descriptions into validated, platform-specific prompt exports",
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@app.exception_handler(ExportError)
async def export_error_handler(request: Request, exc: ExportError):
    if exc.is_input_error:
        return _error(400, str(exc))
    return _error(500, "Server error")


@app.exception_handler(InputError)
async def input_error_handler(request: Request, exc: InputError):
    return _error(400, str(exc))


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    return _error(400, message)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return _error(404, "Not found")
    return _error(exc.status_code, str(exc.detail))


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return _error(500, "Server error")


# ==================== ROUTES ====================

@app.post("/api/export", response_model=ExportResponse)
async def export_prompt(
    body: ExportPromptRequest,
    exporter: PromptExporter = Depends(get_exporter),
):
    """Export one prompt to the requested platform and format"""
    result = await exporter.export_prompt(body.to_request())
    return ExportResponse.model_validate(result.to_dict())


@app.post("/api/batch", response_model=ExportResponse)
async def batch_export(
    body: BatchExportRequest,
    exporter: PromptExporter = Depends(get_exporter),
):
    """Export every prompt stored in an input folder"""
    result = await exporter.batch_process_folder(body.to_request())
    return ExportResponse.model_validate(result.to_dict())


@app.get("/api/platforms", response_model=PlatformsResponse)
async def get_platforms(exporter: PromptExporter = Depends(get_exporter)):
    return {"platforms": exporter.get_supported_platforms()}


@app.get("/api/formats", response_model=FormatsResponse)
async def get_formats(exporter: PromptExporter = Depends(get_exporter)):
    return {"formats": exporter.get_supported_formats()}


@app.get("/api/health", response_model=HealthResponse)
async def health_check():
    """Basic health check endpoint"""
    return {
        "status": "healthy",
        "version": APP_VERSION,
        "timestamp": time.time(),
    }


def main():
    import uvicorn

    settings = get_settings()
    logger.info("Starting Prompt Exporter API Server...")
    logger.info(f"API Documentation: http://localhost:{settings.port}/docs")

    uvicorn.run(app, host=settings.host, port=settings.port, log_level="debug" if settings.debug else "info")


if __name__ == "__main__":
    main()
