#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PromptExporter - orchestrates the export pipeline.

    raw text -> Parser -> (optional) Enhancer -> Validator -> Transformer -> ExportSink

Request values are checked before the pipeline starts; unknown platforms
and formats are rejected here, so every later stage works on closed enums.
Enhancement failures degrade to the parsed prompt; any other failure is
wrapped in a single ExportError for the caller.

Usage:
    exporter = create_exporter(get_settings())
    result = await exporter.export_prompt(ExportRequest(
        source_content="Cinematic urban scene with dramatic lighting",
        target_platform="midjourney",
    ))
    print(result.summary.valid_prompts, result.export_url)
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from config.logging_config import get_logger
from config.constants import (
    BATCH_MAX_CONCURRENCY,
    DEFAULT_DETAIL_LEVEL,
    DEFAULT_FORMAT,
    DEFAULT_PLATFORM,
    ENHANCEMENT_TIMEOUT_SECONDS,
    PARSER_MAX_PROMPT_LENGTH,
)
from config.settings import Settings

from .enhancer import BaseEnhancer, NoOpEnhancer, build_enhancer, run_enhancement
from .errors import ExportError, InputError, InvalidRequestError, SinkFailure
from .export_sink import ExportSink, MemorySink, get_sink, store
from .parser import Clock, PromptParser, utc_now
from .prompt_source import LocalFolderSource, PromptSource, SourceItem
from .rule_tables import list_formats, list_platforms, parse_format, parse_platform
from .transformer import FormatTransformer, file_timestamp, format_timestamp
from .types import (
    DetailLevel,
    FormatId,
    PlatformId,
    RawInput,
    SourceKind,
    ValidationStatus,
)
from .validator import PromptValidator

logger = get_logger(__name__)


# ==================== CONFIG ====================

@dataclass(frozen=True)
class ExporterConfig:
    """Immutable pipeline configuration, passed to the exporter at construction"""
    default_platform: PlatformId = PlatformId(DEFAULT_PLATFORM)
    default_format: FormatId = FormatId(DEFAULT_FORMAT)
    default_detail_level: DetailLevel = DetailLevel(DEFAULT_DETAIL_LEVEL)
    use_enhancement: bool = True
    enhancement_timeout: float = ENHANCEMENT_TIMEOUT_SECONDS
    max_prompt_length: int = PARSER_MAX_PROMPT_LENGTH
    strict_validation: bool = False
    batch_concurrency: int = BATCH_MAX_CONCURRENCY

    @classmethod
    def from_settings(cls, settings: Settings) -> "ExporterConfig":
        return cls(
            default_platform=parse_platform(settings.default_platform),
            default_format=parse_format(settings.default_format),
            default_detail_level=DetailLevel(settings.default_detail_level),
            use_enhancement=settings.use_enhancement,
            enhancement_timeout=settings.enhancement_timeout,
            max_prompt_length=settings.max_prompt_length,
            strict_validation=settings.strict_validation,
            batch_concurrency=max(1, settings.batch_concurrency),
        )


# ==================== REQUESTS ====================

@dataclass(frozen=True)
class EnhancementOptions:
    """Per-request enhancement switches; None means use the configured default"""
    use_enhancement: Optional[bool] = None
    detail_level: Optional[str] = None
    include_metadata: bool = True


@dataclass(frozen=True)
class ExportRequest:
    source_content: Optional[str]
    source_type: str = SourceKind.TEXT.value
    target_platform: Optional[str] = None
    export_format: Optional[str] = None
    enhancement_options: EnhancementOptions = field(default_factory=EnhancementOptions)


@dataclass(frozen=True)
class BatchRequest:
    folder_id: Optional[str]
    target_platform: Optional[str] = None
    export_format: Optional[str] = None
    enhancement_options: EnhancementOptions = field(default_factory=EnhancementOptions)


@dataclass(frozen=True)
class _Plan:
    """Request values after boundary parsing"""
    platform: PlatformId
    export_format: FormatId
    use_enhancement: bool
    detail_level: DetailLevel
    include_metadata: bool


# ==================== RESULTS ====================

@dataclass
class ExportedPromptRecord:
    """One exported prompt (or one batch item that could not be parsed)"""
    content: str
    platform: PlatformId
    export_format: FormatId
    validation: Dict[str, Any]
    metadata: Dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None
    name: Optional[str] = None
    file_name: Optional[str] = None
    mime_type: Optional[str] = None
    size_bytes: int = 0
    url: Optional[str] = None
    enhanced: bool = False

    @property
    def status(self) -> ValidationStatus:
        return ValidationStatus(self.validation["status"])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "content": self.content,
            "platform": self.platform.value,
            "format": self.export_format.value,
            "validation": self.validation,
            "metadata": self.metadata,
            "fileName": self.file_name,
            "mimeType": self.mime_type,
            "sizeBytes": self.size_bytes,
            "url": self.url,
            "enhanced": self.enhanced,
        }


@dataclass
class ExportSummary:
    total_prompts: int = 0
    valid_prompts: int = 0
    warning_prompts: int = 0
    error_prompts: int = 0

    @classmethod
    def from_records(cls, records: List[ExportedPromptRecord]) -> "ExportSummary":
        statuses = [r.status for r in records]
        return cls(
            total_prompts=len(records),
            valid_prompts=statuses.count(ValidationStatus.VALID),
            warning_prompts=statuses.count(ValidationStatus.WARNING),
            error_prompts=statuses.count(ValidationStatus.ERROR),
        )

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalPrompts": self.total_prompts,
            "validPrompts": self.valid_prompts,
            "warningPrompts": self.warning_prompts,
            "errorPrompts": self.error_prompts,
        }


@dataclass
class ExportResult:
    exported_prompts: List[ExportedPromptRecord]
    summary: ExportSummary
    export_url: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exportedPrompts": [r.to_dict() for r in self.exported_prompts],
            "summary": self.summary.to_dict(),
            "exportUrl": self.export_url,
        }


# ==================== EXPORTER ====================

class PromptExporter:
    """
    Runs single and batch exports.

    Args:
        config: Immutable pipeline configuration.
        enhancer: Enhancement capability (NoOpEnhancer when omitted).
        sink: Storage for rendered files (MemorySink when omitted).
        source: Batch input; batch exports fail without one.
        clock: Timestamp source for parsing and rendering.
    """

    def __init__(
        self,
        config: Optional[ExporterConfig] = None,
        enhancer: Optional[BaseEnhancer] = None,
        sink: Optional[ExportSink] = None,
        source: Optional[PromptSource] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config or ExporterConfig()
        self.enhancer = enhancer or NoOpEnhancer()
        self.sink = sink or MemorySink()
        self.source = source
        self._clock = clock or utc_now

        self.parser = PromptParser(max_prompt_length=self.config.max_prompt_length, clock=self._clock)
        self.validator = PromptValidator(strict_validation=self.config.strict_validation)
        self.transformer = FormatTransformer()

        logger.info(
            f"PromptExporter initialized: enhancer={self.enhancer.name}, "
            f"sink={self.sink.name}, platform={self.config.default_platform.value}, "
            f"format={self.config.default_format.value}"
        )

    # ---------- public API ----------

    async def export_prompt(self, request: ExportRequest) -> ExportResult:
        """
        Export one prompt.

        Raises:
            ExportError: Input errors, sink failures or unexpected errors.
        """
        try:
            plan = self._plan(request.target_platform, request.export_format, request.enhancement_options)
            if request.source_content is None or request.source_content == "":
                raise InvalidRequestError("Source content is required")
            raw = RawInput(request.source_content, self._source_kind(request.source_type))

            record = await self._export_item(raw, plan)
        except Exception as e:
            self._log_failure("export", e)
            raise ExportError(f"Failed to export prompt: {e}", cause=e) from e

        result = ExportResult(
            exported_prompts=[record],
            summary=ExportSummary.from_records([record]),
            export_url=record.url,
        )
        logger.info(
            f"Exported prompt for {plan.platform.value} as {plan.export_format.value}: "
            f"{record.status.value}"
        )
        return result

    async def batch_process_folder(self, request: BatchRequest) -> ExportResult:
        """
        Export every prompt of a folder.

        Items run concurrently under a semaphore. Items that cannot be parsed
        are reported as error entries. A JSON manifest is uploaded last and
        its location is the result's export_url.

        Raises:
            ExportError: Input errors, sink failures or unexpected errors.
        """
        try:
            plan = self._plan(request.target_platform, request.export_format, request.enhancement_options)
            if not request.folder_id:
                raise InvalidRequestError("Folder ID is required")
            if self.source is None:
                raise InvalidRequestError("Batch processing is not configured")

            items = await self.source.list_items(request.folder_id)
            logger.info(f"Batch '{request.folder_id}': {len(items)} prompts")

            records = await self._export_items(items, plan)
            summary = ExportSummary.from_records(records)
            manifest_url = await self._upload_manifest(request.folder_id, plan, records, summary)
        except Exception as e:
            self._log_failure("batch export", e)
            raise ExportError(f"Failed to export prompt: {e}", cause=e) from e

        logger.info(
            f"Batch '{request.folder_id}' complete: {summary.total_prompts} prompts, "
            f"{summary.valid_prompts} valid, {summary.warning_prompts} warnings, "
            f"{summary.error_prompts} errors"
        )
        return ExportResult(exported_prompts=records, summary=summary, export_url=manifest_url)

    def get_supported_platforms(self) -> List[Dict[str, Any]]:
        return list_platforms()

    def get_supported_formats(self) -> List[Dict[str, str]]:
        return list_formats()

    # ---------- pipeline ----------

    def _plan(self, platform: Optional[str], export_format: Optional[str],
              options: Optional[EnhancementOptions]) -> _Plan:
        options = options or EnhancementOptions()

        detail_level = self.config.default_detail_level
        if options.detail_level:
            try:
                detail_level = DetailLevel(str(options.detail_level).lower())
            except ValueError:
                raise InvalidRequestError(f"Unsupported detail level: {options.detail_level}") from None

        use_enhancement = self.config.use_enhancement
        if options.use_enhancement is not None:
            use_enhancement = options.use_enhancement

        return _Plan(
            platform=parse_platform(platform) if platform else self.config.default_platform,
            export_format=parse_format(export_format) if export_format else self.config.default_format,
            use_enhancement=use_enhancement,
            detail_level=detail_level,
            include_metadata=options.include_metadata,
        )

    @staticmethod
    def _source_kind(source_type: Optional[str]) -> SourceKind:
        if not source_type:
            return SourceKind.TEXT
        try:
            return SourceKind(str(source_type).lower())
        except ValueError:
            raise InvalidRequestError(f"Unsupported source type: {source_type}") from None

    async def _export_item(self, raw: RawInput, plan: _Plan,
                           name: Optional[str] = None) -> ExportedPromptRecord:
        prompt = self.parser.parse(raw)

        enhanced = False
        if plan.use_enhancement:
            prompt, enhanced = await run_enhancement(
                self.enhancer,
                prompt,
                plan.platform,
                plan.detail_level,
                timeout=self.config.enhancement_timeout,
            )

        verdict = self.validator.validate(prompt, plan.platform)

        rendered = self.transformer.transform(
            prompt,
            plan.platform,
            plan.export_format,
            timestamp=self._clock(),
            include_metadata=plan.include_metadata,
        )

        upload = await store(
            self.sink,
            rendered.file_name,
            rendered.content,
            rendered.mime_type,
            metadata={
                "platform": plan.platform.value,
                "format": plan.export_format.value,
                "status": verdict.status.value,
                "source": name,
            },
        )

        return ExportedPromptRecord(
            id=upload.file_id,
            name=name,
            content=rendered.prompt_text,
            platform=plan.platform,
            export_format=plan.export_format,
            validation=verdict.to_dict(),
            metadata=prompt.metadata,
            file_name=rendered.file_name,
            mime_type=rendered.mime_type,
            size_bytes=rendered.size_bytes,
            url=upload.location_url,
            enhanced=enhanced,
        )

    async def _export_items(self, items: List[SourceItem], plan: _Plan) -> List[ExportedPromptRecord]:
        semaphore = asyncio.Semaphore(self.config.batch_concurrency)

        async def run(item: SourceItem) -> ExportedPromptRecord:
            async with semaphore:
                try:
                    return await self._export_item(
                        RawInput(item.content, item.source_kind), plan, name=item.name
                    )
                except InputError as e:
                    logger.warning(f"Skipping batch item {item.name}: {e}")
                    return self._failed_record(item, plan, str(e))

        outcomes = await asyncio.gather(*(run(item) for item in items), return_exceptions=True)

        # no partial success: the first storage/unexpected failure fails the batch
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        return list(outcomes)

    def _failed_record(self, item: SourceItem, plan: _Plan, message: str) -> ExportedPromptRecord:
        return ExportedPromptRecord(
            name=item.name,
            content="",
            platform=plan.platform,
            export_format=plan.export_format,
            validation={
                "status": ValidationStatus.ERROR.value,
                "warnings": [],
                "errors": [message],
                "message": f"Prompt validation failed with 1 errors for {plan.platform.value}",
            },
        )

    async def _upload_manifest(self, folder_id: str, plan: _Plan,
                               records: List[ExportedPromptRecord], summary: ExportSummary) -> str:
        timestamp = self._clock()
        manifest = {
            "folderId": folder_id,
            "platform": plan.platform.value,
            "format": plan.export_format.value,
            "generatedAt": format_timestamp(timestamp),
            "summary": summary.to_dict(),
            "prompts": [
                {
                    "name": r.name,
                    "fileName": r.file_name,
                    "url": r.url,
                    "status": r.status.value,
                }
                for r in records
            ],
        }
        upload = await store(
            self.sink,
            f"batch_{file_timestamp(timestamp)}.json",
            json.dumps(manifest, indent=2, ensure_ascii=False),
            "application/json",
            metadata={"folder_id": folder_id, "kind": "manifest"},
        )
        return upload.location_url

    @staticmethod
    def _log_failure(operation: str, error: Exception):
        if isinstance(error, InputError):
            logger.warning(f"Rejected {operation} request: {error}")
        elif isinstance(error, SinkFailure):
            logger.error(f"Storage failed during {operation}: {error}")
        else:
            logger.exception(f"Unexpected error during {operation}: {error}")


# ==================== FACTORY ====================

def create_exporter(settings: Settings, clock: Optional[Clock] = None) -> PromptExporter:
    """Wire an exporter from application settings."""
    config = ExporterConfig.from_settings(settings)

    enhancer = build_enhancer(
        settings.enhancement_provider,
        api_key=settings.get_api_key(),
        model=settings.enhancement_model,
        max_prompt_length=config.max_prompt_length,
        clock=clock,
    )
    sink = get_sink(settings.storage_backend, output_dir=settings.output_dir)
    source = LocalFolderSource(settings.input_dir)

    return PromptExporter(config=config, enhancer=enhancer, sink=sink, source=source, clock=clock)
