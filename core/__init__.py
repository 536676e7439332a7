"""
Core export pipeline: parser, enhancer, validator, transformer, sinks and
the orchestrator that runs them.
"""

from .errors import (
    PromptExporterError,
    InputError,
    EmptyContentError,
    UnsupportedPlatformError,
    UnsupportedFormatError,
    InvalidRequestError,
    EnhancementFailure,
    SinkFailure,
    ExportError,
)
from .types import (
    PlatformId,
    FormatId,
    SourceKind,
    DetailLevel,
    ValidationStatus,
    RawInput,
    PromptComponents,
    StructuredPrompt,
    ValidationVerdict,
    RenderedExport,
)
from .parser import PromptParser
from .validator import PromptValidator
from .transformer import FormatTransformer
from .enhancer import BaseEnhancer, NoOpEnhancer, KeywordEnhancer, ProviderEnhancer, build_enhancer
from .export_sink import ExportSink, MemorySink, LocalFileSink, UploadResult, get_sink
from .prompt_source import PromptSource, LocalFolderSource, SourceItem
from .exporter import (
    ExporterConfig,
    EnhancementOptions,
    ExportRequest,
    BatchRequest,
    ExportResult,
    ExportSummary,
    ExportedPromptRecord,
    PromptExporter,
    create_exporter,
)

__all__ = [
    # Errors
    'PromptExporterError',
    'InputError',
    'EmptyContentError',
    'UnsupportedPlatformError',
    'UnsupportedFormatError',
    'InvalidRequestError',
    'EnhancementFailure',
    'SinkFailure',
    'ExportError',
    # Types
    'PlatformId',
    'FormatId',
    'SourceKind',
    'DetailLevel',
    'ValidationStatus',
    'RawInput',
    'PromptComponents',
    'StructuredPrompt',
    'ValidationVerdict',
    'RenderedExport',
    # Stages
    'PromptParser',
    'PromptValidator',
    'FormatTransformer',
    'BaseEnhancer',
    'NoOpEnhancer',
    'KeywordEnhancer',
    'ProviderEnhancer',
    'build_enhancer',
    'ExportSink',
    'MemorySink',
    'LocalFileSink',
    'UploadResult',
    'get_sink',
    'PromptSource',
    'LocalFolderSource',
    'SourceItem',
    # Orchestrator
    'ExporterConfig',
    'EnhancementOptions',
    'ExportRequest',
    'BatchRequest',
    'ExportResult',
    'ExportSummary',
    'ExportedPromptRecord',
    'PromptExporter',
    'create_exporter',
]
