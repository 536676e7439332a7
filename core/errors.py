#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Error taxonomy for the export pipeline.

Input errors fail fast before (or at the entry of) the pipeline.
EnhancementFailure is recoverable: the orchestrator continues with the
un-enhanced prompt. SinkFailure propagates and fails the export as a whole.
A validation verdict of "error" is a normal result, never an exception.
"""

from typing import Optional


class PromptExporterError(Exception):
    """Base error for the prompt export pipeline"""
    pass


class InputError(PromptExporterError):
    """Bad request shape or values; reported to callers as a 400"""
    pass


class EmptyContentError(InputError):
    """Raised by the parser when content is empty after trimming"""

    def __init__(self, message: str = "Content cannot be empty"):
        super().__init__(message)


class UnsupportedPlatformError(InputError):
    """Raised when a platform identifier is not in the rule tables"""

    def __init__(self, platform: str):
        self.platform = platform
        super().__init__(f"Unsupported platform: {platform}")


class UnsupportedFormatError(InputError):
    """Raised when an export format identifier is not in the rule tables"""

    def __init__(self, export_format: str):
        self.export_format = export_format
        super().__init__(f"Unsupported export format: {export_format}")


class InvalidRequestError(InputError):
    """Missing or malformed request fields (source content, folder id)"""
    pass


class EnhancementFailure(PromptExporterError):
    """The enhancement service failed or returned unusable output"""
    pass


class SinkFailure(PromptExporterError):
    """The export sink could not store the rendered file"""

    def __init__(self, message: str, file_name: Optional[str] = None):
        self.file_name = file_name
        super().__init__(message)


class ExportError(PromptExporterError):
    """
    Single user-facing failure raised by the orchestrator.

    The original stage failure is kept as ``__cause__``.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause

    @property
    def is_input_error(self) -> bool:
        return isinstance(self.cause, InputError)
