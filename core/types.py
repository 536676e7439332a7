#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Data model of the prompt export pipeline.

Classes:
    PlatformId, FormatId, SourceKind, DetailLevel: closed identifier enums.
    ValidationStatus: ordered tri-state verdict (valid < warning < error).
    RawInput: immutable pipeline input.
    PromptComponents: keyword labels detected by the parser.
    StructuredPrompt: normalized content + components + metadata.
    ValidationVerdict: result of rule-checking one prompt.
    RenderedExport: one serialized export file.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Tuple


class PlatformId(str, Enum):
    """Supported target platforms"""
    MIDJOURNEY = "midjourney"
    STABLE_DIFFUSION = "stable_diffusion"
    DALL_E = "dall_e"
    RUNWAY = "runway"
    CUSTOM = "custom"


class FormatId(str, Enum):
    """Supported export formats"""
    JSON = "json"
    TXT = "txt"
    CSV = "csv"
    XML = "xml"


class SourceKind(str, Enum):
    """How raw content should be interpreted"""
    TEXT = "text"
    DOCUMENT = "document"
    STRUCTURED = "structured"


class DetailLevel(str, Enum):
    """Enhancement intensity"""
    BASIC = "basic"
    STANDARD = "standard"
    DETAILED = "detailed"


class ValidationStatus(str, Enum):
    """Validation verdict status, ordered by severity"""
    VALID = "valid"
    WARNING = "warning"
    ERROR = "error"

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    def escalate(self, other: "ValidationStatus") -> "ValidationStatus":
        """Return the more severe of the two statuses."""
        return other if other.severity > self.severity else self


_SEVERITY = {
    ValidationStatus.VALID: 0,
    ValidationStatus.WARNING: 1,
    ValidationStatus.ERROR: 2,
}


@dataclass(frozen=True)
class RawInput:
    """Unparsed source content"""
    content: str
    source_kind: SourceKind = SourceKind.TEXT


@dataclass(frozen=True)
class PromptComponents:
    """
    Keyword labels per category.

    Each category has set semantics: a label appears at most once, in the
    order it was first detected.
    """
    subjects: Tuple[str, ...] = ()
    styles: Tuple[str, ...] = ()
    qualities: Tuple[str, ...] = ()
    settings: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, list]:
        return {
            "subjects": list(self.subjects),
            "styles": list(self.styles),
            "qualities": list(self.qualities),
            "settings": list(self.settings),
        }

    def is_empty(self) -> bool:
        return not (self.subjects or self.styles or self.qualities or self.settings)


@dataclass(frozen=True)
class StructuredPrompt:
    """
    Parsed prompt flowing through validation and transformation.

    Attributes:
        content: Normalized prompt text (never empty).
        components: Keyword labels found in the content.
        metadata: JSON-safe mapping (scalars, lists, nested dicts).
    """
    content: str
    components: PromptComponents = field(default_factory=PromptComponents)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_content(self, content: str) -> "StructuredPrompt":
        return replace(self, content=content)


@dataclass(frozen=True)
class ValidationVerdict:
    """Outcome of validating one prompt against one platform profile"""
    status: ValidationStatus
    warnings: Tuple[str, ...] = ()
    errors: Tuple[str, ...] = ()
    summary_message: str = ""

    @property
    def is_valid(self) -> bool:
        return self.status is ValidationStatus.VALID

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "message": self.summary_message,
        }


@dataclass(frozen=True)
class RenderedExport:
    """
    One serialized export file.

    Attributes:
        file_name: Name derived from the render timestamp and format extension.
        mime_type: MIME type of the format.
        content: Serialized text.
        size_bytes: UTF-8 encoded size of content.
        format: Export format.
        platform: Platform whose content rules were applied.
        prompt_text: Shaped prompt text that was serialized.
    """
    file_name: str
    mime_type: str
    content: str
    size_bytes: int
    format: FormatId
    platform: PlatformId
    prompt_text: str

    def to_bytes(self) -> bytes:
        return self.content.encode("utf-8")
