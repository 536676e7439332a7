#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Rule Tables - static per-platform and per-format configuration.

Platform identifiers arriving as strings are parsed here, once:
- parse_platform / parse_format are strict and raise on unknown ids
  (used at request validation before the pipeline starts).
- resolve_platform / resolve_format apply the documented fallback
  (unknown platform -> custom, unknown format -> json).
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Union

from config.constants import FALLBACK_FORMAT, FALLBACK_PLATFORM

from .errors import UnsupportedFormatError, UnsupportedPlatformError
from .types import FormatId, PlatformId

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterConstraint:
    """Constraint for one inline `name:value` parameter"""
    pattern: Optional[re.Pattern] = None
    numeric_range: Optional[Tuple[float, float]] = None
    allowed_values: Tuple[str, ...] = ()
    examples: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PlatformProfile:
    """Content rules of one target platform"""
    id: PlatformId
    name: str
    max_content_length: int
    content_join_separator: str = ","
    supports_style_tags: bool = True
    supports_weights: bool = False
    weight_syntax: str = "{term}::{weight}"
    forbidden_phrases: Tuple[str, ...] = ()
    required_elements: Tuple[str, ...] = ()
    parameter_constraints: Dict[str, ParameterConstraint] = field(default_factory=dict)
    recommended_format: str = ""
    supported_formats: Tuple[FormatId, ...] = (FormatId.JSON,)


@dataclass(frozen=True)
class FormatProfile:
    """Serialization conventions of one export format"""
    id: FormatId
    name: str
    mime_type: str
    extension: str
    include_metadata: bool = True
    indent: int = 2
    line_separator: str = "\n"
    metadata_header: str = "--- Metadata ---"
    delimiter: str = ","
    include_header: bool = True
    quote_all: bool = True
    sequence_joiner: str = ", "
    root_element: str = "prompt"


_DEFAULT_FORBIDDEN = ("nsfw", "nude", "explicit", "gore", "disturbing")

_INTEGER = re.compile(r"^\d+$")
_DECIMAL = re.compile(r"^\d+(\.\d+)?$")
_RATIO = re.compile(r"^\d+:\d+$")


# ==================== PLATFORM PROFILES ====================

PLATFORMS: Dict[PlatformId, PlatformProfile] = {
    PlatformId.MIDJOURNEY: PlatformProfile(
        id=PlatformId.MIDJOURNEY,
        name="Midjourney",
        max_content_length=500,
        supports_style_tags=True,
        supports_weights=True,
        weight_syntax="{term}::{weight}",
        forbidden_phrases=_DEFAULT_FORBIDDEN,
        parameter_constraints={
            "ar": ParameterConstraint(pattern=_RATIO, examples=("16:9", "4:3", "1:1")),
            "stylize": ParameterConstraint(pattern=_INTEGER, numeric_range=(0, 1000)),
            "quality": ParameterConstraint(pattern=_DECIMAL, numeric_range=(0.25, 5)),
        },
        recommended_format="subject, style, setting, quality parameters",
        supported_formats=(FormatId.JSON, FormatId.TXT),
    ),
    PlatformId.STABLE_DIFFUSION: PlatformProfile(
        id=PlatformId.STABLE_DIFFUSION,
        name="Stable Diffusion",
        max_content_length=1000,
        supports_style_tags=True,
        supports_weights=True,
        weight_syntax="({term}:{weight})",
        forbidden_phrases=_DEFAULT_FORBIDDEN,
        parameter_constraints={
            "steps": ParameterConstraint(pattern=_INTEGER, numeric_range=(20, 150)),
            "cfg": ParameterConstraint(pattern=_DECIMAL, numeric_range=(1, 30)),
            "sampler": ParameterConstraint(
                allowed_values=("Euler a", "DPM++ 2M Karras", "DDIM")
            ),
        },
        recommended_format="detailed description with weights using () or []",
        supported_formats=(FormatId.JSON, FormatId.TXT),
    ),
    PlatformId.DALL_E: PlatformProfile(
        id=PlatformId.DALL_E,
        name="DALL-E",
        max_content_length=1000,
        supports_style_tags=False,
        supports_weights=False,
        forbidden_phrases=_DEFAULT_FORBIDDEN + ("political", "celebrity"),
        required_elements=("clear subject", "specific style"),
        recommended_format="detailed description, clear style references",
        supported_formats=(FormatId.JSON, FormatId.TXT),
    ),
    PlatformId.RUNWAY: PlatformProfile(
        id=PlatformId.RUNWAY,
        name="Runway",
        max_content_length=800,
        supports_style_tags=True,
        supports_weights=False,
        forbidden_phrases=_DEFAULT_FORBIDDEN,
        parameter_constraints={
            "guidance": ParameterConstraint(pattern=_DECIMAL, numeric_range=(1, 50)),
        },
        recommended_format="descriptive text with visual details",
        supported_formats=(FormatId.JSON,),
    ),
    PlatformId.CUSTOM: PlatformProfile(
        id=PlatformId.CUSTOM,
        name="Custom Platform",
        max_content_length=2000,
        supports_style_tags=True,
        supports_weights=True,
        weight_syntax="{term}::{weight}",
        recommended_format="any format acceptable",
        supported_formats=(FormatId.JSON, FormatId.TXT, FormatId.CSV, FormatId.XML),
    ),
}


# ==================== FORMAT PROFILES ====================

FORMATS: Dict[FormatId, FormatProfile] = {
    FormatId.JSON: FormatProfile(
        id=FormatId.JSON,
        name="JSON",
        mime_type="application/json",
        extension=".json",
        indent=2,
    ),
    FormatId.TXT: FormatProfile(
        id=FormatId.TXT,
        name="Plain Text",
        mime_type="text/plain",
        extension=".txt",
        line_separator="\n",
        metadata_header="--- Metadata ---",
        sequence_joiner=", ",
    ),
    FormatId.CSV: FormatProfile(
        id=FormatId.CSV,
        name="CSV",
        mime_type="text/csv",
        extension=".csv",
        delimiter=",",
        include_header=True,
        quote_all=True,
        sequence_joiner="; ",
    ),
    FormatId.XML: FormatProfile(
        id=FormatId.XML,
        name="XML",
        mime_type="application/xml",
        extension=".xml",
        indent=2,
        root_element="prompt",
    ),
}


# ==================== LOOKUP ====================

def parse_platform(value: Union[str, PlatformId]) -> PlatformId:
    """Strict string -> PlatformId; raises UnsupportedPlatformError."""
    if isinstance(value, PlatformId):
        return value
    try:
        return PlatformId(str(value).strip().lower())
    except ValueError:
        raise UnsupportedPlatformError(str(value)) from None


def resolve_platform(value: Union[str, PlatformId, None]) -> PlatformId:
    """Lenient string -> PlatformId; unknown ids resolve to custom."""
    if value is None:
        return PlatformId(FALLBACK_PLATFORM)
    try:
        return parse_platform(value)
    except UnsupportedPlatformError:
        logger.warning(f"Unknown platform '{value}', using {FALLBACK_PLATFORM} profile")
        return PlatformId(FALLBACK_PLATFORM)


def parse_format(value: Union[str, FormatId]) -> FormatId:
    """Strict string -> FormatId; raises UnsupportedFormatError."""
    if isinstance(value, FormatId):
        return value
    try:
        return FormatId(str(value).strip().lower())
    except ValueError:
        raise UnsupportedFormatError(str(value)) from None


def resolve_format(value: Union[str, FormatId, None]) -> FormatId:
    """Lenient string -> FormatId; unknown ids resolve to json."""
    if value is None:
        return FormatId(FALLBACK_FORMAT)
    try:
        return parse_format(value)
    except UnsupportedFormatError:
        logger.warning(f"Unknown export format '{value}', using {FALLBACK_FORMAT}")
        return FormatId(FALLBACK_FORMAT)


def get_platform_profile(platform: Union[str, PlatformId, None]) -> PlatformProfile:
    return PLATFORMS[resolve_platform(platform)]


def get_format_profile(export_format: Union[str, FormatId, None]) -> FormatProfile:
    return FORMATS[resolve_format(export_format)]


def get_recommendations(platform: Union[str, PlatformId, None]) -> str:
    """Formatting recommendation text for a platform."""
    profile = get_platform_profile(platform)
    return profile.recommended_format or "No specific format recommendations available"


def list_platforms() -> List[Dict[str, object]]:
    """Platform identifiers and display names for the API."""
    return [
        {
            "id": profile.id.value,
            "name": profile.name,
            "supported_formats": [f.value for f in profile.supported_formats],
            "max_content_length": profile.max_content_length,
        }
        for profile in PLATFORMS.values()
    ]


def list_formats() -> List[Dict[str, str]]:
    """Format identifiers and display names for the API."""
    return [
        {
            "id": profile.id.value,
            "name": profile.name,
            "mime_type": profile.mime_type,
            "extension": profile.extension,
        }
        for profile in FORMATS.values()
    ]
