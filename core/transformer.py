#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
FormatTransformer - platform shaping + serialization.

Step 1, shaping: apply the platform's content rules (style/quality tags,
weighted terms) and enforce its maximum length. The length limit always
holds for the shaped text, whatever the validator reported.

Step 2, rendering: serialize the shaped prompt to JSON, TXT, CSV or XML.
Renderers are pure functions of (content, metadata, timestamp, profile);
the timestamp is passed in by the caller.

Usage:
    from core.transformer import FormatTransformer

    rendered = FormatTransformer().transform(
        prompt, PlatformId.MIDJOURNEY, FormatId.JSON, timestamp=now
    )
    print(rendered.file_name, rendered.size_bytes)
"""

import csv
import io
import json
import numbers
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional, Union
from xml.sax.saxutils import escape

from config.logging_config import get_logger

from .rule_tables import FormatProfile, PlatformProfile, get_format_profile, get_platform_profile
from .types import FormatId, PlatformId, RenderedExport, StructuredPrompt

logger = get_logger(__name__)

FILE_NAME_PREFIX = "prompt_"
FILE_TIMESTAMP_FORMAT = "%Y-%m-%dT%H-%M-%S"


# ==================== SHAPING ====================

def build_suffix_parts(prompt: StructuredPrompt, profile: PlatformProfile) -> List[str]:
    """Tags and weighted terms to append, in order: styles, qualities, weights."""
    parts: List[str] = []

    if profile.supports_style_tags:
        parts.extend(prompt.components.styles)
        parts.extend(prompt.components.qualities)

    weights = prompt.metadata.get("weights")
    if profile.supports_weights and isinstance(weights, Mapping):
        for term, weight in weights.items():
            if isinstance(weight, bool) or not isinstance(weight, numbers.Real):
                logger.debug(f"Skipping non-numeric weight for '{term}'")
                continue
            parts.append(profile.weight_syntax.format(term=term, weight=weight))

    return parts


def shape(prompt: StructuredPrompt, profile: PlatformProfile) -> str:
    """
    Platform-shaped content, never longer than ``profile.max_content_length``.

    The base content is cut to leave room for the appended parts. If the
    parts alone do not fit, the joined text is cut at the limit.
    """
    limit = profile.max_content_length
    parts = build_suffix_parts(prompt, profile)
    if not parts:
        return prompt.content[:limit]

    separator = profile.content_join_separator
    suffix = "".join(f"{separator} {part}" for part in parts)

    room = limit - len(suffix)
    if room > 0:
        return prompt.content[:room] + suffix
    return (prompt.content + suffix)[:limit]


# ==================== RENDERING ====================

def to_utc(timestamp: datetime) -> datetime:
    """Aware UTC datetime; naive values are taken as UTC."""
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp.astimezone(timezone.utc)


def format_timestamp(timestamp: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a trailing Z."""
    return to_utc(timestamp).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def file_timestamp(timestamp: datetime) -> str:
    """UTC timestamp fragment used in export file names."""
    return to_utc(timestamp).strftime(FILE_TIMESTAMP_FORMAT)


def build_file_name(timestamp: datetime, profile: FormatProfile) -> str:
    return f"{FILE_NAME_PREFIX}{file_timestamp(timestamp)}{profile.extension}"


def _scalar_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _value_text(value: Any, sequence_joiner: str) -> str:
    if isinstance(value, (list, tuple)):
        return sequence_joiner.join(
            json.dumps(v) if isinstance(v, (dict, list)) else _scalar_text(v) for v in value
        )
    if isinstance(value, dict):
        return json.dumps(value)
    return _scalar_text(value)


def render_json(content: str, metadata: Optional[Dict[str, Any]], timestamp: str,
                profile: FormatProfile) -> str:
    document: Dict[str, Any] = {"prompt": content, "timestamp": timestamp}
    if metadata is not None:
        document["metadata"] = metadata
    return json.dumps(document, indent=profile.indent or None, ensure_ascii=False)


def render_txt(content: str, metadata: Optional[Dict[str, Any]], timestamp: str,
               profile: FormatProfile) -> str:
    sep = profile.line_separator
    lines = [content]
    if metadata is not None:
        lines.extend(["", profile.metadata_header])
        lines.append(f"timestamp: {timestamp}")
        for key, value in metadata.items():
            lines.append(f"{key}: {_value_text(value, profile.sequence_joiner)}")
    return sep.join(lines) + sep


def render_csv(content: str, metadata: Optional[Dict[str, Any]], timestamp: str,
               profile: FormatProfile) -> str:
    metadata = metadata or {}
    buffer = io.StringIO()
    writer = csv.writer(
        buffer,
        delimiter=profile.delimiter,
        quoting=csv.QUOTE_ALL if profile.quote_all else csv.QUOTE_MINIMAL,
        lineterminator="\n",
    )
    if profile.include_header:
        writer.writerow(["prompt", "timestamp", *metadata.keys()])
    writer.writerow([
        content,
        timestamp,
        *(_value_text(value, profile.sequence_joiner) for value in metadata.values()),
    ])
    return buffer.getvalue()


_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


def xml_element_name(key: str) -> str:
    """Turn a metadata key into a valid XML element name."""
    name = _INVALID_NAME_CHARS.sub("_", str(key)) or "_"
    if not (name[0].isalpha() or name[0] == "_") or name.lower().startswith("xml"):
        name = f"_{name}"
    return name


def _cdata(text: str) -> str:
    return "<![CDATA[" + text.replace("]]>", "]]]]><![CDATA[>") + "]]>"


def _xml_value(value: Any) -> str:
    if isinstance(value, (dict, list)):
        return _cdata(json.dumps(value, ensure_ascii=False))
    return escape(_scalar_text(value))


def render_xml(content: str, metadata: Optional[Dict[str, Any]], timestamp: str,
               profile: FormatProfile) -> str:
    pad = " " * profile.indent
    root = xml_element_name(profile.root_element)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f"<{root}>",
        f"{pad}<content>{_cdata(content)}</content>",
        f"{pad}<timestamp>{escape(timestamp)}</timestamp>",
    ]

    if metadata is not None:
        lines.append(f"{pad}<metadata>")
        for key, value in metadata.items():
            tag = xml_element_name(key)
            if isinstance(value, (list, tuple)):
                lines.append(f"{pad * 2}<{tag}>")
                for item in value:
                    lines.append(f"{pad * 3}<item>{_xml_value(item)}</item>")
                lines.append(f"{pad * 2}</{tag}>")
            else:
                lines.append(f"{pad * 2}<{tag}>{_xml_value(value)}</{tag}>")
        lines.append(f"{pad}</metadata>")

    lines.append(f"</{root}>")
    return "\n".join(lines) + "\n"


Renderer = Callable[[str, Optional[Dict[str, Any]], str, FormatProfile], str]

RENDERERS: Dict[FormatId, Renderer] = {
    FormatId.JSON: render_json,
    FormatId.TXT: render_txt,
    FormatId.CSV: render_csv,
    FormatId.XML: render_xml,
}


# ==================== TRANSFORMER ====================

class FormatTransformer:
    """Shapes a prompt for a platform and renders it into one export file"""

    def transform(
        self,
        prompt: StructuredPrompt,
        platform: Union[str, PlatformId, None],
        export_format: Union[str, FormatId, None],
        timestamp: datetime,
        include_metadata: bool = True,
    ) -> RenderedExport:
        """
        Args:
            prompt: Validated structured prompt.
            platform: Target platform; unknown values use the custom profile.
            export_format: Target format; unknown values render as JSON.
            timestamp: Render time, written into the file and its name.
            include_metadata: Caller's choice, combined with the format profile.
        """
        platform_profile = get_platform_profile(platform)
        format_profile = get_format_profile(export_format)

        shaped = shape(prompt, platform_profile)
        metadata = prompt.metadata if (format_profile.include_metadata and include_metadata) else None

        render = RENDERERS[format_profile.id]
        serialized = render(shaped, metadata, format_timestamp(timestamp), format_profile)

        logger.debug(
            f"Rendered {format_profile.id.value} for {platform_profile.id.value}: "
            f"{len(shaped)}/{platform_profile.max_content_length} chars"
        )

        return RenderedExport(
            file_name=build_file_name(timestamp, format_profile),
            mime_type=format_profile.mime_type,
            content=serialized,
            size_bytes=len(serialized.encode("utf-8")),
            format=format_profile.id,
            platform=platform_profile.id,
            prompt_text=shaped,
        )
