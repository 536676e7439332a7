#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PromptParser - unstructured text -> StructuredPrompt.

Steps:
1. Normalize: trim, collapse whitespace runs (including newlines) to a
   single space, hard-truncate to the configured maximum length.
2. Extract keyword components (styles, qualities, subjects, settings) with
   case-insensitive patterns. Detection is a presence signal only.
3. Dispatch by source kind. Structured input is decoded as JSON; its
   fields override the extracted keywords in metadata. Anything that does
   not decode to a mapping is handled as plain text.

Usage:
    from core.parser import PromptParser
    from core.types import RawInput

    parser = PromptParser()
    prompt = parser.parse(RawInput("Cinematic urban scene with dramatic lighting"))
    print(prompt.components.styles)   # ('cinematic', 'dramatic')
"""

import json
import re
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.logging_config import get_logger
from config.constants import PARSER_MAX_PROMPT_LENGTH

from .errors import EmptyContentError
from .types import PromptComponents, RawInput, SourceKind, StructuredPrompt

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


# Canonical label -> pattern. Order defines the order labels are reported in.
STYLE_PATTERNS: List[Tuple[str, str]] = [
    ("cinematic", r"cinematic"),
    ("film noir", r"film[\s-]?noir|noir"),
    ("dramatic", r"dramatic"),
    ("realistic", r"photo[\s-]?realistic|realistic|photographic"),
    ("stylized", r"stylized|stylised"),
    ("anime", r"anime|manga"),
    ("cyberpunk", r"cyberpunk"),
    ("watercolor", r"watercolou?r"),
    ("oil painting", r"oil[\s-]painting"),
    ("surreal", r"surreal(?:ist|ism)?"),
    ("minimalist", r"minimalist|minimal"),
    ("vintage", r"vintage|retro"),
]

QUALITY_PATTERNS: List[Tuple[str, str]] = [
    ("detailed", r"(?:highly\s+|ultra[\s-])?detailed"),
    ("high quality", r"high[\s-]quality"),
    ("8k", r"8k"),
    ("4k", r"4k"),
    ("hd", r"hd|high[\s-]definition"),
    ("sharp focus", r"sharp[\s-]focus"),
]

SUBJECT_PATTERNS: List[Tuple[str, str]] = [
    ("person", r"person|people"),
    ("man", r"man|men"),
    ("woman", r"woman|women"),
    ("character", r"characters?"),
    ("detective", r"detectives?"),
    ("figure", r"figures?"),
    ("portrait", r"portraits?"),
    ("animal", r"animals?|cat|dog|bird|horse"),
    ("robot", r"robots?|android"),
]

SETTING_PATTERNS: List[Tuple[str, str]] = [
    ("urban", r"urban"),
    ("city", r"city|cityscape|streets?"),
    ("office", r"office"),
    ("indoor", r"indoors?|interior"),
    ("outdoor", r"outdoors?|exterior"),
    ("landscape", r"landscape|mountains?|valley"),
    ("forest", r"forest|woods|jungle"),
    ("night", r"night|midnight"),
]


def _compile(patterns: List[Tuple[str, str]]) -> List[Tuple[str, re.Pattern]]:
    return [
        (label, re.compile(rf"\b(?:{pattern})\b", re.IGNORECASE))
        for label, pattern in patterns
    ]


_STYLE_RE = _compile(STYLE_PATTERNS)
_QUALITY_RE = _compile(QUALITY_PATTERNS)
_SUBJECT_RE = _compile(SUBJECT_PATTERNS)
_SETTING_RE = _compile(SETTING_PATTERNS)
_WHITESPACE_RE = re.compile(r"\s+")


def normalize_content(content: Optional[str], max_length: int = PARSER_MAX_PROMPT_LENGTH) -> str:
    """
    Trim, collapse whitespace and hard-truncate content.

    Raises:
        EmptyContentError: If nothing is left after trimming.
    """
    if content is None or not content.strip():
        raise EmptyContentError()

    normalized = _WHITESPACE_RE.sub(" ", content.strip())
    if len(normalized) > max_length:
        normalized = normalized[:max_length]
    return normalized


def _detect(content: str, patterns: List[Tuple[str, re.Pattern]]) -> Tuple[str, ...]:
    return tuple(label for label, regex in patterns if regex.search(content))


def extract_components(content: str) -> PromptComponents:
    """Keyword presence per category; every label appears at most once."""
    return PromptComponents(
        subjects=_detect(content, _SUBJECT_RE),
        styles=_detect(content, _STYLE_RE),
        qualities=_detect(content, _QUALITY_RE),
        settings=_detect(content, _SETTING_RE),
    )


class PromptParser:
    """
    Turns raw text into a StructuredPrompt.

    Args:
        max_prompt_length: Hard cutoff applied after normalization.
        clock: Source of the parse timestamp (injected for tests).
    """

    def __init__(
        self,
        max_prompt_length: int = PARSER_MAX_PROMPT_LENGTH,
        clock: Optional[Clock] = None,
    ):
        self.max_prompt_length = max_prompt_length
        self._clock = clock or utc_now

    def parse(self, raw: RawInput) -> StructuredPrompt:
        """
        Parse raw input into a structured prompt.

        Raises:
            EmptyContentError: Content is empty or whitespace only.
        """
        source_kind = SourceKind(raw.source_kind)
        logger.debug(f"Parsing content of type {source_kind.value}")

        content = normalize_content(raw.content, self.max_prompt_length)
        components = extract_components(content)

        if source_kind is SourceKind.STRUCTURED:
            metadata = self._parse_structured(content, components)
        else:
            metadata = self._parse_text(components, source_kind)

        return StructuredPrompt(content=content, components=components, metadata=metadata)

    def _parse_text(self, components: PromptComponents, source_kind: SourceKind) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"type": source_kind.value}
        metadata.update(components.to_dict())
        metadata["parsed_at"] = self._timestamp()
        return metadata

    def _parse_structured(self, content: str, components: PromptComponents) -> Dict[str, Any]:
        try:
            document = json.loads(content)
        except json.JSONDecodeError:
            logger.debug("Structured content is not valid JSON, parsing as text")
            return self._parse_text(components, SourceKind.TEXT)

        if not isinstance(document, dict):
            logger.debug("Structured content is not a key-value document, parsing as text")
            return self._parse_text(components, SourceKind.TEXT)

        metadata: Dict[str, Any] = components.to_dict()
        metadata.update({"type": "structured", "structured": True})
        metadata.update(document)
        metadata["parsed_at"] = self._timestamp()
        return metadata

    def _timestamp(self) -> str:
        return self._clock().isoformat()
