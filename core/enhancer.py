#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Prompt enhancement - optional second pass producing richer metadata.

Enhancement is not a merge: an enhancer returns a new StructuredPrompt that
supersedes the parsed one. Fields of a structured source document (e.g.
``weights``) are carried forward; the text-derived metadata is rebuilt.

Enhancers:
    NoOpEnhancer: returns the prompt unchanged.
    KeywordEnhancer: deterministic keyword-to-tag inference, no I/O.
    ProviderEnhancer: asks an AI provider (Gemini/OpenAI) for a JSON reply.

run_enhancement() is the orchestrator's entry point: it bounds the call with
a timeout and falls back to the un-enhanced prompt on any failure.
"""

import asyncio
import json
import re
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ai_providers import BaseAIProvider, create_provider
from config.logging_config import get_logger
from config.constants import (
    ENHANCEMENT_MAX_TOKENS,
    ENHANCEMENT_TEMPERATURE,
    PARSER_MAX_PROMPT_LENGTH,
)

from .errors import EnhancementFailure, InputError
from .parser import extract_components, normalize_content, utc_now
from .rule_tables import get_platform_profile, resolve_platform
from .types import DetailLevel, PlatformId, PromptComponents, StructuredPrompt

logger = get_logger(__name__)


class BaseEnhancer(ABC):
    """Capability contract: prompt + platform + detail level -> new prompt"""

    name: str = "base"

    @abstractmethod
    async def enhance(
        self,
        prompt: StructuredPrompt,
        platform: PlatformId,
        detail_level: DetailLevel,
    ) -> StructuredPrompt:
        pass


# metadata keys the parser derives from the text itself; enhancers rebuild these
PARSED_KEYS = frozenset({"type", "subjects", "styles", "qualities", "settings", "parsed_at"})


def carried_fields(prompt: StructuredPrompt) -> Dict[str, Any]:
    """Metadata an enhancer keeps: structured-document fields such as ``weights``."""
    return {key: value for key, value in prompt.metadata.items() if key not in PARSED_KEYS}


class NoOpEnhancer(BaseEnhancer):
    """Enhancement disabled"""

    name = "none"

    async def enhance(self, prompt, platform, detail_level):
        return prompt


class KeywordEnhancer(BaseEnhancer):
    """
    Infers summary tags from the parsed keyword components.

    basic:    style / subject / setting / quality labels
    standard: + the full component lists
    detailed: + combined tag list and the platform's format recommendation
    """

    name = "keyword"

    def __init__(self, clock: Optional[Callable[[], datetime]] = None):
        self._clock = clock or utc_now

    async def enhance(self, prompt, platform, detail_level):
        platform = resolve_platform(platform)
        detail_level = DetailLevel(detail_level)
        components = prompt.components

        metadata = carried_fields(prompt)
        metadata.update({
            "type": "enhanced",
            "source_type": prompt.metadata.get("type", "text"),
            "enhanced_by": self.name,
            "detail_level": detail_level.value,
            "platform": platform.value,
            "style": _first(components.styles, "standard"),
            "subject": _first(components.subjects, "scene"),
            "setting": _first(components.settings, "unspecified"),
            "quality": _first(components.qualities, "standard"),
        })

        if detail_level in (DetailLevel.STANDARD, DetailLevel.DETAILED):
            metadata.update(components.to_dict())

        if detail_level is DetailLevel.DETAILED:
            metadata["tags"] = _unique(
                list(components.styles)
                + list(components.qualities)
                + list(components.subjects)
                + list(components.settings)
            )
            metadata["recommended_format"] = get_platform_profile(platform).recommended_format

        metadata["generated_at"] = self._clock().isoformat()
        return StructuredPrompt(content=prompt.content, components=components, metadata=metadata)


ENHANCEMENT_INSTRUCTIONS = """You are an expert prompt engineer for the {platform_name} image/video generation platform.
Rewrite the user's prompt so it produces better results on {platform_name}.

Rules:
- Keep the user's subject and intent
- Stay under {max_length} characters
- Recommended prompt shape: {recommended_format}
- Detail level: {detail_level} ({detail_hint})

Reply with ONLY a JSON object of this shape:
{{"prompt": "<rewritten prompt>", "styles": [], "subjects": [], "qualities": [], "settings": [], "tags": []}}"""

_DETAIL_HINTS = {
    DetailLevel.BASIC: "light touch, fix wording only",
    DetailLevel.STANDARD: "add style and lighting cues",
    DetailLevel.DETAILED: "add style, lighting, composition and quality cues",
}

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$")


class ProviderEnhancer(BaseEnhancer):
    """
    Enhancement through an external AI provider.

    Raises:
        EnhancementFailure: The reply is not a JSON object with a non-empty prompt.
    """

    name = "provider"

    def __init__(
        self,
        provider: BaseAIProvider,
        max_prompt_length: int = PARSER_MAX_PROMPT_LENGTH,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.provider = provider
        self.max_prompt_length = max_prompt_length
        self._clock = clock or utc_now

    def build_instructions(self, platform: PlatformId, detail_level: DetailLevel) -> str:
        profile = get_platform_profile(platform)
        return ENHANCEMENT_INSTRUCTIONS.format(
            platform_name=profile.name,
            max_length=profile.max_content_length,
            recommended_format=profile.recommended_format,
            detail_level=detail_level.value,
            detail_hint=_DETAIL_HINTS[detail_level],
        )

    async def enhance(self, prompt, platform, detail_level):
        platform = resolve_platform(platform)
        detail_level = DetailLevel(detail_level)

        response = await self.provider.enhance_prompt(
            prompt.content,
            self.build_instructions(platform, detail_level),
        )
        reply = parse_enhancement_reply(response.content)

        try:
            content = normalize_content(reply["prompt"], self.max_prompt_length)
        except InputError as e:
            raise EnhancementFailure("Enhancement returned an empty prompt") from e

        extracted = extract_components(content)
        components = PromptComponents(
            subjects=_labels(reply.get("subjects")) or extracted.subjects,
            styles=_labels(reply.get("styles")) or extracted.styles,
            qualities=_labels(reply.get("qualities")) or extracted.qualities,
            settings=_labels(reply.get("settings")) or extracted.settings,
        )

        metadata = carried_fields(prompt)
        metadata.update({
            "type": "enhanced",
            "source_type": prompt.metadata.get("type", "text"),
            "enhanced_by": self.provider.provider_type.value,
            "model": response.model,
            "detail_level": detail_level.value,
            "platform": platform.value,
            "original_prompt": prompt.content,
        })
        metadata.update(components.to_dict())
        tags = _labels(reply.get("tags"))
        if tags:
            metadata["tags"] = list(tags)
        metadata["generated_at"] = self._clock().isoformat()

        return StructuredPrompt(content=content, components=components, metadata=metadata)


def parse_enhancement_reply(text: Optional[str]) -> Dict[str, Any]:
    """Decode a provider reply into a dict with a string ``prompt`` field."""
    if not text:
        raise EnhancementFailure("Enhancement service returned no content")

    cleaned = _FENCE_RE.sub("", text.strip())
    try:
        reply = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise EnhancementFailure(f"Enhancement reply is not valid JSON: {e}") from e

    if not isinstance(reply, dict) or not isinstance(reply.get("prompt"), str):
        raise EnhancementFailure("Enhancement reply is missing a 'prompt' string")
    return reply


async def run_enhancement(
    enhancer: BaseEnhancer,
    prompt: StructuredPrompt,
    platform: PlatformId,
    detail_level: DetailLevel,
    timeout: Optional[float] = None,
) -> Tuple[StructuredPrompt, bool]:
    """
    Enhance with a bounded wait, degrading to the parsed prompt on failure.

    Returns:
        (prompt to continue with, whether enhancement was applied)
    """
    try:
        enhanced = await asyncio.wait_for(
            enhancer.enhance(prompt, platform, detail_level),
            timeout=timeout,
        )
    except asyncio.TimeoutError:
        logger.warning(
            f"Enhancement with '{enhancer.name}' timed out after {timeout}s, "
            f"continuing with parsed prompt"
        )
        return prompt, False
    except Exception as e:
        logger.warning(
            f"Enhancement with '{enhancer.name}' failed ({type(e).__name__}: {e}), "
            f"continuing with parsed prompt"
        )
        return prompt, False

    if not isinstance(enhanced, StructuredPrompt) or not enhanced.content.strip():
        logger.warning(f"Enhancer '{enhancer.name}' returned no content, using parsed prompt")
        return prompt, False

    return enhanced, True


def build_enhancer(
    provider_name: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    max_prompt_length: int = PARSER_MAX_PROMPT_LENGTH,
    clock: Optional[Callable[[], datetime]] = None,
) -> BaseEnhancer:
    """
    Build the configured enhancer.

    "none" disables enhancement, "keyword" uses local inference, any AI
    provider name builds a ProviderEnhancer. A provider without credentials
    degrades to keyword inference.
    """
    name = (provider_name or "none").lower()
    if name == "none":
        return NoOpEnhancer()
    if name == "keyword":
        return KeywordEnhancer(clock=clock)

    try:
        provider = create_provider(
            name,
            api_key=api_key or None,
            model=model,
            max_tokens=ENHANCEMENT_MAX_TOKENS,
            temperature=ENHANCEMENT_TEMPERATURE,
        )
    except ValueError as e:
        logger.warning(f"Cannot use enhancement provider '{name}': {e}. Using keyword enhancer")
        return KeywordEnhancer(clock=clock)

    logger.info(f"Enhancement provider: {provider!r}")
    return ProviderEnhancer(provider, max_prompt_length=max_prompt_length, clock=clock)


def _first(values: Tuple[str, ...], default: str) -> str:
    return values[0] if values else default


def _unique(values: List[str]) -> List[str]:
    seen = []
    for value in values:
        if value not in seen:
            seen.append(value)
    return seen


def _labels(values: Union[List[Any], Any, None]) -> Tuple[str, ...]:
    if not isinstance(values, list):
        return ()
    cleaned = [str(v).strip().lower() for v in values if isinstance(v, str) and v.strip()]
    return tuple(_unique(cleaned))
