"""
Unit tests for core/enhancer.py - enhancement stage
"""
import asyncio
import pytest
from unittest.mock import AsyncMock

from ai_providers import AIProviderType, AIResponse
from core.enhancer import (
    KeywordEnhancer,
    NoOpEnhancer,
    ProviderEnhancer,
    build_enhancer,
    parse_enhancement_reply,
    run_enhancement,
)
from core.errors import EnhancementFailure
from core.types import DetailLevel, PlatformId, RawInput, SourceKind


@pytest.fixture
def noir_prompt(parser, sample_prompts):
    return parser.parse(RawInput(sample_prompts["noir"]))


class TestKeywordEnhancer:

    @pytest.mark.asyncio
    async def test_basic_level_labels(self, noir_prompt, fixed_clock, fixed_time):
        enhanced = await KeywordEnhancer(clock=fixed_clock).enhance(
            noir_prompt, PlatformId.MIDJOURNEY, DetailLevel.BASIC
        )
        assert enhanced.content == noir_prompt.content
        assert enhanced.metadata["type"] == "enhanced"
        assert enhanced.metadata["source_type"] == "text"
        assert enhanced.metadata["style"] == "film noir"
        assert enhanced.metadata["subject"] == "detective"
        assert enhanced.metadata["setting"] == "city"
        assert enhanced.metadata["quality"] == "detailed"
        assert enhanced.metadata["generated_at"] == fixed_time.isoformat()
        assert "styles" not in enhanced.metadata

    @pytest.mark.asyncio
    async def test_detailed_level_adds_tags(self, noir_prompt):
        enhanced = await KeywordEnhancer().enhance(noir_prompt, PlatformId.STABLE_DIFFUSION, DetailLevel.DETAILED)
        assert enhanced.metadata["styles"] == ["film noir"]
        assert enhanced.metadata["tags"] == ["film noir", "detailed", "detective", "city", "night"]
        assert "weights" in enhanced.metadata["recommended_format"]

    @pytest.mark.asyncio
    async def test_defaults_when_nothing_detected(self, parser):
        prompt = parser.parse(RawInput("a quiet lake at dawn"))
        enhanced = await KeywordEnhancer().enhance(prompt, PlatformId.CUSTOM, DetailLevel.STANDARD)
        assert enhanced.metadata["style"] == "standard"
        assert enhanced.metadata["subject"] == "scene"
        assert enhanced.metadata["setting"] == "unspecified"

    @pytest.mark.asyncio
    async def test_structured_fields_carried_forward(self, parser):
        prompt = parser.parse(RawInput('{"subject": "robot", "weights": {"robot": 1.4}}', SourceKind.STRUCTURED))
        enhanced = await KeywordEnhancer().enhance(prompt, PlatformId.STABLE_DIFFUSION, DetailLevel.BASIC)

        assert enhanced.metadata["weights"] == {"robot": 1.4}
        assert enhanced.metadata["structured"] is True
        assert enhanced.metadata["type"] == "enhanced"
        assert enhanced.metadata["source_type"] == "structured"
        assert "parsed_at" not in enhanced.metadata

    @pytest.mark.asyncio
    async def test_noop_returns_same_prompt(self, noir_prompt):
        assert await NoOpEnhancer().enhance(noir_prompt, PlatformId.CUSTOM, DetailLevel.BASIC) is noir_prompt


class TestProviderEnhancer:

    @pytest.mark.asyncio
    async def test_reply_supersedes_prompt(self, mock_provider, noir_prompt, fixed_clock):
        enhancer = ProviderEnhancer(mock_provider, clock=fixed_clock)
        enhanced = await enhancer.enhance(noir_prompt, PlatformId.MIDJOURNEY, DetailLevel.DETAILED)

        assert enhanced.content == "Cinematic neon city street at night, dramatic rim lighting"
        assert enhanced.components.styles == ("cinematic", "dramatic")
        assert enhanced.components.settings == ("city", "night")
        assert enhanced.metadata["enhanced_by"] == "gemini"
        assert enhanced.metadata["tags"] == ["neon", "rain"]
        assert enhanced.metadata["original_prompt"] == noir_prompt.content

        prompt_arg, instructions = mock_provider.enhance_prompt.call_args.args
        assert prompt_arg == noir_prompt.content
        assert "Midjourney" in instructions
        assert "500" in instructions

    @pytest.mark.asyncio
    async def test_structured_fields_carried_forward(self, mock_provider, parser):
        prompt = parser.parse(RawInput('{"scene": "alley", "weights": {"neon": 1.2}}', SourceKind.STRUCTURED))
        enhanced = await ProviderEnhancer(mock_provider).enhance(prompt, PlatformId.MIDJOURNEY, DetailLevel.STANDARD)

        assert enhanced.metadata["weights"] == {"neon": 1.2}
        assert enhanced.metadata["scene"] == "alley"
        assert enhanced.metadata["enhanced_by"] == "gemini"

    @pytest.mark.asyncio
    async def test_missing_lists_are_extracted(self, noir_prompt):
        provider = AsyncMock()
        provider.provider_type = AIProviderType.OPENAI
        provider.enhance_prompt = AsyncMock(return_value=AIResponse(
            content='```json\n{"prompt": "portrait of a robot, watercolor"}\n```',
            model="gpt-4o-mini",
            provider=AIProviderType.OPENAI,
        ))
        enhanced = await ProviderEnhancer(provider).enhance(noir_prompt, PlatformId.CUSTOM, DetailLevel.BASIC)

        assert enhanced.components.styles == ("watercolor",)
        assert enhanced.components.subjects == ("portrait", "robot")
        assert "tags" not in enhanced.metadata

    @pytest.mark.asyncio
    async def test_blank_prompt_is_failure(self, mock_provider, noir_prompt):
        mock_provider.enhance_prompt.return_value = AIResponse(
            content='{"prompt": "   "}', model="m", provider=AIProviderType.GEMINI
        )
        with pytest.raises(EnhancementFailure):
            await ProviderEnhancer(mock_provider).enhance(noir_prompt, PlatformId.CUSTOM, DetailLevel.BASIC)


class TestParseReply:

    @pytest.mark.parametrize("text", [None, "", "not json", "[1, 2]", '{"styles": []}', '{"prompt": 3}'])
    def test_malformed_replies(self, text):
        with pytest.raises(EnhancementFailure):
            parse_enhancement_reply(text)

    def test_fenced_reply(self):
        assert parse_enhancement_reply('```\n{"prompt": "x"}\n```') == {"prompt": "x"}


class TestRunEnhancement:
    """Enhancement failures never abort the pipeline."""

    @pytest.mark.asyncio
    async def test_success(self, noir_prompt):
        prompt, applied = await run_enhancement(
            KeywordEnhancer(), noir_prompt, PlatformId.CUSTOM, DetailLevel.BASIC, timeout=1
        )
        assert applied is True
        assert prompt.metadata["type"] == "enhanced"

    @pytest.mark.asyncio
    async def test_exception_falls_back(self, noir_prompt):
        enhancer = AsyncMock()
        enhancer.name = "broken"
        enhancer.enhance = AsyncMock(side_effect=EnhancementFailure("boom"))

        prompt, applied = await run_enhancement(enhancer, noir_prompt, PlatformId.CUSTOM, DetailLevel.BASIC)
        assert applied is False
        assert prompt is noir_prompt

    @pytest.mark.asyncio
    async def test_timeout_falls_back(self, noir_prompt):
        async def slow(*args):
            await asyncio.sleep(5)

        enhancer = AsyncMock()
        enhancer.name = "slow"
        enhancer.enhance = slow

        prompt, applied = await run_enhancement(
            enhancer, noir_prompt, PlatformId.CUSTOM, DetailLevel.BASIC, timeout=0.01
        )
        assert applied is False
        assert prompt is noir_prompt

    @pytest.mark.asyncio
    async def test_empty_content_falls_back(self, noir_prompt):
        enhancer = AsyncMock()
        enhancer.name = "empty"
        enhancer.enhance = AsyncMock(return_value=noir_prompt.with_content("  "))

        prompt, applied = await run_enhancement(enhancer, noir_prompt, PlatformId.CUSTOM, DetailLevel.BASIC)
        assert applied is False
        assert prompt is noir_prompt


class TestBuildEnhancer:

    def test_named_enhancers(self):
        assert isinstance(build_enhancer("none"), NoOpEnhancer)
        assert isinstance(build_enhancer("keyword"), KeywordEnhancer)

    def test_provider_without_key_degrades_to_keyword(self, monkeypatch):
        monkeypatch.delenv("GEMINI_API_KEY", raising=False)
        assert isinstance(build_enhancer("gemini", api_key=None), KeywordEnhancer)

    def test_unknown_provider_degrades_to_keyword(self):
        assert isinstance(build_enhancer("mystery", api_key="k"), KeywordEnhancer)

    def test_provider_with_key(self):
        enhancer = build_enhancer("openai", api_key="test-key", model="gpt-4o")
        assert isinstance(enhancer, ProviderEnhancer)
        assert enhancer.provider.provider_type is AIProviderType.OPENAI
        assert enhancer.provider.config.model == "gpt-4o"
