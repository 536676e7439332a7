"""
Unit tests for core/parser.py - PromptParser component
"""
import pytest

from core.errors import EmptyContentError
from core.parser import PromptParser, extract_components, normalize_content
from core.types import RawInput, SourceKind


class TestNormalizeContent:
    """Test whitespace handling and truncation."""

    def test_collapses_whitespace_and_newlines(self):
        assert normalize_content("  a\n\n  quiet\tlake  ") == "a quiet lake"

    def test_hard_truncates_without_ellipsis(self):
        assert normalize_content("abcdefghij", max_length=4) == "abcd"

    @pytest.mark.parametrize("content", ["", "   ", "\n\t ", None])
    def test_empty_content_rejected(self, content):
        with pytest.raises(EmptyContentError, match="Content cannot be empty"):
            normalize_content(content)


class TestExtractComponents:
    """Test keyword detection."""

    def test_cinematic_example(self):
        components = extract_components("Cinematic urban scene with dramatic lighting")
        assert components.styles == ("cinematic", "dramatic")
        assert components.settings == ("urban",)
        assert components.qualities == ()

    def test_detection_is_case_insensitive(self):
        assert extract_components("CYBERPUNK alley").styles == ("cyberpunk",)

    def test_each_label_reported_once(self):
        components = extract_components("noir, film noir, more noir")
        assert components.styles == ("film noir",)

    def test_word_boundaries_respected(self):
        # "human" must not count as "man", "shadow" must not count as "hd"
        components = extract_components("human shadow")
        assert "man" not in components.subjects
        assert "hd" not in components.qualities

    def test_all_categories(self):
        components = extract_components(
            "A detective in a rainy city street at night, film noir, highly detailed"
        )
        assert components.subjects == ("detective",)
        assert components.styles == ("film noir",)
        assert components.qualities == ("detailed",)
        assert components.settings == ("city", "night")


class TestPromptParser:
    """Test PromptParser.parse dispatch."""

    def test_text_metadata_shape(self, parser, fixed_time):
        prompt = parser.parse(RawInput("Cinematic urban scene with dramatic lighting"))

        assert prompt.content == "Cinematic urban scene with dramatic lighting"
        assert prompt.metadata["type"] == "text"
        assert prompt.metadata["styles"] == ["cinematic", "dramatic"]
        assert prompt.metadata["settings"] == ["urban"]
        assert prompt.metadata["parsed_at"] == fixed_time.isoformat()

    def test_document_kind_tagged(self, parser):
        prompt = parser.parse(RawInput("an old map", SourceKind.DOCUMENT))
        assert prompt.metadata["type"] == "document"

    def test_structured_document_fields_take_precedence(self, parser):
        raw = RawInput('{"styles": ["anime"], "subject": "robot"}', SourceKind.STRUCTURED)
        prompt = parser.parse(raw)

        assert prompt.metadata["type"] == "structured"
        assert prompt.metadata["structured"] is True
        assert prompt.metadata["styles"] == ["anime"]
        assert prompt.metadata["subject"] == "robot"
        assert "parsed_at" in prompt.metadata

    def test_structured_invalid_json_falls_back_to_text(self, parser):
        prompt = parser.parse(RawInput("not {json", SourceKind.STRUCTURED))
        assert prompt.metadata["type"] == "text"
        assert "structured" not in prompt.metadata

    def test_structured_non_mapping_falls_back_to_text(self, parser):
        prompt = parser.parse(RawInput("[1, 2, 3]", SourceKind.STRUCTURED))
        assert prompt.metadata["type"] == "text"

    def test_configured_max_length(self, fixed_clock):
        parser = PromptParser(max_prompt_length=10, clock=fixed_clock)
        assert parser.parse(RawInput("x" * 50)).content == "x" * 10

    def test_empty_input_fails_fast(self, parser):
        with pytest.raises(EmptyContentError):
            parser.parse(RawInput("   \n  "))
