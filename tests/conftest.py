"""
Pytest configuration and shared fixtures for Prompt Exporter tests.
"""
import sys
import pytest
from datetime import datetime, timezone
from pathlib import Path
from unittest.mock import AsyncMock

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from ai_providers import AIProviderType, AIResponse
from core.export_sink import MemorySink
from core.exporter import ExporterConfig, PromptExporter
from core.parser import PromptParser
from core.prompt_source import LocalFolderSource
from core.types import PromptComponents, StructuredPrompt


FIXED_TIME = datetime(2024, 3, 15, 12, 30, 45, tzinfo=timezone.utc)


# ============================================================================
# Fixtures: Clock
# ============================================================================

@pytest.fixture
def fixed_time() -> datetime:
    return FIXED_TIME


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_TIME."""
    return lambda: FIXED_TIME


# ============================================================================
# Fixtures: Sample Data
# ============================================================================

@pytest.fixture
def sample_prompts():
    """Sample prompt texts."""
    return {
        "cinematic": "Cinematic urban scene with dramatic lighting",
        "noir": "A detective in a rainy city street at night, film noir, highly detailed",
        "nsfw": "nsfw content here",
        "plain": "a quiet lake at dawn",
        "dall_e_ok": "A clear subject, a lone tree, in a specific style of watercolor",
        "midjourney_params": "castle on a hill ar:16:9 stylize:2000 quality:high",
    }


@pytest.fixture
def make_prompt():
    """Factory for StructuredPrompt values."""
    def _make(content, styles=(), qualities=(), subjects=(), settings=(), metadata=None):
        return StructuredPrompt(
            content=content,
            components=PromptComponents(
                subjects=tuple(subjects),
                styles=tuple(styles),
                qualities=tuple(qualities),
                settings=tuple(settings),
            ),
            metadata=dict(metadata or {}),
        )
    return _make


@pytest.fixture
def parser(fixed_clock):
    return PromptParser(clock=fixed_clock)


# ============================================================================
# Fixtures: Pipeline
# ============================================================================

@pytest.fixture
def memory_sink():
    return MemorySink()


@pytest.fixture
def input_dir(tmp_path: Path) -> Path:
    """Input directory with one batch folder of three prompts."""
    base = tmp_path / "input"
    folder = base / "scenes"
    folder.mkdir(parents=True)
    (folder / "01_city.txt").write_text("Cinematic urban scene with dramatic lighting", encoding="utf-8")
    (folder / "02_forbidden.txt").write_text("nsfw content here", encoding="utf-8")
    (folder / "03_doc.json").write_text('{"subject": "robot", "styles": ["anime"]}', encoding="utf-8")
    (folder / "ignored.png").write_bytes(b"\x89PNG")
    return base


@pytest.fixture
def exporter(memory_sink, input_dir, fixed_clock):
    """Exporter with enhancement disabled, memory storage and a local batch source."""
    return PromptExporter(
        config=ExporterConfig(use_enhancement=False),
        sink=memory_sink,
        source=LocalFolderSource(input_dir),
        clock=fixed_clock,
    )


# ============================================================================
# Fixtures: Mock AI provider
# ============================================================================

@pytest.fixture
def mock_provider():
    """Mock AI provider whose enhance_prompt returns a JSON reply."""
    provider = AsyncMock()
    provider.provider_type = AIProviderType.GEMINI
    provider.enhance_prompt = AsyncMock(return_value=AIResponse(
        content=(
            '{"prompt": "Cinematic neon city street at night, dramatic rim lighting", '
            '"styles": ["Cinematic", "dramatic"], "subjects": [], '
            '"qualities": ["detailed"], "settings": ["city", "night"], '
            '"tags": ["neon", "rain"]}'
        ),
        model="gemini-2.0-flash",
        provider=AIProviderType.GEMINI,
    ))
    return provider


# ============================================================================
# Session-level Setup
# ============================================================================

def pytest_configure(config):
    """Register markers."""
    config.addinivalue_line("markers", "unit: stage-level tests")
    config.addinivalue_line("markers", "integration: orchestrator and HTTP tests")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers."""
    for item in items:
        # Auto-add 'unit' marker to test files in tests/unit/
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        # Auto-add 'integration' marker to test files in tests/integration/
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
