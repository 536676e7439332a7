"""
AI Providers Package
Prompt Exporter - Enhancement Service Support

Supports:
- Google Gemini (gemini-2.0-flash, gemini-1.5-pro, etc.)
- OpenAI GPT (gpt-4o, gpt-4o-mini, etc.)

Usage:
    from ai_providers import create_provider

    provider = create_provider("gemini", api_key="...")
    response = await provider.enhance_prompt(
        prompt="Cinematic urban scene",
        instructions="Return JSON with a richer prompt"
    )
    print(response.content)
"""

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
    AIConfig
)

from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider

from .manager import (
    ProviderInfo,
    PROVIDER_REGISTRY,
    PROVIDER_INFO,
    create_provider,
    list_providers,
    resolve_provider_type,
)

__all__ = [
    # Base classes
    "BaseAIProvider",
    "AIProviderType",
    "AIMessage",
    "AIResponse",
    "AIConfig",

    # Providers
    "GeminiProvider",
    "OpenAIProvider",

    # Manager
    "ProviderInfo",
    "PROVIDER_REGISTRY",
    "PROVIDER_INFO",
    "create_provider",
    "list_providers",
    "resolve_provider_type",
]

__version__ = "1.0.0"
