"""
AI Provider Manager
Prompt Exporter - Enhancement Service Support

Registry of providers and a factory that builds one from settings.
"""

import os
from typing import Optional, Dict, List, Type
from dataclasses import dataclass

from .base import BaseAIProvider, AIProviderType, AIConfig
from .gemini_provider import GeminiProvider
from .openai_provider import OpenAIProvider


@dataclass
class ProviderInfo:
    """Information about an AI provider"""
    type: AIProviderType
    name: str
    description: str
    models: Dict[str, str]
    default_model: str
    env_key: str  # Environment variable name for API key


# Registry of all available providers
PROVIDER_REGISTRY: Dict[AIProviderType, Type[BaseAIProvider]] = {
    AIProviderType.GEMINI: GeminiProvider,
    AIProviderType.OPENAI: OpenAIProvider,
}

# Provider information
PROVIDER_INFO: Dict[AIProviderType, ProviderInfo] = {
    AIProviderType.GEMINI: ProviderInfo(
        type=AIProviderType.GEMINI,
        name="Google Gemini",
        description="Gemini - Fast multimodal model, default prompt enhancer",
        models=GeminiProvider.MODELS,
        default_model=GeminiProvider.DEFAULT_MODEL,
        env_key="GEMINI_API_KEY"
    ),
    AIProviderType.OPENAI: ProviderInfo(
        type=AIProviderType.OPENAI,
        name="OpenAI GPT",
        description="GPT-4o family - Alternative prompt enhancer",
        models=OpenAIProvider.MODELS,
        default_model=OpenAIProvider.DEFAULT_MODEL,
        env_key="OPENAI_API_KEY"
    ),
}

_PROVIDER_ALIASES = {
    "gemini": AIProviderType.GEMINI,
    "google": AIProviderType.GEMINI,
    "openai": AIProviderType.OPENAI,
    "gpt": AIProviderType.OPENAI,
}


def list_providers() -> List[ProviderInfo]:
    """List all available providers"""
    return list(PROVIDER_INFO.values())


def resolve_provider_type(name: str) -> AIProviderType:
    """Map a provider name or alias to its type"""
    provider_type = _PROVIDER_ALIASES.get(name.lower())
    if provider_type is None:
        raise ValueError(f"Unknown provider: {name}")
    return provider_type


def create_provider(
    name: str,
    api_key: Optional[str] = None,
    model: Optional[str] = None,
    max_tokens: int = 1024,
    temperature: float = 0.4,
) -> BaseAIProvider:
    """
    Factory function to create a provider.

    Args:
        name: Provider name ("gemini", "openai" or an alias)
        api_key: API key; falls back to the provider's environment variable
        model: Specific model; falls back to the provider default
        max_tokens: Completion token cap
        temperature: Sampling temperature

    Returns:
        Uninitialized provider instance (initialized lazily on first call)
    """
    provider_type = resolve_provider_type(name)
    info = PROVIDER_INFO[provider_type]

    key = api_key or os.environ.get(info.env_key)
    if not key:
        raise ValueError(
            f"API key not found for {info.name}. "
            f"Set {info.env_key} environment variable or pass api_key."
        )

    config = AIConfig(
        api_key=key,
        model=model or info.default_model,
        max_tokens=max_tokens,
        temperature=temperature,
    )
    return PROVIDER_REGISTRY[provider_type](config)
