"""
OpenAI Provider - GPT-4o, GPT-4o-mini, etc.
Prompt Exporter - Enhancement Service Support
"""

from typing import Optional, List, Dict, Any

try:
    from openai import AsyncOpenAI
    HAS_OPENAI = True
except ImportError:
    HAS_OPENAI = False

from .base import (
    BaseAIProvider,
    AIProviderType,
    AIMessage,
    AIResponse,
)


class OpenAIProvider(BaseAIProvider):
    """
    OpenAI GPT Provider

    Alternative enhancement backend.
    """

    MODELS = {
        "gpt-4o": "GPT-4o",
        "gpt-4o-mini": "GPT-4o Mini (Fast)",
        "gpt-4-turbo": "GPT-4 Turbo",
    }

    DEFAULT_MODEL = "gpt-4o-mini"

    @property
    def provider_type(self) -> AIProviderType:
        return AIProviderType.OPENAI

    @property
    def supported_models(self) -> List[str]:
        return list(self.MODELS.keys())

    async def initialize(self) -> None:
        """Initialize OpenAI client"""
        if not HAS_OPENAI:
            raise ImportError("openai package not installed. Run: pip install openai")

        self._client = AsyncOpenAI(
            api_key=self.config.api_key,
            base_url=self.config.base_url
        )

    def _convert_messages(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Convert AIMessage to OpenAI format"""
        converted = []

        # Add system message if provided
        if system_prompt:
            converted.append({"role": "system", "content": system_prompt})

        for msg in messages:
            converted.append({"role": msg.role, "content": msg.content})

        return converted

    async def complete(
        self,
        messages: List[AIMessage],
        system_prompt: Optional[str] = None,
        **kwargs
    ) -> AIResponse:
        """Generate completion using OpenAI"""
        if not self._client:
            await self.initialize()

        api_messages = self._convert_messages(messages, system_prompt)

        request: Dict[str, Any] = {
            "model": kwargs.get("model", self.config.model),
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            "temperature": kwargs.get("temperature", self.config.temperature),
            "messages": api_messages,
        }
        if kwargs.get("json_mode"):
            request["response_format"] = {"type": "json_object"}

        response = await self._client.chat.completions.create(**request)

        choice = response.choices[0]

        return AIResponse(
            content=choice.message.content,
            model=response.model,
            provider=self.provider_type,
            usage={
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens
            } if response.usage else None,
            finish_reason=choice.finish_reason,
            raw_response=response
        )
