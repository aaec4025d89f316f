"""Abstract base class for LLM providers.

Public API (the "studs"):
    BaseLLMProvider: Abstract base class for LLM providers
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from switchyard.llm.exceptions import LLMInvalidRequestError
from switchyard.llm.types import ChatOptions, LLMResponse, Message, ToolDefinition


class BaseLLMProvider(ABC):
    """Abstract base class for LLM providers.

    Every backend variant produced by the factory implements this interface,
    so callers never need to know which one they hold. Providers are created
    once per session and may be called concurrently.
    """

    _default_model: str | None = None

    @property
    def default_model(self) -> str | None:
        """Model used when chat() is called without one."""
        return self._default_model

    def _resolve_model(self, model: str | None) -> str:
        resolved = model or self._default_model
        if not resolved:
            raise LLMInvalidRequestError("No model specified and provider has no default model")
        return resolved

    @abstractmethod
    def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        """Send one chat request synchronously.

        Args:
            messages: Conversation so far
            tools: Tools the model may call
            model: Model identifier (provider default when None)
            options: Sampling/limit options (temperature, max_tokens, top_p)
            timeout: Per-call deadline in seconds (configured timeout when None)

        Returns:
            LLMResponse with generated content and tool calls

        Raises:
            LLMError: On any failure; nothing is retried
        """
        ...

    @abstractmethod
    async def chat_async(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        """Send one chat request asynchronously.

        Cancelling the awaiting task aborts the in-flight request and raises
        asyncio.CancelledError.
        """
        ...


__all__ = ["BaseLLMProvider"]
