"""Multi-provider LLM routing layer.

This module lets an agent talk to several LLM backends through one interface:
- OpenAI-compatible HTTP endpoints (OpenRouter, Zhipu, Moonshot, Groq, ...)
- The `claude` CLI
- A local GitHub Copilot bridge
- Claude and Codex with stored OAuth credentials

Public API (the "studs"):
    create_provider: Factory function to create provider instances
    resolve_provider_selection: Pure resolver from configuration to backend
    LLMConfig: Configuration model
    ProviderSelection, ProviderKind: Routing decision and backend variants
    Message, ToolDefinition, ToolFunctionDefinition, ToolCall: Conversation types
    ChatOptions, LLMResponse, UsageInfo: Request options and response types
    BaseLLMProvider: Abstract base class all providers implement

Example:
    >>> from switchyard.llm import LLMConfig, Message, create_provider
    >>>
    >>> config = LLMConfig.from_env()   # SWITCHYARD_MODEL=glm-4.7, ZHIPU_API_KEY=...
    >>> provider = create_provider(config)
    >>> response = provider.chat(
    ...     [Message(role="user", content="Hello!")],
    ...     options={"max_tokens": 256},
    ... )
    >>> print(response.content)
"""

from switchyard.llm.config import AgentDefaults, LLMConfig, ProvidersConfig, VendorConfig
from switchyard.llm.exceptions import (
    LLMAuthenticationError,
    LLMConfigurationError,
    LLMDecodeError,
    LLMError,
    LLMHTTPError,
    LLMInvalidRequestError,
    LLMProviderError,
    LLMRateLimitError,
    LLMTimeoutError,
)
from switchyard.llm.factory import create_provider
from switchyard.llm.providers.base import BaseLLMProvider
from switchyard.llm.selection import ProviderSelection, resolve_provider_selection
from switchyard.llm.types import (
    ChatOptions,
    LLMResponse,
    Message,
    ProviderKind,
    ToolCall,
    ToolDefinition,
    ToolFunctionDefinition,
    UsageInfo,
)

__all__ = [
    # Factory and selection
    "create_provider",
    "resolve_provider_selection",
    "ProviderSelection",
    "ProviderKind",
    # Config
    "LLMConfig",
    "AgentDefaults",
    "ProvidersConfig",
    "VendorConfig",
    # Types
    "Message",
    "ToolDefinition",
    "ToolFunctionDefinition",
    "ToolCall",
    "ChatOptions",
    "LLMResponse",
    "UsageInfo",
    # Base class (for custom providers)
    "BaseLLMProvider",
    # Exceptions
    "LLMError",
    "LLMConfigurationError",
    "LLMAuthenticationError",
    "LLMInvalidRequestError",
    "LLMProviderError",
    "LLMHTTPError",
    "LLMRateLimitError",
    "LLMDecodeError",
    "LLMTimeoutError",
]
