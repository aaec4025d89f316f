"""Type definitions for the LLM routing layer.

Public API (the "studs"):
    ProviderKind: Closed enumeration of backend variants
    Message: Represents a single message in a conversation
    ToolDefinition: A tool the model may call
    ToolFunctionDefinition: Name, description and JSON schema of a tool
    ToolCall: A tool invocation requested by the model
    ChatOptions: Recognized per-request sampling and limit options
    UsageInfo: Token accounting for one request
    LLMResponse: Response from an LLM provider
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from switchyard.llm.exceptions import LLMInvalidRequestError


class ProviderKind(str, Enum):
    """Closed set of backend variants a selection can resolve to."""

    CLAUDE_CLI = "claude-cli"
    GITHUB_COPILOT = "github-copilot"
    HTTP_COMPAT = "http-compat"
    CLAUDE_AUTH = "claude-auth"
    CODEX_AUTH = "codex-auth"


class ToolCall(BaseModel):
    """A tool invocation requested by the model.

    Attributes:
        id: Backend-assigned call id, echoed back in the tool result message
        type: Call type, always "function" for current backends
        name: Function name
        arguments: Parsed arguments
    """

    id: str = Field("", description="Tool call id")
    type: str = Field("function", description="Tool call type")
    name: str = Field(..., description="Function name")
    arguments: dict[str, Any] = Field(default_factory=dict, description="Parsed arguments")


class Message(BaseModel):
    """Represents a single message in a conversation.

    Attributes:
        role: Message role ("system", "user", "assistant" or "tool")
        content: Message content text
        tool_calls: Tool calls issued by an assistant message
        tool_call_id: Id of the tool call a "tool" message answers
    """

    role: Literal["system", "user", "assistant", "tool"] = Field(..., description="Message role")
    content: str = Field("", description="Message content")
    tool_calls: list[ToolCall] = Field(default_factory=list, description="Requested tool calls")
    tool_call_id: str | None = Field(None, description="Tool call this message answers")


class ToolFunctionDefinition(BaseModel):
    name: str = Field(..., description="Function name")
    description: str = Field("", description="What the function does")
    parameters: dict[str, Any] = Field(
        default_factory=dict, description="JSON schema of the arguments"
    )


class ToolDefinition(BaseModel):
    """A callable tool exposed to the model."""

    type: str = Field("function", description="Tool type")
    function: ToolFunctionDefinition


class ChatOptions(BaseModel):
    """Recognized per-request options.

    Only these keys are accepted. Backends may rename or override them:
    ``max_tokens`` is sent as ``max_completion_tokens`` to model families
    that reject the legacy name, and some model families force a fixed
    ``temperature``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    temperature: float | None = Field(None, ge=0.0, le=2.0, description="Sampling temperature")
    max_tokens: int | None = Field(None, ge=1, description="Maximum output tokens")
    top_p: float | None = Field(None, ge=0.0, le=1.0, description="Nucleus sampling mass")

    @classmethod
    def coerce(cls, options: "ChatOptions | Mapping[str, Any] | None") -> "ChatOptions":
        """Accept a ChatOptions, a plain mapping or None."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        try:
            return cls.model_validate(dict(options))
        except ValidationError as e:
            raise LLMInvalidRequestError(f"Invalid chat options: {e}") from e


class UsageInfo(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


class LLMResponse(BaseModel):
    """Response from an LLM provider.

    Attributes:
        content: Generated text content
        tool_calls: Tool calls requested by the model
        finish_reason: Why generation stopped ("stop", "tool_calls", "length", ...)
        usage: Token usage, None when the backend does not report it
    """

    content: str = Field("", description="Generated text content")
    tool_calls: list[ToolCall] = Field(default_factory=list, description="Requested tool calls")
    finish_reason: str = Field("", description="Why generation stopped")
    usage: UsageInfo | None = Field(None, description="Token usage statistics")


__all__ = [
    "ProviderKind",
    "Message",
    "ToolCall",
    "ToolDefinition",
    "ToolFunctionDefinition",
    "ChatOptions",
    "UsageInfo",
    "LLMResponse",
]
