"""Claude provider authenticated with a stored OAuth token.

Public API (the "studs"):
    ClaudeAuthProvider: Anthropic Messages API provider using OAuth bearer tokens
"""

from collections.abc import Mapping, Sequence
from typing import Any

import anthropic
from anthropic import Anthropic, AsyncAnthropic

from switchyard.llm.auth import CredentialSource
from switchyard.llm.providers._errors import translate_sdk_error
from switchyard.llm.providers.base import BaseLLMProvider
from switchyard.llm.types import (
    ChatOptions,
    LLMResponse,
    Message,
    ToolCall,
    ToolDefinition,
    UsageInfo,
)

DEFAULT_CLAUDE_MODEL = "claude-sonnet-4-20250514"
DEFAULT_MAX_TOKENS = 4096
OAUTH_BETA_HEADER = "oauth-2025-04-20"

# Anthropic stop_reason -> OpenAI-style finish_reason
_FINISH_REASONS = {
    "end_turn": "stop",
    "stop_sequence": "stop",
    "tool_use": "tool_calls",
    "max_tokens": "length",
}


class ClaudeAuthProvider(BaseLLMProvider):
    """Anthropic Claude provider authenticated with a stored OAuth token.

    The token source is consulted on every request, so a token refreshed by
    the login flow is used without recreating the provider.
    """

    def __init__(
        self,
        token_source: CredentialSource,
        *,
        default_model: str | None = None,
        timeout_seconds: float = 120,
        base_url: str | None = None,
    ) -> None:
        self._token_source = token_source
        self._default_model = default_model or DEFAULT_CLAUDE_MODEL

        # Fails fast with LLMAuthenticationError when nothing is stored.
        token = token_source().access_token.get_secret_value()

        # The SDK falls back to ANTHROPIC_API_KEY; only the bearer token may be sent.
        client_kwargs: dict[str, Any] = {
            "api_key": None,
            "auth_token": token,
            "timeout": timeout_seconds,
            "max_retries": 0,
            "default_headers": {
                "anthropic-beta": OAUTH_BETA_HEADER,
                "X-Api-Key": anthropic.Omit(),
            },
        }
        if base_url:
            client_kwargs["base_url"] = base_url

        self._client = Anthropic(**client_kwargs)
        self._async_client = AsyncAnthropic(**client_kwargs)

    def _request_kwargs(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None,
        model: str | None,
        options: ChatOptions | Mapping[str, Any] | None,
        timeout: float | None,
    ) -> dict[str, Any]:
        opts = ChatOptions.coerce(options)
        system, formatted_messages = format_messages(messages)

        kwargs: dict[str, Any] = {
            "model": self._resolve_model(model),
            "max_tokens": opts.max_tokens or DEFAULT_MAX_TOKENS,
            "messages": formatted_messages,
        }
        if system:
            kwargs["system"] = system
        if tools:
            kwargs["tools"] = format_tools(tools)
        if opts.temperature is not None:
            kwargs["temperature"] = opts.temperature
        if opts.top_p is not None:
            kwargs["top_p"] = opts.top_p
        if timeout is not None:
            kwargs["timeout"] = timeout

        token = self._token_source().access_token.get_secret_value()
        kwargs["extra_headers"] = {"Authorization": f"Bearer {token}"}
        return kwargs

    def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        kwargs = self._request_kwargs(messages, tools, model, options, timeout)
        try:
            response = self._client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise translate_sdk_error(e, "Anthropic") from e
        return parse_response(response)

    async def chat_async(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        kwargs = self._request_kwargs(messages, tools, model, options, timeout)
        try:
            response = await self._async_client.messages.create(**kwargs)
        except anthropic.APIError as e:
            raise translate_sdk_error(e, "Anthropic") from e
        return parse_response(response)


def format_messages(messages: Sequence[Message]) -> tuple[str, list[dict[str, Any]]]:
    """Split out the system prompt and convert turns to Anthropic content blocks.

    Consecutive tool results are merged into one user turn, as the Messages
    API requires all results for an assistant turn in the following message.
    """
    system_parts: list[str] = []
    formatted: list[dict[str, Any]] = []

    for msg in messages:
        if msg.role == "system":
            system_parts.append(msg.content)
        elif msg.role == "tool":
            block = {
                "type": "tool_result",
                "tool_use_id": msg.tool_call_id or "",
                "content": msg.content,
            }
            last = formatted[-1] if formatted else None
            if (
                last is not None
                and last["role"] == "user"
                and isinstance(last["content"], list)
                and all(b.get("type") == "tool_result" for b in last["content"])
            ):
                last["content"].append(block)
            else:
                formatted.append({"role": "user", "content": [block]})
        elif msg.role == "assistant" and msg.tool_calls:
            blocks: list[dict[str, Any]] = []
            if msg.content:
                blocks.append({"type": "text", "text": msg.content})
            blocks.extend(
                {"type": "tool_use", "id": tc.id, "name": tc.name, "input": tc.arguments}
                for tc in msg.tool_calls
            )
            formatted.append({"role": "assistant", "content": blocks})
        else:
            formatted.append({"role": msg.role, "content": msg.content})

    return "\n\n".join(p for p in system_parts if p), formatted


def format_tools(tools: Sequence[ToolDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "name": t.function.name,
            "description": t.function.description,
            "input_schema": t.function.parameters or {"type": "object", "properties": {}},
        }
        for t in tools
    ]


def parse_response(response: Any) -> LLMResponse:
    text_parts: list[str] = []
    tool_calls: list[ToolCall] = []

    for block in response.content:
        if block.type == "text":
            text_parts.append(block.text)
        elif block.type == "tool_use":
            tool_calls.append(
                ToolCall(id=block.id, name=block.name, arguments=dict(block.input or {}))
            )

    usage = None
    if response.usage is not None:
        usage = UsageInfo(
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
            total_tokens=response.usage.input_tokens + response.usage.output_tokens,
        )

    stop_reason = response.stop_reason or ""
    return LLMResponse(
        content="".join(text_parts),
        tool_calls=tool_calls,
        finish_reason=_FINISH_REASONS.get(stop_reason, stop_reason),
        usage=usage,
    )


__all__ = ["ClaudeAuthProvider"]
