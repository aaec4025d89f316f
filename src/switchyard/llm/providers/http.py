"""HTTP-compatible provider: agent-facing adapter over the wire codec.

Public API (the "studs"):
    HTTPProvider: Provider for OpenAI-compatible HTTP endpoints
"""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

from switchyard.llm.providers.base import BaseLLMProvider
from switchyard.llm.providers.openai_compat import (
    OpenAICompatClient,
    WireFunctionCall,
    WireMessage,
    WireResponse,
    WireTool,
    WireToolCall,
    WireToolFunction,
)
from switchyard.llm.types import (
    ChatOptions,
    LLMResponse,
    Message,
    ToolCall,
    ToolDefinition,
    UsageInfo,
)

_logger = logging.getLogger(__name__)


class HTTPProvider(BaseLLMProvider):
    """Provider for OpenAI-compatible HTTP endpoints.

    Translates Message/ToolDefinition/ToolCall to and from the wire codec's
    shapes. All per-model request quirks live in the codec.
    """

    def __init__(
        self,
        api_key: str | None,
        api_base: str,
        proxy: str | None = None,
        *,
        default_model: str | None = None,
        timeout_seconds: float = 120,
        client: OpenAICompatClient | None = None,
    ) -> None:
        self._default_model = default_model
        self._client = client or OpenAICompatClient(
            api_key, api_base, proxy, timeout_seconds=timeout_seconds
        )

    @property
    def api_base(self) -> str:
        return self._client.api_base

    @property
    def proxy(self) -> str | None:
        return self._client.proxy

    def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        wire = self._client.send(
            to_wire_messages(messages),
            to_wire_tools(tools),
            self._resolve_model(model),
            options,
            timeout=timeout,
        )
        return from_wire_response(wire)

    async def chat_async(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        wire = await self._client.send_async(
            to_wire_messages(messages),
            to_wire_tools(tools),
            self._resolve_model(model),
            options,
            timeout=timeout,
        )
        return from_wire_response(wire)


def to_wire_messages(messages: Sequence[Message]) -> list[WireMessage]:
    return [
        WireMessage(
            role=msg.role,
            content=msg.content,
            tool_calls=[to_wire_tool_call(tc) for tc in msg.tool_calls],
            tool_call_id=msg.tool_call_id,
        )
        for msg in messages
    ]


def to_wire_tools(tools: Sequence[ToolDefinition] | None) -> list[WireTool]:
    return [
        WireTool(
            type=t.type,
            function=WireToolFunction(
                name=t.function.name,
                description=t.function.description,
                parameters=t.function.parameters,
            ),
        )
        for t in tools or ()
    ]


def to_wire_tool_call(tool_call: ToolCall) -> WireToolCall:
    return WireToolCall(
        id=tool_call.id,
        type=tool_call.type,
        function=WireFunctionCall(
            name=tool_call.name,
            arguments=json.dumps(tool_call.arguments),
        ),
    )


def from_wire_tool_call(tool_call: WireToolCall) -> ToolCall:
    function = tool_call.function or WireFunctionCall()
    return ToolCall(
        id=tool_call.id,
        type=tool_call.type,
        name=function.name,
        arguments=parse_arguments(function.arguments, function.name),
    )


def parse_arguments(raw: str, tool_name: str = "") -> dict[str, Any]:
    """Decode a JSON-encoded arguments string.

    Malformed or non-object input degrades to an empty mapping so one bad
    tool call does not fail the whole response.
    """
    if not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        _logger.warning("Malformed arguments for tool call %r: %.200s", tool_name, raw)
        return {}
    if not isinstance(parsed, dict):
        _logger.warning("Non-object arguments for tool call %r: %.200s", tool_name, raw)
        return {}
    return parsed


def from_wire_response(wire: WireResponse | None) -> LLMResponse:
    if wire is None:
        return LLMResponse()

    usage = None
    if wire.usage is not None:
        usage = UsageInfo(
            prompt_tokens=wire.usage.prompt_tokens,
            completion_tokens=wire.usage.completion_tokens,
            total_tokens=wire.usage.total_tokens,
        )

    return LLMResponse(
        content=wire.content,
        tool_calls=[from_wire_tool_call(tc) for tc in wire.tool_calls],
        finish_reason=wire.finish_reason,
        usage=usage,
    )


__all__ = ["HTTPProvider"]
