"""Codex provider authenticated with a stored ChatGPT OAuth token.

Public API (the "studs"):
    CodexAuthProvider: OpenAI Responses API provider for the Codex backend
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

import openai
from openai import AsyncOpenAI, OpenAI

from switchyard.llm.auth import CredentialSource
from switchyard.llm.providers._errors import translate_sdk_error
from switchyard.llm.providers.base import BaseLLMProvider
from switchyard.llm.providers.http import parse_arguments
from switchyard.llm.types import (
    ChatOptions,
    LLMResponse,
    Message,
    ToolCall,
    ToolDefinition,
    UsageInfo,
)

CODEX_BASE_URL = "https://chatgpt.com/backend-api/codex"
DEFAULT_CODEX_MODEL = "gpt-5-codex"
DEFAULT_INSTRUCTIONS = "You are a helpful assistant."


class CodexAuthProvider(BaseLLMProvider):
    """Codex provider using the Responses API with a ChatGPT OAuth token.

    The Codex backend rejects sampling and limit parameters, so options are
    validated but not forwarded.
    """

    def __init__(
        self,
        token_source: CredentialSource,
        *,
        default_model: str | None = None,
        timeout_seconds: float = 120,
        base_url: str = CODEX_BASE_URL,
    ) -> None:
        self._token_source = token_source
        self._default_model = default_model or DEFAULT_CODEX_MODEL

        token = token_source().access_token.get_secret_value()

        self._client = OpenAI(
            api_key=token, base_url=base_url, timeout=timeout_seconds, max_retries=0
        )
        self._async_client = AsyncOpenAI(
            api_key=token, base_url=base_url, timeout=timeout_seconds, max_retries=0
        )

    def _request_kwargs(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None,
        model: str | None,
        options: ChatOptions | Mapping[str, Any] | None,
        timeout: float | None,
    ) -> dict[str, Any]:
        ChatOptions.coerce(options)
        instructions, input_items = format_input(messages)

        kwargs: dict[str, Any] = {
            "model": self._resolve_model(model),
            "instructions": instructions or DEFAULT_INSTRUCTIONS,
            "input": input_items,
            "store": False,
        }
        if tools:
            kwargs["tools"] = [
                {
                    "type": "function",
                    "name": t.function.name,
                    "description": t.function.description,
                    "parameters": t.function.parameters,
                }
                for t in tools
            ]
        if timeout is not None:
            kwargs["timeout"] = timeout

        credential = self._token_source()
        headers = {"Authorization": f"Bearer {credential.access_token.get_secret_value()}"}
        if credential.account_id:
            headers["chatgpt-account-id"] = credential.account_id
        kwargs["extra_headers"] = headers
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
            response = self._client.responses.create(**kwargs)
        except openai.APIError as e:
            raise translate_sdk_error(e, "Codex") from e
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
            response = await self._async_client.responses.create(**kwargs)
        except openai.APIError as e:
            raise translate_sdk_error(e, "Codex") from e
        return parse_response(response)


def format_input(messages: Sequence[Message]) -> tuple[str, list[dict[str, Any]]]:
    """Convert messages to Responses API input items; system text becomes instructions."""
    instructions: list[str] = []
    items: list[dict[str, Any]] = []

    for msg in messages:
        if msg.role == "system":
            instructions.append(msg.content)
        elif msg.role == "tool":
            items.append(
                {
                    "type": "function_call_output",
                    "call_id": msg.tool_call_id or "",
                    "output": msg.content,
                }
            )
        else:
            if msg.content or not msg.tool_calls:
                items.append({"role": msg.role, "content": msg.content})
            items.extend(
                {
                    "type": "function_call",
                    "call_id": tc.id,
                    "name": tc.name,
                    "arguments": json.dumps(tc.arguments),
                }
                for tc in msg.tool_calls
            )

    return "\n\n".join(p for p in instructions if p), items


def parse_response(response: Any) -> LLMResponse:
    text_parts: list[str] = []
    tool_calls: list[ToolCall] = []

    for item in response.output:
        if item.type == "message":
            text_parts.extend(part.text for part in item.content if part.type == "output_text")
        elif item.type == "function_call":
            tool_calls.append(
                ToolCall(
                    id=item.call_id,
                    name=item.name,
                    arguments=parse_arguments(item.arguments or "", item.name),
                )
            )

    if tool_calls:
        finish_reason = "tool_calls"
    elif response.status == "incomplete":
        finish_reason = "length"
    else:
        finish_reason = "stop"

    usage = None
    if response.usage is not None:
        usage = UsageInfo(
            prompt_tokens=response.usage.input_tokens,
            completion_tokens=response.usage.output_tokens,
            total_tokens=response.usage.total_tokens,
        )

    return LLMResponse(
        content="".join(text_parts),
        tool_calls=tool_calls,
        finish_reason=finish_reason,
        usage=usage,
    )


__all__ = ["CodexAuthProvider"]
