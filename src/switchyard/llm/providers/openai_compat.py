"""Wire codec for OpenAI-compatible /chat/completions endpoints.

Builds the JSON request body from wire-shaped messages and tools, applies
per-model quirks, performs one POST through the openai SDK and decodes the
JSON response. Tool-call arguments stay JSON strings at this layer.

Quirks applied to the request body, in order:
    - "max_tokens" is sent as "max_completion_tokens" to model families that
      reject the legacy name (never both)
    - a hosting namespace ("moonshot/", "groq/", ...) is stripped from "model"
    - model families with a mandated temperature get that value

Public API (the "studs"):
    OpenAICompatClient: Sync/async sender bound to one endpoint
    build_request_body: Pure request-body builder (quirks included)
    parse_response_body: Pure decoder of a decoded JSON response
    WireMessage, WireTool, WireToolFunction, WireToolCall, WireFunctionCall,
    WireUsage, WireResponse: Wire-shaped models
"""

import json
import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
import openai
from openai import AsyncOpenAI, DefaultAsyncHttpxClient, DefaultHttpxClient, OpenAI
from pydantic import BaseModel, Field, ValidationError, field_validator

from switchyard.llm.exceptions import LLMDecodeError
from switchyard.llm.providers._errors import translate_sdk_error
from switchyard.llm.types import ChatOptions
from switchyard.llm.vendors import forced_temperature, max_tokens_param, wire_model_name

_logger = logging.getLogger(__name__)

_KEYLESS_PLACEHOLDER = "no-key"


class WireFunctionCall(BaseModel):
    name: str = ""
    arguments: str = ""

    @field_validator("arguments", mode="before")
    @classmethod
    def encode_structured_arguments(cls, v: Any) -> Any:
        """Some backends send arguments as a JSON object instead of a string."""
        if v is None:
            return ""
        if isinstance(v, (dict, list)):
            return json.dumps(v)
        return v


class WireToolCall(BaseModel):
    id: str = ""
    type: str = "function"
    function: WireFunctionCall | None = None


class WireMessage(BaseModel):
    role: str
    content: str = ""
    tool_calls: list[WireToolCall] = Field(default_factory=list)
    tool_call_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"role": self.role, "content": self.content}
        if self.tool_calls:
            payload["tool_calls"] = [tc.model_dump(exclude_none=True) for tc in self.tool_calls]
        if self.tool_call_id:
            payload["tool_call_id"] = self.tool_call_id
        return payload


class WireToolFunction(BaseModel):
    name: str
    description: str = ""
    parameters: dict[str, Any] = Field(default_factory=dict)


class WireTool(BaseModel):
    type: str = "function"
    function: WireToolFunction


class WireUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    @field_validator("prompt_tokens", "completion_tokens", "total_tokens", mode="before")
    @classmethod
    def null_to_zero(cls, v: Any) -> Any:
        return 0 if v is None else v


class WireResponse(BaseModel):
    content: str = ""
    tool_calls: list[WireToolCall] = Field(default_factory=list)
    finish_reason: str = ""
    usage: WireUsage | None = None


class _ChoiceMessage(BaseModel):
    content: str | None = None
    tool_calls: list[WireToolCall] | None = None


class _Choice(BaseModel):
    message: _ChoiceMessage = Field(default_factory=_ChoiceMessage)
    finish_reason: str | None = None


class _CompletionBody(BaseModel):
    choices: list[_Choice] | None = None
    usage: WireUsage | None = None


def build_request_body(
    messages: Sequence[WireMessage],
    tools: Sequence[WireTool] | None,
    model: str,
    options: ChatOptions | Mapping[str, Any] | None = None,
) -> dict[str, Any]:
    """Build the /chat/completions request body with model quirks applied.

    Args:
        messages: Wire-shaped conversation
        tools: Wire-shaped tool specs (omitted from the body when empty)
        model: Model id, possibly carrying a hosting namespace
        options: Sampling/limit options

    Returns:
        JSON-serializable request body

    Raises:
        LLMInvalidRequestError: If options contain unknown keys or invalid values
    """
    opts = ChatOptions.coerce(options)
    wire_model = wire_model_name(model)

    body: dict[str, Any] = {
        "model": wire_model,
        "messages": [m.to_payload() for m in messages],
    }
    if tools:
        body["tools"] = [t.model_dump() for t in tools]

    if opts.max_tokens is not None:
        body[max_tokens_param(wire_model)] = opts.max_tokens

    if opts.temperature is not None:
        forced = forced_temperature(wire_model)
        body["temperature"] = forced if forced is not None else opts.temperature

    if opts.top_p is not None:
        body["top_p"] = opts.top_p

    return body


def parse_response_body(data: Any) -> WireResponse:
    """Decode a JSON-decoded /chat/completions response.

    A response without choices yields an empty WireResponse.

    Raises:
        LLMDecodeError: If the body is not an object or has the wrong structure
    """
    if not isinstance(data, dict):
        raise LLMDecodeError(f"Expected a JSON object response, got {type(data).__name__}")

    try:
        body = _CompletionBody.model_validate(data)
    except ValidationError as e:
        raise LLMDecodeError(f"Unexpected response structure: {e}") from e

    if not body.choices:
        return WireResponse(usage=body.usage)

    choice = body.choices[0]
    return WireResponse(
        content=choice.message.content or "",
        tool_calls=choice.message.tool_calls or [],
        finish_reason=choice.finish_reason or "",
        usage=body.usage,
    )


def _decode_http_response(response: httpx.Response) -> WireResponse:
    try:
        data = response.json()
    except ValueError as e:
        raise LLMDecodeError(f"Response body is not valid JSON: {response.text[:200]!r}") from e
    return parse_response_body(data)


def _timeout_kwargs(timeout: float | None) -> dict[str, Any]:
    # The SDK reads timeout=None as "no timeout", so only pass a real value.
    return {} if timeout is None else {"timeout": timeout}


class OpenAICompatClient:
    """Sender bound to one OpenAI-compatible endpoint.

    Holds only immutable settings and the SDK clients, so one instance can
    serve concurrent callers. Requests are never retried.
    """

    def __init__(
        self,
        api_key: str | None,
        api_base: str,
        proxy: str | None = None,
        *,
        timeout_seconds: float = 120,
        http_client: httpx.Client | None = None,
        async_http_client: httpx.AsyncClient | None = None,
    ) -> None:
        if not api_base:
            raise ValueError("api_base is required for an OpenAI-compatible endpoint")

        self._api_base = api_base.rstrip("/")
        self._proxy = proxy

        if proxy and http_client is None:
            http_client = DefaultHttpxClient(proxy=proxy)
        if proxy and async_http_client is None:
            async_http_client = DefaultAsyncHttpxClient(proxy=proxy)

        # Keyless endpoints: the SDK refuses an empty key, so give it a
        # placeholder and drop the Authorization header it would derive.
        client_kwargs: dict[str, Any] = {
            "api_key": api_key or _KEYLESS_PLACEHOLDER,
            "base_url": self._api_base,
            "timeout": timeout_seconds,
            "max_retries": 0,
        }
        if not api_key:
            client_kwargs["default_headers"] = {"Authorization": openai.Omit()}

        self._client = OpenAI(**client_kwargs, http_client=http_client)
        self._async_client = AsyncOpenAI(**client_kwargs, http_client=async_http_client)

    @property
    def api_base(self) -> str:
        return self._api_base

    @property
    def proxy(self) -> str | None:
        return self._proxy

    def send(
        self,
        messages: Sequence[WireMessage],
        tools: Sequence[WireTool] | None,
        model: str,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> WireResponse:
        """POST one chat completion request and decode the response.

        Raises:
            LLMHTTPError: On a non-success HTTP status
            LLMTimeoutError: If the deadline expires
            LLMProviderError: On connection failures
            LLMDecodeError: If the response body cannot be decoded
        """
        body = build_request_body(messages, tools, model, options)
        _logger.debug("POST %s/chat/completions model=%s", self._api_base, body["model"])

        try:
            raw = self._client.chat.completions.with_raw_response.create(
                **body, **_timeout_kwargs(timeout)
            )
        except openai.APIError as e:
            raise translate_sdk_error(e, "OpenAI-compatible endpoint") from e

        return _decode_http_response(raw.http_response)

    async def send_async(
        self,
        messages: Sequence[WireMessage],
        tools: Sequence[WireTool] | None,
        model: str,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> WireResponse:
        """Async variant of send; task cancellation aborts the request."""
        body = build_request_body(messages, tools, model, options)
        _logger.debug("POST %s/chat/completions model=%s", self._api_base, body["model"])

        try:
            raw = await self._async_client.chat.completions.with_raw_response.create(
                **body, **_timeout_kwargs(timeout)
            )
        except openai.APIError as e:
            raise translate_sdk_error(e, "OpenAI-compatible endpoint") from e

        return _decode_http_response(raw.http_response)


__all__ = [
    "OpenAICompatClient",
    "build_request_body",
    "parse_response_body",
    "WireMessage",
    "WireTool",
    "WireToolFunction",
    "WireToolCall",
    "WireFunctionCall",
    "WireUsage",
    "WireResponse",
]
