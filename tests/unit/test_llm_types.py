"""Tests for LLM types, vendor table and exceptions."""

import pytest
from pydantic import ValidationError

from switchyard.llm.exceptions import (
    LLMConfigurationError,
    LLMError,
    LLMHTTPError,
    LLMInvalidRequestError,
    LLMProviderError,
    LLMRateLimitError,
)
from switchyard.llm.types import (
    ChatOptions,
    LLMResponse,
    Message,
    ProviderKind,
    ToolCall,
    ToolDefinition,
    UsageInfo,
)
from switchyard.llm.vendors import (
    find_vendor,
    forced_temperature,
    match_vendor,
    max_tokens_param,
    split_namespace,
    wire_model_name,
)


class TestMessage:
    def test_valid_roles(self):
        for role in ("system", "user", "assistant", "tool"):
            assert Message(role=role, content="x").role == role

    def test_invalid_role(self):
        with pytest.raises(ValidationError):
            Message(role="function", content="x")

    def test_assistant_with_tool_calls(self):
        msg = Message(
            role="assistant",
            tool_calls=[ToolCall(id="call_1", name="read_file", arguments={"path": "a.txt"})],
        )
        assert msg.content == ""
        assert msg.tool_calls[0].type == "function"
        assert msg.tool_calls[0].arguments == {"path": "a.txt"}

    def test_tool_definition(self):
        tool = ToolDefinition(function={"name": "search", "parameters": {"type": "object"}})
        assert tool.type == "function"
        assert tool.function.description == ""


class TestChatOptions:
    def test_coerce_none(self):
        assert ChatOptions.coerce(None) == ChatOptions()

    def test_coerce_instance_is_identity(self):
        opts = ChatOptions(max_tokens=10)
        assert ChatOptions.coerce(opts) is opts

    def test_coerce_mapping(self):
        opts = ChatOptions.coerce({"max_tokens": 64, "temperature": 0.2})
        assert opts.max_tokens == 64
        assert opts.temperature == 0.2
        assert opts.top_p is None

    def test_unknown_key_rejected(self):
        with pytest.raises(LLMInvalidRequestError, match="Invalid chat options"):
            ChatOptions.coerce({"max_tokens": 64, "frequency_penalty": 1})

    def test_out_of_range_rejected(self):
        with pytest.raises(LLMInvalidRequestError):
            ChatOptions.coerce({"temperature": 3.5})
        with pytest.raises(LLMInvalidRequestError):
            ChatOptions.coerce({"max_tokens": 0})


class TestLLMResponse:
    def test_empty_response(self):
        response = LLMResponse()
        assert response.content == ""
        assert response.tool_calls == []
        assert response.finish_reason == ""
        assert response.usage is None

    def test_usage_defaults(self):
        assert UsageInfo().total_tokens == 0


class TestProviderKind:
    def test_values(self):
        assert {k.value for k in ProviderKind} == {
            "claude-cli",
            "github-copilot",
            "http-compat",
            "claude-auth",
            "codex-auth",
        }


class TestVendors:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("zhipu", "zhipu"),
            ("GLM", "zhipu"),
            ("kimi", "moonshot"),
            ("claude", "anthropic"),
            ("google", "gemini"),
            ("OpenRouter", "openrouter"),
        ],
    )
    def test_find_vendor(self, name, expected):
        assert find_vendor(name).name == expected

    def test_find_unknown_vendor(self):
        assert find_vendor("mistral") is None

    def test_split_namespace(self):
        spec, bare = split_namespace("groq/llama-3.3-70b")
        assert spec.name == "groq"
        assert bare == "llama-3.3-70b"

    def test_split_namespace_unknown(self):
        assert split_namespace("meta-llama/llama-3") is None
        assert split_namespace("glm-4.7") is None
        assert split_namespace("groq/") is None

    @pytest.mark.parametrize(
        "model,expected",
        [
            ("glm-4.7", "zhipu"),
            ("claude-sonnet-4", "anthropic"),
            ("gpt-4o", "openai"),
            ("o3-mini", "openai"),
            ("kimi-k2.5", "moonshot"),
            ("gemini-2.5-pro", "gemini"),
            ("deepseek-chat", "deepseek"),
        ],
    )
    def test_match_vendor(self, model, expected):
        assert match_vendor(model).name == expected

    def test_match_vendor_unknown(self):
        assert match_vendor("my-custom-model") is None

    @pytest.mark.parametrize(
        "model,expected",
        [
            ("moonshot/kimi-k2.5", "kimi-k2.5"),
            ("groq/llama-3.3-70b", "llama-3.3-70b"),
            ("nvidia/nemotron", "nemotron"),
            ("ollama/qwen3", "qwen3"),
            ("openrouter/auto", "openrouter/auto"),
            ("gpt-4o", "gpt-4o"),
        ],
    )
    def test_wire_model_name(self, model, expected):
        assert wire_model_name(model) == expected

    @pytest.mark.parametrize(
        "model,expected",
        [
            ("glm-4.7", "max_completion_tokens"),
            ("o1", "max_completion_tokens"),
            ("o3-mini", "max_completion_tokens"),
            ("gpt-5.2", "max_completion_tokens"),
            ("openrouter/openai/o1", "max_completion_tokens"),
            ("openai/o3-mini", "max_completion_tokens"),
            ("openrouter/auto", "max_tokens"),
            ("gpt-4o", "max_tokens"),
            ("kimi-k2.5", "max_tokens"),
        ],
    )
    def test_max_tokens_param(self, model, expected):
        assert max_tokens_param(model) == expected

    def test_forced_temperature(self):
        assert forced_temperature("kimi-k2.5") == 1.0
        assert forced_temperature("kimi-latest") is None
        assert forced_temperature("gpt-4o") is None


class TestExceptions:
    def test_hierarchy(self):
        assert issubclass(LLMConfigurationError, LLMError)
        assert issubclass(LLMHTTPError, LLMProviderError)
        assert issubclass(LLMRateLimitError, LLMHTTPError)

    def test_missing_provider_key(self):
        err = LLMConfigurationError.missing_provider_key("zhipu")
        assert str(err) == "no API key configured for provider: zhipu"
        assert err.scope == "provider"
        assert err.name == "zhipu"

    def test_missing_model_key(self):
        err = LLMConfigurationError.missing_model_key("my-model")
        assert str(err) == "no API key configured for model: my-model"
        assert err.scope == "model"

    def test_http_error_message(self):
        err = LLMHTTPError(400, '{"error":"bad"}')
        assert err.status_code == 400
        assert err.body == '{"error":"bad"}'
        assert "400" in str(err)
        assert '{"error":"bad"}' in str(err)
