"""Tests for LLM factory function."""

import json
from unittest.mock import patch

import pytest

from switchyard.llm.auth import AuthCredential
from switchyard.llm.config import LLMConfig
from switchyard.llm.exceptions import LLMAuthenticationError, LLMConfigurationError
from switchyard.llm.factory import create_provider
from switchyard.llm.providers.base import BaseLLMProvider


def _config(**data) -> LLMConfig:
    return LLMConfig.model_validate(data)


class TestCreateProvider:
    """Tests for create_provider factory."""

    def test_creates_http_provider(self):
        from switchyard.llm.providers.http import HTTPProvider

        provider = create_provider(
            _config(
                defaults={"model": "openrouter/auto"},
                providers={"openrouter": {"api_key": "sk-or"}},
            )
        )

        assert isinstance(provider, HTTPProvider)
        assert isinstance(provider, BaseLLMProvider)
        assert provider.api_base == "https://openrouter.ai/api/v1"
        assert provider.default_model == "openrouter/auto"

    def test_http_provider_carries_proxy(self):
        provider = create_provider(
            _config(
                defaults={"model": "moonshot/kimi-k2.5"},
                providers={"moonshot": {"api_key": "mk", "proxy": "http://127.0.0.1:7890"}},
            )
        )
        assert provider.proxy == "http://127.0.0.1:7890"
        assert provider.default_model == "kimi-k2.5"

    def test_http_provider_with_socks_proxy(self):
        provider = create_provider(
            _config(
                defaults={"model": "glm-4.7"},
                providers={"zhipu": {"api_key": "zk", "proxy": "socks5://127.0.0.1:1080"}},
            )
        )
        assert provider.proxy == "socks5://127.0.0.1:1080"

    def test_creates_keyless_ollama_provider(self):
        from switchyard.llm.providers.http import HTTPProvider

        provider = create_provider(_config(defaults={"model": "ollama/llama3"}))

        assert isinstance(provider, HTTPProvider)
        assert provider.api_base == "http://localhost:11434/v1"
        assert provider.default_model == "llama3"

    def test_creates_keyless_vllm_provider(self):
        provider = create_provider(
            _config(
                defaults={"model": "qwen3-32b"},
                providers={"vllm": {"api_base": "http://gpu-box:8000/v1"}},
            )
        )
        assert provider.api_base == "http://gpu-box:8000/v1"

    def test_creates_copilot_provider(self):
        from switchyard.llm.providers.copilot import CopilotProvider

        provider = create_provider(_config(defaults={"provider": "copilot"}))

        assert isinstance(provider, CopilotProvider)
        assert provider.api_base == "http://localhost:4321"

    def test_creates_claude_cli_provider(self, tmp_path):
        from switchyard.llm.providers.claude_cli import ClaudeCliProvider

        provider = create_provider(
            _config(defaults={"provider": "claude-cli", "workspace": str(tmp_path)})
        )

        assert isinstance(provider, ClaudeCliProvider)
        assert provider.workspace == str(tmp_path)
        assert provider.default_model == "claude-code"

    @patch("switchyard.llm.providers.claude_auth.AsyncAnthropic")
    @patch("switchyard.llm.providers.claude_auth.Anthropic")
    def test_creates_claude_auth_provider(self, mock_sync, mock_async):
        from switchyard.llm.providers.claude_auth import ClaudeAuthProvider

        provider = create_provider(
            _config(
                defaults={"model": "claude-opus-4"},
                providers={"anthropic": {"auth_method": "oauth"}},
            ),
            token_source=lambda: AuthCredential(access_token="tok"),
        )

        assert isinstance(provider, ClaudeAuthProvider)
        assert provider.default_model == "claude-opus-4"
        assert mock_sync.call_args.kwargs["auth_token"] == "tok"

    @patch("switchyard.llm.providers.codex_auth.AsyncOpenAI")
    @patch("switchyard.llm.providers.codex_auth.OpenAI")
    def test_creates_codex_provider_from_auth_store(self, mock_sync, mock_async, tmp_path):
        from switchyard.llm.providers.codex_auth import CodexAuthProvider

        store = tmp_path / "auth.json"
        store.write_text(json.dumps({"credentials": {"openai": {"access_token": "codex-tok"}}}))

        provider = create_provider(
            _config(
                defaults={"model": "gpt-5-codex"},
                providers={"openai": {"auth_method": "oauth"}},
                auth_store=str(store),
            )
        )

        assert isinstance(provider, CodexAuthProvider)
        assert mock_sync.call_args.kwargs["api_key"] == "codex-tok"

    def test_oauth_without_stored_credential(self, tmp_path):
        with pytest.raises(LLMAuthenticationError):
            create_provider(
                _config(
                    defaults={"model": "claude-opus-4"},
                    providers={"anthropic": {"auth_method": "oauth"}},
                    auth_store=str(tmp_path / "missing.json"),
                )
            )

    def test_selection_error_propagates(self):
        with pytest.raises(LLMConfigurationError, match="no API key configured for model"):
            create_provider(_config(defaults={"model": "my-custom-model"}))

    def test_timeout_applied(self):
        from switchyard.llm.providers.claude_cli import ClaudeCliProvider

        provider = create_provider(
            _config(defaults={"provider": "claude-cli"}, timeout_seconds=42)
        )
        assert isinstance(provider, ClaudeCliProvider)
        assert provider._timeout_seconds == 42
