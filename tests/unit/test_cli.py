"""Tests for CLI commands using Click's CliRunner."""

import json
from unittest.mock import MagicMock, patch

import yaml
from click.testing import CliRunner

from switchyard import __version__
from switchyard.cli.main import cli
from switchyard.llm.exceptions import LLMHTTPError
from switchyard.llm.types import LLMResponse, ToolCall, UsageInfo

runner = CliRunner()


class TestCliGroup:
    def test_help(self):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "resolve" in result.output
        assert "chat" in result.output

    def test_version(self):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestResolveCommand:
    def test_resolve_from_env(self):
        result = runner.invoke(
            cli,
            ["resolve"],
            env={"SWITCHYARD_MODEL": "glm-4.7", "ZHIPU_API_KEY": "zk-secret"},
        )
        assert result.exit_code == 0, result.output
        assert "Provider: http-compat" in result.output
        assert "zhipu" in result.output
        assert "https://open.bigmodel.cn/api/paas/v4" in result.output
        assert "API key:   configured" in result.output
        assert "zk-secret" not in result.output

    def test_resolve_json_masks_key(self):
        result = runner.invoke(
            cli,
            ["resolve", "--format", "json"],
            env={"SWITCHYARD_MODEL": "openrouter/auto", "OPENROUTER_API_KEY": "sk-or"},
        )
        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["kind"] == "http-compat"
        assert data["vendor"] == "openrouter"
        assert data["model"] == "openrouter/auto"
        assert data["api_key"] != "sk-or"

    def test_resolve_model_and_provider_overrides(self):
        result = runner.invoke(
            cli,
            ["resolve", "--provider", "claude-cli", "--model", "opus"],
            env={"SWITCHYARD_WORKSPACE": "/tmp/ws"},
        )
        assert result.exit_code == 0, result.output
        assert "Provider: claude-cli" in result.output
        assert "Model:     opus" in result.output
        assert "Workspace: /tmp/ws" in result.output

    def test_resolve_from_config_file(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text(
            yaml.safe_dump(
                {
                    "defaults": {"model": "groq/llama-3.3-70b"},
                    "providers": {"groq": {"api_key": "gk"}},
                }
            )
        )
        result = runner.invoke(cli, ["resolve", "--config", str(config_path)])
        assert result.exit_code == 0, result.output
        assert "Model:     llama-3.3-70b" in result.output

    def test_resolve_missing_key(self):
        result = runner.invoke(cli, ["resolve", "--model", "my-custom-model"])
        assert result.exit_code == 1
        assert "Error: no API key configured for model: my-custom-model" in result.output

    def test_resolve_invalid_config_file(self, tmp_path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("timeout_seconds: 0\n")
        result = runner.invoke(cli, ["resolve", "--config", str(config_path)])
        assert result.exit_code == 1
        assert "Invalid config file" in result.output


class TestChatCommand:
    @patch("switchyard.cli.main.create_provider")
    def test_chat_prints_reply(self, mock_create):
        provider = MagicMock()
        provider.chat.return_value = LLMResponse(
            content="Hi there",
            finish_reason="stop",
            usage=UsageInfo(prompt_tokens=3, completion_tokens=2, total_tokens=5),
        )
        mock_create.return_value = provider

        result = runner.invoke(
            cli,
            ["chat", "Hello", "--system", "Be brief", "--temperature", "0.2"],
            env={"SWITCHYARD_MODEL": "glm-4.7", "ZHIPU_API_KEY": "zk"},
        )

        assert result.exit_code == 0, result.output
        assert "Hi there" in result.output

        messages = provider.chat.call_args.args[0]
        assert [m.role for m in messages] == ["system", "user"]
        assert messages[1].content == "Hello"
        options = provider.chat.call_args.kwargs["options"]
        assert options.temperature == 0.2
        assert options.max_tokens == 8192

    @patch("switchyard.cli.main.create_provider")
    def test_chat_prints_tool_calls(self, mock_create):
        provider = MagicMock()
        provider.chat.return_value = LLMResponse(
            tool_calls=[ToolCall(id="c1", name="search", arguments={"q": "x"})],
            finish_reason="tool_calls",
        )
        mock_create.return_value = provider

        result = runner.invoke(cli, ["chat", "find x", "--model", "glm-4.7"])

        assert result.exit_code == 0, result.output
        assert "[tool call] search" in result.output

    @patch("switchyard.cli.main.create_provider")
    def test_chat_json_output(self, mock_create):
        provider = MagicMock()
        provider.chat.return_value = LLMResponse(content="ok", finish_reason="stop")
        mock_create.return_value = provider

        result = runner.invoke(cli, ["chat", "hi", "--format", "json", "--model", "glm-4.7"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["content"] == "ok"

    @patch("switchyard.cli.main.create_provider")
    def test_chat_backend_error(self, mock_create):
        provider = MagicMock()
        provider.chat.side_effect = LLMHTTPError(503, "overloaded")
        mock_create.return_value = provider

        result = runner.invoke(cli, ["chat", "hi", "--model", "glm-4.7"])

        assert result.exit_code == 1
        assert "Error: API request failed with status 503: overloaded" in result.output

    def test_chat_configuration_error(self):
        result = runner.invoke(cli, ["chat", "hi", "--model", "glm-4.7"])
        assert result.exit_code == 1
        assert "no API key configured for model: glm-4.7" in result.output
