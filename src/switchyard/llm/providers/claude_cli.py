"""Claude provider driven through the `claude` command-line tool.

Public API (the "studs"):
    ClaudeCliProvider: Runs `claude -p` in a workspace, one process per request
"""

import asyncio
import json
import logging
import subprocess
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from switchyard.llm.exceptions import LLMDecodeError, LLMProviderError, LLMTimeoutError
from switchyard.llm.providers.base import BaseLLMProvider
from switchyard.llm.types import ChatOptions, LLMResponse, Message, ToolDefinition, UsageInfo

_logger = logging.getLogger(__name__)

CLAUDE_COMMAND = "claude"
# Model name meaning "whatever the CLI is configured with"
CLI_DEFAULT_MODEL = "claude-code"


class ClaudeCliProvider(BaseLLMProvider):
    """Claude provider that shells out to the `claude` CLI.

    The CLI runs its own agent loop with its own tools, so tool definitions
    passed to chat() are not forwarded and responses carry no tool calls.
    """

    def __init__(
        self,
        workspace: str | None = None,
        *,
        default_model: str | None = None,
        timeout_seconds: float = 120,
        command: str = CLAUDE_COMMAND,
    ) -> None:
        self._workspace = str(Path(workspace).expanduser()) if workspace else None
        self._default_model = default_model or CLI_DEFAULT_MODEL
        self._timeout_seconds = timeout_seconds
        self._command = command

    @property
    def workspace(self) -> str | None:
        return self._workspace

    def build_args(self, system_prompt: str, model: str) -> list[str]:
        args = [
            self._command,
            "-p",
            "--output-format",
            "json",
            "--dangerously-skip-permissions",
            "--no-chrome",
        ]
        if system_prompt:
            args += ["--system-prompt", system_prompt]
        if model and model != CLI_DEFAULT_MODEL:
            args += ["--model", model]
        args.append("-")
        return args

    def chat(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        ChatOptions.coerce(options)
        system_prompt, prompt = messages_to_prompt(messages)
        args = self.build_args(system_prompt, self._resolve_model(model))
        deadline = timeout if timeout is not None else self._timeout_seconds

        _logger.debug("Running %s in %s", " ".join(args[:2]), self._workspace or ".")
        try:
            result = subprocess.run(
                args,
                input=prompt,
                capture_output=True,
                text=True,
                cwd=self._workspace,
                timeout=deadline,
                check=False,
            )
        except FileNotFoundError as e:
            raise LLMProviderError(f"{self._command} CLI not found on PATH") from e
        except subprocess.TimeoutExpired as e:
            raise LLMTimeoutError(f"{self._command} CLI timed out after {deadline}s") from e

        if result.returncode != 0:
            raise LLMProviderError(
                f"{self._command} CLI exited with status {result.returncode}: "
                f"{result.stderr.strip()}"
            )
        return parse_cli_output(result.stdout)

    async def chat_async(
        self,
        messages: Sequence[Message],
        tools: Sequence[ToolDefinition] | None = None,
        model: str | None = None,
        options: ChatOptions | Mapping[str, Any] | None = None,
        *,
        timeout: float | None = None,
    ) -> LLMResponse:
        ChatOptions.coerce(options)
        system_prompt, prompt = messages_to_prompt(messages)
        args = self.build_args(system_prompt, self._resolve_model(model))
        deadline = timeout if timeout is not None else self._timeout_seconds

        try:
            process = await asyncio.create_subprocess_exec(
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=self._workspace,
            )
        except FileNotFoundError as e:
            raise LLMProviderError(f"{self._command} CLI not found on PATH") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(prompt.encode()), timeout=deadline
            )
        except asyncio.TimeoutError as e:
            await _kill(process)
            raise LLMTimeoutError(f"{self._command} CLI timed out after {deadline}s") from e
        except asyncio.CancelledError:
            await _kill(process)
            raise

        if process.returncode != 0:
            raise LLMProviderError(
                f"{self._command} CLI exited with status {process.returncode}: "
                f"{stderr.decode(errors='replace').strip()}"
            )
        return parse_cli_output(stdout.decode(errors="replace"))


async def _kill(process: asyncio.subprocess.Process) -> None:
    if process.returncode is None:
        process.kill()
        await process.wait()


def messages_to_prompt(messages: Sequence[Message]) -> tuple[str, str]:
    """Flatten a conversation into (system prompt, stdin prompt).

    A lone user message is sent verbatim; longer histories are rendered as
    role-prefixed lines.
    """
    system_parts = [m.content for m in messages if m.role == "system" and m.content]
    turns = [m for m in messages if m.role != "system"]

    if len(turns) == 1 and turns[0].role == "user":
        return "\n\n".join(system_parts), turns[0].content

    lines = []
    for msg in turns:
        if msg.role == "user":
            lines.append(f"User: {msg.content}")
        elif msg.role == "assistant":
            lines.append(f"Assistant: {msg.content}")
        else:
            lines.append(f"[Tool Result for {msg.tool_call_id or 'unknown'}]: {msg.content}")
    return "\n\n".join(system_parts), "\n".join(lines)


def parse_cli_output(output: str) -> LLMResponse:
    """Decode the `--output-format json` result object."""
    try:
        data = json.loads(output)
    except json.JSONDecodeError as e:
        raise LLMDecodeError(f"claude CLI returned invalid JSON: {output[:200]!r}") from e
    if not isinstance(data, dict):
        raise LLMDecodeError("claude CLI returned a non-object JSON result")

    if data.get("is_error"):
        raise LLMProviderError(f"claude CLI reported an error: {data.get('result', '')}")

    usage = None
    raw_usage = data.get("usage")
    if isinstance(raw_usage, dict):
        prompt_tokens = (
            int(raw_usage.get("input_tokens") or 0)
            + int(raw_usage.get("cache_creation_input_tokens") or 0)
            + int(raw_usage.get("cache_read_input_tokens") or 0)
        )
        completion_tokens = int(raw_usage.get("output_tokens") or 0)
        usage = UsageInfo(
            prompt_tokens=prompt_tokens,
            completion_tokens=completion_tokens,
            total_tokens=prompt_tokens + completion_tokens,
        )

    return LLMResponse(content=str(data.get("result") or ""), finish_reason="stop", usage=usage)


__all__ = ["ClaudeCliProvider"]
