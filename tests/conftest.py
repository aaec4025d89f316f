"""Shared test fixtures."""

import os

import pytest

_ENV_PREFIXES = (
    "SWITCHYARD_",
    "OPENROUTER_",
    "GROQ_",
    "MOONSHOT_",
    "NVIDIA_",
    "OLLAMA_",
    "ANTHROPIC_",
    "OPENAI_",
    "GEMINI_",
    "ZHIPU_",
    "DEEPSEEK_",
    "VLLM_",
    "GITHUB_COPILOT_",
)


@pytest.fixture(autouse=True)
def _clean_provider_env(monkeypatch):
    """Keep developer credentials in the environment out of every test."""
    for name in list(os.environ):
        if name.startswith(_ENV_PREFIXES):
            monkeypatch.delenv(name, raising=False)
    yield
