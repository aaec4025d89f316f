"""Switchyard - Route agent chat requests to the right LLM backend.

Switchyard resolves which backend serves a configured model (OpenAI-compatible
HTTP vendors, the `claude` CLI, a local Copilot bridge, or OAuth-authenticated
Claude/Codex) and hides each backend's wire-format quirks behind one `chat`
interface.

Key components:
    - switchyard.llm.create_provider: Configuration -> ready-to-use provider
    - switchyard.llm.resolve_provider_selection: Pure routing decision
    - CLI: `switchyard resolve` and `switchyard chat`

Quick start:
    export SWITCHYARD_MODEL=glm-4.7
    export ZHIPU_API_KEY=...
    switchyard resolve
    switchyard chat "Hello"
"""

# LLM layer - lazy imports keep `import switchyard` cheap
# Use: from switchyard.llm import create_provider, LLMConfig

__version__ = "0.1.0"

__all__ = ["__version__"]
