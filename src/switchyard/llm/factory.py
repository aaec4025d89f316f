"""Factory function for creating LLM providers.

Public API (the "studs"):
    create_provider: Resolve the configuration and instantiate the provider
"""

import logging

from switchyard.llm.auth import CredentialSource, credential_source
from switchyard.llm.config import LLMConfig
from switchyard.llm.providers.base import BaseLLMProvider
from switchyard.llm.selection import ProviderSelection, resolve_provider_selection
from switchyard.llm.types import ProviderKind

_logger = logging.getLogger(__name__)


def create_provider(
    config: LLMConfig, *, token_source: CredentialSource | None = None
) -> BaseLLMProvider:
    """Create an LLM provider based on configuration.

    Resolves the provider selection from the configuration and returns the
    matching provider implementation. Selection errors propagate unchanged.

    Args:
        config: LLMConfig with defaults and per-vendor sections
        token_source: Credential source for OAuth providers (reads
            config.auth_store when None)

    Returns:
        BaseLLMProvider: Configured provider instance

    Raises:
        LLMConfigurationError: If no usable provider/credential is configured
        LLMAuthenticationError: If an OAuth provider has no stored credential

    Example:
        >>> config = LLMConfig.model_validate(
        ...     {"defaults": {"model": "glm-4.7"}, "providers": {"zhipu": {"api_key": "..."}}}
        ... )
        >>> provider = create_provider(config)
        >>> response = provider.chat([Message(role="user", content="Hello")])
    """
    selection = resolve_provider_selection(config)
    provider = _instantiate(selection, config, token_source)
    _logger.debug("Created %s for %s", type(provider).__name__, selection.kind.value)
    return provider


def _instantiate(
    selection: ProviderSelection,
    config: LLMConfig,
    token_source: CredentialSource | None,
) -> BaseLLMProvider:
    timeout = config.timeout_seconds

    if selection.kind is ProviderKind.HTTP_COMPAT:
        from switchyard.llm.providers.http import HTTPProvider

        api_key = selection.api_key.get_secret_value() if selection.api_key else None
        return HTTPProvider(
            api_key,
            selection.api_base,
            selection.proxy,
            default_model=selection.model,
            timeout_seconds=timeout,
        )
    elif selection.kind is ProviderKind.GITHUB_COPILOT:
        from switchyard.llm.providers.copilot import CopilotProvider

        return CopilotProvider(
            selection.api_base, default_model=selection.model, timeout_seconds=timeout
        )
    elif selection.kind is ProviderKind.CLAUDE_CLI:
        from switchyard.llm.providers.claude_cli import ClaudeCliProvider

        return ClaudeCliProvider(
            selection.workspace, default_model=selection.model, timeout_seconds=timeout
        )
    elif selection.kind is ProviderKind.CLAUDE_AUTH:
        from switchyard.llm.providers.claude_auth import ClaudeAuthProvider

        return ClaudeAuthProvider(
            token_source or credential_source("anthropic", config.auth_store),
            default_model=selection.model,
            timeout_seconds=timeout,
        )
    elif selection.kind is ProviderKind.CODEX_AUTH:
        from switchyard.llm.providers.codex_auth import CodexAuthProvider

        return CodexAuthProvider(
            token_source or credential_source("openai", config.auth_store),
            default_model=selection.model,
            timeout_seconds=timeout,
        )
    else:
        raise ValueError(f"Unknown provider kind: {selection.kind}")


__all__ = ["create_provider"]
