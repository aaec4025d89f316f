"""Provider selection: configuration + requested model -> concrete backend.

Public API (the "studs"):
    ProviderSelection: Resolved routing decision
    resolve_provider_selection: Pure resolver from LLMConfig to ProviderSelection

Resolution order:
    1. An explicit provider name in the defaults section always wins.
    2. Otherwise the model name decides:
       a. a namespace prefix ("groq/...", "openrouter/...") names the vendor;
       b. a model-family prefix ("claude", "gpt", "glm", ...) names the vendor,
          routed to its OAuth backend when auth_method is "oauth";
       c. unmatched models go to OpenRouter or a configured vLLM server.
"""

import logging

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from switchyard.llm.config import LLMConfig
from switchyard.llm.exceptions import LLMConfigurationError
from switchyard.llm.types import ProviderKind
from switchyard.llm.vendors import VENDORS, VendorSpec, find_vendor, match_vendor, split_namespace

_logger = logging.getLogger(__name__)

CLI_PROVIDER_NAMES = frozenset({"claude-cli", "claude-code", "claudecode"})
COPILOT_PROVIDER_NAMES = frozenset({"copilot", "github-copilot", "github_copilot"})
DEFAULT_COPILOT_API_BASE = "localhost:4321"


class ProviderSelection(BaseModel):
    """Resolved routing decision.

    Attributes:
        kind: Backend variant to instantiate
        vendor: Vendor table entry the selection came from, if any
        api_base: Endpoint base URL (empty for backends that own their endpoint)
        api_key: Bearer credential for HTTP-compatible backends
        proxy: Proxy URL for requests, if configured
        model: Model identifier with any strippable namespace removed
        workspace: Working directory for the CLI-driven backend
    """

    model_config = ConfigDict(frozen=True)

    kind: ProviderKind = Field(..., description="Backend variant")
    vendor: str | None = Field(None, description="Vendor name")
    api_base: str = Field("", description="Endpoint base URL")
    api_key: SecretStr | None = Field(None, description="Bearer credential")
    proxy: str | None = Field(None, description="Proxy URL")
    model: str | None = Field(None, description="Model identifier")
    workspace: str | None = Field(None, description="CLI workspace directory")


def resolve_provider_selection(config: LLMConfig) -> ProviderSelection:
    """Resolve which backend serves the configured provider/model.

    Pure function of the configuration: no I/O and no mutation, so the same
    configuration always yields the same selection or the same error.

    Args:
        config: Routing configuration

    Returns:
        ProviderSelection for the backend to instantiate

    Raises:
        LLMConfigurationError: If no usable backend/credential exists. The error's
            scope is "provider" when a named provider lacks its key and "model"
            when no provider could be found for the model.
    """
    explicit = config.defaults.provider
    if explicit:
        selection = _resolve_explicit(config, explicit)
    else:
        selection = _resolve_from_model(config)

    _logger.debug(
        "Resolved provider %s (vendor=%s, api_base=%s, model=%s)",
        selection.kind.value,
        selection.vendor,
        selection.api_base,
        selection.model,
    )
    return selection


def _resolve_explicit(config: LLMConfig, name: str) -> ProviderSelection:
    key = name.strip().lower()
    model = config.defaults.model

    if key in CLI_PROVIDER_NAMES:
        return ProviderSelection(
            kind=ProviderKind.CLAUDE_CLI,
            model=model,
            workspace=config.defaults.workspace,
        )

    if key in COPILOT_PROVIDER_NAMES:
        return ProviderSelection(
            kind=ProviderKind.GITHUB_COPILOT,
            api_base=config.providers.github_copilot.api_base or DEFAULT_COPILOT_API_BASE,
            model=model,
        )

    spec = find_vendor(key)
    if spec is None:
        raise LLMConfigurationError(f"unknown provider: {name}", None, name)

    if model:
        split = split_namespace(model)
        if split is not None and split[0] is spec and spec.strip_namespace:
            model = split[1]

    oauth = _oauth_selection(config, spec, model)
    if oauth is not None:
        return oauth
    return _http_selection(config, spec, model)


def _resolve_from_model(config: LLMConfig) -> ProviderSelection:
    model = config.defaults.model
    if not model:
        raise LLMConfigurationError("no model configured")

    split = split_namespace(model)
    if split is not None:
        spec, bare = split
        return _http_selection(config, spec, bare if spec.strip_namespace else model)

    spec = match_vendor(model)
    if spec is not None:
        oauth = _oauth_selection(config, spec, model)
        if oauth is not None:
            return oauth
        if spec.requires_key and not config.providers.section(spec.name).has_key:
            raise LLMConfigurationError.missing_model_key(model)
        return _http_selection(config, spec, model)

    # A marketplace serves arbitrary model ids; a local vLLM server serves whatever it loaded.
    if config.providers.openrouter.has_key:
        return _http_selection(config, VENDORS["openrouter"], model)
    if config.providers.vllm.api_base:
        return _http_selection(config, VENDORS["vllm"], model)

    raise LLMConfigurationError.missing_model_key(model)


def _oauth_selection(
    config: LLMConfig, spec: VendorSpec, model: str | None
) -> ProviderSelection | None:
    if spec.oauth_kind is None:
        return None
    if config.providers.section(spec.name).auth_method != "oauth":
        return None
    return ProviderSelection(kind=spec.oauth_kind, vendor=spec.name, model=model)


def _http_selection(config: LLMConfig, spec: VendorSpec, model: str | None) -> ProviderSelection:
    section = config.providers.section(spec.name)
    if spec.requires_key and not section.has_key:
        raise LLMConfigurationError.missing_provider_key(spec.name)

    api_base = section.api_base or spec.api_base
    if not api_base:
        raise LLMConfigurationError(
            f"no API base configured for provider: {spec.name}", "provider", spec.name
        )

    return ProviderSelection(
        kind=ProviderKind.HTTP_COMPAT,
        vendor=spec.name,
        api_base=api_base,
        api_key=section.api_key,
        proxy=section.proxy,
        model=model,
    )


__all__ = ["ProviderSelection", "resolve_provider_selection"]
