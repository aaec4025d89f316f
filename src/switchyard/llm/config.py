"""Configuration model for LLM provider routing.

Public API (the "studs"):
    LLMConfig: Root configuration (defaults + per-vendor sections)
    AgentDefaults: Explicit provider, model and workspace
    VendorConfig: Credential, endpoint and proxy for one vendor
    ProvidersConfig: One VendorConfig section per known vendor
"""

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError, field_validator

DEFAULT_AUTH_STORE = Path("~/.switchyard/auth.json")

# Data-driven mapping: AgentDefaults field -> env var
_DEFAULTS_ENV_MAP: dict[str, str] = {
    "provider": "SWITCHYARD_PROVIDER",
    "model": "SWITCHYARD_MODEL",
    "workspace": "SWITCHYARD_WORKSPACE",
}

# Data-driven mapping: ProvidersConfig section -> env var prefix
_VENDOR_ENV_PREFIX: dict[str, str] = {
    "openrouter": "OPENROUTER",
    "groq": "GROQ",
    "moonshot": "MOONSHOT",
    "nvidia": "NVIDIA",
    "ollama": "OLLAMA",
    "anthropic": "ANTHROPIC",
    "openai": "OPENAI",
    "gemini": "GEMINI",
    "zhipu": "ZHIPU",
    "deepseek": "DEEPSEEK",
    "vllm": "VLLM",
    "github_copilot": "GITHUB_COPILOT",
}

# VendorConfig field -> env var suffix
_VENDOR_ENV_FIELDS: dict[str, str] = {
    "api_key": "API_KEY",
    "api_base": "API_BASE",
    "proxy": "PROXY",
    "auth_method": "AUTH_METHOD",
}

_PROXY_SCHEMES = ("http://", "https://", "socks5://", "socks5h://")


class VendorConfig(BaseModel):
    """Credential, endpoint and proxy for one vendor.

    Attributes:
        api_key: API key sent as a bearer credential
        api_base: Base URL override (vendor table default when unset)
        proxy: HTTP/SOCKS proxy URL for requests to this vendor
        auth_method: "api_key" (direct) or "oauth" (stored OAuth credential)
    """

    model_config = ConfigDict(extra="forbid")

    api_key: SecretStr | None = Field(None, description="API key")
    api_base: str | None = Field(None, description="Base URL override")
    proxy: str | None = Field(None, description="Proxy URL")
    auth_method: Literal["api_key", "oauth"] | None = Field(
        None, description="Authentication method"
    )

    @field_validator("api_key", "api_base", "proxy", "auth_method", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty strings from env/YAML as unset."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("proxy")
    @classmethod
    def validate_proxy(cls, v: str | None) -> str | None:
        if v is not None and not v.startswith(_PROXY_SCHEMES):
            raise ValueError(f"proxy must be an http(s) or socks5 URL: {v!r}")
        return v

    @property
    def has_key(self) -> bool:
        return self.api_key is not None and bool(self.api_key.get_secret_value())


class ProvidersConfig(BaseModel):
    """One configuration section per known vendor."""

    model_config = ConfigDict(extra="forbid")

    openrouter: VendorConfig = Field(default_factory=VendorConfig)
    groq: VendorConfig = Field(default_factory=VendorConfig)
    moonshot: VendorConfig = Field(default_factory=VendorConfig)
    nvidia: VendorConfig = Field(default_factory=VendorConfig)
    ollama: VendorConfig = Field(default_factory=VendorConfig)
    anthropic: VendorConfig = Field(default_factory=VendorConfig)
    openai: VendorConfig = Field(default_factory=VendorConfig)
    gemini: VendorConfig = Field(default_factory=VendorConfig)
    zhipu: VendorConfig = Field(default_factory=VendorConfig)
    deepseek: VendorConfig = Field(default_factory=VendorConfig)
    vllm: VendorConfig = Field(default_factory=VendorConfig)
    github_copilot: VendorConfig = Field(default_factory=VendorConfig)

    def section(self, name: str) -> VendorConfig:
        """Return the section for a vendor name from the vendor table."""
        return getattr(self, name.replace("-", "_"))


class AgentDefaults(BaseModel):
    """Defaults section of the configuration.

    Attributes:
        provider: Explicit provider name; wins over model-based inference
        model: Requested model identifier
        workspace: Working directory for the CLI-driven provider
        max_tokens: Default output limit used by the CLI chat command
        temperature: Default sampling temperature used by the CLI chat command
    """

    model_config = ConfigDict(extra="forbid")

    provider: str | None = Field(None, description="Explicit provider name")
    model: str | None = Field(None, description="Model identifier")
    workspace: str | None = Field(None, description="Workspace directory")
    max_tokens: int = Field(8192, ge=1, description="Default output token limit")
    temperature: float = Field(0.7, ge=0.0, le=2.0, description="Default sampling temperature")

    @field_validator("provider", "model", "workspace", mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class LLMConfig(BaseModel):
    """Root configuration for provider routing.

    Attributes:
        defaults: Explicit provider, model and workspace
        providers: Per-vendor credential sections
        timeout_seconds: Request deadline applied to every backend call
        auth_store: JSON file holding stored OAuth credentials
    """

    model_config = ConfigDict(extra="forbid")

    defaults: AgentDefaults = Field(default_factory=AgentDefaults)
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    timeout_seconds: int = Field(120, ge=1, le=600, description="Request timeout in seconds")
    auth_store: Path = Field(DEFAULT_AUTH_STORE, description="Stored OAuth credentials file")

    @classmethod
    def from_env(cls) -> "LLMConfig":
        """Create LLMConfig from environment variables.

        Uses _DEFAULTS_ENV_MAP and _VENDOR_ENV_PREFIX for data-driven
        construction. Every vendor section reads <PREFIX>_API_KEY,
        <PREFIX>_API_BASE, <PREFIX>_PROXY and <PREFIX>_AUTH_METHOD.

        Environment variables:
            SWITCHYARD_PROVIDER: Explicit provider name
            SWITCHYARD_MODEL: Model identifier
            SWITCHYARD_WORKSPACE: Workspace for the claude-cli provider
            SWITCHYARD_TIMEOUT: Request timeout in seconds
            SWITCHYARD_AUTH_STORE: Stored OAuth credentials file
            OPENROUTER_API_KEY, ZHIPU_API_KEY, ...: Vendor credentials

        Returns:
            LLMConfig instance

        Raises:
            ValueError: If an environment value fails validation
        """
        defaults: dict[str, Any] = {}
        for field, env_var in _DEFAULTS_ENV_MAP.items():
            value = os.environ.get(env_var)
            if value is not None:
                defaults[field] = value

        providers: dict[str, dict[str, Any]] = {}
        for section, prefix in _VENDOR_ENV_PREFIX.items():
            values: dict[str, Any] = {}
            for field, suffix in _VENDOR_ENV_FIELDS.items():
                value = os.environ.get(f"{prefix}_{suffix}")
                if value is not None:
                    values[field] = value
            if values:
                providers[section] = values

        kwargs: dict[str, Any] = {"defaults": defaults, "providers": providers}
        if "SWITCHYARD_TIMEOUT" in os.environ:
            kwargs["timeout_seconds"] = os.environ["SWITCHYARD_TIMEOUT"]
        if "SWITCHYARD_AUTH_STORE" in os.environ:
            kwargs["auth_store"] = os.environ["SWITCHYARD_AUTH_STORE"]

        try:
            return cls(**kwargs)
        except ValidationError as e:
            raise ValueError(f"Invalid environment configuration: {e}") from e

    @classmethod
    def from_file(cls, path: str | Path) -> "LLMConfig":
        """Load configuration from a YAML (or JSON) file.

        Raises:
            ValueError: If the file is not valid YAML, not a mapping, or fails validation
            OSError: If the file cannot be read
        """
        try:
            with open(Path(path).expanduser()) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file {path}: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ValueError(f"Invalid config file {path}: {e}") from e


__all__ = ["LLMConfig", "AgentDefaults", "VendorConfig", "ProvidersConfig"]
