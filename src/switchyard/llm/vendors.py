"""Static vendor table and model-family wire quirks.

Single source of truth for vendor defaults (base URL, model-name prefixes,
namespace prefix, OAuth variant) consulted by both the provider selector and
the OpenAI-compatible wire codec. Adding a vendor means adding a row here.

Public API (the "studs"):
    VendorSpec: Defaults for one vendor
    VENDORS: Ordered vendor table
    find_vendor: Look up a vendor by name or alias
    split_namespace: Split "<vendor>/<model>" into vendor and bare model
    match_vendor: Find the vendor whose model family matches a bare name
    wire_model_name: Model name as sent on the wire
    max_tokens_param: Name of the output-limit parameter for a model
    forced_temperature: Mandated temperature for a model, if any
"""

import re
from dataclasses import dataclass

from switchyard.llm.types import ProviderKind


@dataclass(frozen=True)
class VendorSpec:
    """Defaults for one vendor.

    Attributes:
        name: Vendor name, also the name of its section in ProvidersConfig
        api_base: Default base URL of the OpenAI-compatible endpoint
        model_prefixes: Lower-case prefixes of model families served by the vendor
        namespace: Leading "<namespace>/" segment routing a model id to this vendor
        strip_namespace: Whether the namespace is removed before sending the model id
        oauth_kind: Dedicated backend used when the vendor's auth_method is "oauth"
        requires_key: Whether an API key must be configured
        aliases: Other names accepted as an explicit provider
    """

    name: str
    api_base: str
    model_prefixes: tuple[str, ...] = ()
    namespace: str | None = None
    strip_namespace: bool = True
    oauth_kind: ProviderKind | None = None
    requires_key: bool = True
    aliases: tuple[str, ...] = ()


VENDORS: dict[str, VendorSpec] = {
    spec.name: spec
    for spec in (
        # Marketplace ids are themselves namespaced ("openrouter/auto", "meta-llama/...").
        VendorSpec(
            name="openrouter",
            api_base="https://openrouter.ai/api/v1",
            namespace="openrouter",
            strip_namespace=False,
        ),
        VendorSpec(name="groq", api_base="https://api.groq.com/openai/v1", namespace="groq"),
        VendorSpec(
            name="moonshot",
            api_base="https://api.moonshot.cn/v1",
            model_prefixes=("kimi", "moonshot"),
            namespace="moonshot",
            aliases=("kimi",),
        ),
        VendorSpec(name="nvidia", api_base="https://integrate.api.nvidia.com/v1", namespace="nvidia"),
        VendorSpec(
            name="ollama",
            api_base="http://localhost:11434/v1",
            namespace="ollama",
            requires_key=False,
        ),
        VendorSpec(
            name="anthropic",
            api_base="https://api.anthropic.com/v1",
            model_prefixes=("claude",),
            oauth_kind=ProviderKind.CLAUDE_AUTH,
            aliases=("claude",),
        ),
        VendorSpec(
            name="openai",
            api_base="https://api.openai.com/v1",
            model_prefixes=("gpt", "o1", "o3", "o4", "chatgpt"),
            oauth_kind=ProviderKind.CODEX_AUTH,
            aliases=("gpt",),
        ),
        VendorSpec(
            name="gemini",
            api_base="https://generativelanguage.googleapis.com/v1beta/openai",
            model_prefixes=("gemini",),
            aliases=("google",),
        ),
        VendorSpec(
            name="zhipu",
            api_base="https://open.bigmodel.cn/api/paas/v4",
            model_prefixes=("glm",),
            aliases=("zai", "glm"),
        ),
        VendorSpec(
            name="deepseek",
            api_base="https://api.deepseek.com/v1",
            model_prefixes=("deepseek",),
        ),
        # Self-hosted; only usable once a base URL is configured.
        VendorSpec(name="vllm", api_base="", requires_key=False),
    )
}

# Model families whose API rejects "max_tokens" in favour of "max_completion_tokens".
_MAX_COMPLETION_TOKENS_MODELS = re.compile(r"glm|(?:^|/)o[134](?:$|-)|gpt-5")

# Model families that only accept one temperature value.
_FORCED_TEMPERATURE: tuple[tuple[re.Pattern[str], float], ...] = ((re.compile(r"kimi.*k2"), 1.0),)


def find_vendor(name: str) -> VendorSpec | None:
    """Look up a vendor by name or alias (case-insensitive)."""
    key = name.strip().lower().replace("_", "-")
    if key in VENDORS:
        return VENDORS[key]
    for spec in VENDORS.values():
        if key in spec.aliases:
            return spec
    return None


def split_namespace(model: str) -> tuple[VendorSpec, str] | None:
    """Split a namespaced model id into its vendor and bare model name.

    Returns None when the model does not start with a known namespace.

    Example:
        >>> spec, bare = split_namespace("groq/llama-3.3-70b")
        >>> spec.name, bare
        ('groq', 'llama-3.3-70b')
    """
    prefix, sep, rest = model.partition("/")
    if not sep or not rest:
        return None
    prefix = prefix.lower()
    for spec in VENDORS.values():
        if spec.namespace == prefix:
            return spec, rest
    return None


def match_vendor(model: str) -> VendorSpec | None:
    """Find the vendor whose model-family prefix matches a bare model name."""
    lowered = model.lower()
    for spec in VENDORS.values():
        if any(lowered.startswith(prefix) for prefix in spec.model_prefixes):
            return spec
    return None


def wire_model_name(model: str) -> str:
    """Strip a hosting namespace the backend does not expect in the model id."""
    split = split_namespace(model)
    if split is None:
        return model
    spec, bare = split
    return bare if spec.strip_namespace else model


def max_tokens_param(model: str) -> str:
    if _MAX_COMPLETION_TOKENS_MODELS.search(model.lower()):
        return "max_completion_tokens"
    return "max_tokens"


def forced_temperature(model: str) -> float | None:
    lowered = model.lower()
    for pattern, value in _FORCED_TEMPERATURE:
        if pattern.search(lowered):
            return value
    return None


__all__ = [
    "VendorSpec",
    "VENDORS",
    "find_vendor",
    "split_namespace",
    "match_vendor",
    "wire_model_name",
    "max_tokens_param",
    "forced_temperature",
]
