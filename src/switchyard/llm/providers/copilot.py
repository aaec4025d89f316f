"""GitHub Copilot provider reached through a local OpenAI-compatible bridge.

Public API (the "studs"):
    CopilotProvider: Provider for a local Copilot bridge
"""

from switchyard.llm.providers.http import HTTPProvider
from switchyard.llm.providers.openai_compat import OpenAICompatClient
from switchyard.llm.selection import DEFAULT_COPILOT_API_BASE

DEFAULT_COPILOT_MODEL = "gpt-4.1"


class CopilotProvider(HTTPProvider):
    """Provider for a local Copilot bridge.

    The bridge owns GitHub authentication, so no credential is sent.
    Addresses given without a scheme ("localhost:4321") are treated as http.
    """

    def __init__(
        self,
        api_base: str = DEFAULT_COPILOT_API_BASE,
        *,
        default_model: str | None = None,
        timeout_seconds: float = 120,
        client: OpenAICompatClient | None = None,
    ) -> None:
        super().__init__(
            None,
            normalize_api_base(api_base),
            default_model=default_model or DEFAULT_COPILOT_MODEL,
            timeout_seconds=timeout_seconds,
            client=client,
        )


def normalize_api_base(api_base: str) -> str:
    if "://" not in api_base:
        api_base = f"http://{api_base}"
    return api_base.rstrip("/")


__all__ = ["CopilotProvider"]
