"""Exceptions for the LLM routing layer.

Public API (the "studs"):
    LLMError: Base exception for all LLM errors
    LLMConfigurationError: No usable provider/credential for the configuration
    LLMAuthenticationError: Missing or expired stored OAuth credential
    LLMInvalidRequestError: Invalid request parameters
    LLMProviderError: Transport or backend failure
    LLMHTTPError: Non-success HTTP status from a backend
    LLMRateLimitError: HTTP 429 from a backend
    LLMDecodeError: Response body could not be decoded
    LLMTimeoutError: Request deadline exceeded
"""


class LLMError(Exception):
    """Base exception for all LLM errors."""

    pass


class LLMConfigurationError(LLMError):
    """No usable provider or credential could be resolved from configuration.

    Attributes:
        scope: "provider" when a named provider lacks a credential,
            "model" when no provider could serve the requested model,
            None for other configuration problems
        name: Provider or model name the error refers to
    """

    def __init__(self, message: str, scope: str | None = None, name: str | None = None) -> None:
        super().__init__(message)
        self.scope = scope
        self.name = name

    @classmethod
    def missing_provider_key(cls, provider: str) -> "LLMConfigurationError":
        return cls(f"no API key configured for provider: {provider}", "provider", provider)

    @classmethod
    def missing_model_key(cls, model: str) -> "LLMConfigurationError":
        return cls(f"no API key configured for model: {model}", "model", model)


class LLMAuthenticationError(LLMError):
    """Stored OAuth credential is missing, unreadable or expired."""

    pass


class LLMInvalidRequestError(LLMError):
    """Invalid request parameters."""

    pass


class LLMProviderError(LLMError):
    """Provider-specific error that doesn't fit other categories."""

    pass


class LLMHTTPError(LLMProviderError):
    """Backend answered with a non-success HTTP status.

    Attributes:
        status_code: HTTP status code
        body: Raw response body text
    """

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"API request failed with status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class LLMRateLimitError(LLMHTTPError):
    """Backend answered 429. Not retried here."""

    pass


class LLMDecodeError(LLMError):
    """Response body is not valid JSON or lacks the expected structure."""

    pass


class LLMTimeoutError(LLMError):
    """Request deadline exceeded before the backend answered."""

    pass


__all__ = [
    "LLMError",
    "LLMConfigurationError",
    "LLMAuthenticationError",
    "LLMInvalidRequestError",
    "LLMProviderError",
    "LLMHTTPError",
    "LLMRateLimitError",
    "LLMDecodeError",
    "LLMTimeoutError",
]
