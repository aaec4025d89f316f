"""Translation of SDK exceptions into the switchyard exception hierarchy."""

import anthropic
import openai

from switchyard.llm.exceptions import (
    LLMError,
    LLMHTTPError,
    LLMProviderError,
    LLMRateLimitError,
    LLMTimeoutError,
)

_TIMEOUT_ERRORS = (openai.APITimeoutError, anthropic.APITimeoutError)
_STATUS_ERRORS = (openai.APIStatusError, anthropic.APIStatusError)


def translate_sdk_error(error: Exception, provider: str) -> LLMError:
    """Map an openai/anthropic SDK exception to an LLMError.

    Timeouts are checked before connection errors because the SDKs derive
    APITimeoutError from APIConnectionError.
    """
    if isinstance(error, _TIMEOUT_ERRORS):
        return LLMTimeoutError(f"{provider} request timed out")
    if isinstance(error, _STATUS_ERRORS):
        body = error.response.text
        if error.status_code == 429:
            return LLMRateLimitError(error.status_code, body)
        return LLMHTTPError(error.status_code, body)
    return LLMProviderError(f"{provider} error: {error}")


__all__ = ["translate_sdk_error"]
