"""Stored OAuth credentials for the OAuth-authenticated providers.

Credentials are written by an external login flow into a JSON file:

    {
      "credentials": {
        "anthropic": {"access_token": "...", "expires_at": "2026-01-01T00:00:00Z"},
        "openai": {"access_token": "...", "account_id": "acct_..."}
      }
    }

This module only reads them. Acquiring and refreshing tokens is the login
flow's job; an expired token is reported, never refreshed here.

Public API (the "studs"):
    AuthCredential: One stored credential
    load_credential: Read and validate the credential for a vendor
    credential_source: Zero-arg callable re-reading the credential on every call
"""

import json
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field, SecretStr, ValidationError

from switchyard.llm.exceptions import LLMAuthenticationError

_logger = logging.getLogger(__name__)

CredentialSource = Callable[[], "AuthCredential"]


class AuthCredential(BaseModel):
    """One stored OAuth credential.

    Attributes:
        access_token: Bearer token sent to the backend
        refresh_token: Refresh token (used only by the login flow)
        account_id: Account id some backends require as a header
        expires_at: Expiry time; None means the token does not expire
    """

    access_token: SecretStr = Field(..., description="OAuth access token")
    refresh_token: SecretStr | None = Field(None, description="OAuth refresh token")
    account_id: str | None = Field(None, description="Backend account id")
    expires_at: datetime | None = Field(None, description="Token expiry")

    def is_expired(self, now: datetime | None = None) -> bool:
        if self.expires_at is None:
            return False
        now = now or datetime.now(timezone.utc)
        expires_at = self.expires_at
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        return now >= expires_at


def load_credential(vendor: str, path: str | Path) -> AuthCredential:
    """Read the stored credential for a vendor.

    Args:
        vendor: Vendor name ("anthropic" or "openai")
        path: Credential file

    Returns:
        AuthCredential that is present and not expired

    Raises:
        LLMAuthenticationError: If the file or entry is missing, malformed or expired
    """
    store = Path(path).expanduser()
    hint = f"log in to {vendor} again to refresh {store}"

    try:
        data = json.loads(store.read_text())
    except FileNotFoundError as e:
        raise LLMAuthenticationError(f"No stored credentials for {vendor}; {hint}") from e
    except (OSError, json.JSONDecodeError) as e:
        raise LLMAuthenticationError(f"Cannot read credential store {store}: {e}") from e

    entry = (data.get("credentials") or {}).get(vendor) if isinstance(data, dict) else None
    if entry is None:
        raise LLMAuthenticationError(f"No stored credentials for {vendor}; {hint}")

    try:
        credential = AuthCredential.model_validate(entry)
    except ValidationError as e:
        raise LLMAuthenticationError(f"Malformed stored credential for {vendor}: {e}") from e

    if credential.is_expired():
        raise LLMAuthenticationError(f"Stored credential for {vendor} has expired; {hint}")

    _logger.debug("Loaded stored credential for %s from %s", vendor, store)
    return credential


def credential_source(vendor: str, path: str | Path) -> CredentialSource:
    """Return a callable that re-reads the credential each time it is called.

    Providers call it per request so tokens refreshed on disk by the login
    flow are picked up without recreating the provider.
    """

    def _source() -> AuthCredential:
        return load_credential(vendor, path)

    return _source


__all__ = ["AuthCredential", "CredentialSource", "load_credential", "credential_source"]
