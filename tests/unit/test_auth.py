"""Tests for stored OAuth credentials."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from switchyard.llm.auth import AuthCredential, credential_source, load_credential
from switchyard.llm.exceptions import LLMAuthenticationError


def _write_store(path, credentials):
    path.write_text(json.dumps({"credentials": credentials}))
    return path


class TestAuthCredential:
    def test_no_expiry_never_expires(self):
        assert not AuthCredential(access_token="t").is_expired()

    def test_expiry(self):
        now = datetime(2026, 1, 1, tzinfo=timezone.utc)
        credential = AuthCredential(access_token="t", expires_at=now + timedelta(hours=1))
        assert not credential.is_expired(now)
        assert credential.is_expired(now + timedelta(hours=2))

    def test_naive_expiry_treated_as_utc(self):
        credential = AuthCredential(access_token="t", expires_at=datetime(2000, 1, 1))
        assert credential.is_expired()

    def test_token_is_secret(self):
        credential = AuthCredential(access_token="very-secret")
        assert "very-secret" not in repr(credential)


class TestLoadCredential:
    def test_load_valid(self, tmp_path):
        store = _write_store(
            tmp_path / "auth.json",
            {
                "openai": {
                    "access_token": "tok",
                    "account_id": "acct_1",
                    "expires_at": "2099-01-01T00:00:00Z",
                }
            },
        )
        credential = load_credential("openai", store)
        assert credential.access_token.get_secret_value() == "tok"
        assert credential.account_id == "acct_1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(LLMAuthenticationError, match="No stored credentials for anthropic"):
            load_credential("anthropic", tmp_path / "missing.json")

    def test_missing_vendor(self, tmp_path):
        store = _write_store(tmp_path / "auth.json", {"openai": {"access_token": "tok"}})
        with pytest.raises(LLMAuthenticationError, match="No stored credentials for anthropic"):
            load_credential("anthropic", store)

    def test_invalid_json(self, tmp_path):
        store = tmp_path / "auth.json"
        store.write_text("{not json")
        with pytest.raises(LLMAuthenticationError, match="Cannot read credential store"):
            load_credential("anthropic", store)

    def test_malformed_entry(self, tmp_path):
        store = _write_store(tmp_path / "auth.json", {"anthropic": {"refresh_token": "r"}})
        with pytest.raises(LLMAuthenticationError, match="Malformed stored credential"):
            load_credential("anthropic", store)

    def test_expired(self, tmp_path):
        store = _write_store(
            tmp_path / "auth.json",
            {"anthropic": {"access_token": "tok", "expires_at": "2001-01-01T00:00:00Z"}},
        )
        with pytest.raises(LLMAuthenticationError, match="has expired"):
            load_credential("anthropic", store)


class TestCredentialSource:
    def test_rereads_on_every_call(self, tmp_path):
        store = _write_store(tmp_path / "auth.json", {"anthropic": {"access_token": "first"}})
        source = credential_source("anthropic", store)

        assert source().access_token.get_secret_value() == "first"

        _write_store(store, {"anthropic": {"access_token": "second"}})
        assert source().access_token.get_secret_value() == "second"
