"""Tests for Twitter API key resolution."""

from __future__ import annotations

import pytest

from tweetembed.config import (
    CONTEXT_API_KEYS,
    ENV_API_KEYS,
    CredentialSource,
    resolve_credentials,
)
from tweetembed.exceptions import ConfigError, MissingCredentialsError
from tweetembed.models import TwitterCredentials


@pytest.fixture()
def environ() -> dict[str, str]:
    return {name: f"env-{name}" for name in ENV_API_KEYS}


class TestResolveCredentials:
    def test_store_tier(self, credential_store) -> None:
        creds = resolve_credentials(CredentialSource(store=credential_store, environ={}))
        assert creds == TwitterCredentials(
            consumer_key="store-consumer_key",
            consumer_secret="store-consumer_secret",
            access_token="store-access_token",
            access_token_secret="store-access_token_secret",
        )

    def test_store_wins_over_environment(self, credential_store, environ) -> None:
        creds = resolve_credentials(CredentialSource(store=credential_store, environ=environ))
        assert creds.consumer_key == "store-consumer_key"

    def test_environment_tier(self, environ) -> None:
        creds = resolve_credentials(CredentialSource(store=None, environ=environ))
        assert creds.consumer_key == "env-TWITTER_CONSUMER_KEY"
        assert creds.access_token_secret == "env-TWITTER_ACCESS_TOKEN_SECRET"

    def test_incomplete_store_falls_back_to_environment(self, credential_store, environ) -> None:
        del credential_store["access_token_secret"]
        creds = resolve_credentials(CredentialSource(store=credential_store, environ=environ))
        assert creds.consumer_key == "env-TWITTER_CONSUMER_KEY"

    def test_tiers_are_never_mixed(self, credential_store, environ) -> None:
        del credential_store["consumer_key"]
        del environ["TWITTER_ACCESS_TOKEN"]
        with pytest.raises(MissingCredentialsError):
            resolve_credentials(CredentialSource(store=credential_store, environ=environ))

    def test_nothing_configured(self) -> None:
        with pytest.raises(MissingCredentialsError) as exc_info:
            resolve_credentials(CredentialSource(store={}, environ={}))
        message = str(exc_info.value)
        assert "tweetembed.json" in message
        assert "TWITTER_CONSUMER_KEY" in message
        assert "tweetembed render --help" in message
        assert exc_info.value.exit_code == 3

    def test_non_string_store_values_are_stringified(self) -> None:
        store = {key: 123 for key in CONTEXT_API_KEYS}
        creds = resolve_credentials(CredentialSource(store=store, environ={}))
        assert creds.consumer_secret == "123"

    def test_null_store_value_falls_back_to_environment(self, credential_store, environ) -> None:
        credential_store["consumer_secret"] = None
        creds = resolve_credentials(CredentialSource(store=credential_store, environ=environ))
        assert creds.consumer_secret == "env-TWITTER_CONSUMER_SECRET"

    def test_null_store_value_is_missing(self, credential_store) -> None:
        credential_store["access_token"] = None
        with pytest.raises(MissingCredentialsError):
            resolve_credentials(CredentialSource(store=credential_store, environ={}))

    def test_defaults_to_process_environment(
        self, monkeypatch: pytest.MonkeyPatch, environ
    ) -> None:
        for name, value in environ.items():
            monkeypatch.setenv(name, value)
        assert resolve_credentials(CredentialSource()).access_token == "env-TWITTER_ACCESS_TOKEN"


class TestFromProject:
    def test_uses_twitter_section(self, credential_store) -> None:
        source = CredentialSource.from_project({"twitter": credential_store, "cache": {}})
        assert source.store == credential_store

    @pytest.mark.parametrize("project", [None, {}, {"twitter": None}])
    def test_missing_section_gives_empty_store(self, project) -> None:
        assert dict(CredentialSource.from_project(project).store) == {}

    def test_non_object_section_raises(self) -> None:
        with pytest.raises(ConfigError):
            CredentialSource.from_project({"twitter": ["consumer_key"]})


class TestCredentialRepr:
    def test_secrets_are_not_shown(self, credential_store) -> None:
        creds = resolve_credentials(CredentialSource(store=credential_store, environ={}))
        text = repr(creds)
        assert "store-consumer_secret" not in text
        assert "store-access_token_secret" not in text
