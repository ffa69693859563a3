"""Tests for per-repository webhook secret derivation."""

import hashlib
import hmac

import pytest

from buildhook.core.config import Settings
from buildhook.core.exceptions import ConfigurationError
from buildhook.webhooks.secrets import SecretDeriver, derive_webhook_secret


class FakeConfig:
    def __init__(self, values: dict):
        self.values = values

    def get(self, key: str):
        return self.values.get(key)


class TestDeriveWebhookSecret:
    def test_matches_hmac_sha1_over_owner_then_name(self):
        expected = hmac.new(b"s3cr3t", b"alicerepo1", hashlib.sha1).hexdigest()
        assert derive_webhook_secret("s3cr3t", "alice", "repo1") == expected
        assert expected == "a7a9ceedfb3401ad7677818b26b2501e7c774a4f"

    def test_is_deterministic(self):
        first = derive_webhook_secret("s3cr3t", "o", "n")
        second = derive_webhook_secret("s3cr3t", "o", "n")
        assert first == second

    def test_differs_between_repositories(self):
        assert derive_webhook_secret("s3cr3t", "alice", "repo1") != derive_webhook_secret(
            "s3cr3t", "alice", "repo2"
        )

    def test_differs_between_owners(self):
        assert derive_webhook_secret("s3cr3t", "alice", "repo") != derive_webhook_secret(
            "s3cr3t", "bob", "repo"
        )

    def test_differs_between_root_secrets(self):
        assert derive_webhook_secret("one", "alice", "repo") != derive_webhook_secret(
            "two", "alice", "repo"
        )

    def test_output_is_lowercase_hex_sha1(self):
        secret = derive_webhook_secret("s3cr3t", "alice", "repo1")
        assert len(secret) == 40
        int(secret, 16)
        assert secret == secret.lower()

    def test_empty_root_secret_raises(self):
        with pytest.raises(ConfigurationError, match="not configured"):
            derive_webhook_secret("", "alice", "repo1")


class TestSecretDeriver:
    def test_reads_root_secret_from_config(self):
        deriver = SecretDeriver(FakeConfig({"GITHUB_WEBHOOK_SECRET": "s3cr3t"}))
        assert deriver.derive("alice", "repo1") == derive_webhook_secret(
            "s3cr3t", "alice", "repo1"
        )

    def test_missing_root_secret_raises_configuration_error(self):
        deriver = SecretDeriver(FakeConfig({}))
        with pytest.raises(ConfigurationError) as exc_info:
            deriver.derive("alice", "repo1")
        assert exc_info.value.status_code == 500

    def test_error_message_does_not_mention_any_secret(self):
        deriver = SecretDeriver(FakeConfig({"GITHUB_WEBHOOK_SECRET": ""}))
        with pytest.raises(ConfigurationError) as exc_info:
            deriver.derive("alice", "repo1")
        assert exc_info.value.message == "GitHub webhook secret not configured"

    def test_works_with_settings_as_config_source(self):
        settings = Settings(github_webhook_secret="s3cr3t", sentry_dsn="")
        deriver = SecretDeriver(settings)
        assert deriver.derive("o", "n") == derive_webhook_secret("s3cr3t", "o", "n")

    def test_blank_setting_counts_as_missing(self):
        settings = Settings(github_webhook_secret="", sentry_dsn="")
        with pytest.raises(ConfigurationError):
            SecretDeriver(settings).derive("o", "n")
