"""Tests for NotionBridgeConfig."""

import os

import pytest

from notionbridge.config import NotionBridgeConfig, NotionEnvSettings


class TestDefaults:
    def test_defaults(self):
        cfg = NotionBridgeConfig(token="t")
        assert cfg.retry_max_attempts == 3
        assert cfg.retry_base_delay == 1.0
        assert cfg.retry_spacing == 0.5
        assert cfg.schema_cache_ttl_seconds == 600.0
        assert cfg.schema_cache_max_entries == 100
        assert cfg.delete_concurrency == 5
        assert cfg.append_batch_size == 100
        assert cfg.append_max_retries == 2
        assert cfg.timeout_ms == 10_000
        assert cfg.circuit_breaker_enabled is False
        assert cfg.circuit_failure_threshold == 5
        assert cfg.circuit_recovery_timeout_seconds == 30.0
        assert cfg.circuit_success_threshold == 3

    def test_repr_masks_token(self):
        text = repr(NotionBridgeConfig(token="secret_abcd1234"))
        assert "secret_abcd1234" not in text
        assert "token='...1234'" in text


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"timeout_seconds": 0},
            {"retry_max_attempts": 0},
            {"retry_base_delay": -1},
            {"schema_cache_ttl_seconds": -1},
            {"schema_cache_max_entries": 0},
            {"delete_concurrency": 0},
            {"append_batch_size": 101},
            {"append_max_retries": -1},
            {"circuit_failure_threshold": 0},
            {"circuit_success_threshold": 0},
            {"circuit_recovery_timeout_seconds": -1},
        ],
    )
    def test_rejects_invalid(self, kwargs):
        with pytest.raises(ValueError):
            NotionBridgeConfig(token="t", **kwargs)

    def test_rejects_insecure_remote_url(self):
        with pytest.raises(ValueError, match="insecure HTTP"):
            NotionBridgeConfig(token="t", base_url="http://api.example.com/v1")

    def test_allows_http_localhost(self):
        NotionBridgeConfig(token="t", base_url="http://localhost:8080/v1")


class TestFromEnv:
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in list(os.environ):
            if name.startswith("NOTION_"):
                monkeypatch.delenv(name)

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "env-token")
        monkeypatch.setenv("NOTION_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("NOTION_SCHEMA_CACHE_TTL_SECONDS", "60")
        monkeypatch.setenv("NOTION_HTTP_PROXY", "http://proxy.local:3128")
        cfg = NotionBridgeConfig.from_env()
        assert cfg.token == "env-token"
        assert cfg.timeout_seconds == 2.5
        assert cfg.schema_cache_ttl_seconds == 60.0
        assert cfg.http_proxy == "http://proxy.local:3128"

    def test_version_and_base_url(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "t")
        monkeypatch.setenv("NOTION_VERSION", "2025-09-03")
        monkeypatch.setenv("NOTION_BASE_URL", "http://localhost:9000/v1")
        cfg = NotionBridgeConfig.from_env()
        assert cfg.notion_version == "2025-09-03"
        assert cfg.base_url == "http://localhost:9000/v1"

    def test_settings_model_leaves_unset_as_none(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "t")
        settings = NotionEnvSettings()
        assert settings.token == "t"
        assert settings.timeout_seconds is None

    def test_overrides_win(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "env")
        cfg = NotionBridgeConfig.from_env(token="explicit")
        assert cfg.token == "explicit"

    def test_empty_values_ignored(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "t")
        monkeypatch.setenv("NOTION_VERSION", "")
        cfg = NotionBridgeConfig.from_env()
        assert cfg.notion_version == "2022-06-28"

    def test_missing_token(self):
        with pytest.raises(ValueError, match="NOTION_API_KEY"):
            NotionBridgeConfig.from_env()

    def test_bad_number(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "t")
        monkeypatch.setenv("NOTION_TIMEOUT_SECONDS", "soon")
        with pytest.raises(ValueError, match="timeout_seconds"):
            NotionBridgeConfig.from_env()

    def test_dataclass_validation_still_applies(self, monkeypatch):
        monkeypatch.setenv("NOTION_API_KEY", "t")
        monkeypatch.setenv("NOTION_TIMEOUT_SECONDS", "0")
        with pytest.raises(ValueError, match="timeout_seconds must be > 0"):
            NotionBridgeConfig.from_env()
