"""Tests for client configuration and endpoint resolution."""

from __future__ import annotations

import pytest

from sharesies.config import DEFAULT_USER_AGENT, ClientConfig, RefreshPolicy
from sharesies.endpoints import Endpoints
from sharesies.errors import ConfigurationError


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()

        assert config.app_url == "https://app.sharesies.nz"
        assert config.data_url == "https://data.sharesies.nz"
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.timeout is None
        assert config.refresh_policy is RefreshPolicy.EXPIRY
        assert config.expiry_leeway == 30.0
        assert config.clear_session_on_reauth_failure is True

    def test_refresh_policy_accepts_string(self):
        config = ClientConfig(refresh_policy="always")

        assert config.refresh_policy is RefreshPolicy.ALWAYS

    def test_unknown_refresh_policy_raises(self):
        with pytest.raises(ConfigurationError, match="Unknown refresh policy"):
            ClientConfig(refresh_policy="sometimes")

    def test_negative_leeway_raises(self):
        with pytest.raises(ConfigurationError):
            ClientConfig(expiry_leeway=-1)

    def test_endpoints_follow_base_urls(self):
        config = ClientConfig(app_url="http://localhost:8000/", data_url="http://localhost:9000")

        assert config.endpoints.identity_login == "http://localhost:8000/api/identity/login"
        assert config.endpoints.instruments == "http://localhost:9000/api/v1/instruments"


class TestClientConfigFromEnv:
    def test_unset_environment_keeps_defaults(self, clean_env):
        assert ClientConfig.from_env(dotenv=False) == ClientConfig()

    def test_reads_all_settings(self, monkeypatch, clean_env):
        monkeypatch.setenv("SHARESIES_APP_URL", "http://app.local")
        monkeypatch.setenv("SHARESIES_DATA_URL", "http://data.local")
        monkeypatch.setenv("SHARESIES_USER_AGENT", "custom-agent/1.0")
        monkeypatch.setenv("SHARESIES_TIMEOUT", "12.5")
        monkeypatch.setenv("SHARESIES_REFRESH_POLICY", "ALWAYS")
        monkeypatch.setenv("SHARESIES_EXPIRY_LEEWAY", "0")
        monkeypatch.setenv("SHARESIES_CLEAR_SESSION_ON_REAUTH_FAILURE", "no")

        config = ClientConfig.from_env(dotenv=False)

        assert config.app_url == "http://app.local"
        assert config.data_url == "http://data.local"
        assert config.user_agent == "custom-agent/1.0"
        assert config.timeout == 12.5
        assert config.refresh_policy is RefreshPolicy.ALWAYS
        assert config.expiry_leeway == 0.0
        assert config.clear_session_on_reauth_failure is False

    def test_reads_dotenv_file(self, tmp_path, monkeypatch, clean_env):
        (tmp_path / ".env").write_text("SHARESIES_TIMEOUT=5\n")
        monkeypatch.chdir(tmp_path)

        config = ClientConfig.from_env()

        assert config.timeout == 5.0

    def test_invalid_timeout_raises(self, monkeypatch, clean_env):
        monkeypatch.setenv("SHARESIES_TIMEOUT", "soon")

        with pytest.raises(ConfigurationError, match="SHARESIES_TIMEOUT"):
            ClientConfig.from_env(dotenv=False)

    def test_invalid_boolean_raises(self, monkeypatch, clean_env):
        monkeypatch.setenv("SHARESIES_CLEAR_SESSION_ON_REAUTH_FAILURE", "maybe")

        with pytest.raises(ConfigurationError, match="must be a boolean"):
            ClientConfig.from_env(dotenv=False)


class TestEndpoints:
    def test_default_urls(self):
        endpoints = Endpoints()

        assert endpoints.identity_login == "https://app.sharesies.nz/api/identity/login"
        assert endpoints.identity_check == "https://app.sharesies.nz/api/identity/check"
        assert (
            endpoints.identity_reauthenticate
            == "https://app.sharesies.nz/api/identity/reauthenticate"
        )
        assert endpoints.instruments == "https://data.sharesies.nz/api/v1/instruments"
        assert endpoints.cost_buy == "https://app.sharesies.nz/api/order/cost-buy"
        assert endpoints.create_buy == "https://app.sharesies.nz/api/order/create-buy"
        assert endpoints.cost_sell == "https://app.sharesies.nz/api/order/cost-sell"
        assert endpoints.create_sell == "https://app.sharesies.nz/api/order/create-sell"
