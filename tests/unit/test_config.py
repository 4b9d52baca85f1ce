"""Tests for energy_projections.core.config."""

import os

import pytest
from pydantic import ValidationError

from energy_projections.core.config import (
    CacheConfig,
    ProjectionsConfig,
    ProvidersConfig,
    _auto_cast,
    _merge_env_vars,
    load_config,
)
from energy_projections.core.exceptions import ConfigError


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Clear project env vars; setenv first so teardown also undoes .env loads."""
    for key in list(os.environ):
        if key.startswith("ENERGY_PROJECTIONS_"):
            monkeypatch.delenv(key)
    for key in ("EIA_API_KEY", "FRED_API_KEY"):
        monkeypatch.setenv(key, "placeholder")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _load(tmp_path, **kwargs):
    return load_config(dotenv_path=str(tmp_path / "missing.env"), **kwargs)


class TestProvidersConfig:
    def test_defaults(self):
        c = ProvidersConfig()
        assert c.eia_api_key is None
        assert c.request_timeout == 10.0
        assert not c.eia_configured
        assert not c.fred_configured

    def test_blank_key_is_missing(self):
        c = ProvidersConfig(eia_api_key="   ")
        assert c.eia_api_key is None
        assert not c.eia_configured

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError, match="request_timeout"):
            ProvidersConfig(request_timeout=0)

    def test_rate_limit_must_be_positive(self):
        with pytest.raises(ValidationError, match="rate_limit"):
            ProvidersConfig(rate_limit=0)


class TestCacheConfig:
    def test_five_minute_default(self):
        assert CacheConfig().ttl_seconds == 300
        assert CacheConfig().max_entries is None

    def test_ttl_must_be_positive(self):
        with pytest.raises(ValidationError, match="ttl_seconds"):
            CacheConfig(ttl_seconds=0)

    def test_max_entries_must_be_positive(self):
        with pytest.raises(ValidationError, match="max_entries"):
            CacheConfig(max_entries=0)


class TestLoadConfig:
    def test_defaults(self, clean_env):
        config = _load(clean_env)
        assert config == ProjectionsConfig()
        assert config.api.port == 3000

    def test_bare_credentials(self, clean_env, monkeypatch):
        monkeypatch.setenv("EIA_API_KEY", "eia-secret")
        monkeypatch.setenv("FRED_API_KEY", "fred-secret")
        config = _load(clean_env)
        assert config.providers.eia_api_key == "eia-secret"
        assert config.providers.fred_api_key == "fred-secret"

    def test_prefixed_env_nesting(self, clean_env, monkeypatch):
        monkeypatch.setenv("ENERGY_PROJECTIONS_CACHE__TTL_SECONDS", "60")
        monkeypatch.setenv("ENERGY_PROJECTIONS_CACHE__MAX_ENTRIES", "128")
        config = _load(clean_env)
        assert config.cache.ttl_seconds == 60
        assert config.cache.max_entries == 128

    def test_numeric_api_key_not_cast(self, clean_env, monkeypatch):
        monkeypatch.setenv("ENERGY_PROJECTIONS_PROVIDERS__EIA_API_KEY", "0123")
        config = _load(clean_env)
        assert config.providers.eia_api_key == "0123"

    def test_yaml_loading(self, clean_env):
        yaml_file = clean_env / "config.yml"
        yaml_file.write_text("providers:\n  request_timeout: 4.5\napi:\n  port: 8080\n")
        config = _load(clean_env, config_path=str(yaml_file))
        assert config.providers.request_timeout == 4.5
        assert config.api.port == 8080

    def test_default_yaml_in_cwd(self, clean_env):
        (clean_env / "energy-projections.yml").write_text("cache:\n  ttl_seconds: 30\n")
        config = _load(clean_env)
        assert config.cache.ttl_seconds == 30

    def test_env_overrides_yaml(self, clean_env, monkeypatch):
        yaml_file = clean_env / "config.yml"
        yaml_file.write_text("providers:\n  eia_api_key: from-yaml\n  request_timeout: 4\n")
        monkeypatch.setenv("EIA_API_KEY", "from-bare-env")
        monkeypatch.setenv("ENERGY_PROJECTIONS_PROVIDERS__REQUEST_TIMEOUT", "7")
        config = _load(clean_env, config_path=str(yaml_file))
        assert config.providers.eia_api_key == "from-bare-env"
        assert config.providers.request_timeout == 7

    def test_dotenv_file(self, clean_env):
        env_file = clean_env / ".env"
        env_file.write_text("FRED_API_KEY=from-dotenv\n")
        config = load_config(dotenv_path=str(env_file))
        assert config.providers.fred_api_key == "from-dotenv"

    def test_missing_explicit_file(self, clean_env):
        with pytest.raises(ConfigError, match="not found"):
            _load(clean_env, config_path=str(clean_env / "nope.yml"))

    def test_missing_env_pointed_file(self, clean_env, monkeypatch):
        monkeypatch.setenv("ENERGY_PROJECTIONS_CONFIG", str(clean_env / "nope.yml"))
        with pytest.raises(ConfigError, match="ENERGY_PROJECTIONS_CONFIG"):
            _load(clean_env)

    def test_non_mapping_yaml(self, clean_env):
        yaml_file = clean_env / "config.yml"
        yaml_file.write_text("- just\n- a list\n")
        with pytest.raises(ConfigError, match="must be a mapping"):
            _load(clean_env, config_path=str(yaml_file))

    def test_invalid_yaml(self, clean_env):
        yaml_file = clean_env / "config.yml"
        yaml_file.write_text("providers: [unclosed\n")
        with pytest.raises(ConfigError, match="Failed to parse"):
            _load(clean_env, config_path=str(yaml_file))

    def test_validation_error_wrapped(self, clean_env, monkeypatch):
        monkeypatch.setenv("ENERGY_PROJECTIONS_CACHE__TTL_SECONDS", "-1")
        with pytest.raises(ConfigError, match="ttl_seconds"):
            _load(clean_env)


class TestEnvHelpers:
    @pytest.mark.parametrize(
        "raw,expected",
        [("true", True), ("FALSE", False), ("42", 42), ("2.5", 2.5), ("abc", "abc")],
    )
    def test_auto_cast(self, raw, expected):
        assert _auto_cast(raw) == expected

    def test_merge_does_not_mutate_base(self, monkeypatch):
        monkeypatch.setenv("TEST_PREFIX_API__PORT", "9000")
        base = {"api": {"host": "127.0.0.1"}}
        merged = _merge_env_vars(base, "TEST_PREFIX_")
        assert merged["api"] == {"host": "127.0.0.1", "port": 9000}
        assert base == {"api": {"host": "127.0.0.1"}}
