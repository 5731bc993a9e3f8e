"""
Tests for ConfigRegistry, EndpointConfig and Settings.

- Construction fails on missing fields or an unknown default name
- Host normalization
- switch() keeps the selection on unknown names
- Settings load configs from LUIGIS_BOX_ environment variables
"""

from __future__ import annotations

import json

import pytest

from conftest import make_raw_config
from luigis_box.core.config import ConfigRegistry, EndpointConfig, Settings
from luigis_box.core.exceptions import ConfigurationError

REQUIRED_FIELDS = [
    "host",
    "publicKey",
    "privateKey",
    "connectionTimeout",
    "requestTimeout",
    "searchTimeout",
]


# =============================================================================
# EndpointConfig
# =============================================================================


class TestEndpointConfig:
    """Tests for the EndpointConfig model."""

    def test_trailing_slash_is_stripped(self) -> None:
        """Host loses its trailing slash."""
        config = EndpointConfig.model_validate(make_raw_config(host="https://a.com//"))

        assert config.host == "https://a.com"

    def test_accepts_snake_case_names(self) -> None:
        """Snake_case keyword names are accepted alongside camelCase aliases."""
        config = EndpointConfig(
            host="https://a.com",
            public_key="pub",
            private_key="priv",
            connection_timeout=1,
            request_timeout=2,
            search_timeout=3,
        )

        assert config.public_key == "pub"
        assert config.request_timeout == 2.0

    def test_is_immutable(self) -> None:
        """EndpointConfig cannot be changed after construction."""
        config = EndpointConfig.model_validate(make_raw_config())

        with pytest.raises(Exception):
            config.host = "https://other.com"  # type: ignore[misc]

    def test_private_key_not_in_repr(self) -> None:
        """The private key never shows up in repr()."""
        config = EndpointConfig.model_validate(make_raw_config())

        assert "secret-key" not in repr(config)


# =============================================================================
# ConfigRegistry construction
# =============================================================================


class TestConfigRegistryConstruction:
    """Tests for ConfigRegistry.__init__."""

    @pytest.mark.parametrize("missing", REQUIRED_FIELDS)
    def test_missing_field_raises(self, missing: str) -> None:
        """Every one of the six fields is required."""
        raw = make_raw_config()
        del raw[missing]

        with pytest.raises(ConfigurationError, match="default"):
            ConfigRegistry("default", {"default": raw})

    @pytest.mark.parametrize("field", REQUIRED_FIELDS)
    def test_null_field_raises(self, field: str) -> None:
        """A null value counts as missing."""
        raw = make_raw_config(**{field: None})

        with pytest.raises(ConfigurationError):
            ConfigRegistry("default", {"default": raw})

    def test_unknown_default_name_raises(self) -> None:
        """Default name must be one of the configs."""
        with pytest.raises(ConfigurationError) as exc_info:
            ConfigRegistry("missing", {"pl": make_raw_config(), "cz": make_raw_config()})

        assert str(exc_info.value) == (
            'No configuration with key "missing". Available configurations: pl, cz.'
        )

    def test_accepts_endpoint_config_instances(self) -> None:
        """Already-built EndpointConfig values are used as is."""
        config = EndpointConfig.model_validate(make_raw_config())

        registry = ConfigRegistry("only", {"only": config})

        assert registry.active() is config

    def test_default_is_active(self, registry: ConfigRegistry) -> None:
        """The default config is active right after construction."""
        assert registry.active_name == "default"
        assert registry.active().host == "https://live.luigisbox.com"
        assert registry.names == ("default", "second")


# =============================================================================
# ConfigRegistry switching
# =============================================================================


class TestConfigRegistrySwitch:
    """Tests for ConfigRegistry.switch()."""

    def test_switch_changes_active(self, registry: ConfigRegistry) -> None:
        """switch() selects another config."""
        registry.switch("second")

        assert registry.active_name == "second"
        assert registry.active().public_key == "9999-0000"

    def test_switch_to_unknown_keeps_selection(self, registry: ConfigRegistry) -> None:
        """A failed switch leaves the active config untouched."""
        before = registry.active()

        with pytest.raises(ConfigurationError, match="unknown"):
            registry.switch("unknown")

        assert registry.active_name == "default"
        assert registry.active() is before

    def test_get_does_not_switch(self, registry: ConfigRegistry) -> None:
        """get() returns a named config without selecting it."""
        assert registry.get("second").host == "https://second.luigisbox.com"
        assert registry.active_name == "default"

    def test_get_unknown_raises(self, registry: ConfigRegistry) -> None:
        with pytest.raises(ConfigurationError):
            registry.get("unknown")


# =============================================================================
# Settings
# =============================================================================


class TestSettings:
    """Tests for environment-driven Settings."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Settings have usable defaults."""
        monkeypatch.delenv("LUIGIS_BOX_CONFIGS", raising=False)
        monkeypatch.delenv("LUIGIS_BOX_DEFAULT_CONFIG", raising=False)

        settings = Settings(_env_file=None)

        assert settings.default_config == "default"
        assert settings.configs == {}
        assert settings.log_to_stderr is False
        assert settings.log_level == "INFO"
        assert settings.tracing_enabled is False

    def test_registry_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Configs are read as JSON from LUIGIS_BOX_CONFIGS."""
        monkeypatch.setenv("LUIGIS_BOX_DEFAULT_CONFIG", "eshop")
        monkeypatch.setenv("LUIGIS_BOX_CONFIGS", json.dumps({"eshop": make_raw_config()}))

        registry = ConfigRegistry.from_settings(Settings(_env_file=None))

        assert registry.active_name == "eshop"
        assert registry.active().private_key == "secret-key"

    def test_registry_from_empty_settings_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without any configs the default name cannot resolve."""
        monkeypatch.delenv("LUIGIS_BOX_CONFIGS", raising=False)

        with pytest.raises(ConfigurationError):
            ConfigRegistry.from_settings(Settings(_env_file=None))
