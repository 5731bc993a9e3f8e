"""
Luigi's Box Client - Configuration

Patterns Applied:
- Pydantic Settings with SettingsConfigDict
- Environment variable prefix LUIGIS_BOX_
- Frozen pydantic model for each endpoint configuration

The ConfigRegistry is process-wide state: built once at startup, then only
mutated through switch(). switch() is not guarded by a lock; callers needing
per-request isolation pass an explicit EndpointConfig instead.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from luigis_box.core.exceptions import ConfigurationError
from luigis_box.core.logging import get_logger

logger = get_logger(__name__)


class Settings(BaseSettings):
    """Client settings loaded from environment variables.

    All settings can be overridden via environment variables with LUIGIS_BOX_ prefix.
    Example: LUIGIS_BOX_DEFAULT_CONFIG=eshop_pl
             LUIGIS_BOX_CONFIGS='{"eshop_pl": {"host": "https://live.luigisbox.com", ...}}'
    """

    # Endpoint configuration
    default_config: str = "default"
    configs: dict[str, dict[str, Any]] = Field(default_factory=dict)

    # Logging configuration, applied by LuigisBoxClient.from_settings() only
    # when log_to_stderr is set
    log_to_stderr: bool = False
    log_level: str = "INFO"
    log_json: bool = True

    # Tracing configuration, global provider installed only when enabled
    tracing_enabled: bool = False
    tracing_console_export: bool = False

    model_config = SettingsConfigDict(
        env_prefix="LUIGIS_BOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


def get_settings() -> Settings:
    """Get client settings instance.

    Returns:
        Settings instance with values from environment
    """
    return Settings()


class EndpointConfig(BaseModel):
    """Connection and credential settings for one Luigi's Box site.

    Accepts both snake_case names and the camelCase keys used by raw
    configuration files (publicKey, connectionTimeout, ...).

    Attributes:
        host: API host without trailing slash (e.g. https://live.luigisbox.com)
        public_key: Public (tracker) key sent in the Authorization header
        private_key: Secret key used to sign requests, never sent
        connection_timeout: Seconds allowed for establishing a connection
        request_timeout: Seconds allowed for content requests
        search_timeout: Seconds allowed for search requests
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    host: str
    public_key: str = Field(alias="publicKey")
    private_key: str = Field(alias="privateKey", repr=False)
    connection_timeout: float = Field(alias="connectionTimeout")
    request_timeout: float = Field(alias="requestTimeout")
    search_timeout: float = Field(alias="searchTimeout")

    @field_validator("host")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        """Normalize host so endpoint paths can be appended directly."""
        return value.rstrip("/")


class ConfigRegistry:
    """Named endpoint configurations with one active selection.

    Usage:
        registry = ConfigRegistry("pl", {"pl": {...}, "cz": {...}})
        registry.active().host
        registry.switch("cz")
    """

    def __init__(
        self,
        default_name: str,
        configs: Mapping[str, Mapping[str, Any] | EndpointConfig],
    ) -> None:
        """Validate every raw config and select the default one.

        Args:
            default_name: Name of the config that is active after construction
            configs: Mapping of config name to raw config mapping or EndpointConfig

        Raises:
            ConfigurationError: If a config misses a required field or
                default_name is not among the configs
        """
        parsed: dict[str, EndpointConfig] = {}
        for name, raw in configs.items():
            parsed[name] = self._parse(name, raw)

        self._configs = parsed
        self._ensure_known(default_name)
        self._active_name = default_name

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ConfigRegistry:
        """Build a registry from Settings (environment / .env file)."""
        settings = settings or get_settings()
        return cls(settings.default_config, settings.configs)

    @staticmethod
    def _parse(name: str, raw: Mapping[str, Any] | EndpointConfig) -> EndpointConfig:
        if isinstance(raw, EndpointConfig):
            return raw
        try:
            return EndpointConfig.model_validate(dict(raw))
        except ValidationError as e:
            fields = ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in e.errors()
            )
            msg = f'Invalid configuration "{name}": {fields}.'
            raise ConfigurationError(msg) from e

    def _ensure_known(self, name: str) -> None:
        if name not in self._configs:
            msg = (
                f'No configuration with key "{name}". '
                f"Available configurations: {', '.join(self._configs)}."
            )
            raise ConfigurationError(msg)

    @property
    def active_name(self) -> str:
        """Name of the currently selected configuration."""
        return self._active_name

    @property
    def names(self) -> tuple[str, ...]:
        """All registered configuration names, in registration order."""
        return tuple(self._configs)

    def switch(self, name: str) -> None:
        """Select another configuration.

        Args:
            name: Registered configuration name

        Raises:
            ConfigurationError: If name is unknown; the selection is unchanged
        """
        self._ensure_known(name)
        logger.debug("config_switched", previous=self._active_name, current=name)
        self._active_name = name

    def active(self) -> EndpointConfig:
        """Return the currently selected configuration."""
        return self._configs[self._active_name]

    def get(self, name: str) -> EndpointConfig:
        """Return a configuration by name without changing the selection.

        Raises:
            ConfigurationError: If name is unknown
        """
        self._ensure_known(name)
        return self._configs[name]
