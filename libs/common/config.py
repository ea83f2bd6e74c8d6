"""Configuration management for the document search gateway.

This module centralizes environment-driven configuration. It builds on
``pydantic_settings.BaseSettings`` so configuration can be provided via
environment variables, ``.env`` files, or defaults.

Highlights
- Strongly-typed settings with sensible defaults
- One place to discover commonly used environment variables
- Small service-specific subclasses to keep concerns clear

Usage
- Inject the appropriate config in your service entrypoint:
  ``config = GatewayConfig()``
- Or select dynamically: ``config = get_config("gateway")``
"""

from typing import List, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class.

    Parameters are read from the process environment; field names map to
    upper-cased variable names (``ds_log_level`` -> ``DS_LOG_LEVEL``).

    Notes
    - Add new shared settings here so downstream services inherit them.
    - Prefer a typed field over reading ``os.environ`` directly.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    ds_env: str = Field(default="local", description="Deployment environment name")

    # Logging
    ds_log_level: str = Field(default="INFO")
    ds_log_format: str = Field(default="json", description="json or console")

    # Search engine
    ds_opensearch_hosts: str = Field(
        default="http://elasticsearch:9200",
        description="Comma separated list of engine URLs",
    )
    ds_opensearch_index: str = Field(default="documents")
    ds_opensearch_username: Optional[str] = Field(default=None)
    ds_opensearch_password: Optional[str] = Field(default=None)
    ds_opensearch_verify_certs: bool = Field(default=False)
    ds_opensearch_ssl_assert_hostname: bool = Field(default=False)
    ds_opensearch_ssl_show_warn: bool = Field(default=False)

    # Engine interaction
    ds_engine_timeout_seconds: float = Field(
        default=10.0,
        gt=0,
        description="Upper bound for a single bulk-write or query call",
    )
    ds_connect_retry_interval: float = Field(
        default=3.0,
        gt=0,
        description="Seconds between startup connection attempts",
    )

    @property
    def opensearch_hosts(self) -> List[str]:
        """Engine hosts as a list, with blanks dropped."""
        return [host.strip() for host in self.ds_opensearch_hosts.split(",") if host.strip()]


class GatewayConfig(BaseConfig):
    """Configuration for the HTTP gateway.

    Adds the listen address used by the uvicorn entrypoint.
    """

    ds_gateway_host: str = Field(default="0.0.0.0")
    ds_gateway_port: int = Field(default=8080)


def get_config(service_name: str) -> BaseConfig:
    """Get configuration for a specific service.

    Parameters
    - service_name: ``gateway`` for the HTTP service; anything else yields the
      shared ``BaseConfig``.
    """
    config_map = {
        "gateway": GatewayConfig,
    }

    # Default to ``BaseConfig`` to avoid surprising crashes for unknown names.
    config_class = config_map.get(service_name, BaseConfig)
    return config_class()
