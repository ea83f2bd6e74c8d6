"""Common utilities shared across the gateway.

Includes:
- ``config``: Pydantic-based service configuration from environment variables.
- ``logging``: structured logging setup with structlog.
- ``metrics``: Prometheus metrics helpers.
- ``retry``: retry policies with fixed or exponential backoff.

Import pattern:
- from libs.common.config import GatewayConfig
- from libs.common.logging import configure_logging
"""
