"""Search engine client factory.

Centralizes creation of the concrete ``SearchEngineClient`` so callers don't
depend on implementation details, and provides the startup readiness gate.
"""

from typing import Optional

import structlog

from libs.common.config import BaseConfig
from libs.common.metrics import MetricsCollector
from libs.common.retry import RetryConfig, RetryHandler
from .base import SearchEngineClient, SearchEngineError
from .opensearch import OpenSearchEngineClient

logger = structlog.get_logger("search_engine.factory")


def create_search_engine_client(
    config: BaseConfig,
    metrics: Optional[MetricsCollector] = None
) -> SearchEngineClient:
    """Build an engine client from typed configuration."""
    return OpenSearchEngineClient(
        hosts=config.opensearch_hosts,
        timeout=config.ds_engine_timeout_seconds,
        username=config.ds_opensearch_username,
        password=config.ds_opensearch_password,
        verify_certs=config.ds_opensearch_verify_certs,
        ssl_assert_hostname=config.ds_opensearch_ssl_assert_hostname,
        ssl_show_warn=config.ds_opensearch_ssl_show_warn,
        metrics=metrics,
    )


async def connect_with_retry(
    config: BaseConfig,
    client: Optional[SearchEngineClient] = None,
    retry_handler: Optional[RetryHandler] = None,
    metrics: Optional[MetricsCollector] = None
) -> SearchEngineClient:
    """Block until the engine answers, then return the connected client.

    Attempts are unbounded and spaced by ``ds_connect_retry_interval``
    seconds unless a custom ``retry_handler`` is supplied.
    """
    client = client or create_search_engine_client(config, metrics=metrics)
    retry_handler = retry_handler or RetryHandler(
        RetryConfig.fixed_interval(
            config.ds_connect_retry_interval,
            retryable_exceptions=(SearchEngineError,)
        )
    )

    logger.info("Connecting to search engine", hosts=config.opensearch_hosts)
    await retry_handler.execute_with_retry(
        client.check_connection,
        operation_name="engine_connect"
    )
    logger.info("Connected to search engine", hosts=config.opensearch_hosts)
    return client
