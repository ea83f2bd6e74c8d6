"""OpenSearch search engine client implementation.

Works against OpenSearch and wire-compatible Elasticsearch clusters through
``opensearch-py``'s asyncio transport. Every call is bounded by a timeout and
cancelling the awaiting task aborts the underlying HTTP request.
"""

import asyncio
from typing import Any, Awaitable, Dict, List, Optional, Sequence, Tuple

import structlog
from opensearchpy import AsyncOpenSearch, exceptions

from libs.common.metrics import MetricsCollector

from .base import (
    RawSearchResult,
    SearchEngineClient,
    SearchEngineConnectionError,
    SearchEngineQueryError,
)

logger = structlog.get_logger("search_engine.opensearch")


class OpenSearchEngineClient(SearchEngineClient):
    """OpenSearch-based search engine client."""

    def __init__(
        self,
        hosts: List[str],
        timeout: float = 10.0,
        username: Optional[str] = None,
        password: Optional[str] = None,
        verify_certs: bool = False,
        ssl_assert_hostname: bool = False,
        ssl_show_warn: bool = False,
        client: Optional[AsyncOpenSearch] = None,
        metrics: Optional[MetricsCollector] = None,
    ):
        """Initialize the client.

        Args:
            hosts: List of engine host URLs
            timeout: Seconds allowed for each engine call
            username: Basic auth username
            password: Basic auth password
            verify_certs: Whether to verify SSL certificates
            ssl_assert_hostname: Whether to assert hostname
            ssl_show_warn: Whether to show SSL warnings
            client: Pre-built ``AsyncOpenSearch`` to wrap instead of creating one
            metrics: Collector that counts engine calls by operation and outcome
        """
        if not hosts:
            raise ValueError("At least one engine host is required")

        self.hosts = hosts
        self.timeout = timeout
        self.metrics = metrics

        self.client = client or AsyncOpenSearch(
            hosts=hosts,
            http_auth=(username, password) if username and password else None,
            verify_certs=verify_certs,
            ssl_assert_hostname=ssl_assert_hostname,
            ssl_show_warn=ssl_show_warn,
            use_ssl=hosts[0].startswith('https'),
            timeout=timeout,
        )

    def _record(self, operation: str, status: str) -> None:
        if self.metrics:
            self.metrics.record_engine_operation(operation, status)

    async def _call(self, operation: str, awaitable: Awaitable[Any]) -> Any:
        """Await an engine call under the client timeout, translating errors.

        Failures are recorded here; callers record success once they have
        checked the response body.
        """
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            self._record(operation, "timeout")
            logger.error("Engine call timed out", operation=operation, timeout=self.timeout)
            raise SearchEngineQueryError(f"{operation} timed out after {self.timeout}s") from e
        except exceptions.ConnectionError as e:
            self._record(operation, "unreachable")
            logger.error("Engine unreachable", operation=operation, error=str(e))
            raise SearchEngineConnectionError(str(e)) from e
        except exceptions.OpenSearchException as e:
            self._record(operation, "error")
            logger.error("Engine call failed", operation=operation, error=str(e))
            raise SearchEngineQueryError(str(e)) from e

    async def bulk_index(
        self,
        index: str,
        documents: Sequence[Tuple[str, Dict[str, Any]]]
    ) -> None:
        """Index all documents with one ``_bulk`` request."""
        if not documents:
            return

        body: List[Dict[str, Any]] = []
        for doc_id, source in documents:
            body.append({"index": {"_index": index, "_id": doc_id}})
            body.append(source)

        response = await self._call(
            "bulk_index",
            self.client.bulk(body=body, index=index, request_timeout=self.timeout)
        )

        if response.get("errors"):
            self._record("bulk_index", "rejected")
            failed = [
                item for item in response.get("items", [])
                if item.get("index", {}).get("error")
            ]
            logger.error(
                "Bulk request reported failed items",
                index=index,
                failed_count=len(failed),
                total_count=len(documents)
            )
            raise SearchEngineQueryError(
                f"{len(failed)} of {len(documents)} documents failed to index"
            )

        self._record("bulk_index", "success")
        logger.info("Bulk indexed documents", index=index, count=len(documents))

    async def search(
        self,
        index: str,
        query: Dict[str, Any],
        offset: int = 0,
        limit: int = 10
    ) -> RawSearchResult:
        """Execute a query and return the raw page of hits."""
        body = {
            "query": query,
            "from": offset,
            "size": limit,
        }

        response = await self._call(
            "search",
            self.client.search(index=index, body=body, request_timeout=self.timeout)
        )

        self._record("search", "success")
        hits_section = response.get("hits", {})
        total = hits_section.get("total", 0)
        # Engines from 7.x on report {"value": n, "relation": "eq"}.
        if isinstance(total, dict):
            total = total.get("value", 0)

        return RawSearchResult(
            took_ms=response.get("took", 0),
            total_hits=total,
            hits=[hit.get("_source") for hit in hits_section.get("hits", [])],
        )

    async def check_connection(self) -> None:
        """Fetch cluster info; raises if the engine does not answer."""
        info = await self._call("info", self.client.info(request_timeout=self.timeout))
        self._record("info", "success")
        logger.debug(
            "Engine reachable",
            cluster_name=info.get("cluster_name"),
            version=info.get("version", {}).get("number")
        )

    async def close(self) -> None:
        """Close the engine client connection."""
        try:
            await self.client.close()
            logger.info("Engine client connection closed")
        except Exception as e:
            logger.error("Failed to close engine client", error=str(e))
