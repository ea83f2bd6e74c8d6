"""Shared fixtures: an in-memory search engine client."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from libs.common.config import GatewayConfig
from libs.search_engine.base import (
    RawSearchResult,
    SearchEngineClient,
    SearchEngineConnectionError,
    SearchEngineQueryError,
)


class FakeSearchEngineClient(SearchEngineClient):
    """Stores documents in a dict and matches queries by substring.

    Set ``fail_bulk`` / ``fail_search`` / ``fail_connection`` to make the
    corresponding calls raise, or ``canned_result`` to bypass matching.
    """

    def __init__(self):
        self.indices: Dict[str, Dict[str, Dict[str, Any]]] = {}
        self.bulk_calls: List[Tuple[str, List[Tuple[str, Dict[str, Any]]]]] = []
        self.search_calls: List[Dict[str, Any]] = []
        self.fail_bulk = False
        self.fail_search = False
        self.fail_connection = False
        self.canned_result: Optional[RawSearchResult] = None
        self.closed = False

    async def bulk_index(self, index: str, documents: Sequence[Tuple[str, Dict[str, Any]]]) -> None:
        self.bulk_calls.append((index, list(documents)))
        if self.fail_bulk:
            raise SearchEngineQueryError("bulk rejected")
        store = self.indices.setdefault(index, {})
        for doc_id, source in documents:
            store[doc_id] = source

    async def search(self, index: str, query: Dict[str, Any], offset: int = 0, limit: int = 10) -> RawSearchResult:
        self.search_calls.append({"index": index, "query": query, "offset": offset, "limit": limit})
        if self.fail_search:
            raise SearchEngineQueryError("index unavailable")
        if self.canned_result is not None:
            return self.canned_result

        match = query["multi_match"]
        text = match["query"].lower()
        matched = [
            source for source in self.indices.get(index, {}).values()
            if any(text in str(source.get(field, "")).lower() for field in match["fields"])
        ]
        return RawSearchResult(
            took_ms=3,
            total_hits=len(matched),
            hits=matched[offset:offset + limit],
        )

    async def check_connection(self) -> None:
        if self.fail_connection:
            raise SearchEngineConnectionError("engine down")

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_engine():
    return FakeSearchEngineClient()


@pytest.fixture
def gateway_config():
    return GatewayConfig(ds_log_format="console", ds_opensearch_index="documents")
