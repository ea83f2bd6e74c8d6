"""Fuzzy multi-field search pipeline.

Builds a ``multi_match`` query over ``title`` and ``content`` with a fixed
fuzziness and minimum-should-match policy, runs it with offset/limit
pagination and reshapes the engine result into a ``SearchResult``. Ordering
is the engine's relevance ranking; no secondary sort is applied.
"""

import re
import time
from typing import Any, Dict, List, Optional, Tuple

import pydantic
import structlog

from libs.common.logging import log_performance
from libs.common.metrics import MetricsCollector
from libs.search_engine.base import SearchEngineClient, SearchEngineError
from ..errors import MappingError, QueryFailedError, ValidationError
from ..models import DocumentView, SearchResult

logger = structlog.get_logger("search_gateway.query")

SEARCH_FIELDS = ("title", "content")
FUZZINESS = "2"
MINIMUM_SHOULD_MATCH = "2"
DEFAULT_SKIP = 0
DEFAULT_TAKE = 10

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
# Largest value the engine accepts for from/size.
MAX_PAGINATION_VALUE = 2 ** 31 - 1


def parse_pagination_param(value: Optional[str], default: int) -> int:
    """Parse a textual pagination value.

    Absent, non-numeric, negative or out-of-range values yield ``default``.
    """
    if value is None or not _INTEGER_RE.fullmatch(value):
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    if parsed < 0 or parsed > MAX_PAGINATION_VALUE:
        return default
    return parsed


def resolve_pagination(skip: Optional[str], take: Optional[str]) -> Tuple[int, int]:
    return (
        parse_pagination_param(skip, DEFAULT_SKIP),
        parse_pagination_param(take, DEFAULT_TAKE),
    )


def build_fuzzy_query(text: str) -> Dict[str, Any]:
    """Multi-field fuzzy match over title and content."""
    return {
        "multi_match": {
            "query": text,
            "fields": list(SEARCH_FIELDS),
            "fuzziness": FUZZINESS,
            "minimum_should_match": MINIMUM_SHOULD_MATCH,
        }
    }


def decode_hit(payload: Any) -> DocumentView:
    """Strictly project a raw hit payload; raises ``MappingError``."""
    if not isinstance(payload, dict):
        raise MappingError(f"hit payload is {type(payload).__name__}, expected object")
    try:
        return DocumentView.model_validate(payload)
    except pydantic.ValidationError as e:
        raise MappingError(str(e)) from e


class QueryPipeline:
    """Translates search requests into engine queries and back."""

    def __init__(
        self,
        engine: SearchEngineClient,
        index_name: str,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.engine = engine
        self.index_name = index_name
        self.metrics = metrics

    def map_hits(self, hits: List[Any]) -> Tuple[List[DocumentView], int]:
        """Decode hits in order, dropping those that fail to map.

        Returns the documents and the number of skipped hits.
        """
        documents = []
        skipped = 0
        for position, payload in enumerate(hits):
            try:
                documents.append(decode_hit(payload))
            except MappingError as e:
                skipped += 1
                logger.warning("Skipping unmappable search hit", position=position, error=str(e))
        return documents, skipped

    async def search(
        self,
        query: Optional[str],
        skip: Optional[str] = None,
        take: Optional[str] = None
    ) -> SearchResult:
        """Run a fuzzy search.

        Raises ``ValidationError`` for an empty query (the engine is not
        called) and ``QueryFailedError`` if the engine call fails.
        """
        if not query:
            raise ValidationError("Query not specified")

        offset, limit = resolve_pagination(skip, take)
        start_time = time.time()
        try:
            raw = await self.engine.search(
                self.index_name,
                build_fuzzy_query(query),
                offset=offset,
                limit=limit
            )
        except SearchEngineError as e:
            logger.error("Search failed", query=query, error=str(e))
            if self.metrics:
                self.metrics.record_search("failed", time.time() - start_time)
            raise QueryFailedError() from e

        documents, skipped = self.map_hits(raw.hits)
        duration = time.time() - start_time
        if self.metrics:
            self.metrics.record_search("success", duration, skipped_hits=skipped)
        log_performance(
            "search_documents",
            duration * 1000,
            offset=offset,
            limit=limit,
            returned=len(documents),
            skipped=skipped
        )

        return SearchResult(
            elapsed=str(raw.took_ms),
            total_hits=str(raw.total_hits),
            documents=documents,
        )
