"""Base search engine client interface.

Defines the contract the gateway pipelines depend on, independent of the
backing engine. All methods are asynchronous; implementations must be safe
for concurrent use by many in-flight requests.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple


@dataclass
class RawSearchResult:
    """Engine response to a query, before any reshaping.

    ``hits`` holds each hit's source payload in relevance order; a payload is
    ``None`` when the engine returned a hit without one.
    """
    took_ms: int
    total_hits: int
    hits: List[Optional[Dict[str, Any]]] = field(default_factory=list)


class SearchEngineClient(ABC):
    """Abstract base class for search engine clients."""

    @abstractmethod
    async def bulk_index(
        self,
        index: str,
        documents: Sequence[Tuple[str, Dict[str, Any]]]
    ) -> None:
        """Index ``(doc_id, body)`` pairs with a single bulk request.

        Raises ``SearchEngineError`` if the request fails or the engine
        reports any item as failed.
        """
        pass

    @abstractmethod
    async def search(
        self,
        index: str,
        query: Dict[str, Any],
        offset: int = 0,
        limit: int = 10
    ) -> RawSearchResult:
        """Run ``query`` against ``index`` and return one page of hits."""
        pass

    @abstractmethod
    async def check_connection(self) -> None:
        """Raise ``SearchEngineError`` unless the engine responds."""
        pass

    async def health_check(self) -> bool:
        """Check if the engine is reachable."""
        try:
            await self.check_connection()
        except SearchEngineError:
            return False
        return True

    async def close(self) -> None:
        """Release network resources."""
        pass


class SearchEngineError(Exception):
    """Base exception for search engine operations."""
    pass


class SearchEngineConnectionError(SearchEngineError):
    """The engine could not be reached."""
    pass


class SearchEngineQueryError(SearchEngineError):
    """The engine rejected or failed a request."""
    pass
