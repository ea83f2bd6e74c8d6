"""Data shapes for ingestion and search."""

from datetime import datetime
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class DocumentSubmission(BaseModel):
    """A document as submitted by a client."""
    title: str = Field(..., description="Document title, may be empty")
    content: str = Field(..., description="Document body, may be empty")


class Document(BaseModel):
    """A document as stored in the search index."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="System generated identifier")
    title: str
    content: str
    created_at: datetime = Field(..., description="UTC ingestion instant")

    def to_source(self) -> Dict[str, Any]:
        """Body sent to the engine for indexing."""
        return self.model_dump(mode="json")


class DocumentView(BaseModel):
    """A stored document as returned by search; ``id`` is not exposed."""
    title: str
    content: str
    created_at: datetime


class SearchResult(BaseModel):
    """One page of search results.

    Serialized with the wire names ``time`` and ``hits``.
    """
    model_config = ConfigDict(populate_by_name=True)

    elapsed: str = Field(..., alias="time", description="Engine processing time")
    total_hits: str = Field(..., alias="hits", description="Total matching documents")
    documents: List[DocumentView] = Field(default_factory=list)
