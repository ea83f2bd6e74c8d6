"""Document ingestion pipeline.

Validates a batch of submissions, assigns each an identifier and creation
timestamp, and commits the whole batch with a single bulk write. The bulk
call's outcome is the batch's outcome; per-item results are not inspected.
"""

import secrets
import time
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

import pydantic
import structlog
from pydantic import TypeAdapter

from libs.common.logging import log_performance
from libs.common.metrics import MetricsCollector
from libs.search_engine.base import SearchEngineClient, SearchEngineError
from ..errors import IngestionFailedError, ValidationError
from ..models import Document, DocumentSubmission

logger = structlog.get_logger("search_gateway.ingestion")

_submissions_adapter = TypeAdapter(List[DocumentSubmission])


def generate_document_id() -> str:
    """Return a 12 character URL-safe random token (72 bits)."""
    return secrets.token_urlsafe(9)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_submissions(payload: Any) -> List[DocumentSubmission]:
    """Validate a decoded JSON body as an array of submissions."""
    try:
        return _submissions_adapter.validate_python(payload)
    except pydantic.ValidationError as e:
        logger.info("Rejected malformed ingestion payload", errors=e.error_count())
        raise ValidationError("Malformed request body") from e


class IngestionPipeline:
    """Turns document submissions into one bulk index request."""

    def __init__(
        self,
        engine: SearchEngineClient,
        index_name: str,
        id_factory: Callable[[], str] = generate_document_id,
        clock: Callable[[], datetime] = utc_now,
        metrics: Optional[MetricsCollector] = None,
    ):
        self.engine = engine
        self.index_name = index_name
        self.id_factory = id_factory
        self.clock = clock
        self.metrics = metrics

    def build_documents(self, submissions: List[DocumentSubmission]) -> List[Document]:
        return [
            Document(
                id=self.id_factory(),
                title=submission.title,
                content=submission.content,
                created_at=self.clock(),
            )
            for submission in submissions
        ]

    async def ingest(self, payload: Any) -> List[Document]:
        """Validate ``payload`` and index it as one batch.

        Returns the documents that were written. Raises ``ValidationError``
        before touching the engine if the payload is malformed, and
        ``IngestionFailedError`` if the bulk write fails.
        """
        submissions = parse_submissions(payload)
        if not submissions:
            logger.debug("Empty ingestion batch, nothing to index")
            return []

        documents = self.build_documents(submissions)
        start_time = time.time()
        try:
            await self.engine.bulk_index(
                self.index_name,
                [(doc.id, doc.to_source()) for doc in documents]
            )
        except SearchEngineError as e:
            logger.error(
                "Bulk ingestion failed",
                index=self.index_name,
                count=len(documents),
                error=str(e)
            )
            if self.metrics:
                self.metrics.record_ingestion("failed", len(documents))
            raise IngestionFailedError() from e

        if self.metrics:
            self.metrics.record_ingestion("success", len(documents))
        log_performance(
            "ingest_documents",
            (time.time() - start_time) * 1000,
            count=len(documents),
            index=self.index_name
        )
        return documents
