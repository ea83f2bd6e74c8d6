"""API routes for the search gateway."""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
import structlog

from ..errors import ValidationError
from ..pipelines import IngestionPipeline, QueryPipeline

logger = structlog.get_logger("search_gateway.api")

router = APIRouter()


def get_ingestion_pipeline(request: Request) -> IngestionPipeline:
    """Get ingestion pipeline from application state."""
    return request.app.state.ingestion_pipeline


def get_query_pipeline(request: Request) -> QueryPipeline:
    """Get query pipeline from application state."""
    return request.app.state.query_pipeline


@router.post("/documents")
async def create_documents(
    request: Request,
    pipeline: IngestionPipeline = Depends(get_ingestion_pipeline)
):
    """Index a JSON array of ``{title, content}`` documents as one batch."""
    try:
        payload = await request.json()
    except ValueError as e:
        logger.info("Rejected undecodable request body", error=str(e))
        raise ValidationError("Malformed request body") from e

    documents = await pipeline.ingest(payload)
    logger.info("Documents created", count=len(documents))
    return Response(status_code=200)


@router.get("/search")
async def search(
    query: Optional[str] = Query(None, description="Free-text query"),
    skip: Optional[str] = Query(None, description="Number of hits to skip"),
    take: Optional[str] = Query(None, description="Maximum number of hits"),
    pipeline: QueryPipeline = Depends(get_query_pipeline)
):
    """Fuzzy search over document titles and contents."""
    result = await pipeline.search(query, skip=skip, take=take)
    return result.model_dump(mode="json", by_alias=True)
