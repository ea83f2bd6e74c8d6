"""Request-to-query translation pipelines.

- ``ingestion``: validate submissions, assign ids, commit one bulk write.
- ``query``: build the fuzzy multi-field query and reshape engine results.
"""

from .ingestion import IngestionPipeline
from .query import QueryPipeline

__all__ = ["IngestionPipeline", "QueryPipeline"]
