"""API subpackage for the search gateway.

Routers expose ingestion and search endpoints. The transport layer stays thin
and delegates to the pipelines.
"""
