"""Search gateway application package.

Layout:
- ``api``: HTTP endpoints for document ingestion and search.
- ``pipelines``: ingestion and query translation between requests and the
  search engine.
- ``models``: request, stored and response data shapes.
- ``errors``: error taxonomy mapped to HTTP responses.
"""
