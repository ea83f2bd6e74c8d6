"""Shared libraries for the document search gateway.

Subpackages:
- ``libs.common``: configuration, logging, metrics, and retry policies.
- ``libs.search_engine``: search engine client interface and the OpenSearch
  backend.

Notes:
- Avoid gateway-specific logic; keep modules cohesive and broadly useful.
"""
