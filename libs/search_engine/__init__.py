"""Search engine client adapters.

Primary components:
- ``base``: abstract ``SearchEngineClient`` interface, raw result type and
  common exceptions.
- ``opensearch``: asyncio OpenSearch/Elasticsearch-compatible implementation.
- ``factory``: helpers to construct a client from typed config and to wait for
  the engine at startup.
"""
