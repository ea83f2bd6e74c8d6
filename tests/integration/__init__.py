"""Integration tests against a live gateway and search engine."""
