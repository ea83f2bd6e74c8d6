"""Tests for the search gateway.

Unit and HTTP contract tests run against an in-memory engine client. Tests
under ``integration`` need a running gateway and search engine and skip
otherwise.
"""
