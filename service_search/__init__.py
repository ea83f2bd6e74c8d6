"""Document search gateway service."""
