"""Error taxonomy for the gateway.

``GatewayError`` subclasses carry the client-facing message and HTTP status;
the application's exception handler renders them as ``{"error": message}``.
``MappingError`` never leaves the query pipeline.
"""


class GatewayError(Exception):
    """Base exception for errors surfaced to HTTP callers."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(GatewayError):
    """The request is malformed; nothing was sent to the engine."""

    status_code = 400
    default_message = "Bad request"


class EngineError(GatewayError):
    """A search engine call failed."""

    status_code = 500


class IngestionFailedError(EngineError):
    default_message = "Failed to create documents"


class QueryFailedError(EngineError):
    default_message = "Something went wrong"


class MappingError(Exception):
    """A search hit payload could not be projected into a document view."""
    pass
