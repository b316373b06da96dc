"""
Error types shared by the quoting core and the API layer.

Routers translate these into HTTP responses:
ValidationError -> 400, NotFoundError -> 404, PersistenceError -> 503.
"""


class QuoteError(Exception):
    """Base class for all SubQuote errors."""


class ValidationError(QuoteError):
    """User input is incomplete or invalid. The message is user-facing."""


class NotFoundError(QuoteError):
    """A project, client or session does not exist."""


class PersistenceError(QuoteError):
    """The backing store failed. Local quote state is still valid; retry is safe."""
