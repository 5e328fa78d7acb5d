"""Custom exception hierarchy for Medline retrieval."""

from __future__ import annotations

from typing import Optional


class MedlineRetrievalError(Exception):
    """Base exception for Medline retrieval errors."""


class FetcherError(MedlineRetrievalError):
    """Raised when a search or fetch against E-utilities cannot complete.

    The underlying exception is kept on :attr:`cause` (and chained as
    ``__cause__`` when raised with ``from``) so callers can inspect it.
    """

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class MalformedRequestError(FetcherError):
    """Raised when a request URL cannot be constructed."""


class TransportError(FetcherError):
    """Raised when the connection, the HTTP exchange, or decoding fails."""


class RecordParseError(FetcherError):
    """Raised when the record parser reports that no records are usable."""
