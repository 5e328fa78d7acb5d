"""Search PubMed through NCBI E-utilities and return bibliographic entries."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from .core.models import BibEntry, ParserResult, SearchOutcome
from .core.query import normalize_query
from .exceptions import (
    FetcherError,
    MalformedRequestError,
    MedlineRetrievalError,
    RecordParseError,
    TransportError,
)
from .services.cleanup import cleanup_record

if TYPE_CHECKING:
    from .api import MedlineFetcher

_default_fetcher: Optional["MedlineFetcher"] = None


def get_default_fetcher() -> "MedlineFetcher":
    """Return the default ``MedlineFetcher`` instance, creating it lazily."""

    global _default_fetcher
    if _default_fetcher is None:
        from .api import MedlineFetcher

        _default_fetcher = MedlineFetcher()
    return _default_fetcher


def perform_search(query: str) -> List[BibEntry]:
    """Search PubMed for ``query`` and return cleaned entries."""

    return get_default_fetcher().perform_search(query)


def fetch_records(ids: Sequence[str]) -> List[BibEntry]:
    """Fetch cleaned entries for the given PMIDs."""

    return get_default_fetcher().fetch_records(ids)


def get_record_url(identifier: str) -> str:
    """Return the efetch URL for a single PMID."""

    return get_default_fetcher().get_record_url(identifier)


__all__ = [
    "BibEntry",
    "FetcherError",
    "MalformedRequestError",
    "MedlineRetrievalError",
    "ParserResult",
    "RecordParseError",
    "SearchOutcome",
    "TransportError",
    "cleanup_record",
    "fetch_records",
    "get_default_fetcher",
    "get_record_url",
    "normalize_query",
    "perform_search",
]
