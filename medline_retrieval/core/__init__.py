"""Core data models and query helpers for Medline retrieval."""

from .models import BibEntry, ParserResult, SearchOutcome
from .query import AND_OPERATOR, normalize_query

__all__ = [
    "AND_OPERATOR",
    "BibEntry",
    "ParserResult",
    "SearchOutcome",
    "normalize_query",
]
