"""Record parser capability used by the fetch client."""

from __future__ import annotations

from typing import Protocol, TextIO, runtime_checkable

from medline_retrieval.core.models import ParserResult


@runtime_checkable
class RecordParser(Protocol):
    """Turn a decoded record stream into bibliographic entries.

    Implementations report unusable input through :attr:`ParserResult.fatal`
    instead of raising, and attach non-fatal problems as warnings.
    """

    def parse(self, stream: TextIO) -> ParserResult:
        ...
