from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

_KEY_UNSAFE_PATTERN = re.compile(r"\W")


@dataclass(frozen=True)
class SearchOutcome:
    """Identifiers and total match count recovered from one esearch response.

    ``total_count`` is ``None`` when the response did not report a count
    before the identifier list closed. It may exceed ``len(ids)`` because
    E-utilities caps how many identifiers a single response enumerates.
    """

    ids: Tuple[str, ...] = ()
    total_count: Optional[int] = None

    @property
    def is_capped(self) -> bool:
        return self.total_count is not None and self.total_count > len(self.ids)


@dataclass
class BibEntry:
    """Bibliographic entry produced by a record parser.

    ``fields`` is an open mapping of BibTeX-style field names to values.
    ``source_format`` records the format the entry was parsed from.
    """

    entry_type: str = "article"
    fields: Dict[str, str] = field(default_factory=dict)
    source_format: str = "medline"

    def get_field(self, name: str) -> Optional[str]:
        return self.fields.get(name)

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def set_field(self, name: str, value: Optional[str]) -> None:
        """Set ``name`` to ``value``; empty values are not stored."""

        if value is None:
            return
        cleaned = value.strip()
        if cleaned:
            self.fields[name] = cleaned

    def clear_field(self, name: str) -> bool:
        """Remove ``name`` and report whether it was present."""

        return self.fields.pop(name, None) is not None

    @property
    def citation_key(self) -> str:
        """Key derived from the first author surname, year and PMID."""

        author = self.fields.get("author", "")
        surname = author.split(" and ")[0].split(",")[0]
        parts = [
            _KEY_UNSAFE_PATTERN.sub("", surname),
            self.fields.get("year", ""),
        ]
        key = "".join(parts)
        pmid = self.fields.get("pmid")
        if pmid:
            key = f"{key}_{pmid}" if key else f"pmid{pmid}"
        return key or "entry"


@dataclass
class ParserResult:
    """Outcome of parsing a record stream.

    ``fatal`` marks results where nothing usable could be recovered; the
    warnings then describe why and ``error`` holds the exception behind it,
    if there was one.
    """

    entries: List[BibEntry] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    fatal: bool = False
    error: Optional[BaseException] = None

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    @property
    def error_message(self) -> str:
        return "\n".join(self.warnings)

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    @classmethod
    def from_error(
        cls, message: str, error: Optional[BaseException] = None
    ) -> "ParserResult":
        return cls(warnings=[message], fatal=True, error=error)


__all__ = ["BibEntry", "ParserResult", "SearchOutcome"]
