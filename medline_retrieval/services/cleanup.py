"""Post-processing applied to every fetched Medline entry."""

from __future__ import annotations

from typing import Iterable, List

from medline_retrieval.core.models import BibEntry

PROVIDER_ONLY_FIELDS = ("journal-abbreviation", "status", "copyright")


def cleanup_record(entry: BibEntry) -> BibEntry:
    """Remove provider-only Medline fields from ``entry`` in place.

    Missing fields are ignored and no other field is touched, so applying the
    cleanup again is a no-op. The same entry is returned for chaining.
    """

    for name in PROVIDER_ONLY_FIELDS:
        entry.clear_field(name)
    return entry


def cleanup_records(entries: Iterable[BibEntry]) -> List[BibEntry]:
    return [cleanup_record(entry) for entry in entries]
