"""Utilities for exporting entries as BibTeX."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from medline_retrieval.core.models import BibEntry


def entry_to_bibtex(entry: BibEntry) -> str:
    """Render ``entry`` as a single BibTeX record with fields sorted by name."""

    lines = [f"@{entry.entry_type}{{{entry.citation_key},"]
    for name in sorted(entry.fields):
        value = " ".join(entry.fields[name].split())
        lines.append(f"  {name} = {{{value}}},")
    lines.append("}")
    return "\n".join(lines) + "\n"


def export_bibtex(entries: Iterable[BibEntry], output_path: Path) -> Path:
    """Write ``entries`` to ``output_path`` separated by blank lines."""

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", encoding="utf-8", newline="") as handle:
        handle.write("\n".join(entry_to_bibtex(entry) for entry in entries))

    return output_path
