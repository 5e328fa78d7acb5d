"""Command-line utilities for Medline retrieval."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, List

from pydantic import ValidationError

from medline_retrieval.api import MedlineFetcher
from medline_retrieval.core.models import BibEntry
from medline_retrieval.exceptions import FetcherError
from medline_retrieval.export import entry_to_bibtex, export_bibtex


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Search and fetch PubMed records via E-utilities")
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Increase log verbosity (-v for INFO, -vv for DEBUG)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search PubMed and print matching records")
    search.add_argument("query", help="Free-text query; commas are treated as AND")
    _add_output_arguments(search)

    fetch = subparsers.add_parser("fetch", help="Fetch records for one or more PMIDs")
    fetch.add_argument("ids", nargs="+", help="PubMed identifiers")
    _add_output_arguments(fetch)

    url = subparsers.add_parser("url", help="Print the efetch URL for a PMID")
    url.add_argument("identifier", help="PubMed identifier")

    return parser


def _add_output_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        choices=("bibtex", "json"),
        default="bibtex",
        help="Output format (default: bibtex)",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Write records to this file instead of stdout",
    )


def _configure_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def _write_entries(entries: List[BibEntry], args: argparse.Namespace) -> None:
    if args.format == "bibtex" and args.output is not None:
        export_bibtex(entries, args.output)
        return

    if args.format == "json":
        text = json.dumps([asdict(entry) for entry in entries], indent=2, ensure_ascii=False) + "\n"
    else:
        text = "\n".join(entry_to_bibtex(entry) for entry in entries)

    if args.output is not None:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        args.output.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)


def _run_search(fetcher: MedlineFetcher, args: argparse.Namespace) -> None:
    _write_entries(fetcher.perform_search(args.query), args)


def _run_fetch(fetcher: MedlineFetcher, args: argparse.Namespace) -> None:
    _write_entries(fetcher.fetch_records(args.ids), args)


def _run_url(fetcher: MedlineFetcher, args: argparse.Namespace) -> None:
    print(fetcher.get_record_url(args.identifier))


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    commands: dict[str, Any] = {
        "search": _run_search,
        "fetch": _run_fetch,
        "url": _run_url,
    }

    handler = commands.get(args.command)
    if handler is None:
        parser.error("Unknown command")
        return 1

    try:
        handler(MedlineFetcher(), args)
    except FetcherError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    except ValidationError as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
