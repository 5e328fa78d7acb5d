"""Client for the E-utilities ``esearch`` endpoint.

Only the header region of an esearch response is of interest: the total
match count and the identifier list. The client streams the body line by
line and stops reading as soon as the identifier list closes, so large
responses never have to be downloaded or parsed in full.
"""

from __future__ import annotations

import logging
import re
from typing import Iterable, List, Optional

import requests

from medline_retrieval.clients.base import BaseHttpClient, ClientError, InvalidRequestError
from medline_retrieval.core.models import SearchOutcome
from medline_retrieval.exceptions import MalformedRequestError, TransportError

logger = logging.getLogger(__name__)

ESEARCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/esearch.fcgi"

ID_PATTERN = re.compile(r"<Id>(\d+)</Id>")
COUNT_PATTERN = re.compile(r"<Count>(\d+)</Count>")
ID_LIST_END_PATTERN = re.compile(r"</IdList>|<IdList\s*/>")


def scan_search_lines(lines: Iterable[str]) -> SearchOutcome:
    """Collect identifiers and the total count from esearch response lines.

    Iteration stops at the first line that closes the identifier list
    (``</IdList>``, or ``<IdList/>`` for an empty list). Text before the
    closing tag on that line is still scanned; nothing after it is read.
    Identifiers keep document order. When the count tag occurs more than once
    the last value wins.
    """

    ids: List[str] = []
    total_count: Optional[int] = None
    for line in lines:
        end_match = ID_LIST_END_PATTERN.search(line)
        if end_match:
            line = line[: end_match.start()]
        ids.extend(match.group(1) for match in ID_PATTERN.finditer(line))
        for count_match in COUNT_PATTERN.finditer(line):
            total_count = int(count_match.group(1))
        if end_match:
            break
    return SearchOutcome(ids=tuple(ids), total_count=total_count)


class ESearchClient(BaseHttpClient):
    """Resolve a PubMed query into relevance-ordered PMIDs."""

    BASE_URL = ESEARCH_URL

    def build_search_url(self, query: str) -> str:
        params = {"db": "pubmed", "sort": "relevance", "term": query}
        try:
            return self._build_url(params=params)
        except InvalidRequestError as exc:
            raise MalformedRequestError("Unable to build PubMed search URL", cause=exc) from exc

    def search(self, query: str) -> SearchOutcome:
        """Return the identifiers and total count matching ``query``.

        ``query`` is sent as-is; callers normalize it beforehand.
        """

        url = self.build_search_url(query)
        try:
            with self._stream(url) as response:
                response.encoding = "utf-8"
                return scan_search_lines(response.iter_lines(decode_unicode=True))
        except (ClientError, requests.RequestException, UnicodeDecodeError) as exc:
            raise TransportError(f"Unable to get PubMed IDs: {exc}", cause=exc) from exc
