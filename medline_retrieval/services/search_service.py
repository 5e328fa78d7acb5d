from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from medline_retrieval.clients.efetch import EFetchClient
from medline_retrieval.clients.esearch import ESearchClient
from medline_retrieval.core.models import BibEntry, SearchOutcome
from medline_retrieval.core.query import normalize_query
from medline_retrieval.services.cleanup import cleanup_records

logger = logging.getLogger(__name__)


class MedlineSearchService:
    """Resolve a free-text query into cleaned PubMed entries.

    The search runs in two strictly sequential steps: ``esearch`` yields the
    relevance-ordered PMIDs and total count, then a single ``efetch`` request
    retrieves all of those records. Only the ids returned by the first
    response window are fetched; larger result sets are reported in the log
    but not paged through.

    No per-call state is stored on the instance, so a service may be shared
    between threads as long as its clients' sessions are.
    """

    def __init__(
        self,
        *,
        search_client: Optional[ESearchClient] = None,
        fetch_client: Optional[EFetchClient] = None,
    ) -> None:
        self.search_client = search_client or ESearchClient()
        self.fetch_client = fetch_client or EFetchClient()

    def search_ids(self, query: str) -> SearchOutcome:
        if not query:
            return SearchOutcome()
        return self.search_client.search(normalize_query(query))

    def perform_search(self, query: str) -> List[BibEntry]:
        if not query:
            return []

        outcome = self.search_ids(query)

        if not outcome.ids:
            logger.info("No results found.")
        if outcome.is_capped:
            logger.info(
                "%s results found. Only %s relevant results will be fetched by default.",
                outcome.total_count,
                len(outcome.ids),
            )

        return self.fetch_records(outcome.ids)

    def fetch_records(self, ids: Sequence[str]) -> List[BibEntry]:
        """Fetch and clean the records for ``ids``; no request is sent when empty."""

        entries = self.fetch_client.fetch_batch(list(ids)) if ids else []
        return cleanup_records(entries)
