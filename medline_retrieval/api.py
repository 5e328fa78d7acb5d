"""High-level facade for searching and fetching PubMed records.

Example
-------
```python
from medline_retrieval.api import MedlineFetcher

fetcher = MedlineFetcher()
for entry in fetcher.perform_search("influenza, vaccine"):
    print(entry.get_field("pmid"), entry.get_field("title"))
```
"""

from __future__ import annotations

from typing import List, Optional, Sequence

import requests

from .clients.efetch import EFetchClient
from .clients.esearch import ESearchClient
from .config import MedlineConfig
from .core.models import BibEntry, SearchOutcome
from .parsing import MedlineParser, RecordParser
from .services.cleanup import cleanup_record
from .services.search_service import MedlineSearchService

HELP_PAGE_URL = "https://docs.jabref.org/collect/import-using-online-bibliographic-database#medline-pubmed"


class MedlineFetcher:
    """Facade wiring configuration, HTTP clients, parser and search service."""

    name = "Medline"
    help_page = HELP_PAGE_URL

    def __init__(
        self,
        config: Optional[MedlineConfig] = None,
        *,
        session: Optional[requests.Session] = None,
        parser: Optional[RecordParser] = None,
        search_service: Optional[MedlineSearchService] = None,
    ) -> None:
        self.config = config or MedlineConfig()
        self.session = self.config.build_session(session)

        client_options = {
            "session": self.session,
            "timeout": self.config.request_timeout_s,
            "debug_logging": self.config.debug_logging,
        }
        self.search_client = ESearchClient(base_url=str(self.config.search_url), **client_options)
        self.fetch_client = EFetchClient(
            base_url=str(self.config.fetch_url),
            parser=parser or MedlineParser(),
            **client_options,
        )
        self.search_service = search_service or MedlineSearchService(
            search_client=self.search_client,
            fetch_client=self.fetch_client,
        )

    def get_record_url(self, identifier: str) -> str:
        return self.fetch_client.get_record_url(identifier)

    def search_ids(self, query: str) -> SearchOutcome:
        return self.search_service.search_ids(query)

    def perform_search(self, query: str) -> List[BibEntry]:
        return self.search_service.perform_search(query)

    def fetch_records(self, ids: Sequence[str]) -> List[BibEntry]:
        return self.search_service.fetch_records(ids)

    @staticmethod
    def cleanup_record(entry: BibEntry) -> BibEntry:
        return cleanup_record(entry)
