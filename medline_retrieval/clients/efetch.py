"""Client for the E-utilities ``efetch`` endpoint."""

from __future__ import annotations

import codecs
import logging
from typing import Any, List, Optional, Sequence

from urllib3.exceptions import HTTPError as Urllib3HTTPError

from medline_retrieval.clients.base import BaseHttpClient, ClientError, InvalidRequestError
from medline_retrieval.core.models import BibEntry
from medline_retrieval.exceptions import MalformedRequestError, RecordParseError, TransportError
from medline_retrieval.parsing import MedlineParser, RecordParser

logger = logging.getLogger(__name__)

EFETCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"


class EFetchClient(BaseHttpClient):
    """Fetch full PubMed records for a batch of PMIDs in one request.

    The response body is decoded as strict UTF-8 while it streams and is
    handed to the configured :class:`RecordParser` in a single call.
    """

    BASE_URL = EFETCH_URL

    def __init__(self, *, parser: Optional[RecordParser] = None, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.parser = parser or MedlineParser()

    def get_record_url(self, identifier: str) -> str:
        """Return the efetch URL for a single PMID."""

        return self.build_fetch_url([identifier])

    def build_fetch_url(self, ids: Sequence[str]) -> str:
        params = {"db": "pubmed", "retmode": "xml", "id": ",".join(ids)}
        try:
            return self._build_url(params=params)
        except InvalidRequestError as exc:
            raise MalformedRequestError("Unable to build PubMed fetch URL", cause=exc) from exc

    def fetch_batch(self, ids: Sequence[str]) -> List[BibEntry]:
        """Fetch and parse the records for ``ids``.

        Raises:
            ValueError: If ``ids`` is empty.
            MalformedRequestError: If the request URL cannot be built.
            TransportError: On connection, HTTP status or decoding failures.
            RecordParseError: If the parser cannot recover any records.
        """

        if not ids:
            raise ValueError("fetch_batch requires at least one identifier")

        url = self.build_fetch_url(ids)
        try:
            with self._stream(url) as response:
                response.raw.decode_content = True
                stream = codecs.getreader("utf-8")(response.raw, errors="strict")
                result = self.parser.parse(stream)
        # requests exceptions derive from OSError; raw body reads can also raise urllib3 errors.
        except (ClientError, OSError, Urllib3HTTPError, UnicodeDecodeError) as exc:
            raise TransportError(f"Unable to fetch PubMed records: {exc}", cause=exc) from exc

        if result.fatal:
            raise RecordParseError(
                f"Unable to parse PubMed records: {result.error_message}", cause=result.error
            ) from result.error
        if result.has_warnings:
            logger.warning("Medline parser reported: %s", result.error_message)

        return list(result.entries)
