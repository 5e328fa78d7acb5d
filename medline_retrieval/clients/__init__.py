"""HTTP clients for the E-utilities search and fetch endpoints."""

from .base import (
    BaseHttpClient,
    ClientError,
    InvalidRequestError,
    NotFoundError,
    RateLimitedError,
    RequestRejectedError,
    UpstreamError,
    build_url,
)
from .efetch import EFETCH_URL, EFetchClient
from .esearch import ESEARCH_URL, ESearchClient, scan_search_lines

__all__ = [
    "BaseHttpClient",
    "ClientError",
    "EFETCH_URL",
    "EFetchClient",
    "ESEARCH_URL",
    "ESearchClient",
    "InvalidRequestError",
    "NotFoundError",
    "RateLimitedError",
    "RequestRejectedError",
    "UpstreamError",
    "build_url",
    "scan_search_lines",
]
