"""Shared HTTP client utilities with error classification and streaming."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

import requests

logger = logging.getLogger(__name__)

DEFAULT_HEADERS: Dict[str, str] = {
    "User-Agent": "medline-retrieval",
    "Accept": "application/xml",
}

_shared_session: Optional[requests.Session] = None


class ClientError(Exception):
    """Base exception for HTTP client errors."""


class InvalidRequestError(ClientError):
    """Raised when a request URL cannot be built from the given parts."""


class NotFoundError(ClientError):
    """Raised when a requested resource cannot be found (HTTP 404)."""


class RateLimitedError(ClientError):
    """Raised when the upstream service responds with a rate limit (HTTP 429)."""


class RequestRejectedError(ClientError):
    """Raised when the upstream rejects the request (HTTP 4xx, excluding 404/429)."""

    def __init__(self, status: int, message: str, body_excerpt: Optional[str] = None) -> None:
        super().__init__(message)
        self.status = status
        self.body_excerpt = body_excerpt


class UpstreamError(ClientError):
    """Raised when the upstream service fails or cannot be reached."""


def _get_shared_session() -> requests.Session:
    """Return a shared :class:`requests.Session` with default headers."""

    global _shared_session
    if _shared_session is None:
        _shared_session = requests.Session()
        _shared_session.headers.update(DEFAULT_HEADERS)
    return _shared_session


_BODY_EXCERPT_LIMIT = 200


def _sanitize_excerpt(text: str, max_length: int) -> str:
    cleaned = " ".join(text.split())
    return cleaned[:max_length]


def _get_body_excerpt(response: requests.Response) -> Optional[str]:
    try:
        body_text = response.text
    except (requests.RequestException, UnicodeDecodeError, RuntimeError):
        return None

    if not body_text:
        return None

    return _sanitize_excerpt(body_text, _BODY_EXCERPT_LIMIT)


def build_url(base_url: str, params: Optional[Dict[str, Any]] = None) -> str:
    """Return ``base_url`` with ``params`` URL-encoded into its query string.

    Raises :class:`InvalidRequestError` when ``requests`` cannot prepare a URL
    from the inputs (missing scheme, invalid host, and similar).
    """

    try:
        prepared = requests.Request("GET", base_url, params=params).prepare()
    except (requests.exceptions.MissingSchema, requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL) as exc:
        raise InvalidRequestError(f"Cannot build request URL from {base_url!r}: {exc}") from exc
    if not prepared.url:
        raise InvalidRequestError(f"Cannot build request URL from {base_url!r}")
    return prepared.url


class BaseHttpClient:
    """Base class providing shared HTTP behavior for E-utilities clients.

    Requests are sent exactly once. Transport failures raised by ``requests``
    surface as :class:`UpstreamError` and HTTP error statuses are classified
    by :meth:`_handle_response`; no retry or backoff is applied.
    """

    BASE_URL = ""

    def __init__(
        self,
        *,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
        timeout: float = 10.0,
        debug_logging: bool = False,
    ) -> None:
        self.session = session or _get_shared_session()
        self.base_url = base_url or self.BASE_URL
        self.timeout = timeout
        self.debug_logging = debug_logging

    def _build_url(self, path: str = "", *, params: Optional[Dict[str, Any]] = None) -> str:
        return build_url(f"{self.base_url}{path}", params)

    @contextmanager
    def _stream(
        self,
        url: str,
        *,
        headers: Optional[Dict[str, str]] = None,
    ) -> Iterator[requests.Response]:
        """Open a streamed GET for a fully built ``url``.

        The response is closed when the block exits, whether the body was read
        to the end, abandoned early, or an exception was raised.
        """

        if self.debug_logging:
            logger.debug("HTTP GET %s", url)
        try:
            response = self.session.request(
                "GET", url, headers=headers, timeout=self.timeout, stream=True
            )
        except requests.RequestException as exc:
            raise UpstreamError(f"Request failed: {exc}") from exc

        with response:
            yield self._handle_response(response)

    def _handle_response(self, response: requests.Response) -> requests.Response:
        status = response.status_code
        if status == 404:
            raise NotFoundError("Resource not found")
        if status == 429:
            raise RateLimitedError("Rate limit exceeded")
        if 500 <= status < 600:
            excerpt = _get_body_excerpt(response)
            message = "Upstream service error"
            if excerpt:
                message = f"{message}: {excerpt}"
            raise UpstreamError(f"{message} ({status})")
        if 400 <= status < 500:
            excerpt = _get_body_excerpt(response)
            message = "Client request rejected"
            if excerpt:
                message = f"{message}: {excerpt}"
            raise RequestRejectedError(status, f"{message} ({status})", body_excerpt=excerpt)
        return response
