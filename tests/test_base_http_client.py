from __future__ import annotations

from typing import Any, Iterable, Optional

import pytest
import requests

from medline_retrieval.clients.base import (
    BaseHttpClient,
    InvalidRequestError,
    NotFoundError,
    RateLimitedError,
    RequestRejectedError,
    UpstreamError,
    build_url,
)


class _StubSession:
    def __init__(self, responses: Iterable[Any]):
        self._responses = list(responses)
        self.headers: dict[str, str] = {}
        self.calls = 0

    def request(self, method: str, url: str, timeout: float = 0, **_: Any):
        self.calls += 1
        response = self._responses[self.calls - 1]
        if isinstance(response, Exception):
            raise response
        return response


class _DummyClient(BaseHttpClient):
    BASE_URL = "https://example.test"

    def __init__(self, responses: Iterable[Any]):
        super().__init__(session=_StubSession(responses))

    @property
    def stub_session(self) -> _StubSession:
        return self.session  # type: ignore[return-value]


def _make_response(status: int, body: str = "", headers: Optional[dict[str, str]] = None):
    response = requests.Response()
    response.status_code = status
    response._content = body.encode()
    response.url = "https://example.test/resource"
    response.headers.update(headers or {})
    response.encoding = "utf-8"
    response._content_consumed = True
    return response


def test_build_url_encodes_params():
    url = build_url("https://example.test/search", {"term": "a AND b", "db": "pubmed"})

    assert url == "https://example.test/search?term=a+AND+b&db=pubmed"


def test_build_url_rejects_missing_scheme():
    with pytest.raises(InvalidRequestError):
        build_url("example.test/search", {"term": "x"})


def test_http_400_raises_request_rejected_error():
    response = _make_response(400, body="Bad request details" + "!" * 500)
    client = _DummyClient([response])

    with pytest.raises(RequestRejectedError) as excinfo:
        client._handle_response(response)

    assert excinfo.value.status == 400
    assert excinfo.value.body_excerpt is not None
    assert len(excinfo.value.body_excerpt) <= 200
    assert "Bad request details" in excinfo.value.body_excerpt


def test_http_401_and_403_are_request_rejections():
    unauthorized = _make_response(401, body="token expired")
    forbidden = _make_response(403, body="denied")
    client = _DummyClient([unauthorized, forbidden])

    with pytest.raises(RequestRejectedError) as excinfo:
        client._handle_response(unauthorized)
    assert excinfo.value.status == 401

    with pytest.raises(RequestRejectedError) as excinfo:
        client._handle_response(forbidden)
    assert excinfo.value.status == 403


def test_http_404_raises_not_found():
    response = _make_response(404)
    client = _DummyClient([response])

    with pytest.raises(NotFoundError):
        client._handle_response(response)


def test_http_429_is_not_retried():
    client = _DummyClient([_make_response(429, headers={"Retry-After": "7"})])

    with pytest.raises(RateLimitedError):
        with client._stream("https://example.test/resource"):
            pass

    assert client.stub_session.calls == 1


def test_http_500_is_not_retried():
    client = _DummyClient([_make_response(500, body="oops")])

    with pytest.raises(UpstreamError, match="oops"):
        with client._stream("https://example.test/resource"):
            pass

    assert client.stub_session.calls == 1


def test_transport_errors_become_upstream_errors():
    client = _DummyClient([requests.ConnectionError("refused")])

    with pytest.raises(UpstreamError, match="Request failed"):
        with client._stream("https://example.test/resource"):
            pass


def test_stream_yields_successful_response():
    response = _make_response(200, body="ok")
    client = _DummyClient([response])

    with client._stream("https://example.test/resource") as streamed:
        assert streamed is response


def test_client_leaves_supplied_session_headers_alone():
    session = requests.Session()
    session.headers["Accept"] = "text/plain"

    client = BaseHttpClient(session=session)

    assert client.session is session
    assert session.headers["Accept"] == "text/plain"
