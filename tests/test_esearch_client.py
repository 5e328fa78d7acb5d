import io
from urllib.parse import parse_qs, urlparse

import pytest
import requests
import responses

from medline_retrieval.clients.esearch import ESEARCH_URL, ESearchClient, scan_search_lines
from medline_retrieval.core.models import SearchOutcome
from medline_retrieval.exceptions import MalformedRequestError, TransportError


class _StubSession:
    def __init__(self, response):
        self._response = response
        self.headers: dict[str, str] = {}
        self.calls: list[tuple[str, str, dict]] = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        return self._response


def _make_streamed_response(body: bytes, status: int = 200) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.raw = io.BytesIO(body)
    response.encoding = "utf-8"
    response.url = ESEARCH_URL
    return response


def test_scan_stops_at_id_list_end_and_keeps_order():
    lines = [
        "<eSearchResult>",
        "<IdList>",
        "<Id>11</Id>",
        "<Id>22</Id>",
        "<Id>33</Id>",
        "<Count>57</Count>",
        "</IdList>",
        "<Id>44</Id>",
        "<Count>1</Count>",
    ]

    outcome = scan_search_lines(lines)

    assert outcome == SearchOutcome(ids=("11", "22", "33"), total_count=57)


def test_scan_does_not_consume_lines_after_id_list_end():
    consumed: list[str] = []

    def lines():
        for line in ["<Count>3</Count>", "<Id>1</Id>", "</IdList>"]:
            consumed.append(line)
            yield line
        raise AssertionError("scan read past </IdList>")

    outcome = scan_search_lines(lines())

    assert outcome.ids == ("1",)
    assert consumed[-1] == "</IdList>"


def test_scan_without_count_leaves_total_unknown():
    outcome = scan_search_lines(["<IdList>", "<Id>5</Id>", "</IdList>"])

    assert outcome.ids == ("5",)
    assert outcome.total_count is None
    assert outcome.is_capped is False


def test_scan_last_count_wins():
    outcome = scan_search_lines(["<Count>4</Count>", "<Count>9</Count>", "</IdList>"])

    assert outcome.total_count == 9


def test_build_search_url_encodes_fixed_parameters():
    client = ESearchClient(session=requests.Session())

    url = client.build_search_url("influenza AND vaccine")

    parsed = urlparse(url)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == ESEARCH_URL
    assert parse_qs(parsed.query) == {
        "db": ["pubmed"],
        "sort": ["relevance"],
        "term": ["influenza AND vaccine"],
    }


def test_build_search_url_rejects_invalid_base_url():
    client = ESearchClient(session=requests.Session(), base_url="not a url")

    with pytest.raises(MalformedRequestError) as excinfo:
        client.build_search_url("influenza")

    assert excinfo.value.cause is not None


@responses.activate
def test_search_parses_fixture_and_ignores_trailing_content(load_fixture):
    responses.add(
        responses.GET,
        ESEARCH_URL,
        body=load_fixture("esearch_pubmed.xml"),
        status=200,
        content_type="text/xml",
    )
    client = ESearchClient(session=requests.Session())

    outcome = client.search("influenza AND vaccine")

    assert outcome.ids == ("31452104", "31437182", "31332301")
    assert outcome.total_count == 57
    assert outcome.is_capped is True

    params = parse_qs(urlparse(responses.calls[0].request.url).query)
    assert params["term"] == ["influenza AND vaccine"]


@responses.activate
def test_search_with_no_matches_returns_empty_outcome(load_fixture):
    responses.add(responses.GET, ESEARCH_URL, body=load_fixture("esearch_empty.xml"), status=200)
    client = ESearchClient(session=requests.Session())

    outcome = client.search("nonexistentterm")

    assert outcome.ids == ()
    assert outcome.total_count == 0


def test_search_closes_stream_after_early_exit():
    body = b"<Count>2</Count>\n<IdList>\n<Id>1</Id>\n<Id>2</Id>\n</IdList>\n" + b"<x/>\n" * 10_000
    response = _make_streamed_response(body)
    session = _StubSession(response)
    client = ESearchClient(session=session)  # type: ignore[arg-type]

    outcome = client.search("query")

    assert outcome.ids == ("1", "2")
    assert response.raw.closed
    assert session.calls[0][2]["stream"] is True


@responses.activate
def test_search_wraps_connection_errors():
    responses.add(responses.GET, ESEARCH_URL, body=requests.ConnectionError("connection refused"))
    client = ESearchClient(session=requests.Session())

    with pytest.raises(TransportError) as excinfo:
        client.search("influenza")

    assert isinstance(excinfo.value.cause, Exception)
    assert excinfo.value.__cause__ is not None


@responses.activate
def test_search_wraps_http_errors():
    responses.add(responses.GET, ESEARCH_URL, body="backend down", status=502)
    client = ESearchClient(session=requests.Session())

    with pytest.raises(TransportError, match="Unable to get PubMed IDs"):
        client.search("influenza")


def test_scan_reads_single_line_response_up_to_list_end():
    line = (
        "<eSearchResult><Count>12</Count><IdList><Id>7</Id><Id>8</Id></IdList>"
        "<TranslationStack><Count>99</Count></TranslationStack></eSearchResult>"
    )

    outcome = scan_search_lines([line])

    assert outcome == SearchOutcome(ids=("7", "8"), total_count=12)


def test_scan_treats_self_closing_id_list_as_end():
    outcome = scan_search_lines(
        ["<eSearchResult><Count>0</Count><IdList/><TermSet><Count>5</Count></TermSet>"]
    )

    assert outcome == SearchOutcome(ids=(), total_count=0)
