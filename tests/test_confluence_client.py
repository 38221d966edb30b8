import asyncio
import base64

import httpx
import pytest

from decision_sync.confluence import (
    ConfluenceClient,
    DiscoveryError,
    PageFetchError,
    build_credential,
)
from decision_sync.models import DocumentRef

CREDENTIAL = build_credential("dev@example.test", "token")


def _search_page(ids, next_link=True, total=None):
    payload = {
        "results": [{"id": str(page_id), "title": f"Page {page_id}"} for page_id in ids],
        "size": len(ids),
        "_links": {"next": "/rest/api/content/search?cursor=abc"} if next_link else {},
    }
    if total is not None:
        payload["totalSize"] = total
    return payload


def _body_payload(page_id, body="<p>body</p>"):
    return {"id": str(page_id), "title": f"Page {page_id}", "body": {"storage": {"value": body}}}


def _run(config, handler, coro_factory):
    async def scenario():
        async with ConfluenceClient(config, CREDENTIAL, transport=httpx.MockTransport(handler)) as client:
            return await coro_factory(client)

    return asyncio.run(scenario())


def test_build_credential_encodes_basic_pair():
    assert base64.b64decode(CREDENTIAL).decode() == "dev@example.test:token"


@pytest.mark.parametrize(("email", "token"), [(None, "t"), ("a@b.c", ""), (None, None)])
def test_build_credential_requires_both_secrets(email, token):
    with pytest.raises(ValueError):
        build_credential(email, token)


def test_discover_follows_next_links_until_exhausted(config):
    pages = [_search_page([1, 2]), _search_page([3, 4]), _search_page([5], next_link=False)]
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=pages[len(requests) - 1])

    refs = _run(config, handler, lambda client: client.discover_all())

    assert [ref.id for ref in refs] == [1, 2, 3, 4, 5]
    assert len(requests) == 3
    assert [request.url.params["start"] for request in requests] == ["0", "2", "4"]
    first = requests[0]
    assert first.url.path == "/wiki/rest/api/content/search"
    assert first.url.params["cql"] == "ancestor=100 AND type=page"
    assert first.url.params["limit"] == "2"
    assert first.headers["Authorization"] == f"Basic {CREDENTIAL}"
    assert first.headers["Accept"] == "application/json"


def test_discover_stops_when_offset_reaches_total(config):
    pages = [_search_page([1, 2], total=5), _search_page([3, 4], total=5), _search_page([5], total=5)]
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=pages[len(requests) - 1])

    refs = _run(config, handler, lambda client: client.discover_all())

    assert len(requests) == 3
    assert [ref.title for ref in refs] == ["Page 1", "Page 2", "Page 3", "Page 4", "Page 5"]


def test_discover_stops_on_empty_page(config):
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=_search_page([]))

    assert _run(config, handler, lambda client: client.discover_all()) == []
    assert len(requests) == 1


def test_discover_error_status_is_fatal(config):
    calls = []

    def handler(request):
        calls.append(request)
        if len(calls) == 1:
            return httpx.Response(200, json=_search_page([1, 2]))
        return httpx.Response(401, text="unauthorized")

    with pytest.raises(DiscoveryError, match="HTTP 401"):
        _run(config, handler, lambda client: client.discover_all())


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, text="<html>login</html>"),
        httpx.Response(200, json={"results": [{"title": "No id"}], "size": 1}),
        httpx.Response(200, json=["not", "an", "object"]),
    ],
)
def test_discover_malformed_payload_is_fatal(config, response):
    def handler(request):
        return response

    with pytest.raises(DiscoveryError, match="Malformed page list"):
        _run(config, handler, lambda client: client.discover_all())


def test_discover_drops_repeated_page_ids(config):
    pages = [_search_page([1, 2]), _search_page([2, 3], next_link=False)]
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(200, json=pages[len(requests) - 1])

    refs = _run(config, handler, lambda client: client.discover_all())

    assert [ref.id for ref in refs] == [1, 2, 3]
    assert [request.url.params["start"] for request in requests] == ["0", "2"]


def test_request_timeout_caps_the_whole_request(config):
    config = config.model_copy(update={"request_timeout": 0.05})

    async def handler(request):
        await asyncio.sleep(1)
        return httpx.Response(200, json=_body_payload(1))

    with pytest.raises(DiscoveryError):
        _run(config, handler, lambda client: client.discover_all())

    outcomes = _run(config, handler, lambda client: client.fetch_bodies([DocumentRef(id=1, title="x")]))
    assert not outcomes[0].ok
    assert "page 1" in outcomes[0].error


def test_discover_timeout_is_fatal(config):
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(DiscoveryError):
        _run(config, handler, lambda client: client.discover_all())


def test_fetch_body_returns_storage_value(config):
    def handler(request):
        assert request.url.path == "/wiki/rest/api/content/42"
        assert request.url.params["expand"] == "body.storage"
        return httpx.Response(200, json=_body_payload(42, "<h2>Hi</h2>"))

    body = _run(config, handler, lambda client: client.fetch_body(DocumentRef(id=42, title="x")))

    assert body == "<h2>Hi</h2>"


def test_fetch_body_error_names_the_page(config):
    def handler(request):
        return httpx.Response(404, text="missing")

    with pytest.raises(PageFetchError) as excinfo:
        _run(config, handler, lambda client: client.fetch_body(DocumentRef(id=42, title="x")))

    assert excinfo.value.page_id == 42
    assert "page 42" in str(excinfo.value)


def test_fetch_bodies_isolates_failures(config):
    refs = [DocumentRef(id=page_id, title=f"Page {page_id}") for page_id in range(1, 11)]

    def handler(request):
        page_id = int(request.url.path.rsplit("/", 1)[-1])
        if page_id == 5:
            return httpx.Response(500, text="boom")
        if page_id == 8:
            raise httpx.ConnectTimeout("timed out", request=request)
        return httpx.Response(200, json=_body_payload(page_id))

    outcomes = _run(config, handler, lambda client: client.fetch_bodies(refs))

    assert [outcome.ref.id for outcome in outcomes] == list(range(1, 11))
    failed = [outcome for outcome in outcomes if not outcome.ok]
    assert [outcome.ref.id for outcome in failed] == [5, 8]
    assert failed[0].error == "HTTP 500 fetching page 5: boom"
    assert "page 8" in failed[1].error
    assert sum(outcome.ok for outcome in outcomes) == 8


def test_fetch_bodies_records_malformed_payloads(config):
    def handler(request):
        return httpx.Response(200, json={"id": "3"})

    outcomes = _run(config, handler, lambda client: client.fetch_bodies([DocumentRef(id=3, title="x")]))

    assert not outcomes[0].ok
    assert "page 3" in outcomes[0].error


def test_fetch_bodies_respects_concurrency_limit(config):
    config = config.model_copy(update={"fetch_concurrency": 2})
    refs = [DocumentRef(id=page_id, title="x") for page_id in range(6)]
    in_flight = 0
    peak = 0

    async def handler(request):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return httpx.Response(200, json=_body_payload(0))

    outcomes = _run(config, handler, lambda client: client.fetch_bodies(refs))

    assert all(outcome.ok for outcome in outcomes)
    assert peak == 2


def test_client_requires_credential(config):
    with pytest.raises(ValueError):
        ConfluenceClient(config, "")
