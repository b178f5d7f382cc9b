import asyncio

import httpx

from book_manager.book import BookRecord
from book_manager.store import LoadState
from conftest import LIST_URL


def _load(client):
    async def scenario():
        async with client:
            ok = await client.store.load()
            return ok, client.store
    return asyncio.run(scenario())


def test_store_starts_loading(make_client):
    client = make_client()
    assert client.store.state is LoadState.LOADING
    assert client.store.books == []
    asyncio.run(client.close())


def test_load_keeps_server_order(make_client, service):
    service.books.insert(0, {"isbn": "999", "title": "Zed", "author": "Last"})
    ok, store = _load(make_client())

    assert ok is True
    assert store.state is LoadState.READY
    assert store.books == [
        BookRecord("999", "Zed", "Last"),
        BookRecord("111", "A", "X"),
        BookRecord("222", "Dune", "Frank Herbert"),
    ]
    assert service.calls == [("GET", LIST_URL)]


def test_204_means_empty_collection(make_client, service):
    service.respond("GET", LIST_URL, 204)
    ok, store = _load(make_client())

    assert ok is True
    assert store.state is LoadState.READY
    assert store.books == []
    assert store.is_empty
    assert store.error is None


def test_empty_200_body_means_empty_collection(make_client, service):
    service.respond("GET", LIST_URL, 200, content=b"")
    ok, store = _load(make_client())

    assert ok is True
    assert store.state is LoadState.READY
    assert store.books == []


def test_failure_prefers_server_message(make_client, service):
    service.respond("GET", LIST_URL, 500, json={"message": "database offline"})
    ok, store = _load(make_client())

    assert ok is False
    assert store.state is LoadState.ERROR
    assert store.error == "database offline"


def test_failure_without_body_uses_status(make_client, service):
    service.respond("GET", LIST_URL, 503)
    ok, store = _load(make_client())

    assert ok is False
    assert store.error == "HTTP error fetching books! Status: 503"


def test_failure_with_unparsable_body_uses_status(make_client, service):
    service.respond("GET", LIST_URL, 502, text="<html>Bad Gateway</html>")
    ok, store = _load(make_client())

    assert store.error == "HTTP error fetching books! Status: 502"


def test_failure_keeps_previous_collection(make_client, service):
    client = make_client()

    async def scenario():
        async with client:
            assert await client.store.load() is True
            service.respond("GET", LIST_URL, 500, json={"error": "boom"})
            assert await client.store.load() is False

    asyncio.run(scenario())
    assert client.store.state is LoadState.ERROR
    assert client.store.error == "boom"
    assert [b.isbn for b in client.store.books] == ["111", "222"]


def test_error_is_cleared_only_by_a_successful_load(make_client, service):
    client = make_client()
    seen = []

    async def scenario():
        async with client:
            service.respond("GET", LIST_URL, 500)
            await client.store.load()
            seen.append(client.store.error)
            service._overrides.clear()
            await client.store.load()
            seen.append(client.store.error)

    asyncio.run(scenario())
    assert seen == ["HTTP error fetching books! Status: 500", None]
    assert client.store.state is LoadState.READY


def test_store_is_loading_with_stale_error_while_request_is_in_flight(settings, service):
    from book_manager.client import BookManagerClient

    in_flight = []

    def handler(request):
        in_flight.append((client.store.state, client.store.error))
        return service.handler(request)

    async def scenario():
        async with client:
            await client.store.load()
            service.respond("GET", LIST_URL, 500)
            await client.store.load()
            service._overrides.clear()
            await client.store.load()

    client = BookManagerClient(settings, transport=httpx.MockTransport(handler))
    asyncio.run(scenario())

    assert in_flight == [
        (LoadState.LOADING, None),
        (LoadState.LOADING, None),
        (LoadState.LOADING, "HTTP error fetching books! Status: 500"),
    ]
    assert client.store.state is LoadState.READY
    assert client.store.error is None


def test_malformed_list_is_a_parse_failure(make_client, service):
    service.respond("GET", LIST_URL, 200, json=[{"isbn": "1", "title": "No author"}])
    ok, store = _load(make_client())

    assert ok is False
    assert store.state is LoadState.ERROR
    assert store.error == "Could not parse book list from server."
    assert store.books == []


def test_non_json_success_body_is_a_parse_failure(make_client, service):
    service.respond("GET", LIST_URL, 200, text="not json")
    ok, store = _load(make_client())

    assert ok is False
    assert store.error == "Could not parse book list from server."


def test_transport_error_is_reported(settings):
    from book_manager.client import BookManagerClient

    def refuse(request):
        raise httpx.ConnectError("Connection refused", request=request)

    client = BookManagerClient(settings, transport=httpx.MockTransport(refuse))
    ok, store = _load(client)

    assert ok is False
    assert store.state is LoadState.ERROR
    assert "Connection refused" in store.error
