import httpx
import pytest

from strata.clients.http import HttpFeedClient, feed_params
from strata.core.cursors import TokenCursor
from strata.core.models import StreamQuery

FEED = [{"id": f"{i:04d}", "value": i} for i in range(1, 6)]


def _handler(request: httpx.Request) -> httpx.Response:
    after = request.url.params.get("after")
    limit = request.url.params.get("limit")
    items = [item for item in FEED if after is None or item["id"] > after]
    if limit is not None:
        items = items[: int(limit)]
    return httpx.Response(200, json={"items": items})


@pytest.fixture
def client() -> HttpFeedClient:
    return HttpFeedClient("https://feed.test/events", "id", transport=httpx.MockTransport(_handler))


def test_feed_params_omit_unset_values() -> None:
    assert feed_params(StreamQuery(cursor=TokenCursor())) == {}
    assert feed_params(StreamQuery(cursor=TokenCursor("0003"), batch_size=2)) == {"after": "0003", "limit": "2"}


@pytest.mark.asyncio
async def test_http_stream_pages_through_feed(client: HttpFeedClient) -> None:
    async with client:
        stream = client.stream(id="events")
        cursor = stream.create_cursor()
        pages = []
        while batch := await stream.fetch(stream.create_query(cursor, 2)):
            pages.append([item["id"] for item in batch])

    assert pages == [["0001", "0002"], ["0003", "0004"], ["0005"]]
    assert cursor.position == "0005"


@pytest.mark.asyncio
async def test_http_bare_list_response_and_local_skip() -> None:
    # Server ignores `after`; the client still drops items the cursor reached.
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json=FEED))
    async with HttpFeedClient("https://feed.test/all", "id", transport=transport) as client:
        stream = client.stream()
        batch = await stream.fetch(stream.create_query(client.new_cursor("0003")))

    assert [item["id"] for item in batch] == ["0004", "0005"]


@pytest.mark.asyncio
async def test_http_error_status_propagates() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(503))
    async with HttpFeedClient("https://feed.test/down", "id", transport=transport) as client:
        stream = client.stream()
        cursor = client.new_cursor("0001")
        with pytest.raises(httpx.HTTPStatusError):
            await stream.fetch(stream.create_query(cursor))

    assert cursor.position == "0001"


@pytest.mark.asyncio
async def test_http_malformed_body_raises() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"data": []}))
    async with HttpFeedClient("https://feed.test/odd", "id", transport=transport) as client:
        with pytest.raises(ValueError):
            await client.stream().create_query().next_batch()


def _int_feed_handler(request: httpx.Request) -> httpx.Response:
    after = request.url.params.get("after")
    limit = int(request.url.params.get("limit", "100"))
    ids = [i for i in range(1, 21) if after is None or i > int(after)]
    return httpx.Response(200, json=[{"id": i} for i in ids[:limit]])


@pytest.mark.asyncio
async def test_http_int_keys_cross_digit_boundary() -> None:
    transport = httpx.MockTransport(_int_feed_handler)
    async with HttpFeedClient("https://feed.test/ints", "id", int_key=True, transport=transport) as client:
        stream = client.stream()
        cursor = client.new_cursor("9")
        batch = await stream.fetch(stream.create_query(cursor, 5))

    assert [item["id"] for item in batch] == [10, 11, 12, 13, 14]
    assert cursor.position == 14
