"""Tests for src/ledger/iota_rpc.py against a local aiohttp test server."""

import pytest
from aiohttp import web
from aiohttp import test_utils

from config.config_loader import LedgerConfig
from src.indexer import index_candidates
from src.ledger.base import LedgerQueryError, ObjectNotFoundError
from src.ledger.iota_rpc import IotaRpcClient
from tests.conftest import CREATED


class FakeNode:
    """JSON-RPC endpoint whose per-method replies are set by each test."""

    def __init__(self) -> None:
        self.results: dict[str, dict] = {}
        self.requests: list[dict] = []
        self.status = 200

    async def handle(self, request: web.Request) -> web.Response:
        body = await request.json()
        self.requests.append(body)
        if self.status != 200:
            return web.Response(status=self.status, text="unavailable")
        reply = {"jsonrpc": "2.0", "id": body["id"]}
        reply.update(self.results[body["method"]])
        return web.json_response(reply)


@pytest.fixture
async def node():
    fake = FakeNode()
    app = web.Application()
    app.router.add_post("/", fake.handle)
    server = test_utils.TestServer(app)
    await server.start_server()
    fake.url = str(server.make_url("/"))
    yield fake
    await server.close()


@pytest.fixture
async def client(node):
    async with IotaRpcClient(LedgerConfig(rpc_url=node.url, package_id="0xpkg", request_timeout_sec=2)) as rpc:
        yield rpc


async def test_query_events_returns_parsed_json(node, client):
    node.results["iotax_queryEvents"] = {"result": {
        "data": [
            {"id": {"txDigest": "a"}, "parsedJson": {"debate_id": "0x1"}},
            {"id": {"txDigest": "b"}, "parsedJson": {"debate_id": "0x2"}},
        ],
        "nextCursor": None,
        "hasNextPage": False,
    }}

    events = await client.query_events(CREATED, 50)

    assert [e.payload["debate_id"] for e in events] == ["0x1", "0x2"]
    assert all(e.event_type == CREATED for e in events)
    assert node.requests[0]["params"] == [{"MoveEventType": CREATED}, None, 50, False]


async def test_query_events_non_object_payload_is_dropped(node, client):
    node.results["iotax_queryEvents"] = {"result": {"data": [
        {"parsedJson": {"debate_id": "0x1"}},
        {"parsedJson": "garbage"},
        {"parsedJson": ["0x2"]},
    ]}}

    events = await client.query_events(CREATED, 50)

    assert [e.payload for e in events[1:]] == [{}, {}]
    assert index_candidates(events) == ["0x1"]


async def test_query_events_rpc_error(node, client):
    node.results["iotax_queryEvents"] = {"error": {"code": -32602, "message": "Invalid params"}}
    with pytest.raises(LedgerQueryError, match="Invalid params"):
        await client.query_events(CREATED, 50)


async def test_http_error_becomes_query_error(node, client):
    node.status = 503
    with pytest.raises(LedgerQueryError, match="503"):
        await client.query_events(CREATED, 50)


async def test_get_object_move_fields(node, client):
    node.results["iota_getObject"] = {"result": {"data": {
        "objectId": "0x1",
        "content": {"dataType": "moveObject", "fields": {"topic": "T", "side_a_count": "3"}},
    }}}
    snapshot = await client.get_object("0x1")
    assert snapshot.object_id == "0x1"
    assert snapshot.is_move_object is True
    assert snapshot.fields["side_a_count"] == "3"


async def test_get_object_package_is_not_move_object(node, client):
    node.results["iota_getObject"] = {"result": {"data": {"objectId": "0x1", "content": {"dataType": "package"}}}}
    snapshot = await client.get_object("0x1")
    assert snapshot.is_move_object is False


async def test_get_object_not_exists(node, client):
    node.results["iota_getObject"] = {"result": {"error": {"code": "notExists", "object_id": "0x1"}}}
    with pytest.raises(ObjectNotFoundError):
        await client.get_object("0x1")


async def test_unreachable_node():
    rpc = IotaRpcClient(LedgerConfig(rpc_url="http://127.0.0.1:9/", package_id="0xpkg", request_timeout_sec=1))
    try:
        with pytest.raises(LedgerQueryError):
            await rpc.query_events(CREATED, 1)
    finally:
        await rpc.stop()
