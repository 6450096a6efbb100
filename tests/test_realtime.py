"""Fan-out tests: connected sockets receive auction and bid events."""

import asyncio

from fastapi.testclient import TestClient
from conftest import register, auth_header, create_auction
from livebid.realtime.broadcast import ConnectionManager, manager


def test_auction_created_is_pushed(client: TestClient, unique):
    user = register(client, unique, f"{unique}@x.com")
    with client.websocket_connect('/ws') as ws:
        auction = create_auction(client, user["token"], title="Pushed")
        msg = ws.receive_json()
    assert msg["event"] == "auctionCreated"
    assert msg["data"] == auction


def test_bid_accepted_reaches_every_socket(client: TestClient, unique):
    user = register(client, unique, f"{unique}@x.com")
    auction = create_auction(client, user["token"], starting_price=10)
    with client.websocket_connect('/ws') as first, client.websocket_connect('/ws') as second:
        r = client.post('/api/bids', json={"auctionId": auction["id"], "amount": 11}, headers=auth_header(user["token"]))
        assert r.status_code == 200
        for ws in (first, second):
            msg = ws.receive_json()
            assert msg["event"] == "bidAccepted"
            assert msg["data"]["auctionId"] == auction["id"]
            assert msg["data"]["currentPrice"] == 11
            assert msg["data"]["bid"] == r.json()


def test_rejected_bid_is_not_pushed(client: TestClient, unique):
    user = register(client, unique, f"{unique}@x.com")
    auction = create_auction(client, user["token"], starting_price=10)
    with client.websocket_connect('/ws') as ws:
        r = client.post('/api/bids', json={"auctionId": auction["id"], "amount": 5}, headers=auth_header(user["token"]))
        assert r.status_code == 400
        r = client.post('/api/bids', json={"auctionId": auction["id"], "amount": 12}, headers=auth_header(user["token"]))
        assert r.status_code == 200
        # The first message seen is the accepted bid, not the rejected one
        assert ws.receive_json()["data"]["currentPrice"] == 12


class FakeSocket:
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent = []
    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("gone")
        self.sent.append(data)


def test_broadcast_drops_failed_sockets():
    registry = ConnectionManager()
    good, bad = FakeSocket(), FakeSocket(fail=True)
    registry.active.update({good, bad})
    delivered = asyncio.run(registry.broadcast("bidAccepted", {"auctionId": 1}))
    assert delivered == 1
    assert good.sent == [{"event": "bidAccepted", "data": {"auctionId": 1}}]
    assert registry.active == {good}


def test_broadcast_with_no_clients():
    assert asyncio.run(ConnectionManager().broadcast("auctionCreated", {})) == 0


def test_dead_socket_does_not_break_bidding(client: TestClient, unique):
    user = register(client, unique, f"{unique}@x.com")
    auction = create_auction(client, user["token"], starting_price=10)
    dead = FakeSocket(fail=True)
    manager.active.add(dead)
    try:
        with client.websocket_connect('/ws') as ws:
            r = client.post('/api/bids', json={"auctionId": auction["id"], "amount": 11}, headers=auth_header(user["token"]))
            assert r.status_code == 200
            assert ws.receive_json()["data"]["currentPrice"] == 11
        assert dead not in manager.active
    finally:
        manager.active.discard(dead)
