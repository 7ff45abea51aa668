# MIT License
# Copyright (c) 2025 Hashborn

import pytest
import requests

from host.rpc import announcer as announcer_module
from host.rpc.announcer import NodeAnnouncer
from protocol.types.common import BroadcastError
from protocol.types.currency import NetAddress


class FakeResponse:
    def __init__(self, status_code, text=""):
        self.status_code = status_code
        self.text = text


def test_broadcast_posts_announcement(monkeypatch):
    calls = []

    def fake_post(url, json=None, timeout=None):
        calls.append((url, json, timeout))
        return FakeResponse(200)

    monkeypatch.setattr(announcer_module.requests, "post", fake_post)
    NodeAnnouncer("http://node:8000/", timeout=5).broadcast(NetAddress("h.example:9982"))

    assert calls == [("http://node:8000/host/announcement", {"netaddress": "h.example:9982"}, 5)]


def test_rejected_announcement_raises(monkeypatch):
    monkeypatch.setattr(announcer_module.requests, "post", lambda *a, **kw: FakeResponse(400, "bad address"))
    with pytest.raises(BroadcastError, match="400"):
        NodeAnnouncer("http://node:8000").broadcast(NetAddress("h.example:9982"))


def test_unreachable_node_raises(monkeypatch):
    def fake_post(*args, **kwargs):
        raise requests.ConnectionError("connection refused")

    monkeypatch.setattr(announcer_module.requests, "post", fake_post)
    with pytest.raises(BroadcastError, match="connection refused"):
        NodeAnnouncer("http://node:8000").broadcast(NetAddress("h.example:9982"))
