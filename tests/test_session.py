"""
CDPSession tests against a fake websocket.

No browser is involved: the fake answers commands and replays a recorded
page load through the session's message handler.
"""

import json
from concurrent.futures import Future

import pytest
import requests

from pagetap.cdp import CDPSession
from pagetap.events import LoadEventFired, Notification


class FakeWebSocket:
    """Stands in for WebSocketApp: replies to commands synchronously."""

    def __init__(self, session: CDPSession, on_navigate: list[dict], navigate_result: dict | None = None):
        self.session = session
        self.on_navigate = on_navigate
        self.navigate_result = navigate_result or {"frameId": "main"}
        self.sent: list[dict] = []

    def send(self, raw: str) -> None:
        command = json.loads(raw)
        self.sent.append(command)

        result = self.navigate_result if command["method"] == "Page.navigate" else {}
        self.session._on_message(self, json.dumps({"id": command["id"], "result": result}))

        if command["method"] == "Page.navigate":
            for event in self.on_navigate:
                self.session._on_message(self, json.dumps(event))

    def close(self) -> None:
        pass


# =============================================================================
# MESSAGE HANDLING
# =============================================================================


class TestOnMessage:
    def test_events_ignored_without_recording(self):
        session = CDPSession()

        session._on_message(None, json.dumps({"method": "Page.loadEventFired", "params": {"timestamp": 1.0}}))

        assert session.document is None
        assert not session.loaded.is_set()

    def test_events_appended_to_document(self, page_load_messages):
        session = CDPSession()
        document = session.start_recording("http://x/")

        for msg in page_load_messages:
            session._on_message(None, json.dumps(msg))

        assert len(document.events) == len(page_load_messages)
        assert document.onload_event() == 1.234
        assert session.loaded.is_set()

    def test_malformed_event_dropped(self):
        session = CDPSession()
        document = session.start_recording("http://x/")
        session._on_message(None, json.dumps({"method": "Page.frameNavigated", "params": {}}))

        session._on_message(None, json.dumps({"method": "Network.dataReceived", "params": {"requestId": "1"}}))
        session._on_message(None, "{broken")

        assert len(document.events) == 1
        assert isinstance(document.events[0], Notification)

    def test_response_resolves_future(self):
        session = CDPSession()
        future = Future()
        session._pending[5] = future

        session._on_message(None, json.dumps({"id": 5, "result": {"ok": True}}))

        assert future.result(timeout=0) == {"ok": True}
        assert 5 not in session._pending

    def test_error_response_fails_future(self):
        session = CDPSession()
        future = Future()
        session._pending[1] = future

        session._on_message(None, json.dumps({"id": 1, "error": {"code": -32601, "message": "nope"}}))

        with pytest.raises(RuntimeError):
            future.result(timeout=0)

    @pytest.mark.parametrize("raw", ["5", "[1, 2]", "null", "\"text\""])
    def test_non_object_message_ignored(self, raw):
        session = CDPSession()
        document = session.start_recording("http://x/")

        session._on_message(None, raw)

        assert document.events == []

    def test_close_fails_pending(self):
        session = CDPSession()
        future = Future()
        session._pending[1] = future
        session.connected.set()

        session._on_close(None, 1000, "bye")

        assert not session.is_connected
        with pytest.raises(RuntimeError, match="Connection closed"):
            future.result(timeout=0)


# =============================================================================
# COMMANDS AND LOADING
# =============================================================================


class TestLoad:
    def test_send_requires_connection(self):
        with pytest.raises(RuntimeError, match="Not connected"):
            CDPSession().send("Page.enable")

    def test_load_records_until_load_event(self, page_load_messages):
        session = CDPSession(timeout=1)
        session.ws_app = FakeWebSocket(session, page_load_messages)

        document = session.load("http://x/")

        methods = [command["method"] for command in session.ws_app.sent]
        assert methods == ["Network.enable", "Page.enable", "Page.navigate"]
        assert session.ws_app.sent[-1]["params"] == {"url": "http://x/"}
        assert session.document is None
        assert document.request_count() == 3
        assert document.dom_content_event() == 0.5

    def test_load_timeout_returns_partial_document(self, page_load_messages):
        partial = [m for m in page_load_messages if m["method"] != "Page.loadEventFired"]
        session = CDPSession(timeout=1)
        session.ws_app = FakeWebSocket(session, partial)

        document = session.load("http://x/", timeout=0.01)

        assert len(document.events) == len(partial)
        assert not any(isinstance(e, LoadEventFired) for e in document.events)
        assert document.onload_event() is None

    def test_load_reports_navigation_error(self):
        session = CDPSession(timeout=1)
        session.ws_app = FakeWebSocket(session, [], navigate_result={"frameId": "main", "errorText": "net::ERR_NAME"})

        with pytest.raises(RuntimeError, match="net::ERR_NAME"):
            session.load("http://nowhere.invalid/")

    def test_events_after_load_not_recorded(self, page_load_messages):
        session = CDPSession(timeout=1)
        session.ws_app = FakeWebSocket(session, page_load_messages)

        document = session.load("http://x/")
        session._on_message(None, json.dumps({"method": "Page.loadEventFired", "params": {"timestamp": 200.0}}))

        assert len(document.events) == len(page_load_messages)

    def test_failed_navigation_stops_recording(self):
        session = CDPSession(timeout=1)
        session.ws_app = FakeWebSocket(session, [], navigate_result={"errorText": "net::ERR_FAILED"})

        with pytest.raises(RuntimeError):
            session.load("http://x/")

        assert session.document is None

    def test_new_load_starts_new_document(self, page_load_messages):
        session = CDPSession(timeout=1)
        session.ws_app = FakeWebSocket(session, page_load_messages)

        first = session.load("http://x/")
        second = session.load("http://x/")

        assert first is not second
        assert len(second.events) == len(page_load_messages)


# =============================================================================
# PAGE DISCOVERY
# =============================================================================


class TestListPages:
    def test_filters_pages(self, monkeypatch):
        class Response:
            def raise_for_status(self):
                pass

            def json(self):
                return [
                    {"type": "page", "title": "A", "webSocketDebuggerUrl": "ws://a"},
                    {"type": "service_worker", "webSocketDebuggerUrl": "ws://sw"},
                    {"type": "page", "title": "attached elsewhere"},
                ]

        calls = []
        monkeypatch.setattr(requests, "get", lambda url, timeout: calls.append(url) or Response())

        pages = CDPSession(host="127.0.0.1", port=9333).list_pages()

        assert [p["title"] for p in pages] == ["A"]
        assert calls == ["http://127.0.0.1:9333/json"]

    def test_connection_error_returns_empty(self, monkeypatch):
        def refuse(url, timeout):
            raise requests.ConnectionError("refused")

        monkeypatch.setattr(requests, "get", refuse)

        assert CDPSession().list_pages() == []

    def test_connect_without_pages(self, monkeypatch):
        session = CDPSession()
        monkeypatch.setattr(session, "list_pages", lambda: [])

        with pytest.raises(RuntimeError, match="No pages available"):
            session.connect()


# =============================================================================
# PAGE SELECTION
# =============================================================================


TWO_PAGES = [
    {"type": "page", "title": "First", "webSocketDebuggerUrl": "ws://chrome/page/first"},
    {"type": "page", "title": "Second", "webSocketDebuggerUrl": "ws://chrome/page/second"},
]


class FakeConnection:
    closed = False

    def close(self):
        self.closed = True


@pytest.fixture
def attaching_session(monkeypatch):
    """CDPSession whose connect() attaches instantly and records the page index."""
    session = CDPSession()
    session.attached = []

    def connect(page_index=0):
        if session.ws_app:
            raise RuntimeError("Already connected")
        session.ws_app = FakeConnection()
        session.page_info = TWO_PAGES[page_index]
        session.connected.set()
        session.attached.append(page_index)

    monkeypatch.setattr(session, "list_pages", lambda: list(TWO_PAGES))
    monkeypatch.setattr(session, "connect", connect)
    return session


class TestUsePage:
    def test_connects_when_detached(self, attaching_session):
        attaching_session.use_page(1)

        assert attaching_session.attached == [1]
        assert attaching_session.page_info["title"] == "Second"

    def test_same_page_keeps_connection(self, attaching_session):
        attaching_session.use_page(0)
        connection = attaching_session.ws_app

        attaching_session.use_page(0)

        assert attaching_session.attached == [0]
        assert attaching_session.ws_app is connection

    def test_other_page_reconnects(self, attaching_session):
        attaching_session.use_page(0)
        first = attaching_session.ws_app

        attaching_session.use_page(1)

        assert attaching_session.attached == [0, 1]
        assert first.closed
        assert attaching_session.page_info["title"] == "Second"

    def test_out_of_range_while_connected(self, attaching_session):
        attaching_session.use_page(0)

        with pytest.raises(IndexError):
            attaching_session.use_page(5)

        assert attaching_session.page_info["title"] == "First"
