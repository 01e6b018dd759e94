"""Shared factories for CDP events and messages."""

import pytest

from pagetap.events import (
    DataReceived,
    DomContentEventFired,
    LoadEventFired,
    RequestWillBeSent,
    ResponseReceived,
)


def request_sent(ts: float, url: str, request_id: str = "r0") -> RequestWillBeSent:
    return RequestWillBeSent(timestamp=ts, url=url, request_id=request_id)


def response(ts: float, request_id: str, resource_type: str) -> ResponseReceived:
    return ResponseReceived(timestamp=ts, request_id=request_id, resource_type=resource_type)


def data(ts: float, request_id: str, data_length: int, encoded_data_length: int) -> DataReceived:
    return DataReceived(
        timestamp=ts, request_id=request_id, data_length=data_length, encoded_data_length=encoded_data_length
    )


def load(ts: float) -> LoadEventFired:
    return LoadEventFired(timestamp=ts)


def dom_content(ts: float) -> DomContentEventFired:
    return DomContentEventFired(timestamp=ts)


def message(method: str, **params) -> dict:
    """Raw CDP event message as it arrives on the websocket."""
    return {"method": method, "params": params}


@pytest.fixture
def page_load_messages() -> list[dict]:
    """A small page: the document, one script and one image."""
    return [
        message("Network.requestWillBeSent", requestId="1", timestamp=100.0, request={"url": "http://x/"}),
        message("Network.responseReceived", requestId="1", timestamp=100.1, type="Document", response={}),
        message("Network.dataReceived", requestId="1", timestamp=100.15, dataLength=500, encodedDataLength=300),
        message("Network.requestWillBeSent", requestId="2", timestamp=100.2, request={"url": "http://x/app.js"}),
        message("Page.frameStartedLoading", frameId="main"),
        message("Network.responseReceived", requestId="2", timestamp=100.3, type="Script", response={}),
        message("Network.dataReceived", requestId="2", timestamp=100.35, dataLength=2000, encodedDataLength=800),
        message("Network.dataReceived", requestId="2", timestamp=100.36, dataLength=1000, encodedDataLength=400),
        message("Page.domContentEventFired", timestamp=100.5),
        message("Network.responseReceived", requestId="3", timestamp=100.6, type="Image", response={}),
        message("Network.dataReceived", requestId="3", timestamp=100.7, dataLength=4096, encodedDataLength=4200),
        message("Page.loadEventFired", timestamp=101.234),
    ]
