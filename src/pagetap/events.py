"""Typed CDP events consumed by the metrics model.

Each variant wraps the `params` of one CDP event. Only the fields the metrics
need are pulled out; anything else the protocol sends is ignored. Events the
model does not interpret become a Notification so a recorded stream never has
to be filtered before it is appended.

PUBLIC API:
  - Event: Base class of all variants
  - RequestWillBeSent, ResponseReceived, DataReceived: Network domain events
  - LoadEventFired, DomContentEventFired: Page lifecycle milestones
  - Notification: Any other CDP event
  - EVENT_TYPES: CDP method name -> variant
  - RESOURCE_TYPES: Resource types the reports know about
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from pagetap.errors import MalformedEvent

# Report order matters, so keep a tuple alongside the frozenset
RESOURCE_TYPE_ORDER: tuple[str, ...] = ("Document", "Script", "Image", "Stylesheet", "Other")
RESOURCE_TYPES = frozenset(RESOURCE_TYPE_ORDER)

_MISSING = object()


def _require(params: Mapping[str, Any], method: str, *path: str) -> Any:
    """Walk `path` into params, raising MalformedEvent on the first gap."""
    value: Any = params
    for key in path:
        if not isinstance(value, Mapping):
            raise MalformedEvent(method, ".".join(path))
        value = value.get(key, _MISSING)
        if value is _MISSING or value is None:
            raise MalformedEvent(method, ".".join(path))
    return value


@dataclass(frozen=True)
class Event:
    """One CDP event. `timestamp` is seconds on the stream's shared clock."""

    method = ""

    timestamp: float


@dataclass(frozen=True)
class RequestWillBeSent(Event):
    method = "Network.requestWillBeSent"

    url: str
    request_id: str | None = None

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "RequestWillBeSent":
        url = _require(params, cls.method, "request", "url")
        return cls(
            timestamp=_require(params, cls.method, "timestamp"),
            url=url,
            request_id=params.get("requestId"),
        )


@dataclass(frozen=True)
class ResponseReceived(Event):
    method = "Network.responseReceived"

    request_id: str
    resource_type: str

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "ResponseReceived":
        return cls(
            timestamp=_require(params, cls.method, "timestamp"),
            request_id=_require(params, cls.method, "requestId"),
            resource_type=_require(params, cls.method, "type"),
        )


@dataclass(frozen=True)
class DataReceived(Event):
    """A chunk of response body.

    `data_length` is the decoded body size of the chunk. `encoded_data_length`
    is what went over the wire, so it reflects compression and can include
    header bytes. The two are independent and neither bounds the other.
    """

    method = "Network.dataReceived"

    request_id: str
    data_length: int
    encoded_data_length: int

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "DataReceived":
        return cls(
            timestamp=_require(params, cls.method, "timestamp"),
            request_id=_require(params, cls.method, "requestId"),
            data_length=_require(params, cls.method, "dataLength"),
            encoded_data_length=_require(params, cls.method, "encodedDataLength"),
        )


@dataclass(frozen=True)
class LoadEventFired(Event):
    method = "Page.loadEventFired"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "LoadEventFired":
        return cls(timestamp=_require(params, cls.method, "timestamp"))


@dataclass(frozen=True)
class DomContentEventFired(Event):
    method = "Page.domContentEventFired"

    @classmethod
    def from_params(cls, params: Mapping[str, Any]) -> "DomContentEventFired":
        return cls(timestamp=_require(params, cls.method, "timestamp"))


@dataclass(frozen=True)
class Notification(Event):
    """Any CDP event the metrics do not look at.

    Many CDP events carry no timestamp, so it is optional here. `params` is a
    read-only view and is left out of the hash.
    """

    method: str = ""
    params: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    def __post_init__(self):
        object.__setattr__(self, "params", MappingProxyType(dict(self.params)))

    @classmethod
    def from_params(cls, params: Mapping[str, Any], method: str = "") -> "Notification":
        return cls(timestamp=params.get("timestamp"), method=method, params=params)


EVENT_TYPES: dict[str, type[Event]] = {
    variant.method: variant
    for variant in (RequestWillBeSent, ResponseReceived, DataReceived, LoadEventFired, DomContentEventFired)
}


__all__ = [
    "Event",
    "RequestWillBeSent",
    "ResponseReceived",
    "DataReceived",
    "LoadEventFired",
    "DomContentEventFired",
    "Notification",
    "EVENT_TYPES",
    "RESOURCE_TYPES",
    "RESOURCE_TYPE_ORDER",
]
