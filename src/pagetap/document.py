"""Page-load metrics for one navigation.

A Document collects the CDP events recorded while its URL loads and answers
metric queries over them. Events are only ever appended.

Timing queries are read-once: the first call computes and stores the value on
the instance and later calls return it unchanged, even if more events were
appended in between. Read them after the load has finished. Byte and request
queries are recomputed on every call.

PUBLIC API:
  - Document: Event accumulator with timing and resource queries
"""

import logging
from typing import Any, Iterable, Iterator

from pagetap.decode import parse_event
from pagetap.errors import UndefinedReference
from pagetap.events import (
    DataReceived,
    DomContentEventFired,
    Event,
    LoadEventFired,
    RequestWillBeSent,
    ResponseReceived,
)

logger = logging.getLogger(__name__)

_UNSET: Any = object()


class Document:
    """Events and derived metrics for the page at `url`.

    Attributes:
        url: Navigation URL, compared by exact string equality.
        events: Recorded events in arrival order.
    """

    def __init__(self, url: str):
        self._url = url
        self.events: list[Event] = []

        # Filled on first access, never invalidated
        self._start_time: float | None = _UNSET
        self._onload_event: float | None = _UNSET
        self._dom_content_event: float | None = _UNSET

    @property
    def url(self) -> str:
        return self._url

    def __repr__(self) -> str:
        return f"Document(url={self._url!r}, events={len(self.events)})"

    @classmethod
    def from_messages(cls, url: str, messages: Iterable[dict | str]) -> "Document":
        """Build a Document from raw CDP event messages in arrival order.

        Raises:
            MalformedEvent: On the first message that does not decode.
        """
        document = cls(url)
        document.extend(parse_event(message) for message in messages)
        return document

    def add_event(self, event: Event) -> None:
        """Append one event."""
        if not isinstance(event, Event):
            raise TypeError(f"Expected Event, got {type(event).__name__}")
        self.events.append(event)

    def extend(self, events: Iterable[Event]) -> None:
        for event in events:
            self.add_event(event)

    # Timing

    def start_time(self) -> float | None:
        """Timestamp of the first request for this document's URL, or None."""
        if self._start_time is _UNSET:
            self._start_time = next(
                (
                    event.timestamp
                    for event in self.events
                    if isinstance(event, RequestWillBeSent) and event.url == self._url
                ),
                None,
            )
            logger.debug(f"start_time for {self._url}: {self._start_time}")
        return self._start_time

    def onload_event(self) -> float | None:
        """Seconds from start_time to the first load event, or None if it never fired.

        Raises:
            UndefinedReference: The load event fired but start_time is None.
        """
        if self._onload_event is _UNSET:
            self._onload_event = self._milestone(LoadEventFired)
        return self._onload_event

    def dom_content_event(self) -> float | None:
        """Seconds from start_time to the first DOMContentLoaded event, or None.

        Raises:
            UndefinedReference: DOMContentLoaded fired but start_time is None.
        """
        if self._dom_content_event is _UNSET:
            self._dom_content_event = self._milestone(DomContentEventFired)
        return self._dom_content_event

    def _milestone(self, kind: type[Event]) -> float | None:
        fired = next((event for event in self.events if isinstance(event, kind)), None)
        if fired is None:
            return None

        start = self.start_time()
        if start is None:
            # start_time is now cached as None, so later calls raise too
            raise UndefinedReference(kind.method, self._url)
        return round(fired.timestamp - start, 3)

    # Resources

    def request_count(self) -> int:
        """Number of responses received while loading this document."""
        return sum(1 for _ in self._responses())

    def request_count_by_resource(self, resource_type: str) -> int:
        """Number of responses of `resource_type` ('Document', 'Script', 'Image', 'Stylesheet', 'Other')."""
        return sum(1 for _ in self._responses(resource_type))

    def encoded_bytes(self, resource_type: str) -> int:
        """Bytes transferred for `resource_type`.

        Uses the on-the-wire length, so a gzipped response counts its compressed
        size and the response headers are included.
        """
        return sum(chunk.encoded_data_length for chunk in self._chunks(resource_type))

    def bytes(self, resource_type: str) -> int:
        """Decoded body bytes for `resource_type`, headers not included."""
        return sum(chunk.data_length for chunk in self._chunks(resource_type))

    def total_encoded_bytes(self) -> int:
        return sum(chunk.encoded_data_length for chunk in self._chunks())

    def total_bytes(self) -> int:
        return sum(chunk.data_length for chunk in self._chunks())

    def resource_types(self) -> list[str]:
        """Distinct resource types seen in responses, in first-seen order."""
        return list(dict.fromkeys(response.resource_type for response in self._responses()))

    def _responses(self, resource_type: str | None = None) -> Iterator[ResponseReceived]:
        for event in self.events:
            match event:
                case ResponseReceived() if resource_type is None or event.resource_type == resource_type:
                    yield event

    def _chunks(self, resource_type: str | None = None) -> Iterator[DataReceived]:
        # One pass over the data per response, so a request id shared by two
        # responses has its chunks counted for both
        for request_id in [response.request_id for response in self._responses(resource_type)]:
            yield from self._data_received_for_request(request_id)

    def _data_received_for_request(self, request_id: str) -> Iterator[DataReceived]:
        for event in self.events:
            match event:
                case DataReceived(request_id=chunk_id) if chunk_id == request_id:
                    yield event


__all__ = ["Document"]
