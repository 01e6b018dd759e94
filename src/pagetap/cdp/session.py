"""Minimal CDP session that records one page load into a Document.

WebSocketApp handles the WebSocket, we handle CDP protocol.
"""

import json
import logging
import threading
from concurrent.futures import Future, TimeoutError
from typing import Any

import requests
import websocket

from pagetap.decode import is_event, parse_event
from pagetap.document import Document
from pagetap.errors import MalformedEvent
from pagetap.events import LoadEventFired

logger = logging.getLogger(__name__)

_REQUIRED_DOMAINS = ["Network", "Page"]


class CDPSession:
    """CDP client for a single page: connect, send, execute, load.

    Events arriving while a load is in progress are appended to that load's
    Document from the websocket thread. Recording stops when load() returns.
    """

    def __init__(self, host: str = "localhost", port: int = 9222, timeout: float = 30):
        """Initialize CDP session.

        Args:
            host: Chrome debugging host
            port: Chrome debugging port
            timeout: Default timeout for execute() and load()
        """
        self.host = host
        self.port = port
        self.timeout = timeout

        # WebSocketApp instance
        self.ws_app: websocket.WebSocketApp | None = None
        self.ws_thread: threading.Thread | None = None

        # Connection state
        self.connected = threading.Event()
        self.page_info: dict | None = None

        # CDP request/response tracking
        self._next_id = 1
        self._pending: dict[int, Future] = {}
        self._lock = threading.Lock()

        # Current recording
        self.document: Document | None = None
        self.loaded = threading.Event()

    @property
    def is_connected(self) -> bool:
        return self.connected.is_set()

    def list_pages(self) -> list[dict]:
        """List available Chrome pages."""
        try:
            resp = requests.get(f"http://{self.host}:{self.port}/json", timeout=2)
            resp.raise_for_status()
            pages = resp.json()
            return [p for p in pages if p.get("type") == "page" and "webSocketDebuggerUrl" in p]
        except requests.RequestException as e:
            logger.error(f"Failed to list pages: {e}")
            return []

    def connect(self, page_index: int = 0) -> None:
        """Connect to Chrome page."""
        if self.ws_app:
            raise RuntimeError("Already connected")

        pages = self.list_pages()
        if not pages:
            raise RuntimeError("No pages available")

        if page_index >= len(pages):
            raise IndexError(f"Page {page_index} out of range")

        page = pages[page_index]
        self.page_info = page

        self.ws_app = websocket.WebSocketApp(
            page["webSocketDebuggerUrl"],
            on_open=self._on_open,
            on_message=self._on_message,
            on_error=self._on_error,
            on_close=self._on_close,
        )

        self.ws_thread = threading.Thread(
            target=self.ws_app.run_forever,
            kwargs={
                "ping_interval": 30,
                "ping_timeout": 10,
                "skip_utf8_validation": True,
            },
        )
        self.ws_thread.daemon = True
        self.ws_thread.start()

        if not self.connected.wait(timeout=5):
            self.disconnect()
            raise TimeoutError("Failed to connect to Chrome")

    def use_page(self, page_index: int = 0) -> None:
        """Make sure the session is attached to page `page_index`.

        Reconnects when currently attached to a different page.
        """
        if self.is_connected and self.page_info:
            pages = self.list_pages()
            if page_index >= len(pages):
                raise IndexError(f"Page {page_index} out of range")
            if pages[page_index]["webSocketDebuggerUrl"] == self.page_info["webSocketDebuggerUrl"]:
                return
            logger.info(f"Switching to page {page_index}")

        if self.ws_app:
            self.disconnect()
        self.connect(page_index)

    def disconnect(self) -> None:
        """Disconnect from Chrome."""
        if self.ws_app:
            self.ws_app.close()
            self.ws_app = None

        if self.ws_thread and self.ws_thread.is_alive():
            self.ws_thread.join(timeout=2)
            self.ws_thread = None

        self.connected.clear()
        self.page_info = None

    def send(self, method: str, params: dict | None = None) -> Future:
        """Send CDP command asynchronously.

        Args:
            method: CDP method (e.g. "Page.navigate")
            params: Optional parameters

        Returns:
            Future that will contain the 'result' field from CDP response
        """
        if not self.ws_app:
            raise RuntimeError("Not connected")

        with self._lock:
            msg_id = self._next_id
            self._next_id += 1

            future = Future()
            self._pending[msg_id] = future

        message: dict[str, Any] = {"id": msg_id, "method": method}
        if params:
            message["params"] = params

        self.ws_app.send(json.dumps(message))

        return future

    def execute(self, method: str, params: dict | None = None, timeout: float | None = None) -> Any:
        """Send CDP command synchronously.

        Returns:
            The 'result' field from CDP response
        """
        future = self.send(method, params)

        try:
            return future.result(timeout=timeout or self.timeout)
        except TimeoutError:
            with self._lock:
                for msg_id, f in list(self._pending.items()):
                    if f is future:
                        self._pending.pop(msg_id, None)
                        break
            raise TimeoutError(f"Command {method} timed out")

    def start_recording(self, url: str) -> Document:
        """Route incoming events into a fresh Document for `url`."""
        with self._lock:
            self.document = Document(url)
            self.loaded.clear()
        return self.document

    def stop_recording(self) -> None:
        """Stop appending events. The Document is safe to read afterwards."""
        with self._lock:
            self.document = None

    def load(self, url: str, timeout: float | None = None) -> Document:
        """Navigate to `url` and record events until the page's load event.

        Args:
            url: Page URL. Must match the navigation request exactly.
            timeout: Seconds to wait for the load event. Defaults to self.timeout.

        Returns:
            The Document, possibly partial if the load event never arrived.
        """
        document = self.start_recording(url)

        try:
            for domain in _REQUIRED_DOMAINS:
                self.execute(f"{domain}.enable")

            result = self.execute("Page.navigate", {"url": url})
            if error_text := result.get("errorText"):
                raise RuntimeError(f"Navigation to {url} failed: {error_text}")

            if not self.loaded.wait(timeout=timeout or self.timeout):
                logger.warning(f"Load event for {url} not seen after {timeout or self.timeout}s, keeping partial events")
        finally:
            self.stop_recording()

        return document

    def _on_open(self, ws):
        """WebSocket opened."""
        logger.info("WebSocket connected")
        self.connected.set()

    def _on_message(self, ws, message):
        """Handle CDP message - resolve futures, record events."""
        try:
            data = json.loads(message)
        except json.JSONDecodeError as e:
            logger.error(f"Error decoding message: {e}")
            return

        if not isinstance(data, dict):
            logger.warning(f"Ignoring non-object message: {data!r}")
            return

        # Command response - resolve future
        if "id" in data:
            with self._lock:
                future = self._pending.pop(data["id"], None)

            if future:
                if "error" in data:
                    future.set_exception(RuntimeError(data["error"]))
                else:
                    future.set_result(data.get("result", {}))

        elif is_event(data):
            try:
                event = parse_event(data)
            except MalformedEvent as e:
                logger.warning(f"Dropping event: {e}")
                return

            with self._lock:
                if self.document is None:
                    return
                self.document.add_event(event)

            if isinstance(event, LoadEventFired):
                self.loaded.set()

    def _on_error(self, ws, error):
        """WebSocket error."""
        logger.error(f"WebSocket error: {error}")

    def _on_close(self, ws, code, reason):
        """WebSocket closed."""
        logger.info(f"WebSocket closed: {code} {reason}")
        self.connected.clear()

        # Fail pending commands
        with self._lock:
            for future in self._pending.values():
                future.set_exception(RuntimeError("Connection closed"))
            self._pending.clear()
