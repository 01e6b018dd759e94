"""Decode raw CDP messages into typed events.

PUBLIC API:
  - parse_event: CDP event message (dict or JSON text) -> Event
  - is_event: Whether a decoded message is an event rather than a command response
"""

import json
import logging
from typing import Any

from pagetap.errors import MalformedEvent
from pagetap.events import EVENT_TYPES, Event, Notification

logger = logging.getLogger(__name__)


def is_event(message: dict) -> bool:
    """Events carry a method, command responses carry an id instead."""
    return "method" in message and "id" not in message


def parse_event(message: dict[str, Any] | str | bytes) -> Event:
    """Build the Event for one CDP message.

    Args:
        message: Decoded message dict, or the raw websocket text.

    Returns:
        The matching variant, or a Notification for methods the metrics ignore.

    Raises:
        MalformedEvent: Invalid JSON, not an event, or a required field is missing.
    """
    if isinstance(message, (str, bytes)):
        try:
            message = json.loads(message)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise MalformedEvent("<message>", reason=f"invalid JSON: {e}") from e

    if not isinstance(message, dict) or not message.get("method"):
        raise MalformedEvent("<message>", reason="not a CDP event (no method)")

    method = message["method"]
    params = message.get("params") or {}

    variant = EVENT_TYPES.get(method)
    if variant is None:
        logger.debug(f"Keeping {method} as notification")
        return Notification.from_params(params, method=method)

    return variant.from_params(params)  # type: ignore[attr-defined]


__all__ = ["parse_event", "is_event"]
