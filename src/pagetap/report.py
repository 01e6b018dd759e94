"""Turn a Document into reportable metrics.

PUBLIC API:
  - document_metrics: Plain dict of timings and per-type resource totals
  - format_size: Human-readable byte count
  - format_seconds: Milestone offset for display
"""

import logging
from typing import Any, Iterable

from pagetap.document import Document
from pagetap.errors import UndefinedReference
from pagetap.events import RESOURCE_TYPE_ORDER

logger = logging.getLogger(__name__)


def _timing(query, warnings: list[str]) -> float | None:
    try:
        return query()
    except UndefinedReference as e:
        logger.warning(str(e))
        warnings.append(str(e))
        return None


def document_metrics(document: Document, resource_types: Iterable[str] = RESOURCE_TYPE_ORDER) -> dict[str, Any]:
    """Collect every metric for `document` into a JSON-friendly dict.

    A milestone that cannot be measured because navigation start is missing
    is reported as None with an entry in "warnings".

    Args:
        document: Recorded page load.
        resource_types: Types to break down, in output order.

    Returns:
        Dict with url, start_time, onload_event, dom_content_event,
        request_count, resources and warnings.
    """
    warnings: list[str] = []

    return {
        "url": document.url,
        "start_time": document.start_time(),
        "onload_event": _timing(document.onload_event, warnings),
        "dom_content_event": _timing(document.dom_content_event, warnings),
        "request_count": document.request_count(),
        "resources": {
            resource_type: {
                "requests": document.request_count_by_resource(resource_type),
                "bytes": document.bytes(resource_type),
                "encoded_bytes": document.encoded_bytes(resource_type),
            }
            for resource_type in resource_types
        },
        "warnings": warnings,
    }


def format_size(size_bytes: int | None) -> str:
    """Format byte size as human-readable string.

    Returns:
        Formatted size string (e.g., "512B", "1.2K", "3.4M", "5.6G").
    """
    if size_bytes is None:
        return "-"

    if size_bytes < 1024:
        return f"{size_bytes}B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f}K"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f}M"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f}G"


def format_seconds(seconds: float | None) -> str:
    if seconds is None:
        return "-"
    return f"{seconds:.3f}s"


__all__ = ["document_metrics", "format_size", "format_seconds"]
