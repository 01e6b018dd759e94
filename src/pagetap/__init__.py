"""pagetap - page-load metrics from Chrome DevTools Protocol events.

Records the CDP events emitted while a page loads and derives timing
milestones and per-resource-type byte and request totals from them.

PUBLIC API:
  - Document: Event accumulator with metric queries
  - parse_event: Decode one CDP message into a typed event
  - document_metrics: All metrics for a Document as a dict
  - MalformedEvent, UndefinedReference: Error types
  - __version__: Package version string
"""

from importlib.metadata import version

from pagetap.decode import parse_event
from pagetap.document import Document
from pagetap.errors import MalformedEvent, PageTapError, UndefinedReference
from pagetap.report import document_metrics

__version__ = version("pagetap")

__all__ = [
    "Document",
    "parse_event",
    "document_metrics",
    "PageTapError",
    "MalformedEvent",
    "UndefinedReference",
    "__version__",
]
