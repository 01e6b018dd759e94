"""Exception types for pagetap.

Construction of events is the only place input is validated. Metric queries
either return a value, return None, or raise UndefinedReference for a
milestone that has nothing to be measured against.

PUBLIC API:
  - PageTapError: Base class for all pagetap errors
  - MalformedEvent: Event payload missing a required field
  - UndefinedReference: Milestone present but navigation start missing
"""


class PageTapError(Exception):
    """Base class for pagetap errors."""


class MalformedEvent(PageTapError, ValueError):
    """A CDP event payload is missing a field its variant requires."""

    def __init__(self, method: str, field: str | None = None, reason: str | None = None):
        self.method = method
        self.field = field
        super().__init__(f"{method}: {reason or f'missing required field {field!r}'}")


class UndefinedReference(PageTapError, LookupError):
    """A milestone event exists but no request for the document URL was seen."""

    def __init__(self, milestone: str, url: str):
        self.milestone = milestone
        self.url = url
        super().__init__(f"{milestone} fired but no request for {url} was recorded")


__all__ = ["PageTapError", "MalformedEvent", "UndefinedReference"]
