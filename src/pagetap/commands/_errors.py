"""Unified error handling for pagetap commands.

PUBLIC API:
  - check_document: Validate that a page load has been recorded
  - error_response: Build formatted error responses
"""

from typing import Optional

from replkit2.textkit import markdown

# Registers the alert element with replkit2
from pagetap.commands import _markdown  # noqa: F401

# Standard error message templates
_ERRORS = {
    "no_document": {
        "message": "No page load recorded",
        "details": "Use `load(url)` to record a page load first",
        "help": [
            "Run `pages()` to see available tabs",
            "Use `load('https://example.com/')` to load in the first tab",
        ],
    },
    "load_failed": {
        "message": "Page load failed",
        "details": "Check that Chrome is running with --remote-debugging-port and the URL is reachable",
    },
    "no_pages": {
        "message": "No Chrome pages available",
        "details": "Start Chrome with --remote-debugging-port",
    },
}


def check_document(state) -> Optional[dict]:
    """Return an error response if nothing has been loaded yet, else None."""
    if state.document is None:
        return error_response("no_document")
    return None


def error_response(error_key: str, custom_message: str | None = None, **kwargs) -> dict:
    """Build consistent error response in markdown.

    Args:
        error_key: Key from error templates or custom identifier.
        custom_message: Override default message. Defaults to None.
        **kwargs: Additional context to add to error response.

    Returns:
        Markdown dict with error formatting.
    """
    error_info = _ERRORS.get(error_key, {})
    message = custom_message or error_info.get("message", "Error occurred")

    builder = markdown().element("alert", message=message, level="error")

    if details := error_info.get("details"):
        builder.text(details)

    if help_items := error_info.get("help"):
        builder.text("**How to fix:**")
        builder.list(help_items)

    for key, value in kwargs.items():
        if value:
            builder.text(f"_{key}: {value}_")

    return builder.build()
