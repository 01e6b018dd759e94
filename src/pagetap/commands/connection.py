"""Chrome page discovery and page-load recording commands.

PUBLIC API:
  - pages: List available Chrome pages
  - load: Navigate a page and record its load
"""

import logging

from pagetap.app import app
from pagetap.commands._errors import error_response
from pagetap.commands._utils import build_info_response, build_table_response
from pagetap.report import document_metrics, format_seconds

logger = logging.getLogger(__name__)


@app.command(display="markdown")
def pages(state) -> dict:
    """List Chrome pages available for recording.

    Returns:
        Table of pages in markdown
    """
    available = state.cdp.list_pages()
    if not available:
        return error_response("no_pages")

    rows = [
        {"Index": str(i), "Title": page.get("title", ""), "URL": page.get("url", "")}
        for i, page in enumerate(available)
    ]
    return build_table_response(
        title="Chrome Pages", headers=["Index", "Title", "URL"], rows=rows, summary=f"{len(rows)} pages"
    )


@app.command(display="markdown")
def load(state, url: str, page: int = 0, timeout: float | None = None) -> dict:
    """Navigate to a URL and record events until the page's load event.

    Args:
        url: Page URL, matched exactly against the navigation request
        page: Page index from pages() (default: 0)
        timeout: Seconds to wait for the load event (default: from config)

    Examples:
        load("https://example.com/")
        load("https://example.com/", page=1, timeout=60)

    Returns:
        Load summary in markdown
    """
    try:
        state.cdp.use_page(page)
        state.document = state.cdp.load(url, timeout=timeout)
    except (RuntimeError, IndexError, TimeoutError) as e:
        logger.error(f"Load of {url} failed: {e}")
        return error_response("load_failed", custom_message=str(e), url=url)

    result = document_metrics(state.document, state.config.resource_types)
    return build_info_response(
        title="Page Loaded",
        fields={
            "URL": result["url"],
            "Events": len(state.document.events),
            "Requests": result["request_count"],
            "DOMContentLoaded": format_seconds(result["dom_content_event"]),
            "Load": format_seconds(result["onload_event"]),
        },
        warnings=result["warnings"],
    )
