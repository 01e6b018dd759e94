"""Main application for pagetap.

Provides REPL and MCP access to page-load metrics recorded over the Chrome
DevTools Protocol. Built on the ReplKit2 framework.
"""

from dataclasses import dataclass, field

from replkit2 import App

from pagetap.cdp import CDPSession
from pagetap.config import PageTapConfig, load_config
from pagetap.document import Document


@dataclass
class PageTapState:
    """Application state for pagetap.

    Attributes:
        config: Resolved pagetap.toml settings.
        cdp: Chrome DevTools Protocol session, built from config.
        document: Most recently recorded page load, None until load() runs.
    """

    config: PageTapConfig = field(default_factory=load_config)
    cdp: CDPSession | None = None
    document: Document | None = None

    def __post_init__(self):
        if self.cdp is None:
            self.cdp = CDPSession(host=self.config.host, port=self.config.port, timeout=self.config.timeout)

    def cleanup(self) -> None:
        if self.cdp and self.cdp.is_connected:
            self.cdp.disconnect()


# Must be created before command imports for decorator registration
app = App(
    "pagetap",
    PageTapState,
    uri_scheme="pagetap",
    fastmcp={
        "description": "Page-load metrics from Chrome DevTools Protocol events",
        "tags": {"browser", "performance", "chrome", "cdp"},
    },
)


# Command imports trigger @app.command decorator registration
from pagetap.commands import connection  # noqa: E402, F401
from pagetap.commands import metrics  # noqa: E402, F401


# Entry point is in __main__.py:main() as specified in pyproject.toml
