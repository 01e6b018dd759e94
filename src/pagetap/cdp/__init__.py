"""Chrome DevTools Protocol client that records page loads.

PUBLIC API:
  - CDPSession: Page-level WebSocket client feeding a Document
"""

from pagetap.cdp.session import CDPSession

__all__ = ["CDPSession"]
