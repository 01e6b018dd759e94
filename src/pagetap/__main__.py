"""Entry point for pagetap.

Runs the REPL on an interactive terminal and the MCP server otherwise.
"""

import atexit
import logging
import os
import sys

from pagetap.app import app

logging.basicConfig(
    level=os.environ.get("PAGETAP_LOG_LEVEL", "WARNING").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)

atexit.register(lambda: app.state.cleanup() if hasattr(app, "state") and app.state else None)


def main():
    """Run pagetap as REPL or MCP server.

    - With --mcp, or when stdin is not a TTY: Runs as MCP server
    - Otherwise: Runs as interactive REPL
    """
    if "--mcp" in sys.argv or not sys.stdin.isatty():
        app.mcp.run()
    else:
        app.run(title="pagetap - Page Load Metrics")


if __name__ == "__main__":
    main()
