"""pagetap command modules.

Command functions are registered with the app via @app.command when their
modules are imported.
"""

from pagetap.commands import connection, metrics

__all__ = ["connection", "metrics"]
