"""ASCII severity symbols for pagetap alerts.

PUBLIC API:
  - sym: Get ASCII symbol by name with fallback
"""

# Internal symbol registry
_SYMBOLS = {
    "error": "[ERROR]",
    "warning": "[WARN]",
}


def sym(name: str) -> str:
    """Get ASCII symbol by name with fallback to dash."""
    return _SYMBOLS.get(name, "-")
