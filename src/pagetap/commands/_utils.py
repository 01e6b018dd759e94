"""Shared response builders for pagetap command modules.

PUBLIC API:
  - build_table_response: Build consistent table responses in markdown
  - build_info_response: Build info display responses in markdown
"""

from replkit2.textkit import markdown

# Registers the table and alert elements with replkit2
from pagetap.commands import _markdown  # noqa: F401


def build_table_response(
    title: str, headers: list[str], rows: list[dict], summary: str | None = None, warnings: list[str] | None = None
) -> dict:
    """Build consistent table response in markdown format.

    Args:
        title: Table title.
        headers: Column headers.
        rows: Data rows as dicts.
        summary: Optional summary text.
        warnings: Optional warning messages.

    Returns:
        Markdown dict with formatted table.
    """
    builder = markdown().heading(title, level=2)

    if warnings:
        for warning in warnings:
            builder.element("alert", message=warning, level="warning")

    if rows:
        builder.element("table", headers=headers, rows=rows)
    else:
        builder.text("_No data available_")

    if summary:
        builder.text(f"_{summary}_")

    return builder.build()


def build_info_response(title: str, fields: dict, warnings: list[str] | None = None) -> dict:
    """Build info display response in markdown format.

    Args:
        title: Info display title.
        fields: Dict of field names to values. None values are skipped.
        warnings: Optional warning messages.

    Returns:
        Markdown dict with formatted info display.
    """
    builder = markdown().heading(title, level=2)

    for warning in warnings or []:
        builder.element("alert", message=warning, level="warning")

    for key, value in fields.items():
        if value is not None:
            builder.text(f"**{key}:** {value}")

    return builder.build()
