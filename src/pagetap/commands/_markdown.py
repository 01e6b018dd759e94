"""Markdown elements for pagetap command output.

Registers the `table` and `alert` element types used by the response builders.
"""

from replkit2.textkit import MarkdownElement

from pagetap.commands._symbols import sym


class Table(MarkdownElement):
    """Markdown table with columns padded to their widest value.

    Attributes:
        headers: Column header names, also the row dict keys.
        rows: One dict per row.
        align: Column alignment (left, right).
    """

    element_type = "table"

    def __init__(self, headers: list[str], rows: list[dict], align: str = "left"):
        self.headers = headers
        self.rows = rows
        self.align = align

    @classmethod
    def from_dict(cls, data: dict) -> "Table":
        return cls(headers=data.get("headers", []), rows=data.get("rows", []), align=data.get("align", "left"))

    def _pad(self, value: str, width: int) -> str:
        return value.rjust(width) if self.align == "right" else value.ljust(width)

    def render(self) -> str:
        if not self.headers:
            return ""

        widths = [max([len(h)] + [len(str(row.get(h, ""))) for row in self.rows]) for h in self.headers]

        lines = ["| " + " | ".join(self._pad(h, w) for h, w in zip(self.headers, widths)) + " |"]
        if self.align == "right":
            lines.append("|" + "|".join("-" * (w + 1) + ":" for w in widths) + "|")
        else:
            lines.append("|" + "|".join(":" + "-" * (w + 1) for w in widths) + "|")

        for row in self.rows:
            cells = (self._pad(str(row.get(h, "")), w) for h, w in zip(self.headers, widths))
            lines.append("| " + " | ".join(cells) + " |")

        return "\n".join(lines)


class Alert(MarkdownElement):
    """One-line alert prefixed with a severity symbol."""

    element_type = "alert"

    def __init__(self, message: str, level: str = "warning"):
        self.message = message
        self.level = level

    @classmethod
    def from_dict(cls, data: dict) -> "Alert":
        return cls(message=data.get("message", ""), level=data.get("level", "warning"))

    def render(self) -> str:
        return f"{sym(self.level)} **{self.message}**"
