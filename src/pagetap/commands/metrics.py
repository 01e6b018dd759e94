"""Metric display commands for the recorded page load.

PUBLIC API:
  - metrics: Timing milestones relative to navigation start
  - resources: Requests and bytes per resource type
  - summary: All metrics as JSON
"""

import json

from replkit2.textkit import markdown

from pagetap.app import app
from pagetap.commands._errors import check_document
from pagetap.commands._utils import build_info_response, build_table_response
from pagetap.report import document_metrics, format_seconds, format_size


@app.command(display="markdown")
def metrics(state) -> dict:
    """Show page-load milestones for the last recorded load.

    Offsets are seconds after the navigation request for the loaded URL.
    """
    if error := check_document(state):
        return error

    result = document_metrics(state.document, resource_types=())
    return build_info_response(
        title="Timing",
        fields={
            "URL": result["url"],
            "Start": result["start_time"],
            "DOMContentLoaded": format_seconds(result["dom_content_event"]),
            "Load": format_seconds(result["onload_event"]),
        },
        warnings=result["warnings"],
    )


@app.command(display="markdown")
def resources(state, raw: bool = False) -> dict:
    """Show request counts and bytes per resource type.

    Args:
        raw: Show byte counts as integers instead of 1.2K style (default: False)

    Returns:
        Table of resource types in markdown
    """
    if error := check_document(state):
        return error

    document = state.document
    size = str if raw else format_size

    rows = [
        {
            "Type": resource_type,
            "Requests": str(document.request_count_by_resource(resource_type)),
            "Bytes": size(document.bytes(resource_type)),
            "Transferred": size(document.encoded_bytes(resource_type)),
        }
        for resource_type in state.config.resource_types
    ]

    return build_table_response(
        title="Resources",
        headers=["Type", "Requests", "Bytes", "Transferred"],
        rows=rows,
        summary=f"{document.request_count()} requests, {size(document.total_encoded_bytes())} transferred",
    )


@app.command(display="markdown")
def summary(state) -> dict:
    """All metrics for the last recorded load as JSON."""
    if error := check_document(state):
        return error

    result = document_metrics(state.document, state.config.resource_types)
    return markdown().heading("Summary", level=2).raw(f"```json\n{json.dumps(result, indent=2)}\n```").build()
