"""Console and JSON rendering for QueryTorque Joins."""

from .report_renderer import (
    STATUS_COLORS,
    render_catalog,
    render_fixture,
    render_report,
    report_json,
)

__all__ = [
    "render_report",
    "render_catalog",
    "render_fixture",
    "report_json",
    "STATUS_COLORS",
]
