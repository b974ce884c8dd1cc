"""Report exporters."""

from .generate import REPORTERS, generate_report, resolve_formats
from .json_report import export_documents, export_json_report

__all__ = [
    "REPORTERS",
    "export_documents",
    "export_json_report",
    "generate_report",
    "resolve_formats",
]
