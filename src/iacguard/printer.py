# SPDX-License-Identifier: MIT
"""
Human-readable console output for a finished scan.

Evidence lines are printed as they appear in the summary, which means
secrets are already masked by the time anything reaches the terminal.
"""
from __future__ import annotations

import sys
from datetime import timedelta
from typing import Any, Dict, Optional, TextIO

from iacguard.core.findings import SEVERITIES
from iacguard.core.summary import Summary


class Printer:
    """Console writer with optional minimal (no evidence) mode."""

    def __init__(self, stream: Optional[TextIO] = None, minimal: bool = False):
        self.stream = stream or sys.stdout
        self.minimal = minimal

    def write(self, text: str = "") -> None:
        print(text, file=self.stream)


def print_result(summary: Summary, failed_queries: Dict[str, Any], printer: Printer) -> None:
    """Print failed queries, findings grouped by query, and the totals."""
    if failed_queries:
        printer.write("Errors in queries:")
        for query_id, error in failed_queries.items():
            printer.write(f"  - {query_id}: {error}")
        printer.write()

    for query in summary.queries:
        printer.write(
            f"{query.query_name}, Severity: {query.severity}, Results: {len(query.files)}"
        )
        if query.description:
            printer.write(f"Description: {query.description}")
        if query.platform:
            printer.write(f"Platform: {query.platform}")

        for vf in query.files:
            printer.write(f"\n    [{vf.file_name}:{vf.line}]")
            if printer.minimal:
                continue
            for code_line in vf.vuln_lines:
                printer.write(f"    {code_line.position:03d}: {code_line.line}")
        printer.write()

    counters = summary.counters
    printer.write("Results Summary:")
    printer.write("=" * 50)
    printer.write(f"Files scanned: {counters.scanned_files}")
    printer.write(f"Parsed files: {counters.parsed_files}")
    printer.write(f"Queries loaded: {counters.total_queries}")
    printer.write(f"Queries failed to execute: {counters.failed_to_execute_queries}")
    printer.write()

    counters_by_severity = summary.severity_summary.severity_counters
    for severity in SEVERITIES:
        printer.write(f"{severity}: {counters_by_severity.get(severity, 0)}")
    printer.write(f"TOTAL: {summary.severity_summary.total_counter}")


def format_duration(elapsed: timedelta) -> str:
    total = int(elapsed.total_seconds())
    minutes, seconds = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}h{minutes:02d}m{seconds:02d}s"


def print_scan_duration(elapsed: timedelta, printer: Printer) -> None:
    printer.write(f"\nScan duration: {format_duration(elapsed)}")
