# SPDX-License-Identifier: MIT
"""
Anonymous usage telemetry.

Only aggregate numbers are sent: no paths, no resource names and no
evidence lines.
"""
from __future__ import annotations

import json
import urllib.request
from typing import Any, Dict

from iacguard.core.summary import Summary


def build_telemetry_payload(summary: Summary) -> Dict[str, Any]:
    counters = summary.counters
    return {
        "event": "scan.finished",
        "version": summary.version,
        "scan_id": summary.severity_summary.scan_id,
        "files_scanned": counters.scanned_files,
        "files_parsed": counters.parsed_files,
        "queries_total": counters.total_queries,
        "queries_failed": counters.failed_to_execute_queries,
        "severity_counters": dict(summary.severity_summary.severity_counters),
        "total": summary.severity_summary.total_counter,
    }


def telemetry_request(summary: Summary, url: str, timeout: float = 5.0) -> int:
    """
    POST the anonymised summary record.

    Returns:
        HTTP status code

    Raises:
        urllib.error.URLError, OSError: On any network failure
    """
    data = json.dumps(build_telemetry_payload(summary)).encode("utf-8")
    req = urllib.request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json"},
        method="POST",
    )

    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return resp.getcode()
