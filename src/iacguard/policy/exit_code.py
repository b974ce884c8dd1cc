# SPDX-License-Identifier: MIT
"""
Exit status policy.

The exit status is derived from the most severe finding whose severity is
configured to fail the scan.
"""
from __future__ import annotations

from typing import Dict, Iterable, Optional

from iacguard.core.findings import SEVERITIES
from iacguard.core.summary import Summary

FAIL_FLAGS: Dict[str, int] = {
    "critical": 60,
    "high": 50,
    "medium": 40,
    "low": 30,
    "info": 20,
}

IGNORE_ON_EXIT_OPTIONS = ("none", "all", "results", "errors")


def results_exit_code(summary: Summary, fail_on: Optional[Iterable[str]] = None) -> int:
    """
    Compute the exit code for a summary.

    Args:
        summary: Finished scan summary
        fail_on: Severities that fail the scan (case-insensitive); all
            severities with a fail flag when None

    Returns:
        Fail flag of the most severe failing severity, 0 if none
    """
    enabled = {s.lower() for s in fail_on} if fail_on is not None else set(FAIL_FLAGS)
    counters = summary.severity_summary.severity_counters

    for severity in SEVERITIES:
        key = severity.lower()
        if key not in enabled or key not in FAIL_FLAGS:
            continue
        if counters.get(severity, 0) > 0:
            return FAIL_FLAGS[key]

    return 0


def show_error(kind: str, ignore_on_exit: str = "none") -> bool:
    """
    Whether errors of ``kind`` ("results" or "errors") should reach the exit code.

    Raises:
        ValueError: If ``ignore_on_exit`` is not a known option
    """
    option = (ignore_on_exit or "none").lower()
    if option not in IGNORE_ON_EXIT_OPTIONS:
        raise ValueError(f"Unknown ignore-on-exit option: {ignore_on_exit}")

    if option == "none":
        return True
    return option != "all" and option != kind.lower()
