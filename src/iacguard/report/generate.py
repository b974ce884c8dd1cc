# SPDX-License-Identifier: MIT
"""
Report dispatch: one exporter per named format.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Dict, List, Sequence

from iacguard.core.exceptions import ReportFormatError
from iacguard.core.summary import Summary

from .csv_report import export_csv_report
from .json_report import export_json_report
from .sarif import export_sarif_report

logger = logging.getLogger(__name__)

DEFAULT_FORMATS = ["json"]

ReportExporter = Callable[[str, str, Summary], Path]

REPORTERS: Dict[str, ReportExporter] = {
    "json": export_json_report,
    "sarif": export_sarif_report,
    "csv": export_csv_report,
}


def resolve_formats(formats: Sequence[str]) -> List[str]:
    """Normalise requested formats; "all" expands to every exporter."""
    if not formats:
        return list(DEFAULT_FORMATS)

    names = [fmt.strip().lower() for fmt in formats]
    for fmt, name in zip(formats, names):
        if name != "all" and name not in REPORTERS:
            raise ReportFormatError(
                f"Report format not supported: {fmt} (available: {', '.join(REPORTERS)})"
            )

    if "all" in names:
        return list(REPORTERS)
    return list(dict.fromkeys(names))


def generate_report(
    output_path: str,
    filename: str,
    summary: Summary,
    formats: Sequence[str],
) -> List[Path]:
    """
    Write the summary in every requested format.

    Args:
        output_path: Directory receiving the reports (created when missing)
        filename: Base file name without extension
        summary: Finished scan summary
        formats: Format names; defaults to json when empty

    Returns:
        Paths of the written reports

    Raises:
        ReportFormatError: If a format is not supported
        OSError: If a report cannot be written
    """
    names = resolve_formats(formats)
    logger.debug("Output formats provided [%s]", ",".join(names))

    Path(output_path).mkdir(parents=True, exist_ok=True)

    written = []
    for name in names:
        written.append(REPORTERS[name](output_path, filename, summary))
        logger.debug("Generated %s report", name)
    return written
