# SPDX-License-Identifier: MIT
"""
JSON exporters: the summary report and the raw scanned-documents payload.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Sequence

from iacguard.core.findings import ScannedDocument, combine_documents


def export_json_report(path: str, filename: str, body: Any) -> Path:
    """
    Write ``body`` as indented JSON to ``<path>/<filename>``.

    A ``.json`` suffix is appended to ``filename`` when missing. Summaries
    and other objects exposing ``to_dict`` are converted first.
    """
    if not filename.endswith(".json"):
        filename += ".json"

    if hasattr(body, "to_dict"):
        body = body.to_dict()

    target = Path(path) / filename
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps(body, indent=2, default=str), encoding="utf-8")
    return target


def export_documents(
    path: str,
    filename: str,
    documents: Sequence[ScannedDocument],
    line_info: bool = False,
) -> Path:
    """Write the scanned documents payload, with line info when requested."""
    return export_json_report(path, filename, combine_documents(documents, line_info))
