from __future__ import annotations

import csv
from pathlib import Path

from iacguard.core.summary import Summary

CSV_COLUMNS = [
    "query_name",
    "query_id",
    "severity",
    "platform",
    "category",
    "file_name",
    "line",
    "resource_type",
    "resource_name",
    "issue_type",
    "search_key",
    "expected_value",
    "actual_value",
    "similarity_id",
]


def export_csv_report(path: str, filename: str, summary: Summary) -> Path:
    target = Path(path) / f"{filename}.csv"
    with open(target, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=CSV_COLUMNS)
        writer.writeheader()
        for query in summary.queries:
            for vf in query.files:
                writer.writerow(
                    {
                        "query_name": query.query_name,
                        "query_id": query.query_id,
                        "severity": query.severity,
                        "platform": query.platform,
                        "category": query.category,
                        "file_name": vf.file_name,
                        "line": vf.line,
                        "resource_type": vf.resource_type,
                        "resource_name": vf.resource_name,
                        "issue_type": vf.issue_type,
                        "search_key": vf.search_key,
                        "expected_value": vf.key_expected_value,
                        "actual_value": vf.key_actual_value,
                        "similarity_id": vf.similarity_id,
                    }
                )
    return target
