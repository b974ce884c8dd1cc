from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from iacguard import __version__
from iacguard.core.summary import Summary

INFORMATION_URI = "https://github.com/iacguard/iacguard"

_LEVELS = {
    "CRITICAL": "error",
    "HIGH": "error",
    "MEDIUM": "warning",
    "LOW": "note",
    "INFO": "none",
    "TRACE": "none",
}


def build_sarif(summary: Summary) -> Dict[str, Any]:
    # One rule per query, one result per vulnerable file
    rules = []
    results = []
    for ridx, query in enumerate(summary.queries):
        level = _LEVELS.get(query.severity, "warning")
        rules.append(
            {
                "id": query.query_id,
                "name": query.query_name,
                "shortDescription": {"text": query.query_name},
                "fullDescription": {"text": query.description or query.query_name},
                "defaultConfiguration": {"level": level},
                "helpUri": query.query_url or INFORMATION_URI,
                "properties": {
                    "category": query.category,
                    "platform": query.platform,
                    "severity": query.severity,
                },
            }
        )

        for f in query.files:
            results.append(
                {
                    "ruleId": query.query_id,
                    "ruleIndex": ridx,
                    "level": level,
                    "message": {"text": f.key_actual_value or query.query_name},
                    "locations": [
                        {
                            "physicalLocation": {
                                "artifactLocation": {"uri": f.file_name},
                                "region": {"startLine": max(1, f.line)},
                            }
                        }
                    ],
                    "partialFingerprints": {"similarityID": f.similarity_id},
                }
            )

    return {
        "version": "2.1.0",
        "$schema": "https://json.schemastore.org/sarif-2.1.0.json",
        "runs": [
            {
                "automationDetails": {"id": summary.severity_summary.scan_id},
                "tool": {
                    "driver": {
                        "name": "iacguard",
                        "version": summary.version or __version__,
                        "informationUri": INFORMATION_URI,
                        "rules": rules,
                    }
                },
                "results": results,
            }
        ],
    }


def export_sarif_report(path: str, filename: str, summary: Summary) -> Path:
    target = Path(path) / f"{filename}.sarif"
    target.write_text(json.dumps(build_sarif(summary), indent=2), encoding="utf-8")
    return target
