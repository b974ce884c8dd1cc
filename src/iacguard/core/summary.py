# SPDX-License-Identifier: MIT
"""
Scan summary data structures.

The Summary is built once per scan from the tracker counters and the
already-masked findings. Building it performs no I/O and never mutates
its inputs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from .findings import SEVERITIES, CodeLine, Vulnerability


@dataclass(frozen=True)
class Counters:
    """Scan statistics captured from the tracker."""

    scanned_files: int = 0
    scanned_files_lines: int = 0
    parsed_files: int = 0
    parsed_files_lines: int = 0
    total_queries: int = 0
    failed_to_execute_queries: int = 0
    failed_similarity_id: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "filesScanned": self.scanned_files,
            "linesScanned": self.scanned_files_lines,
            "filesParsed": self.parsed_files,
            "linesParsed": self.parsed_files_lines,
            "queriesTotal": self.total_queries,
            "queriesFailedToExecute": self.failed_to_execute_queries,
            "failedSimilarityId": self.failed_similarity_id,
        }


@dataclass(frozen=True)
class Times:
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
        }


@dataclass(frozen=True)
class VulnerableFile:
    """One occurrence of a query result in a file."""

    file_name: str
    line: int
    similarity_id: str
    resource_type: str
    resource_name: str
    issue_type: str
    search_key: str
    search_line: int
    search_value: str
    key_expected_value: str
    key_actual_value: str
    vuln_lines: Tuple[CodeLine, ...] = ()
    remediation: str = ""
    remediation_type: str = ""

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "fileName": self.file_name,
            "similarityID": self.similarity_id,
            "line": self.line,
            "resourceType": self.resource_type,
            "resourceName": self.resource_name,
            "issueType": self.issue_type,
            "searchKey": self.search_key,
            "searchLine": self.search_line,
            "searchValue": self.search_value,
            "expectedValue": self.key_expected_value,
            "actualValue": self.key_actual_value,
        }
        if self.remediation:
            result["remediation"] = self.remediation
            result["remediationType"] = self.remediation_type
        return result


@dataclass(frozen=True)
class QueryResult:
    """All findings of a single query."""

    query_name: str
    query_id: str
    query_url: str
    severity: str
    platform: str
    category: str
    description: str
    files: Tuple[VulnerableFile, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "queryName": self.query_name,
            "queryID": self.query_id,
            "queryURL": self.query_url,
            "severity": self.severity,
            "platform": self.platform,
            "category": self.category,
            "description": self.description,
            "files": [f.to_dict() for f in self.files],
        }


@dataclass(frozen=True)
class SeveritySummary:
    scan_id: str
    severity_counters: Mapping[str, int]
    total_counter: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "scanId": self.scan_id,
            "severityCounters": dict(self.severity_counters),
            "totalCounter": self.total_counter,
        }


@dataclass(frozen=True)
class Summary:
    """Final aggregated result of one scan."""

    counters: Counters
    results: Tuple[Vulnerability, ...]
    queries: Tuple[QueryResult, ...]
    severity_summary: SeveritySummary
    version: str = ""
    scanned_paths: Tuple[str, ...] = ()
    times: Times = field(default_factory=Times)

    def to_dict(self) -> Dict[str, Any]:
        """Convert Summary to its report dictionary."""
        result = {"version": self.version}
        result.update(self.counters.to_dict())
        result.update(self.severity_summary.to_dict())
        result.update(
            {
                "scannedPaths": list(self.scanned_paths),
                "queries": [q.to_dict() for q in self.queries],
            }
        )
        result.update(self.times.to_dict())
        return result


def resolve_path(file_name: str, path_extraction_map: Dict[str, str]) -> str:
    """Map a file inside a temporary extraction folder back to its origin."""
    for extracted_root, original in path_extraction_map.items():
        if extracted_root and file_name.startswith(extracted_root):
            return original + file_name[len(extracted_root):]
    return file_name


def _severity_rank(severity: str) -> int:
    try:
        return SEVERITIES.index(severity)
    except ValueError:
        return len(SEVERITIES)


def create_summary(
    counters: Counters,
    results: Sequence[Vulnerability],
    scan_id: str,
    path_extraction_map: Dict[str, str],
    version: str,
    scanned_paths: Sequence[str] = (),
    times: Times = None,
) -> Summary:
    """
    Aggregate findings into a Summary.

    Args:
        counters: Tracker snapshot, copied verbatim
        results: Masked findings, kept in input order
        scan_id: Identifier of this scan
        path_extraction_map: Temporary extraction root -> original path
        version: Engine version tag
        scanned_paths: Paths the user asked to scan
        times: Start/end pair

    Returns:
        Immutable Summary
    """
    severity_counters = {severity: 0 for severity in SEVERITIES}
    grouped: Dict[str, Dict[str, Any]] = {}

    for vuln in results:
        severity_counters[vuln.severity] = severity_counters.get(vuln.severity, 0) + 1

        entry = grouped.setdefault(vuln.query_id, {"first": vuln, "files": []})
        entry["files"].append(
            VulnerableFile(
                file_name=resolve_path(vuln.file_name, path_extraction_map),
                line=vuln.line,
                similarity_id=vuln.similarity_id,
                resource_type=vuln.resource_type,
                resource_name=vuln.resource_name,
                issue_type=vuln.issue_type,
                search_key=vuln.search_key,
                search_line=vuln.search_line,
                search_value=vuln.search_value,
                key_expected_value=vuln.key_expected_value,
                key_actual_value=vuln.key_actual_value,
                vuln_lines=vuln.vuln_lines,
                remediation=vuln.remediation,
                remediation_type=vuln.remediation_type,
            )
        )

    queries: List[QueryResult] = []
    for entry in grouped.values():
        first = entry["first"]
        queries.append(
            QueryResult(
                query_name=first.query_name,
                query_id=first.query_id,
                query_url=first.query_url,
                severity=first.severity,
                platform=first.platform,
                category=first.category,
                description=first.description,
                files=tuple(entry["files"]),
            )
        )

    queries.sort(key=lambda q: (_severity_rank(q.severity), q.query_name))

    return Summary(
        counters=counters,
        results=tuple(results),
        queries=tuple(queries),
        severity_summary=SeveritySummary(
            scan_id=scan_id,
            severity_counters=MappingProxyType(severity_counters),
            total_counter=len(results),
        ),
        version=version,
        scanned_paths=tuple(scanned_paths),
        times=times or Times(),
    )
