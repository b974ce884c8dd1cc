"""Finding data structures for iacguard."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, Sequence, Tuple


# Most severe first
SEVERITIES: Tuple[str, ...] = ("CRITICAL", "HIGH", "MEDIUM", "LOW", "INFO", "TRACE")


@dataclass(frozen=True)
class CodeLine:
    """A single line of evidence attached to a finding."""

    position: int  # 1-based line number in the scanned file
    line: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CodeLine":
        return cls(position=int(data.get("position", 0)), line=str(data.get("line", "")))

    def to_dict(self) -> Dict[str, Any]:
        return {"position": self.position, "line": self.line}


@dataclass(frozen=True)
class Vulnerability:
    """One issue emitted by the upstream rule evaluation.

    Only ``vuln_lines`` is ever rewritten by this package (through
    :func:`dataclasses.replace`); the identity fields ``document_id``,
    ``resource_type``, ``resource_name`` and ``search_key`` are carried
    through untouched.
    """

    query_id: str
    query_name: str
    severity: str
    file_name: str
    document_id: str = ""
    resource_type: str = ""
    resource_name: str = ""
    search_key: str = ""
    query_url: str = ""
    platform: str = ""
    category: str = ""
    description: str = ""
    line: int = 0
    issue_type: str = ""
    search_line: int = 0
    search_value: str = ""
    key_expected_value: str = ""
    key_actual_value: str = ""
    value: Optional[str] = None
    similarity_id: str = ""
    remediation: str = ""
    remediation_type: str = ""
    vuln_lines: Tuple[CodeLine, ...] = field(default_factory=tuple)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Vulnerability":
        """Create a Vulnerability from the upstream camelCase JSON record."""
        return cls(
            query_id=data.get("queryID", ""),
            query_name=data.get("queryName", ""),
            severity=str(data.get("severity", "INFO")).upper(),
            file_name=data.get("fileName", ""),
            document_id=data.get("documentId", ""),
            resource_type=data.get("resourceType", ""),
            resource_name=data.get("resourceName", ""),
            search_key=data.get("searchKey", ""),
            query_url=data.get("queryURI", ""),
            platform=data.get("platform", ""),
            category=data.get("category", ""),
            description=data.get("description", ""),
            line=int(data.get("line", 0)),
            issue_type=data.get("issueType", ""),
            search_line=int(data.get("searchLine", 0)),
            search_value=data.get("searchValue", ""),
            key_expected_value=data.get("keyExpectedValue", ""),
            key_actual_value=data.get("keyActualValue", ""),
            value=data.get("value"),
            similarity_id=data.get("similarityID", ""),
            remediation=data.get("remediation", ""),
            remediation_type=data.get("remediationType", ""),
            vuln_lines=tuple(CodeLine.from_dict(cl) for cl in data.get("vulnLines") or []),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert Vulnerability to its camelCase dictionary format."""
        result = {
            "queryID": self.query_id,
            "queryName": self.query_name,
            "severity": self.severity,
            "fileName": self.file_name,
            "documentId": self.document_id,
            "resourceType": self.resource_type,
            "resourceName": self.resource_name,
            "searchKey": self.search_key,
            "queryURI": self.query_url,
            "platform": self.platform,
            "category": self.category,
            "description": self.description,
            "line": self.line,
            "issueType": self.issue_type,
            "searchLine": self.search_line,
            "searchValue": self.search_value,
            "keyExpectedValue": self.key_expected_value,
            "keyActualValue": self.key_actual_value,
            "similarityID": self.similarity_id,
            "vulnLines": [cl.to_dict() for cl in self.vuln_lines],
        }

        if self.value is not None:
            result["value"] = self.value

        if self.remediation:
            result["remediation"] = self.remediation
            result["remediationType"] = self.remediation_type

        return result


@dataclass
class Results:
    """Raw output of the upstream scan handed to the finalizer."""

    results: list = field(default_factory=list)
    # temporary extraction root -> original (user supplied) path
    extraction_map: Dict[str, str] = field(default_factory=dict)
    # ScannedDocument entries, written to the payload file when configured
    documents: list = field(default_factory=list)
    failed_queries: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ScannedDocument:
    """One parsed file as handed over by the upstream parser."""

    id: str
    file_path: str
    document: Dict[str, Any] = field(default_factory=dict)
    # same content annotated with source line numbers, when the parser kept them
    line_info_document: Optional[Dict[str, Any]] = None
    ignored: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScannedDocument":
        return cls(
            id=data.get("id", ""),
            file_path=data.get("file", ""),
            document=dict(data.get("document") or {}),
            line_info_document=data.get("lineInfoDocument"),
            ignored=bool(data.get("ignored", False)),
        )


def combine_documents(documents: Sequence[ScannedDocument], line_info: bool = False) -> Dict[str, Any]:
    """
    Build the scanned-documents payload.

    Args:
        documents: Parsed files in scan order
        line_info: Use the line-annotated content where the parser kept it

    Returns:
        ``{"documents": [...]}`` with ``id`` and ``file`` set on every entry;
        ignored files are left out
    """
    combined = []
    for doc in documents:
        if doc.ignored:
            continue
        content = doc.line_info_document if line_info and doc.line_info_document is not None else doc.document
        combined.append({**content, "id": doc.id, "file": doc.file_path})
    return {"documents": combined}
