# SPDX-License-Identifier: MIT
"""
Tests for summary aggregation and the finding data model.
"""
from datetime import datetime

import pytest

from iacguard.core.findings import CodeLine, Vulnerability
from iacguard.core.summary import Counters, Times, create_summary, resolve_path

from tests.helpers import build_vulnerability


class TestCreateSummary:
    """Test summary aggregation."""

    def test_empty(self):
        counters = Counters()

        summary = create_summary(counters, [], "scan-1", {}, "1.0.0")

        assert summary.results == ()
        assert summary.queries == ()
        assert summary.counters is counters
        assert summary.severity_summary.scan_id == "scan-1"
        assert summary.severity_summary.total_counter == 0
        assert set(summary.severity_summary.severity_counters.values()) == {0}

    def test_counters_passed_through(self):
        counters = Counters(
            scanned_files=3,
            scanned_files_lines=30,
            parsed_files=2,
            parsed_files_lines=20,
            total_queries=8,
            failed_to_execute_queries=1,
            failed_similarity_id=4,
        )

        summary = create_summary(counters, [build_vulnerability("x")], "s", {}, "v")

        assert summary.counters == counters

    def test_grouping_and_severity_counts(self):
        vulns = [
            build_vulnerability("a", query_id="q-low", query_name="Low", severity="LOW"),
            build_vulnerability("b", query_id="q-crit", query_name="Crit", severity="CRITICAL"),
            build_vulnerability("c", query_id="q-low", query_name="Low", severity="LOW", line=9),
        ]

        summary = create_summary(Counters(), vulns, "s", {}, "v")

        assert summary.results == tuple(vulns)
        assert [q.query_id for q in summary.queries] == ["q-crit", "q-low"]
        assert len(summary.queries[1].files) == 2
        assert summary.queries[1].files[1].line == 9
        assert summary.severity_summary.severity_counters["LOW"] == 2
        assert summary.severity_summary.severity_counters["CRITICAL"] == 1
        assert summary.severity_summary.total_counter == 3

    def test_extracted_paths_resolved(self):
        vuln = build_vulnerability("a", file_name="/tmp/kics-extract-1/modules/main.tf")

        summary = create_summary(
            Counters(), [vuln], "s", {"/tmp/kics-extract-1": "git::https://example.com/repo"}, "v"
        )

        assert summary.queries[0].files[0].file_name == "git::https://example.com/repo/modules/main.tf"
        assert summary.results[0].file_name == "/tmp/kics-extract-1/modules/main.tf"

    def test_times_and_dict(self):
        start = datetime(2024, 1, 1, 12, 0, 0)
        end = datetime(2024, 1, 1, 12, 0, 5)

        summary = create_summary(
            Counters(scanned_files=1), [build_vulnerability("a")], "s", {}, "v", times=Times(start, end)
        )
        report = summary.to_dict()

        assert report["start"] == "2024-01-01T12:00:00"
        assert report["end"] == "2024-01-01T12:00:05"
        assert report["filesScanned"] == 1
        assert report["queries"][0]["files"][0]["fileName"] == "/src/main.tf"

    def test_inputs_not_mutated(self):
        vulns = [build_vulnerability("a")]
        before = list(vulns)

        create_summary(Counters(), vulns, "s", {}, "v")

        assert vulns == before

    def test_summary_is_read_only(self):
        """Test callers cannot alter the results or severity counters."""
        vulns = [build_vulnerability("a")]
        summary = create_summary(Counters(), vulns, "s", {}, "v")

        vulns.append(build_vulnerability("b"))

        assert len(summary.results) == 1
        with pytest.raises(AttributeError):
            summary.results.append(build_vulnerability("c"))
        with pytest.raises(TypeError):
            summary.severity_summary.severity_counters["HIGH"] = 99
        assert summary.to_dict()["severityCounters"]["HIGH"] == 1


class TestResolvePath:
    def test_unrelated_path_unchanged(self):
        assert resolve_path("/src/main.tf", {"/tmp/x": "origin"}) == "/src/main.tf"


class TestVulnerability:
    """Test the upstream record conversion."""

    def test_from_dict_round_trip_fields(self):
        record = {
            "queryID": "q-1",
            "queryName": "Passwords And Secrets",
            "severity": "high",
            "fileName": "main.tf",
            "documentId": "doc",
            "resourceType": "aws_db_instance",
            "resourceName": "db",
            "searchKey": "resource.aws_db_instance[db].password",
            "line": 4,
            "vulnLines": [{"position": 4, "line": "password = \"x\""}],
        }

        vuln = Vulnerability.from_dict(record)

        assert vuln.severity == "HIGH"
        assert vuln.vuln_lines == (CodeLine(4, 'password = "x"'),)
        assert vuln.to_dict()["searchKey"] == "resource.aws_db_instance[db].password"
        assert vuln.to_dict()["vulnLines"] == [{"position": 4, "line": 'password = "x"'}]
