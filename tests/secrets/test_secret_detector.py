# SPDX-License-Identifier: MIT
"""
Tests for secret detection, including the multi-line line-elimination search.
"""
import time

from iacguard.secrets.detector import find_detect_line, is_secret

from tests.helpers import build_allow_rules, build_rule

K8S_RULE = {
    "id": "k8s-env",
    "regex": r"(?i)name:\s*['\"]?\w*(password|secret)\w*['\"]?\s*\n\s*value:\s*['\"]?([^\s'\"]{4,})['\"]?",
    "multiline": {"detectLineGroup": 2},
}


class TestIsSecret:
    """Test single-line detection."""

    def test_no_match(self):
        rule = build_rule(regex=r"AKIA[A-Z0-9]{16}")

        detection = is_secret("region = eu-west-1", rule, [])

        assert detection.is_secret is False
        assert detection.groups == []

    def test_all_matches_collected(self):
        """Test every non-overlapping match contributes its groups."""
        rule = build_rule(regex=r"tok_([a-z0-9]{6})")

        detection = is_secret("a=tok_abc123 b=tok_def456", rule, [])

        assert detection.is_secret is True
        assert detection.groups == [("tok_abc123", "abc123"), ("tok_def456", "def456")]

    def test_unmatched_optional_group_is_empty(self):
        rule = build_rule(regex=r"secret(_key)?=(\w+)")

        detection = is_secret("secret=abcdef", rule, [])

        assert detection.groups == [("secret=abcdef", "", "abcdef")]

    def test_global_allow_rule_wins(self):
        """Test allow-rules veto a line that the rule matches."""
        rule = build_rule(regex=r"password:\s*(\w+)")
        allow_rules = build_allow_rules(r"password:\s*changeme")

        detection = is_secret("password: changeme", rule, allow_rules)

        assert detection.is_secret is False

    def test_rule_allow_rule_wins(self):
        rule = build_rule(
            regex=r"password\s*=\s*(\S+)",
            allowRules=[{"description": "tf reference", "regex": r"password\s*=\s*var\.\w+"}],
        )

        assert is_secret("password = var.db_password", rule, []).is_secret is False
        assert is_secret("password = hunter22", rule, []).is_secret is True

    def test_inputs_not_mutated(self):
        rule = build_rule(regex=r"tok_\w+")
        allow_rules = build_allow_rules("nothing-matches-this")
        before = list(allow_rules)

        is_secret("tok_abc", rule, allow_rules)

        assert allow_rules == before


class TestMultilineDetection:
    """Test detection where the keyword and value sit on different lines."""

    BLOB = "- name: DB_PASSWORD\n  value: s3cr3tValue\n- name: OTHER\n  value: plain"

    def test_detects_across_lines(self):
        rule = build_rule(**K8S_RULE)

        detection = is_secret(self.BLOB, rule, [])

        assert detection.is_secret is True
        assert detection.groups[0][2] == "s3cr3tValue"

    def test_value_line_is_identified(self):
        """Test the physical line holding the value is the one eliminated."""
        lines = self.BLOB.split("\n")

        assert find_detect_line(lines, "s3cr3tValue") == 1
        for i, physical in enumerate(lines):
            if i != 1:
                assert "s3cr3tValue" not in physical

    def test_removing_value_line_defeats_detection(self):
        rule = build_rule(**K8S_RULE)
        lines = self.BLOB.split("\n")
        reduced = "\n".join(lines[:1] + lines[2:])

        assert is_secret(reduced, rule, []).is_secret is False

    def test_last_containing_line_is_used(self):
        assert find_detect_line(["value: x1", "other", "again x1"], "x1") == 2
        assert find_detect_line(["a", "b"], "zzz") is None

    def test_reduction_reveals_later_value(self):
        """Test a value hidden behind the first match is found once that line is dropped."""
        rule = build_rule(**K8S_RULE)
        blob = "name: DB_PASSWORD\nvalue: first1\nvalue: second2"

        detection = is_secret(blob, rule, [])

        assert detection.is_secret is True
        assert [g[2] for g in detection.groups] == ["first1", "second2"]

    def test_reduced_groups_are_unique(self):
        rule = build_rule(**K8S_RULE)
        blob = "name: DB_PASSWORD\nvalue: first1\nname: API_SECRET\nvalue: second2"

        detection = is_secret(blob, rule, [])

        assert detection.is_secret is True
        assert [g[2] for g in detection.groups] == ["first1", "second2"]

    def test_many_secret_variables(self):
        """Test a large env block is reduced without revisiting the same blob."""
        rule = build_rule(**K8S_RULE)
        blob = "\n".join(
            f"- name: VAR{i}_PASSWORD\n  value: s3cr3tValue{i:02d}" for i in range(10)
        )

        started = time.perf_counter()
        detection = is_secret(blob, rule, [])
        elapsed = time.perf_counter() - started

        assert detection.is_secret is True
        assert len(detection.groups) == 10
        assert detection.groups[0][2] == "s3cr3tValue00"
        assert elapsed < 5.0

    def test_out_of_range_group_skips_reduction(self):
        rule = build_rule(**dict(K8S_RULE, multiline={"detectLineGroup": 7}))
        blob = "name: DB_PASSWORD\nvalue: first1\nname: API_SECRET\nvalue: second2"

        detection = is_secret(blob, rule, [])

        assert detection.is_secret is True
        assert len(detection.groups) == 2

    def test_single_line_terminates(self):
        """Test a one-line blob is never reduced further."""
        rule = build_rule(regex=r"(.*)", multiline={"detectLineGroup": 1})

        detection = is_secret("anything", rule, [])

        assert detection.is_secret is True
        assert detection.groups[0] == ("anything", "anything")

    def test_allow_rule_applies_to_whole_blob(self):
        rule = build_rule(**K8S_RULE)
        allow_rules = build_allow_rules(r"name: OTHER")

        assert is_secret(self.BLOB, rule, allow_rules).is_secret is False
