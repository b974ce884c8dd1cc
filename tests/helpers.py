# SPDX-License-Identifier: MIT
"""Builders shared by the iacguard tests."""

from iacguard.core.findings import CodeLine, Vulnerability
from iacguard.secrets.rules import (
    AllowRuleDefinition,
    RegexRuleDefinition,
    compile_allow_rules,
    compile_regex_rules,
)


def build_rule(**definition):
    """Compile a single rule from its camelCase definition."""
    definition.setdefault("id", "test-rule")
    return compile_regex_rules([RegexRuleDefinition.model_validate(definition)])[0]


def build_allow_rules(*patterns):
    return compile_allow_rules(
        [AllowRuleDefinition(description=f"allow-{i}", regex=p) for i, p in enumerate(patterns)]
    )


def build_vulnerability(*lines, severity="HIGH", query_id="q-1", **kwargs):
    kwargs.setdefault("query_name", "Hardcoded Secret")
    kwargs.setdefault("file_name", "/src/main.tf")
    return Vulnerability(
        query_id=query_id,
        severity=severity,
        vuln_lines=tuple(CodeLine(position=i + 1, line=text) for i, text in enumerate(lines)),
        **kwargs,
    )


