# SPDX-License-Identifier: MIT
"""
Secret detection over evidence lines.

A "line" here may be a blob of several physical lines when the upstream
evidence spans them. For multi-line rules the physical line holding the
secret value is dropped and detection is re-run on the remainder, so a
keyword on one line and a value on another are both accounted for.

The same reduced blob is reachable through many removal orders, so each
blob is evaluated once per top-level call and group vectors are kept
unique.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .rules import AllowRule, RegexRule

Groups = Tuple[str, ...]


@dataclass(frozen=True)
class SecretDetection:
    """Outcome of running one rule against one line."""

    is_secret: bool
    groups: List[Groups] = field(default_factory=list)


NOT_A_SECRET = SecretDetection(False, [])


def is_allowed(line: str, allow_rules: Iterable[AllowRule]) -> bool:
    """True when any allow-rule matches the line."""
    return any(rule.matches(line) for rule in allow_rules)


def find_all_groups(rule: RegexRule, line: str) -> List[Groups]:
    """Return the group vector (whole match first) of every match."""
    return [
        (m.group(0),) + tuple(g if g is not None else "" for g in m.groups())
        for m in rule.regex.finditer(line)
    ]


def find_detect_line(lines: Sequence[str], value: str) -> Optional[int]:
    """Index of the last physical line containing ``value``, if any."""
    found = None
    for i, physical in enumerate(lines):
        if value in physical:
            found = i
    return found


def is_secret(line: str, rule: RegexRule, allow_rules: Sequence[AllowRule]) -> SecretDetection:
    """
    Decide whether ``line`` holds a secret matched by ``rule``.

    Args:
        line: Evidence text, possibly spanning several physical lines
        rule: Compiled secret rule
        allow_rules: Global compiled allow-rules

    Returns:
        SecretDetection with every match's groups, plus the groups found by
        the multi-line reduction, each distinct group vector once
    """
    return _detect(line, rule, allow_rules, {})


def _detect(
    line: str,
    rule: RegexRule,
    allow_rules: Sequence[AllowRule],
    seen: Dict[str, SecretDetection],
) -> SecretDetection:
    if line in seen:
        return seen[line]

    if is_allowed(line, allow_rules) or is_allowed(line, rule.allow_rules):
        seen[line] = NOT_A_SECRET
        return NOT_A_SECRET

    groups = find_all_groups(rule, line)
    accumulated = list(dict.fromkeys(groups))

    if rule.detect_line_group is not None:
        physical_lines = line.split("\n")
        for group in groups:
            reduced = _drop_detect_line(physical_lines, group, rule.detect_line_group)
            if reduced is None:
                continue

            nested = _detect(reduced, rule, allow_rules, seen)
            for nested_group in nested.groups:
                if nested_group not in accumulated:
                    accumulated.append(nested_group)

    result = SecretDetection(True, accumulated) if accumulated else NOT_A_SECRET
    seen[line] = result
    return result


def _drop_detect_line(physical_lines: List[str], group: Groups, index: int) -> Optional[str]:
    # a single physical line cannot be reduced any further
    if len(physical_lines) < 2 or index >= len(group) or not group[index]:
        return None

    detect_line = find_detect_line(physical_lines, group[index])
    if detect_line is None:
        return None

    return "\n".join(physical_lines[:detect_line] + physical_lines[detect_line + 1:])
