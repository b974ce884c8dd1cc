# SPDX-License-Identifier: MIT
"""
Central redaction utilities for iacguard.

Evidence lines attached to findings are checked against every compiled
secret rule and the sensitive part is replaced by a fixed placeholder
before anything reaches the console, a report or telemetry.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from iacguard.core.findings import CodeLine
from iacguard.secrets.detector import Groups, is_secret
from iacguard.secrets.rules import AllowRule, RegexRule

logger = logging.getLogger(__name__)

SECRET_MASK = "<SECRET-MASKED-ON-PURPOSE>"


def mask_secret(rule: RegexRule, text: str) -> str:
    """
    Redact the first occurrence of the sensitive text matched by ``rule``.

    With a special mask, everything up to and including the first match of
    ``<specialMask>`` is kept and the remainder of the line is treated as
    sensitive. Otherwise the first match of the rule's pattern is sensitive.

    Args:
        rule: The rule that reported the secret
        text: Line text to redact

    Returns:
        Redacted line; the whole line becomes the placeholder when the
        sensitive text cannot be isolated
    """
    if rule.special_mask_regex is not None:
        prefix = rule.special_mask_regex.search(text)
        start, end = (prefix.end() if prefix else 0), len(text)
    else:
        match = rule.regex.search(text)
        start, end = match.span() if match else (0, 0)

    if start == end:
        return SECRET_MASK

    return text[:start] + SECRET_MASK + text[end:]


def _entropy_groups_present(rule: RegexRule, groups: Groups) -> bool:
    # Out-of-range groups skip the rule instead of failing the scan
    for entropy in rule.entropies:
        if entropy.group >= len(groups):
            logger.debug(
                "Rule %s: entropy group %d not captured, skipping", rule.id, entropy.group
            )
            return False
    return True


def hide_line(text: str, allow_rules: Sequence[AllowRule], rules: Sequence[RegexRule]) -> str:
    """Run every rule, in order, against one line and return the masked text."""
    for rule in rules:
        detection = is_secret(text, rule, allow_rules)
        if not detection.is_secret:
            continue

        if rule.mask_all:
            return SECRET_MASK

        if not rule.entropies or _entropy_groups_present(rule, detection.groups[0]):
            text = mask_secret(rule, text)

    return text


def hide_secrets(
    lines: Sequence[CodeLine],
    allow_rules: Sequence[AllowRule],
    rules: Sequence[RegexRule],
) -> List[CodeLine]:
    """
    Mask secrets in a finding's evidence lines.

    Args:
        lines: Evidence lines of one finding
        allow_rules: Global compiled allow-rules
        rules: Compiled secret rules in definition order

    Returns:
        New list of CodeLines; lines without secrets are the original objects
    """
    hidden = []
    for code_line in lines:
        text = hide_line(code_line.line, allow_rules, rules)
        if text == code_line.line:
            hidden.append(code_line)
        else:
            hidden.append(CodeLine(position=code_line.position, line=text))
    return hidden
