# SPDX-License-Identifier: MIT
"""
Secret rule definitions and the rule compiler.

The rules document is JSON (or YAML) of the form::

    {
      "rules": [
        {
          "id": "...", "name": "...", "regex": "...",
          "specialMask": "...",             # optional, "all" masks the whole line
          "allowRules": [{"description": "...", "regex": "..."}],
          "entropies": [{"group": 1, "min": 2.8, "max": 8}],
          "multiline": {"detectLineGroup": 2}
        }
      ],
      "allowRules": [{"description": "...", "regex": "..."}]
    }

Every pattern is compiled exactly once here; the resulting objects are
frozen and safe to share.
"""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Pattern, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from iacguard.core.exceptions import PatternCompilationError, RuleDefinitionError

logger = logging.getLogger(__name__)

MASK_ALL = "all"

DEFAULT_RULES_PATH = Path(__file__).resolve().parent.parent / "assets" / "regex_rules.json"


class AllowRuleDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    description: str = ""
    regex: str


class EntropyDefinition(BaseModel):
    group: int = Field(ge=0)
    min: float = 0.0
    max: float = 0.0


class MultilineDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    detect_line_group: int = Field(alias="detectLineGroup", ge=0)


class RegexRuleDefinition(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str = ""
    regex: str
    special_mask: str = Field(default="", alias="specialMask")
    allow_rules: List[AllowRuleDefinition] = Field(default_factory=list, alias="allowRules")
    entropies: List[EntropyDefinition] = Field(default_factory=list)
    multiline: Optional[MultilineDefinition] = None


class RegexRulesDocument(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    rules: List[RegexRuleDefinition] = Field(default_factory=list)
    allow_rules: List[AllowRuleDefinition] = Field(default_factory=list, alias="allowRules")


@dataclass(frozen=True)
class AllowRule:
    """A compiled false-positive suppression pattern."""

    description: str
    regex: Pattern[str]

    def matches(self, line: str) -> bool:
        return self.regex.search(line) is not None


@dataclass(frozen=True)
class Entropy:
    group: int
    min: float
    max: float


@dataclass(frozen=True)
class RegexRule:
    """A compiled secret detection rule."""

    id: str
    name: str
    regex_str: str
    regex: Pattern[str]
    special_mask: str = ""
    # "(.*?)" + special_mask, used to keep the non-sensitive prefix of a line
    special_mask_regex: Optional[Pattern[str]] = None
    allow_rules: Tuple[AllowRule, ...] = ()
    entropies: Tuple[Entropy, ...] = ()
    detect_line_group: Optional[int] = None

    @property
    def mask_all(self) -> bool:
        return self.special_mask == MASK_ALL


def load_regex_rules(path: Optional[str] = None) -> RegexRulesDocument:
    """
    Load and validate the secret rules document.

    Args:
        path: Path to a JSON/YAML rules file. The bundled default rules are
            used when empty.

    Returns:
        Validated rules document (patterns not yet compiled)

    Raises:
        RuleDefinitionError: If the file is missing, unparsable or invalid
    """
    rules_path = Path(path) if path else DEFAULT_RULES_PATH
    logger.debug("Loading secret rules from %s", rules_path)

    try:
        content = rules_path.read_text(encoding="utf-8")
    except OSError as e:
        raise RuleDefinitionError(
            f"Unable to read secret rules: {e}", config_path=str(rules_path)
        ) from e

    return parse_regex_rules(content, source=str(rules_path))


def parse_regex_rules(content: str, source: str = None) -> RegexRulesDocument:
    """Parse a rules document from its text (JSON is valid YAML)."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise RuleDefinitionError(
            f"Malformed secret rules document: {e}", config_path=source
        ) from e

    if data is None:
        data = {}

    if not isinstance(data, dict):
        raise RuleDefinitionError(
            "Secret rules document must be a mapping", config_path=source
        )

    try:
        return RegexRulesDocument.model_validate(data)
    except ValidationError as e:
        raise RuleDefinitionError(
            f"Invalid secret rules document: {e}", config_path=source, section="rules"
        ) from e


_INLINE_FLAGS = re.compile(r"^\(\?[aiLmsux]+\)")


def special_mask_pattern(special_mask: str) -> str:
    """Build ``(.*?)<specialMask>``, keeping leading inline flags in front."""
    flags = _INLINE_FLAGS.match(special_mask)
    if flags:
        return flags.group(0) + "(.*?)" + special_mask[flags.end():]
    return "(.*?)" + special_mask


def _compile(rule_id: str, pattern: str) -> Pattern[str]:
    try:
        return re.compile(pattern)
    except re.error as e:
        raise PatternCompilationError(rule_id, pattern, e) from e


def compile_allow_rules(definitions: List[AllowRuleDefinition], owner: str = "allowRules") -> List[AllowRule]:
    """Compile allow-rules; the first invalid pattern aborts the batch."""
    return [
        AllowRule(description=d.description, regex=_compile(d.description or owner, d.regex))
        for d in definitions
    ]


def compile_regex_rules(definitions: List[RegexRuleDefinition]) -> List[RegexRule]:
    """
    Compile secret rules in definition order.

    Raises:
        PatternCompilationError: On the first invalid primary, special-mask
            or allow-rule pattern, naming the offending rule
    """
    compiled = []
    for d in definitions:
        special_mask_regex = None
        if d.special_mask and d.special_mask != MASK_ALL:
            special_mask_regex = _compile(d.id, special_mask_pattern(d.special_mask))

        compiled.append(
            RegexRule(
                id=d.id,
                name=d.name,
                regex_str=d.regex,
                regex=_compile(d.id, d.regex),
                special_mask=d.special_mask,
                special_mask_regex=special_mask_regex,
                allow_rules=tuple(
                    AllowRule(description=a.description, regex=_compile(d.id, a.regex))
                    for a in d.allow_rules
                ),
                entropies=tuple(Entropy(e.group, e.min, e.max) for e in d.entropies),
                detect_line_group=d.multiline.detect_line_group if d.multiline else None,
            )
        )

    logger.debug("Compiled %d secret rules", len(compiled))
    return compiled
