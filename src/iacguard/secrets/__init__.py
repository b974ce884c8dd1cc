"""Secret rules, rule compilation and secret detection."""

from .detector import SecretDetection, find_detect_line, is_secret
from .rules import (
    AllowRule,
    RegexRule,
    compile_allow_rules,
    compile_regex_rules,
    load_regex_rules,
)

__all__ = [
    "AllowRule",
    "RegexRule",
    "SecretDetection",
    "compile_allow_rules",
    "compile_regex_rules",
    "find_detect_line",
    "is_secret",
    "load_regex_rules",
]
