# SPDX-License-Identifier: MIT
"""iacguard custom exceptions."""

from __future__ import annotations


class IacGuardError(Exception):
    """Base class for every error raised by iacguard."""


class IacGuardConfigError(IacGuardError):
    """Raised when configuration is missing or invalid."""

    def __init__(self, message: str, config_path: str = None, section: str = None):
        self.config_path = config_path
        self.section = section
        super().__init__(message)

    def __str__(self):
        msg = super().__str__()
        if self.config_path:
            msg += f" (config: {self.config_path})"
        if self.section:
            msg += f" (section: {self.section})"
        return msg


class RuleDefinitionError(IacGuardConfigError):
    """Raised when the secret rules document cannot be read or validated."""


class PatternCompilationError(IacGuardError):
    """Raised when a rule pattern is not a valid regular expression."""

    def __init__(self, rule_id: str, pattern: str, cause: Exception):
        self.rule_id = rule_id
        self.pattern = pattern
        self.cause = cause
        super().__init__(f"Invalid pattern in rule '{rule_id}': {pattern!r} ({cause})")


class SinkError(IacGuardError):
    """Raised when an output sink (printer, exporter) fails."""

    def __init__(self, sink: str, cause: Exception):
        self.sink = sink
        self.cause = cause
        super().__init__(f"Output sink '{sink}' failed: {cause}")


class ReportFormatError(IacGuardError):
    """Raised when an unsupported report format is requested."""
