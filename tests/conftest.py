# SPDX-License-Identifier: MIT
"""Shared fixtures for iacguard tests."""

import json

import pytest


@pytest.fixture
def rules_file(tmp_path):
    """Write a rules document and return its path."""

    def _write(rules, allow_rules=None):
        path = tmp_path / "regex_rules.json"
        path.write_text(json.dumps({"rules": rules, "allowRules": allow_rules or []}))
        return str(path)

    return _write
