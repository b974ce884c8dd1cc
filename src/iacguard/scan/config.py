# SPDX-License-Identifier: MIT
"""
Scan parameters loader for iacguard.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from iacguard.core.exceptions import IacGuardConfigError
from iacguard.policy.exit_code import FAIL_FLAGS, IGNORE_ON_EXIT_OPTIONS

logger = logging.getLogger(__name__)

CONFIG_FILE_NAMES = (".iacguard.yml", ".iacguard.yaml")


@dataclass
class ScanParams:
    """Settings that drive the post-scan stage."""

    scan_id: str = "console"
    paths: List[str] = field(default_factory=list)
    secrets_regexes_path: str = ""
    payload_path: str = ""
    line_info_payload: bool = False
    output_path: str = ""
    output_name: str = "results"
    report_formats: List[str] = field(default_factory=list)
    disable_telemetry: bool = False
    telemetry_url: str = ""
    telemetry_timeout: float = 5.0
    fail_on: List[str] = field(default_factory=lambda: list(FAIL_FLAGS))
    ignore_on_exit: str = "none"

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "ScanParams":
        """Create params from a config mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(config) - known)
        if unknown:
            logger.warning("Ignoring unknown config keys: %s", ", ".join(unknown))
        return cls(**{k: v for k, v in config.items() if k in known})


def load_scan_params(config_path: Optional[str] = None, root: str = ".") -> ScanParams:
    """
    Load scan parameters following the search order.

    Args:
        config_path: Explicit config file path
        root: Directory searched for .iacguard.yml/.iacguard.yaml

    Returns:
        ScanParams

    Raises:
        IacGuardConfigError: If config file is malformed or explicitly provided config is missing
    """
    # 1. Explicit path
    if config_path:
        path = Path(config_path).resolve()
        if not path.exists():
            raise IacGuardConfigError(
                f"Specified config file not found: {path}",
                config_path=str(path),
            )
        return _load_config_file(path)

    # 2. Config file at the root
    root_path = Path(root).resolve()
    for name in CONFIG_FILE_NAMES:
        path = root_path / name
        if path.exists():
            return _load_config_file(path)

    # 3. Built-in defaults
    logger.debug("Using default scan params")
    return ScanParams()


def _load_config_file(path: Path) -> ScanParams:
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise IacGuardConfigError(
            f"Failed to parse config file: {e}", config_path=str(path)
        ) from e

    if config is None:
        config = {}

    if not isinstance(config, dict):
        raise IacGuardConfigError("Config must be a dictionary", config_path=str(path))

    _validate_config(config, str(path))
    logger.debug("Loaded config: %s", path)
    return ScanParams.from_dict(config)


def _validate_config(config: Dict[str, Any], config_path: str) -> None:
    """Validate scan configuration values."""
    for key in ("paths", "report_formats", "fail_on"):
        if key in config and not isinstance(config[key], list):
            raise IacGuardConfigError(
                f"{key} must be a list", config_path=config_path, section=key
            )

    for severity in config.get("fail_on", []):
        if str(severity).lower() not in FAIL_FLAGS:
            raise IacGuardConfigError(
                f"Unknown severity in fail_on: {severity}",
                config_path=config_path,
                section="fail_on",
            )

    ignore_on_exit = str(config.get("ignore_on_exit", "none")).lower()
    if ignore_on_exit not in IGNORE_ON_EXIT_OPTIONS:
        raise IacGuardConfigError(
            f"ignore_on_exit must be one of {', '.join(IGNORE_ON_EXIT_OPTIONS)}",
            config_path=config_path,
            section="ignore_on_exit",
        )
