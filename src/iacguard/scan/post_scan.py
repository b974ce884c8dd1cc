# SPDX-License-Identifier: MIT
"""
Post-scan result finalization.

Runs once after every file has been scanned: masks secrets in the
evidence of each finding, builds the summary, hands it to the output
sinks and works out the exit status.
"""
from __future__ import annotations

import dataclasses
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from iacguard.core.exceptions import SinkError
from iacguard.core.findings import Results, ScannedDocument, Vulnerability
from iacguard.core.redaction import hide_secrets
from iacguard.core.summary import Summary, Times, create_summary
from iacguard.policy.exit_code import results_exit_code, show_error
from iacguard.printer import Printer, print_result, print_scan_duration
from iacguard.report.generate import generate_report
from iacguard.report.json_report import export_documents
from iacguard.secrets.rules import (
    AllowRule,
    RegexRule,
    compile_allow_rules,
    compile_regex_rules,
    load_regex_rules,
)
from iacguard.telemetry import telemetry_request

from .config import ScanParams
from .tracker import Tracker

logger = logging.getLogger(__name__)


class Client:
    """Holds the state shared by the scan and post-scan stages.

    Example:
        client = Client(ScanParams(output_path="out"), tracker)
        exit_code = client.post_scan(results)
        if should_exit(exit_code, client.scan_params):
            sys.exit(exit_code)
    """

    def __init__(
        self,
        scan_params: Optional[ScanParams] = None,
        tracker: Optional[Tracker] = None,
        printer: Optional[Printer] = None,
        scan_start_time: Optional[datetime] = None,
    ):
        self.scan_params = scan_params or ScanParams()
        self.tracker = tracker or Tracker()
        self.printer = printer or Printer()
        self.scan_start_time = scan_start_time or datetime.now()

    def post_scan(self, scan_results: Optional[Results]) -> int:
        """
        Finalize a scan.

        Args:
            scan_results: Raw results of the scan, None when nothing was scanned

        Returns:
            Exit code derived from the summary severities

        Raises:
            RuleDefinitionError: If the secret rules cannot be loaded
            PatternCompilationError: If a secret rule pattern is invalid
            SinkError: If printing or exporting fails
        """
        if scan_results is None:
            logger.info("No files were scanned")
            scan_results = Results()

        document = load_regex_rules(self.scan_params.secrets_regexes_path)
        allow_rules = compile_allow_rules(document.allow_rules)
        rules = compile_regex_rules(document.rules)

        masked = mask_results(scan_results.results, allow_rules, rules)

        summary = self.get_summary(masked, datetime.now(), scan_results.extraction_map)

        self.resolve_outputs(summary, scan_results.documents, scan_results.failed_queries)

        delete_extraction_folder(scan_results.extraction_map)

        print_scan_duration(datetime.now() - self.scan_start_time, self.printer)

        return results_exit_code(summary, self.scan_params.fail_on)

    def get_summary(
        self,
        results: Sequence[Vulnerability],
        end: datetime,
        path_extraction_map: Dict[str, str],
    ) -> Summary:
        """Build the summary and submit telemetry for it."""
        summary = create_summary(
            self.tracker.counters(),
            results,
            self.scan_params.scan_id,
            path_extraction_map,
            self.tracker.version,
            scanned_paths=self.scan_params.paths,
            times=Times(start=self.scan_start_time, end=end),
        )

        if self.scan_params.disable_telemetry:
            logger.warning("Skipping all telemetry because provided disable flag is set")
        elif not self.scan_params.telemetry_url:
            logger.debug("No telemetry endpoint configured")
        else:
            try:
                telemetry_request(
                    summary,
                    self.scan_params.telemetry_url,
                    self.scan_params.telemetry_timeout,
                )
            except Exception as e:
                logger.warning("Unable to request for telemetry update: %s", e)

        return summary

    def resolve_outputs(
        self,
        summary: Summary,
        documents: Sequence[ScannedDocument],
        failed_queries: Dict[str, Any],
    ) -> None:
        """Invoke the console printer, the payload export and the reports."""
        logger.debug("resolve_outputs()")
        params = self.scan_params

        try:
            print_result(summary, failed_queries, self.printer)
        except Exception as e:
            raise SinkError("console", e) from e

        if params.payload_path:
            payload = Path(params.payload_path)
            try:
                export_documents(
                    str(payload.parent), payload.name, documents, params.line_info_payload
                )
            except Exception as e:
                raise SinkError("payload", e) from e

        print_output(params.output_path, params.output_name, summary, params.report_formats)


def mask_results(
    results: Sequence[Vulnerability],
    allow_rules: Sequence[AllowRule],
    rules: Sequence[RegexRule],
) -> List[Vulnerability]:
    """Return copies of the findings with secrets masked in their evidence."""
    masked = []
    for vuln in results:
        lines = hide_secrets(vuln.vuln_lines, allow_rules, rules)
        if all(a is b for a, b in zip(lines, vuln.vuln_lines)):
            masked.append(vuln)
        else:
            masked.append(dataclasses.replace(vuln, vuln_lines=tuple(lines)))
    return masked


def print_output(output_path: str, filename: str, summary: Summary, formats: Sequence[str]) -> None:
    """Write the configured reports; no-op without an output path."""
    logger.debug("print_output()")
    if not output_path:
        return

    try:
        generate_report(output_path, filename, summary, formats)
    except Exception as e:
        raise SinkError("report", e) from e


def delete_extraction_folder(extraction_map: Dict[str, str]) -> None:
    """Remove temporary folders created when extracting archives or URLs."""
    for extracted in extraction_map:
        try:
            shutil.rmtree(extracted)
        except FileNotFoundError:
            continue
        except OSError as e:
            logger.error("Failed to delete extraction folder %s: %s", extracted, e)


def should_exit(exit_code: int, scan_params: ScanParams) -> bool:
    """Whether the caller should terminate the process with ``exit_code``."""
    return exit_code != 0 and show_error("results", scan_params.ignore_on_exit)
