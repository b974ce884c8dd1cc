"""Scan progress counters filled in by the upstream scanning stage."""

from __future__ import annotations

from dataclasses import dataclass

from iacguard.core.summary import Counters


@dataclass
class Tracker:
    """Mutable counters; snapshot them with :meth:`counters` once scanning is done."""

    version: str = ""
    found_files: int = 0
    found_count_lines: int = 0
    parsed_files: int = 0
    parsed_count_lines: int = 0
    loaded_queries: int = 0
    executing_queries: int = 0
    executed_queries: int = 0
    failed_similarity_id: int = 0

    def counters(self) -> Counters:
        return Counters(
            scanned_files=self.found_files,
            scanned_files_lines=self.found_count_lines,
            parsed_files=self.parsed_files,
            parsed_files_lines=self.parsed_count_lines,
            total_queries=self.loaded_queries,
            failed_to_execute_queries=self.executing_queries - self.executed_queries,
            failed_similarity_id=self.failed_similarity_id,
        )
