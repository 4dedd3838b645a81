"""
Presentation helpers for run output.

Keeps the orchestrators focused on the crawl while this module renders
summaries and saves JSON outputs.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from fetch.paths import atomic_write_text

from .run_context import RunStats


def write_record_json(record: dict, path: Path) -> Path:
    """Write one normalized contract record, pretty-printed."""
    return atomic_write_text(path, json.dumps(record, indent=2, ensure_ascii=False) + "\n")


def format_fetch_summary(stats: RunStats) -> list[str]:
    return [
        f"{stats.acronym}: {stats.quarters_fetched} quarters",
        f"  Downloaded: {stats.contracts_fetched}",
        f"  Already cached: {stats.already_cached}",
        f"  Failed: {stats.contracts_failed}",
    ]


def format_parse_summary(stats: RunStats) -> list[str]:
    lines = [
        f"{stats.acronym}: {stats.files_parsed} records written",
        f"  Failed: {stats.files_failed}",
    ]
    if stats.warnings:
        lines.append(f"  Warnings: {len(stats.warnings)}")
    return lines


def print_summary(lines: list[str], quiet: bool = False) -> None:
    if quiet:
        return
    for line in lines:
        print(line)


def append_execution_log(log_file: Path, command: str, phase: str, runs: list[RunStats]) -> Path:
    """Append one JSON line describing a CLI invocation and its per-department results."""
    log_file.parent.mkdir(parents=True, exist_ok=True)
    entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "command": command,
        "phase": phase,
        "departments": [s.as_dict() for s in runs],
    }
    with open(log_file, "a", encoding="utf-8") as f:
        f.write(json.dumps(entry) + "\n")
    return log_file
