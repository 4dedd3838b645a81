"""
Orchestration for fetch and parse runs.

    from orchestrate import run_fetch, run_parse, build_run_config
"""

from .config import (
    load_run_config,
    apply_run_config,
    build_run_config,
)
from .department import Department
from .fetch_run import fetch_quarter, run_fetch
from .parse_run import parse_single, raw_files, run_parse
from .presenter import (
    append_execution_log,
    format_fetch_summary,
    format_parse_summary,
    write_record_json,
)
from .run_context import RunStats

__all__ = [
    "load_run_config",
    "apply_run_config",
    "build_run_config",
    "Department",
    "fetch_quarter",
    "run_fetch",
    "parse_single",
    "raw_files",
    "run_parse",
    "append_execution_log",
    "format_fetch_summary",
    "format_parse_summary",
    "write_record_json",
    "RunStats",
]
