#!/usr/bin/env python3
"""
Government contract-disclosure scraper.

Two decoupled phases per department:
- fetch: walk index -> quarters -> contract pages into the raw page cache
- parse: turn cached pages into canonical JSON records

    python scripts/scrape.py fetch --department cbsa --limit-quarters 1
    python scripts/scrape.py parse --all
    python scripts/scrape.py list
"""

import argparse
import sys
from pathlib import Path

# Add parent dir to path for project packages
sys.path.insert(0, str(Path(__file__).parent.parent))

from departments import all_departments, get_department
from fetch.errors import ConfigError, DumpAndHalt
from normalize.vendors import VendorTable
from orchestrate.config import build_run_config
from orchestrate.fetch_run import run_fetch
from orchestrate.parse_run import parse_single, run_parse
from orchestrate.presenter import append_execution_log
from orchestrate.run_context import RunStats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scrape government contract disclosures")
    parser.add_argument("command", choices=["fetch", "parse", "list"], help="Phase to run")
    parser.add_argument("--department", "-d", help="Department acronym (e.g. cbsa)")
    parser.add_argument("--all", action="store_true", help="Run every registered department")
    parser.add_argument("--run-config", help="Path to JSON/YAML run config (overrides environment)")
    parser.add_argument("--storage-dir", type=Path, help="Root directory for raw pages, metadata and records")
    parser.add_argument("--limit-quarters", type=int, help="Max quarters per department (0 = all)")
    parser.add_argument("--limit-contracts", type=int, help="Max contracts per quarter (0 = all)")
    parser.add_argument("--limit-files", type=int, help="Max raw files to parse (0 = all)")
    parser.add_argument("--redownload", action="store_true", help="Re-fetch pages already in the cache")
    parser.add_argument("--delay", type=float, help="Seconds to sleep after each download")
    parser.add_argument("--timeout", type=float, help="HTTP timeout in seconds")
    parser.add_argument("--no-vendor-cleanup", action="store_true", help="Keep vendor names as scraped")
    parser.add_argument("--no-value-cleanup", action="store_true", help="Skip required-value fallbacks")
    parser.add_argument("--vendor-file", type=Path, help="JSON/YAML vendor alias table")
    parser.add_argument("--file", help="Parse a single raw file (with --department)")
    parser.add_argument("--dump-index", action="store_true", help="Print quarter URLs from the index and stop")
    parser.add_argument("--dump-quarter", action="store_true", help="Print contract URLs from the first quarter page and stop")
    parser.add_argument("--no-log", action="store_true", help="Don't append to the execution log")
    parser.add_argument("--quiet", "-q", action="store_true", help="Suppress progress output")
    return parser


def select_departments(args: argparse.Namespace) -> list:
    if args.all:
        return all_departments()
    if not args.department:
        raise ConfigError("Pass --department ACR or --all")
    return [get_department(d) for d in args.department.split(",")]


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "list":
        for dept in all_departments():
            print(f"{dept.acronym:8} {dept.name}")
        return 0

    # CLI flags win over run config and environment
    provided_flags = {a.lstrip("-").split("=")[0].replace("-", "_") for a in argv if a.startswith("--")}
    if "-q" in argv:
        provided_flags.add("quiet")

    try:
        config = build_run_config(args, provided_flags, run_config_path=args.run_config)
        departments = select_departments(args)
        vendors = VendorTable.from_file(config.vendor_file) if config.vendor_file else None
    except ConfigError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    runs: list[RunStats] = []
    try:
        for dept in departments:
            if args.command == "fetch":
                runs.append(run_fetch(dept, config))
            elif args.file:
                stats = RunStats(acronym=dept.acronym, quiet=config.quiet)
                parse_single(dept, args.file, config, vendors=vendors, stats=stats)
                runs.append(stats.finish())
            else:
                runs.append(run_parse(dept, config, vendors=vendors))
    except DumpAndHalt:
        return 0
    except (ConfigError, FileNotFoundError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if len(runs) > 1 and not config.quiet:
        print(f"\n{'='*60}")
        print(f"Completed: {len(runs)} departments")

    if not args.no_log:
        try:
            log_file = append_execution_log(
                config.storage_dir / "logs" / "executions.jsonl",
                " ".join(["scrape.py", *argv]),
                args.command,
                runs,
            )
            if not config.quiet:
                print(f"Execution logged to: {log_file}")
        except OSError as exc:
            print(f"Warning: Could not write execution log: {exc}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
