"""
Parse phase: turn cached raw pages into canonical JSON records.

    {raw_root}/{acronym}/{hash}.html + sidecar -> {output_root}/{acronym}/{hash}.json
"""

from __future__ import annotations

from itertools import islice
from pathlib import Path

from fetch.cleaners import apply_initial_source_html_transformations
from fetch.config import RunConfig
from fetch.errors import ExtractionError
from fetch.metadata import read_metadata
from fetch.paths import RAW_EXTENSION, PathResolver
from normalize.normalizer import NormalizeOptions, normalize
from normalize.vendors import VendorLookup

from .department import Department
from .presenter import format_parse_summary, print_summary, write_record_json
from .run_context import RunStats


def raw_files(paths: PathResolver, acronym: str, limit: int = 0) -> list[Path]:
    """Cached raw pages for a department, sorted, at most `limit` (0 = all)."""
    raw_dir = paths.raw_dir(acronym)
    if not raw_dir.is_dir():
        return []
    files = sorted(p for p in raw_dir.glob(f"*{RAW_EXTENSION}") if p.is_file())
    if limit:
        files = list(islice(files, limit))
    return files


def parse_single(
    department: Department,
    filename: str,
    config: RunConfig,
    vendors: VendorLookup | None = None,
    stats: RunStats | None = None,
) -> dict | None:
    """
    Parse one cached raw page and write its record.

    Args:
        department: Department descriptor (supplies raw_extract)
        filename: Raw page filename within the department's raw directory
        config: Run configuration
        vendors: Vendor lookup for name canonicalization
        stats: Counters to update

    Returns:
        The normalized record, or None when extraction failed
    """
    stats = stats or RunStats(acronym=department.acronym, quiet=config.quiet)
    paths = PathResolver(config)
    acronym = department.acronym
    raw_path = paths.raw_dir(acronym) / filename

    source = apply_initial_source_html_transformations(raw_path.read_text(encoding="utf-8"))

    try:
        raw = department.raw_extract(source)
    except ExtractionError as exc:
        raw = None
        reason = str(exc)
    else:
        reason = "no values extracted"

    if raw is None:
        stats.files_failed += 1
        if not config.quiet:
            print(f"  [parse] {acronym}/{filename}: {reason}")
        return None

    metadata = read_metadata(paths, acronym, filename, warn=stats.warn)
    record = normalize(
        raw,
        metadata,
        acronym,
        filename,
        options=NormalizeOptions.from_config(config),
        vendors=vendors,
        warn=stats.warn,
    )
    write_record_json(record, paths.output_path_for(acronym, filename))
    stats.files_parsed += 1
    return record


def run_parse(
    department: Department,
    config: RunConfig,
    vendors: VendorLookup | None = None,
    stats: RunStats | None = None,
) -> RunStats:
    """Parse every cached page of a department (up to limit_files)."""
    stats = stats or RunStats(acronym=department.acronym, quiet=config.quiet)
    paths = PathResolver(config)

    if not paths.raw_dir(department.acronym).is_dir():
        if not config.quiet:
            print(f"No raw pages for {department.acronym} in {paths.raw_dir(department.acronym)}")
        return stats.finish()

    files = raw_files(paths, department.acronym, limit=config.limit_files)
    if not config.quiet:
        print(f"Parsing {len(files)} pages for {department.name} ({department.acronym})...")

    for raw_path in files:
        parse_single(department, raw_path.name, config, vendors=vendors, stats=stats)

    stats.finish()
    print_summary(format_parse_summary(stats), quiet=config.quiet)
    return stats
