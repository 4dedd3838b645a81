"""
Metadata sidecars: fetch-time fiscal context stored next to each raw page.

    {metadata_root}/{acronym}/{hash}.json
    {"sourceURL": "...", "sourceYear": 2016, "sourceQuarter": 3}
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from .hasher import url_to_filename
from .paths import JSON_EXTENSION, PathResolver, atomic_write_text


SIDECAR_KEYS = ("sourceURL", "sourceYear", "sourceQuarter")

_LEADING_INT_RE = re.compile(r'^\s*([+-]?\d+)')


def to_int(value) -> int:
    """Leading integer of a value, 0 when there is none ("2016-17" -> 2016)."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    match = _LEADING_INT_RE.match(str(value or ''))
    return int(match.group(1)) if match else 0


@dataclass
class FiscalContext:
    """Fiscal year/quarter of the quarter page currently being processed."""
    year: str | int = ''
    quarter: str | int = ''

    def clear(self) -> None:
        self.year = ''
        self.quarter = ''

    @property
    def known(self) -> bool:
        return bool(self.year)


def sidecar_for(url: str, context: FiscalContext) -> dict | None:
    """Sidecar payload for a contract URL, or None without a fiscal year."""
    if not context.known:
        return None
    return {
        "sourceURL": url,
        "sourceYear": to_int(context.year),
        "sourceQuarter": to_int(context.quarter),
    }


def save_metadata(paths: PathResolver, acronym: str, url: str, context: FiscalContext) -> Path | None:
    """
    Write the sidecar for a (session-ID-stripped) contract URL.

    Returns:
        Path written, or None if there was no fiscal context to record
    """
    payload = sidecar_for(url, context)
    if payload is None:
        return None
    path = paths.metadata_dir(acronym) / url_to_filename(url, JSON_EXTENSION)
    return atomic_write_text(path, json.dumps(payload, indent=2))


def read_metadata(paths: PathResolver, acronym: str, raw_filename: str, warn=None) -> dict:
    """
    Load the sidecar matching a raw page filename.

    Missing sidecars mean "no fiscal attribution" and return {}. Unreadable
    ones are reported through warn and also return {}.
    """
    path = paths.metadata_path_for(acronym, raw_filename)
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        if warn:
            warn(f"Unreadable metadata for {raw_filename}: {exc}")
        return {}
    if not isinstance(data, dict):
        if warn:
            warn(f"Unexpected metadata shape for {raw_filename}")
        return {}
    return {k: data[k] for k in SIDECAR_KEYS if k in data}
