"""
Run-scoped counters, passed explicitly through fetch and parse runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


@dataclass
class RunStats:
    """Mutable tally for one department run (fetch or parse)."""
    acronym: str = ''
    started_at: str = field(default_factory=_now)
    finished_at: str | None = None

    # Fetch
    quarters_fetched: int = 0
    contracts_fetched: int = 0
    already_cached: int = 0
    contracts_failed: int = 0

    # Parse
    files_parsed: int = 0
    files_failed: int = 0

    warnings: list[str] = field(default_factory=list)
    quiet: bool = False

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        if not self.quiet:
            print(f"  Warning: {message}")

    def finish(self) -> 'RunStats':
        self.finished_at = _now()
        return self

    def as_dict(self) -> dict:
        return {
            "acronym": self.acronym,
            "started_at": self.started_at,
            "finished_at": self.finished_at,
            "quarters_fetched": self.quarters_fetched,
            "contracts_fetched": self.contracts_fetched,
            "already_cached": self.already_cached,
            "contracts_failed": self.contracts_failed,
            "files_parsed": self.files_parsed,
            "files_failed": self.files_failed,
            "warning_count": len(self.warnings),
        }
