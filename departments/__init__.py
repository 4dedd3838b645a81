"""
Department plugin registry.

    from departments import get_department
    dept = get_department('cbsa')
"""

from fetch.errors import ConfigError
from orchestrate.department import Department

from . import agr, cbsa, dnd


DEPARTMENTS: dict[str, Department] = {
    module.department.acronym: module.department
    for module in (agr, cbsa, dnd)
}


def get_department(acronym: str) -> Department:
    """Look up a department by acronym (case-insensitive)."""
    key = (acronym or '').strip().lower()
    if key not in DEPARTMENTS:
        known = ', '.join(sorted(DEPARTMENTS))
        raise ConfigError(f"Unknown department {acronym!r} (known: {known})")
    return DEPARTMENTS[key]


def all_departments() -> list[Department]:
    return [DEPARTMENTS[k] for k in sorted(DEPARTMENTS)]


__all__ = ['DEPARTMENTS', 'get_department', 'all_departments']
