"""
Vendor name canonicalization.

The same supplier shows up under many spellings across departments
("IBM Canada Ltd.", "I.B.M. CANADA LIMITED", ...). A vendor table maps each
canonical name to its known aliases:

    IBM Canada:
      - IBM Canada Ltd.
      - I.B.M. Canada Limited

and a reverse index resolves any alias back to its canonical form. The table
is loaded from a JSON or YAML file and passed to the normalizer explicitly.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Protocol

import yaml

from fetch.errors import ConfigError


# Trailing corporate designations ignored when matching
CORPORATE_SUFFIXES = (
    'incorporated', 'inc', 'limited', 'ltd', 'ltée', 'ltee', 'corporation',
    'corp', 'co', 'company', 'llc', 'llp', 'lp', 'plc',
)

_PUNCT_RE = re.compile(r'[.,\'"()]')
_SUFFIX_RE = re.compile(r'(?:\s+(?:' + '|'.join(CORPORATE_SUFFIXES) + r'))+$')


class VendorLookup(Protocol):
    def canonicalize(self, name: str) -> str: ...


def clean_vendor_name(name: str) -> str:
    """Collapse whitespace and trim."""
    return re.sub(r'\s+', ' ', str(name or '').replace('\xa0', ' ')).strip()


def vendor_key(name: str) -> str:
    """Case-, punctuation- and suffix-insensitive matching key."""
    key = _PUNCT_RE.sub('', clean_vendor_name(name).lower())
    key = re.sub(r'\s+', ' ', key).strip()
    stripped = _SUFFIX_RE.sub('', key)
    return stripped or key


class VendorTable:
    """Alias table with a reverse index of cleaned keys."""

    def __init__(self, aliases: dict[str, list[str]] | None = None):
        self.aliases: dict[str, list[str]] = {}
        self._index: dict[str, str] = {}
        for canonical, names in (aliases or {}).items():
            self.add(canonical, names)

    def add(self, canonical: str, aliases=()) -> None:
        canonical = clean_vendor_name(canonical)
        if not canonical:
            return
        if isinstance(aliases, str):
            aliases = [aliases]
        self.aliases.setdefault(canonical, []).extend(aliases or [])
        self._index[vendor_key(canonical)] = canonical
        for alias in aliases or []:
            key = vendor_key(str(alias))
            if key:
                self._index[key] = canonical

    @classmethod
    def from_file(cls, path: str | Path) -> 'VendorTable':
        """
        Load a vendor table from .json, .yaml or .yml.

        Raises:
            ConfigError: unreadable file or not a mapping of name -> aliases
        """
        path = Path(path)
        try:
            text = path.read_text(encoding='utf-8')
        except OSError as exc:
            raise ConfigError(f"Cannot read vendor file {path}: {exc}") from exc

        try:
            if path.suffix.lower() in ('.yaml', '.yml'):
                data = yaml.safe_load(text)
            else:
                data = json.loads(text)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Malformed vendor file {path}: {exc}") from exc

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Vendor file {path} must map canonical names to alias lists")
        return cls(data)

    def canonicalize(self, name: str) -> str:
        """Canonical vendor name, or the cleaned input when unknown."""
        cleaned = clean_vendor_name(name)
        if not cleaned:
            return cleaned
        return self._index.get(vendor_key(cleaned), cleaned)

    def __len__(self) -> int:
        return len(self.aliases)
