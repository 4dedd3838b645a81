"""
Configuration for fetch and parse runs.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping

from .errors import ConfigError


# User agents for rotation
USER_AGENTS = [
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 (KHTML, like Gecko) Version/17.2 Safari/605.1.15",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:121.0) Gecko/20100101 Firefox/121.0",
]

# Default request headers
DEFAULT_HEADERS = {
    'Accept': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'Accept-Language': 'en-CA,en;q=0.9,fr-CA;q=0.8',
    'Accept-Encoding': 'gzip, deflate',
    'Connection': 'keep-alive',
}

DEFAULT_STORAGE_DIR = Path.cwd() / "storage"

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}

# RunConfig field -> environment variable
ENV_VARS = {
    "storage_dir": "STORAGE_DIR",
    "raw_folder": "FETCH_RAW_HTML_FOLDER",
    "metadata_folder": "FETCH_METADATA_FOLDER",
    "output_folder": "PARSE_JSON_OUTPUT_FOLDER",
    "redownload_existing": "FETCH_REDOWNLOAD_EXISTING_FILES",
    "sleep_between_downloads": "FETCH_SLEEP_BETWEEN_DOWNLOADS",
    "limit_quarters": "FETCH_LIMIT_QUARTERS",
    "limit_contracts_per_quarter": "FETCH_LIMIT_CONTRACTS_PER_QUARTER",
    "limit_files": "PARSE_LIMIT_FILES",
    "clean_vendor_names": "PARSE_CLEAN_VENDOR_NAMES",
    "clean_contract_values": "PARSE_CLEAN_CONTRACT_VALUES",
    "vendor_file": "PARSE_VENDOR_FILE",
    "dev_dump_index": "DEV_TEST_INDEX",
    "dev_dump_quarter": "DEV_TEST_QUARTER",
    "timeout": "FETCH_TIMEOUT",
    "verify_ssl": "FETCH_VERIFY_SSL",
    "user_agent": "FETCH_USER_AGENT",
}


@dataclass
class RunConfig:
    """Settings for a single fetch or parse run.

    Built once (from_env / run config / CLI) and passed to every component
    that needs it.
    """

    # Storage layout
    storage_dir: Path = DEFAULT_STORAGE_DIR
    raw_folder: str = "raw-data"
    metadata_folder: str = "metadata"
    output_folder: str = "generated-data"

    # Fetch layer settings
    redownload_existing: bool = False
    sleep_between_downloads: float = 0.0  # added to the per-department delay
    timeout: float = 30.0
    verify_ssl: bool = False
    user_agent: str | None = None  # if None, rotates from USER_AGENTS

    # Run limits (0 = unlimited)
    limit_quarters: int = 0
    limit_contracts_per_quarter: int = 0
    limit_files: int = 0

    # Parse layer settings
    clean_vendor_names: bool = True
    clean_contract_values: bool = True
    vendor_file: Path | None = None

    # Dev inspection switches: print the URL list and halt
    dev_dump_index: bool = False
    dev_dump_quarter: bool = False

    quiet: bool = False

    def __post_init__(self):
        self.storage_dir = Path(self.storage_dir)
        if self.vendor_file is not None:
            self.vendor_file = Path(self.vendor_file)
        for name in ("limit_quarters", "limit_contracts_per_quarter", "limit_files"):
            if getattr(self, name) < 0:
                raise ConfigError(f"{name} must be >= 0")
        if self.sleep_between_downloads < 0:
            raise ConfigError("sleep_between_downloads must be >= 0")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **overrides) -> 'RunConfig':
        """Build a config from environment-style variables.

        Unset variables keep the dataclass defaults. Keyword overrides win.
        """
        environ = os.environ if environ is None else environ
        types = {f.name: f.type for f in fields(cls)}
        values = {}
        for name, var in ENV_VARS.items():
            if var not in environ:
                continue
            value = coerce_value(name, types[name], environ[var], source=var)
            if value is None and getattr(cls, name, None) is not None:
                continue
            values[name] = value
        values.update(overrides)
        return cls(**values)


def coerce_value(name: str, annotation, raw, source: str | None = None):
    """Coerce a raw config value to the type of a RunConfig field."""
    label = source or name
    kind = annotation if isinstance(annotation, str) else getattr(annotation, "__name__", str(annotation))

    if raw is None:
        return None
    if "bool" in kind:
        if isinstance(raw, bool):
            return raw
        text = str(raw).strip().lower()
        if text in _TRUE:
            return True
        if text in _FALSE:
            return False
        raise ConfigError(f"{label}: expected a boolean, got {raw!r}")
    if "int" in kind:
        try:
            return int(str(raw).strip() or 0)
        except ValueError:
            raise ConfigError(f"{label}: expected an integer, got {raw!r}") from None
    if "float" in kind:
        try:
            return float(str(raw).strip() or 0)
        except ValueError:
            raise ConfigError(f"{label}: expected a number, got {raw!r}") from None
    if "Path" in kind:
        text = str(raw).strip()
        return Path(text) if text else None
    text = str(raw).strip()
    return text or None if "None" in kind else text
