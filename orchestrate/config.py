"""
Run configuration loading for fetch and parse runs.

Precedence, highest first: CLI flags, run-config file, environment,
RunConfig defaults.
"""

import argparse
import json
import os
from dataclasses import fields
from pathlib import Path
from typing import Mapping

import yaml

from fetch.config import ENV_VARS, RunConfig, coerce_value
from fetch.errors import ConfigError


# CLI argument -> RunConfig field
ARG_FIELDS = {
    "storage_dir": "storage_dir",
    "limit_quarters": "limit_quarters",
    "limit_contracts": "limit_contracts_per_quarter",
    "limit_files": "limit_files",
    "redownload": "redownload_existing",
    "delay": "sleep_between_downloads",
    "timeout": "timeout",
    "vendor_file": "vendor_file",
    "dump_index": "dev_dump_index",
    "dump_quarter": "dev_dump_quarter",
    "quiet": "quiet",
}

# Negated switches: CLI argument -> RunConfig field set to False
NEGATED_ARG_FIELDS = {
    "no_vendor_cleanup": "clean_vendor_names",
    "no_value_cleanup": "clean_contract_values",
}


def load_run_config(path: str) -> dict:
    """Load a run configuration from JSON or YAML."""
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Run config not found: {path}")

    # Handle empty files (e.g., /dev/null) gracefully
    content = p.read_text(encoding="utf-8").strip()
    if not content:
        return {}

    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            result = yaml.safe_load(content)
        else:
            result = json.loads(content)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise ConfigError(f"Malformed run config {path}: {exc}") from exc

    if result and not isinstance(result, dict):
        raise ConfigError(f"Run config {path} must be a mapping")
    return result if result else {}


def _field_name(key: str) -> str | None:
    """Accept RunConfig field names and their environment variable names."""
    field_names = {f.name for f in fields(RunConfig)}
    if key in field_names:
        return key
    by_env = {var.lower(): name for name, var in ENV_VARS.items()}
    return by_env.get(key.lower())


def apply_run_config(values: dict, cfg: dict, provided: set[str] | None = None) -> dict:
    """
    Apply run config entries to a RunConfig keyword dict.

    Keys already in `provided` (set from the CLI) are left alone. Unknown
    keys are ignored.
    """
    if not cfg:
        return values

    types = {f.name: f.type for f in fields(RunConfig)}
    provided = provided or set()
    for key, raw in cfg.items():
        name = _field_name(str(key))
        if name is None or name in provided:
            continue
        value = coerce_value(name, types[name], raw, source=f"run config '{key}'")
        if value is None and getattr(RunConfig, name, None) is not None:
            continue
        values[name] = value
    return values


def cli_overrides(args: argparse.Namespace, provided_flags: set[str]) -> dict:
    """RunConfig values for the flags actually given on the command line."""
    overrides = {}
    for arg_key, name in ARG_FIELDS.items():
        if arg_key in provided_flags and getattr(args, arg_key, None) is not None:
            overrides[name] = getattr(args, arg_key)
    for arg_key, name in NEGATED_ARG_FIELDS.items():
        if arg_key in provided_flags and getattr(args, arg_key, False):
            overrides[name] = False
    return overrides


def build_run_config(
    args: argparse.Namespace | None = None,
    provided_flags: set[str] | None = None,
    environ: Mapping[str, str] | None = None,
    run_config_path: str | None = None,
) -> RunConfig:
    """
    Layer defaults, environment, run-config file and CLI flags into a RunConfig.

    Raises:
        ConfigError: malformed environment value or run config
    """
    environ = os.environ if environ is None else environ
    provided_flags = provided_flags or set()

    base = RunConfig.from_env(environ)
    values = {f.name: getattr(base, f.name) for f in fields(RunConfig)}

    cfg = load_run_config(run_config_path) if run_config_path else {}

    overrides = cli_overrides(args, provided_flags) if args is not None else {}
    apply_run_config(values, cfg, provided=set(overrides))
    values.update(overrides)
    return RunConfig(**values)
