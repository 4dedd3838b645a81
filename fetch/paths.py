"""
On-disk layout for raw pages, metadata sidecars and generated records.

    {storage}/{raw_folder}/{acronym}/{hash}.html
    {storage}/{metadata_folder}/{acronym}/{hash}.json
    {storage}/{output_folder}/{acronym}/{hash}.json
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from .config import RunConfig


RAW_EXTENSION = ".html"
JSON_EXTENSION = ".json"


class PathResolver:
    """Resolve department directories for a run config."""

    def __init__(self, config: RunConfig):
        self.config = config

    @property
    def raw_root(self) -> Path:
        return self.config.storage_dir / self.config.raw_folder

    @property
    def metadata_root(self) -> Path:
        return self.config.storage_dir / self.config.metadata_folder

    @property
    def output_root(self) -> Path:
        return self.config.storage_dir / self.config.output_folder

    def raw_dir(self, acronym: str = "") -> Path:
        return self.raw_root / acronym if acronym else self.raw_root

    def metadata_dir(self, acronym: str) -> Path:
        return self.metadata_root / acronym

    def output_dir(self, acronym: str) -> Path:
        return self.output_root / acronym

    def metadata_path_for(self, acronym: str, raw_filename: str) -> Path:
        """Sidecar path matching a raw page filename."""
        return self.metadata_dir(acronym) / (Path(raw_filename).stem + JSON_EXTENSION)

    def output_path_for(self, acronym: str, raw_filename: str) -> Path:
        """Generated record path matching a raw page filename."""
        return self.output_dir(acronym) / (Path(raw_filename).stem + JSON_EXTENSION)


def atomic_write_text(path: Path, text: str) -> Path:
    """Write text via a temp file in the same directory, then rename.

    A crashed run never leaves a half-written file at `path`.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    return path
