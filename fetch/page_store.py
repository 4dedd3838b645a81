"""
Idempotent download cache for contract pages.

If a contract page has already been downloaded it is served from disk, so a
stopped run can be restarted without going back to the very beginning.
"""

from __future__ import annotations

import time
from urllib.parse import urljoin
from pathlib import Path
from typing import TYPE_CHECKING, Callable

from .cleaners import clean_incoming_url
from .config import RunConfig
from .fetcher import Transport
from .hasher import url_to_filename
from .paths import PathResolver, atomic_write_text
from .selectors import inner_html_via_xpath

if TYPE_CHECKING:
    from orchestrate.department import Department
    from orchestrate.run_context import RunStats


class PageStore:
    """
    Page cache for one department run.

    Args:
        transport: Object with get(url) -> str | None
        config: Run configuration
        department: Supplies session-ID stripping, broken-page marker,
            content subset selector and per-department delay
        stats: Run counters (already_cached is incremented here)
        sleep: Injected for tests
    """

    def __init__(
        self,
        transport: Transport,
        config: RunConfig,
        department: 'Department',
        stats: 'RunStats',
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.transport = transport
        self.config = config
        self.department = department
        self.stats = stats
        self.sleep = sleep
        self.paths = PathResolver(config)
        self.last_failure: str | None = None

    def resolve(self, url: str) -> str:
        """Cleaned URL, made absolute against the department base URL."""
        url = clean_incoming_url(url)
        if self.department.base_url:
            url = urljoin(self.department.base_url, url)
        return url

    def canonical_url(self, url: str) -> str:
        """Cleaned URL with session IDs removed; the cache key."""
        return self.department.strip_session_ids(self.resolve(url))

    def filename_for(self, url: str) -> str:
        return url_to_filename(self.canonical_url(url))

    def path_for(self, url: str, subdirectory: str = '') -> Path:
        return self.paths.raw_dir(subdirectory) / self.filename_for(url)

    def get_page(self, url: str) -> str | None:
        """Fetch without caching (index and quarter pages are always re-read)."""
        return self.transport.get(self.resolve(url))

    def fetch_or_cached(self, url: str, subdirectory: str = '') -> tuple[str | None, bool]:
        """
        Return a page from the cache, or fetch and store it.

        Args:
            url: Contract page URL
            subdirectory: Usually the department acronym

        Returns:
            (content, was_cached). content is None when the download failed
            (empty body, broken-page marker, or content subset not found);
            nothing is written in that case.
        """
        self.last_failure = None
        url = self.resolve(url)
        path = self.path_for(url, subdirectory)

        if path.exists() and not self.config.redownload_existing:
            self.stats.already_cached += 1
            return path.read_text(encoding="utf-8"), True

        page_source = self.transport.get(url)

        if not page_source or not page_source.strip():
            return self._fail(f"Empty response for {url}")

        marker = self.department.broken_page_marker
        if marker and marker in page_source:
            return self._fail(f"Broken page marker found for {url}")

        if self.department.contract_content_subset_xpath:
            subset = inner_html_via_xpath(page_source, self.department.contract_content_subset_xpath)
            if subset is None or not subset.strip():
                return self._fail(f"Content subset not found for {url}")
            page_source = subset

        atomic_write_text(path, page_source)

        # Global and per-department delays are cumulative
        delay = self.config.sleep_between_downloads + self.department.sleep_between_downloads
        if delay > 0:
            self.sleep(delay)

        return page_source, False

    def _fail(self, reason: str) -> tuple[None, bool]:
        self.last_failure = reason
        return None, False
