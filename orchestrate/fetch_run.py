"""
Fetch phase: walk a department's quarters and cache every contract page.

    index page -> quarter URLs -> quarter page(s) -> contract URLs -> raw cache

Each stored contract gets a metadata sidecar when the fiscal year of its
quarter page could be determined.
"""

from __future__ import annotations

import time
from typing import Callable

from fetch.config import RunConfig
from fetch.errors import DumpAndHalt
from fetch.fetcher import HttpClient, Transport
from fetch.metadata import FiscalContext, save_metadata
from fetch.page_store import PageStore
from fetch.selectors import values_via_xpath
from fetch.traversal import iter_quarter_pages

from .department import Department
from .presenter import format_fetch_summary, print_summary
from .run_context import RunStats


def _dump(stage: str, urls: list[str], quiet: bool) -> None:
    if not quiet:
        print(f"[{stage}] {len(urls)} URLs")
        for url in urls:
            print(f"  {url}")
    raise DumpAndHalt(stage, urls)


def fetch_quarter(
    department: Department,
    config: RunConfig,
    store: PageStore,
    page_urls: list[str],
    stats: RunStats,
) -> int:
    """
    Download the contracts listed on one quarter's pages.

    The per-quarter limit counts contracts stored (fetched or already
    cached) across all pages of the quarter.

    Returns:
        Number of contracts stored for the quarter
    """
    limit = config.limit_contracts_per_quarter
    context = FiscalContext()
    stored = 0

    for page_url in page_urls:
        context.clear()
        page = store.get_page(page_url)
        if not page:
            if not config.quiet:
                print(f"  [quarter] Could not fetch {page_url}")
            continue

        context.year = department.fiscal_year_from_quarter_page(page, page_url) or ''
        context.quarter = department.fiscal_quarter_from_quarter_page(page, page_url) or ''

        contract_urls = values_via_xpath(page, department.quarter_to_contract_xpath)
        if config.dev_dump_quarter:
            _dump("quarter", contract_urls, config.quiet)

        for contract_url in contract_urls:
            if limit and stored >= limit:
                return stored

            url = department.quarter_to_contract_url_transform(contract_url)
            content, was_cached = store.fetch_or_cached(url, department.acronym)
            if content is None:
                stats.contracts_failed += 1
                if not config.quiet:
                    print(f"  [contract] {store.last_failure}")
                continue

            stored += 1
            save_metadata(store.paths, department.acronym, store.canonical_url(url), context)
            if not was_cached:
                stats.contracts_fetched += 1

    return stored


def run_fetch(
    department: Department,
    config: RunConfig,
    transport: Transport | None = None,
    stats: RunStats | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> RunStats:
    """
    Fetch every quarter of a department into the raw page cache.

    Args:
        department: Department descriptor
        config: Run configuration
        transport: Page source; an HttpClient is created when omitted
        stats: Counters to update; a fresh RunStats when omitted
        sleep: Throttle function (injected for tests)

    Raises:
        DumpAndHalt: a dev dump switch is on
    """
    stats = stats or RunStats(acronym=department.acronym, quiet=config.quiet)
    client = None
    if transport is None:
        transport = client = HttpClient(config, base_url=department.base_url)
    store = PageStore(transport, config, department, stats, sleep=sleep)

    if not config.quiet:
        print(f"Fetching {department.name} ({department.acronym})...")

    def on_index(quarters: list[str]) -> None:
        if config.dev_dump_index:
            _dump("index", quarters, config.quiet)
        if not config.quiet:
            print(f"  [index] {len(quarters)} quarters listed")

    try:
        quarter_pages = iter_quarter_pages(
            department, store, limit=config.limit_quarters, on_index=on_index,
        )
        for i, page_urls in enumerate(quarter_pages, 1):
            if not config.quiet:
                print(f"  [quarter {i}] {page_urls[0]}")
            fetch_quarter(department, config, store, page_urls, stats)
            stats.quarters_fetched += 1
    finally:
        if client is not None:
            client.close()

    stats.finish()
    print_summary(format_fetch_summary(stats), quiet=config.quiet)
    return stats
