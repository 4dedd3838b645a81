"""
Fetch layer for contract-disclosure crawling.

Primary interface:
    from fetch import PageStore, HttpClient, RunConfig

    store = PageStore(HttpClient(config), config, department, stats)
    content, was_cached = store.fetch_or_cached(url, department.acronym)

Modules:
- config: RunConfig (env / run-config driven settings)
- fetcher: HttpClient transport (requests session)
- page_store: idempotent raw page cache
- traversal: index → quarter → page URL groups
- metadata: fiscal-context sidecars
- selectors: lxml XPath helpers
- cleaners: URL and source HTML fixups
"""

from .config import RunConfig
from .errors import ConfigError, DumpAndHalt, ExtractionError, FetchError, ScraperError
from .fetcher import HttpClient, Transport
from .hasher import hash_content, url_to_filename
from .metadata import FiscalContext, read_metadata, save_metadata
from .page_store import PageStore
from .paths import PathResolver, atomic_write_text
from .traversal import iter_quarter_pages, list_quarter_pages, page_urls_for_quarter, quarter_urls


__all__ = [
    'RunConfig',
    'ConfigError',
    'DumpAndHalt',
    'ExtractionError',
    'FetchError',
    'ScraperError',
    'HttpClient',
    'Transport',
    'hash_content',
    'url_to_filename',
    'FiscalContext',
    'read_metadata',
    'save_metadata',
    'PageStore',
    'PathResolver',
    'atomic_write_text',
    'iter_quarter_pages',
    'list_quarter_pages',
    'page_urls_for_quarter',
    'quarter_urls',
]
