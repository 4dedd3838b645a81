"""
Quarter traversal: index page → quarter URLs → (paginated) quarter pages.
"""

from __future__ import annotations

from itertools import islice
from typing import TYPE_CHECKING, Callable, Iterator

from .selectors import values_via_xpath

if TYPE_CHECKING:
    from orchestrate.department import Department
    from .page_store import PageStore


def _dedupe(urls: list[str]) -> list[str]:
    seen = set()
    out = []
    for url in urls:
        if url not in seen:
            seen.add(url)
            out.append(url)
    return out


def quarter_urls(department: 'Department', store: 'PageStore') -> list[str]:
    """Quarter URLs listed on the index page, after the department filter."""
    index_page = store.get_page(department.index_url)
    if not index_page:
        if not store.config.quiet:
            print(f"  [index] Could not fetch {department.index_url}")
        return []
    urls = values_via_xpath(index_page, department.index_to_quarter_xpath)
    return list(department.filter_quarter_urls(urls))


def page_urls_for_quarter(department: 'Department', store: 'PageStore', quarter_url: str) -> list[str]:
    """
    Get the URLs of the index pages for one quarter.

    Some departments paginate their quarter index pages; for those the first
    page is fetched and its pager links collected. Returns a single-item list
    for unpaginated quarters.
    """
    url = department.index_to_quarter_url_transform(quarter_url)

    if not department.paginated:
        return [url]

    first_page = store.get_page(url)
    if not first_page:
        if not store.config.quiet:
            print(f"  [quarter] Could not fetch {url}")
        return [url]

    pages = [
        department.index_to_quarter_url_transform(page_url)
        for page_url in values_via_xpath(first_page, department.quarter_multi_page_xpath)
    ]

    # Some departments leave page 1 out of their own pager
    if department.include_first_paginated_page:
        pages.insert(0, url)

    if not pages:
        return [url]
    return _dedupe(pages)


def iter_quarter_pages(
    department: 'Department',
    store: 'PageStore',
    limit: int = 0,
    on_index: Callable[[list[str]], None] | None = None,
) -> Iterator[list[str]]:
    """
    Yield one group of page URLs per quarter.

    `on_index` receives every quarter URL listed on the index page before
    the first quarter is fetched. Quarters past `limit` (0 = unlimited) are
    never fetched.
    """
    urls = quarter_urls(department, store)
    if on_index is not None:
        on_index(urls)
    if limit:
        urls = list(islice(urls, limit))
    for quarter_url in urls:
        yield page_urls_for_quarter(department, store, quarter_url)


def list_quarter_pages(department: 'Department', store: 'PageStore', limit: int = 0) -> list[list[str]]:
    return list(iter_quarter_pages(department, store, limit=limit))
