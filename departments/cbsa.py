"""
Canada Border Services Agency (cbsa).

- Quarter listings are paginated; the pager links pages 2..n only.
- URLs carry a jsessionid that changes every visit.
- Missing contracts render a normal-looking page with an error notice.
- Quarters before 2011-12 use a different page layout and are skipped.
"""

import re

from orchestrate.department import Department

from .common import (
    extract_by_labels,
    fiscal_quarter_from_heading,
    fiscal_year_from_heading,
    strip_session_ids,
)


BASE_URL = 'https://www.cbsa-asfc.gc.ca'

# First fiscal year published with the current layout
FIRST_SUPPORTED_YEAR = 2011

LABELS = {
    'vendorName': ('vendor name',),
    'referenceNumber': ('reference number',),
    'contractDate': ('contract date',),
    'description': ('description of work',),
    'extraDescription': ('detailed description',),
    'contractPeriodStart': ('contract period - from', 'contract period start'),
    'contractPeriodEnd': ('contract period - to', 'contract period end'),
    'deliveryDate': ('delivery date',),
    'originalValue': ('original contract value',),
    'contractValue': ('contract value', 'total contract value'),
    'comments': ('comments',),
    'amendedValues': ('amendment value',),
}

_URL_YEAR_RE = re.compile(r'(?:fy|year=|/)((?:19|20)\d{2})')


def raw_extract(html: str):
    return extract_by_labels(html, LABELS)


def filter_quarter_urls(urls: list[str]) -> list[str]:
    """Drop quarters published before the layout change."""
    kept = []
    for url in urls:
        match = _URL_YEAR_RE.search(url)
        if match and int(match.group(1)) < FIRST_SUPPORTED_YEAR:
            continue
        kept.append(url)
    return kept


def quarter_url(url: str) -> str:
    """Quarter listings default to 10 rows; ask for the largest page size."""
    url = strip_session_ids(url)
    separator = '&' if '?' in url else '?'
    if 'rows=' in url:
        return url
    return f"{url}{separator}rows=100"


department = Department(
    acronym='cbsa',
    name='Canada Border Services Agency',
    base_url=BASE_URL,
    index_url=f'{BASE_URL}/agency-agence/reports-rapports/pd-dp/contracts-contrats/menu-eng.html',
    index_to_quarter_xpath="//main//ul/li/a/@href",
    quarter_to_contract_xpath="//table[@id='contracts']//tbody//a/@href",
    quarter_multi_page_xpath="//ul[contains(@class, 'pagination')]//a[not(@rel)]/@href",
    raw_extract=raw_extract,
    include_first_paginated_page=True,
    filter_quarter_urls=filter_quarter_urls,
    index_to_quarter_url_transform=quarter_url,
    strip_session_ids=strip_session_ids,
    fiscal_year_from_quarter_page=fiscal_year_from_heading,
    fiscal_quarter_from_quarter_page=fiscal_quarter_from_heading,
    contract_content_subset_xpath="//main",
    broken_page_marker='The requested contract could not be found',
    sleep_between_downloads=0.5,
)
