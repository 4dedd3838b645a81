"""
Department descriptor: everything the core needs from a department plugin.

Required fields cover the crawl selectors and the extraction strategy.
Optional hooks default to identity/no-op implementations chosen at
construction time.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from fetch.errors import ConfigError


RawExtract = Callable[[str], 'dict[str, Any] | None']
UrlTransform = Callable[[str], str]
UrlFilter = Callable[[list[str]], list[str]]
QuarterPageHook = Callable[[str, str], Any]  # (quarter_page_html, quarter_page_url)


def identity(value):
    return value


def no_fiscal_value(html: str, url: str) -> str:
    return ''


@dataclass
class Department:
    """A government department's contract-disclosure site."""

    # Required
    acronym: str
    index_url: str
    index_to_quarter_xpath: str
    quarter_to_contract_xpath: str
    raw_extract: RawExtract

    name: str = ''
    base_url: str | None = None

    # Paginated quarter indexes
    quarter_multi_page_xpath: str | None = None
    paginated: bool | None = None  # defaults to bool(quarter_multi_page_xpath)
    include_first_paginated_page: bool = False

    # URL hooks
    filter_quarter_urls: UrlFilter = identity
    index_to_quarter_url_transform: UrlTransform = identity
    quarter_to_contract_url_transform: UrlTransform = identity
    strip_session_ids: UrlTransform = identity

    # Fiscal context from the quarter page
    fiscal_year_from_quarter_page: QuarterPageHook = no_fiscal_value
    fiscal_quarter_from_quarter_page: QuarterPageHook = no_fiscal_value

    # Contract page handling
    contract_content_subset_xpath: str | None = None
    broken_page_marker: str | None = None
    sleep_between_downloads: float = 0.0

    def __post_init__(self):
        if not self.acronym:
            raise ConfigError("Department acronym is required")
        if not self.index_url:
            raise ConfigError(f"{self.acronym}: index_url is required")
        for name in ("index_to_quarter_xpath", "quarter_to_contract_xpath"):
            if not getattr(self, name):
                raise ConfigError(f"{self.acronym}: {name} is required")

        hooks = (
            "raw_extract",
            "filter_quarter_urls",
            "index_to_quarter_url_transform",
            "quarter_to_contract_url_transform",
            "strip_session_ids",
            "fiscal_year_from_quarter_page",
            "fiscal_quarter_from_quarter_page",
        )
        for name in hooks:
            if not callable(getattr(self, name)):
                raise ConfigError(f"{self.acronym}: {name} must be callable")

        if self.paginated is None:
            self.paginated = bool(self.quarter_multi_page_xpath)
        if self.paginated and not self.quarter_multi_page_xpath:
            raise ConfigError(f"{self.acronym}: paginated quarters need quarter_multi_page_xpath")
        if self.sleep_between_downloads < 0:
            raise ConfigError(f"{self.acronym}: sleep_between_downloads must be >= 0")

        self.name = self.name or self.acronym.upper()
