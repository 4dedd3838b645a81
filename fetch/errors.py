"""
Exception hierarchy shared by the fetch, parse and normalize layers.
"""


class ScraperError(Exception):
    """Base class for all scraper errors."""
    pass


class ConfigError(ScraperError):
    """Configuration is missing or malformed (env, run config, department)."""
    pass


class FetchError(ScraperError):
    """A page could not be retrieved."""
    pass


class ExtractionError(ScraperError):
    """A department extractor could not produce a record for a page."""
    pass


class DumpAndHalt(ScraperError):
    """Raised by the dev inspection switches after printing a URL list."""

    def __init__(self, stage: str, urls: list[str]):
        super().__init__(f"{stage}: {len(urls)} URLs")
        self.stage = stage
        self.urls = urls
