"""
HTTP fetch layer.

One persistent requests session per department run, so cookies set by a
department's site (session IDs, language choice) carry across requests.
"""

import random
from typing import Protocol
from urllib.parse import urljoin

import requests
import urllib3

from .config import RunConfig, USER_AGENTS, DEFAULT_HEADERS
from .errors import FetchError


class Transport(Protocol):
    """Anything that can turn a URL into a page body (or None on failure)."""

    def get(self, url: str) -> str | None:
        ...


def get_user_agent(config: RunConfig) -> str:
    """Get user agent string (fixed or rotated)."""
    if config.user_agent:
        return config.user_agent
    return random.choice(USER_AGENTS)


class HttpClient:
    """
    requests-backed transport.

    Relative URLs are resolved against base_url, mirroring a client built
    with a base URI. Failures are reported and returned as None; callers that
    prefer an exception use get_or_raise().
    """

    def __init__(self, config: RunConfig, base_url: str | None = None, session: requests.Session | None = None):
        self.config = config
        self.base_url = base_url
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.session.headers['User-Agent'] = get_user_agent(config)
        self.last_error: str | None = None

        if not config.verify_ssl:
            # Several department sites serve incomplete certificate chains.
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

    def resolve(self, url: str) -> str:
        if self.base_url and not url.startswith(('http://', 'https://')):
            return urljoin(self.base_url, url)
        return url

    def get(self, url: str) -> str | None:
        """
        Fetch URL using the shared session.

        Args:
            url: Absolute URL, or one relative to base_url

        Returns:
            Decoded body, or None on network error / non-2xx status
        """
        self.last_error = None
        full_url = self.resolve(url)
        try:
            resp = self.session.get(
                full_url,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
                allow_redirects=True,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            self.last_error = str(exc)
            if not self.config.quiet:
                print(f"  [http] {full_url}: {exc}")
            return None

        # requests falls back to ISO-8859-1 when the server sends no charset
        content_type = resp.headers.get('Content-Type', '').lower()
        if 'charset' not in content_type and resp.apparent_encoding:
            resp.encoding = resp.apparent_encoding

        return resp.text

    def get_or_raise(self, url: str) -> str:
        body = self.get(url)
        if not body:
            raise FetchError(self.last_error or f"Empty response from {self.resolve(url)}")
        return body

    def close(self) -> None:
        self.session.close()
