"""
Source fixups shared by every department.

- clean_incoming_url(): tidy hrefs scraped from quarter pages
- apply_initial_source_html_transformations(): markup/encoding repairs run
  on every cached page before a department extractor sees it
"""

import re
from urllib.parse import quote, urlsplit, urlunsplit


# Mis-decoded UTF-8 (read as Windows-1252) seen on older department pages
MOJIBAKE_FIXES = {
    'Ã©': 'é',
    'Ã¨': 'è',
    'Ãª': 'ê',
    'Ã‰': 'É',
    'Ã§': 'ç',
    'Ã´': 'ô',
    'Ã®': 'î',
    'Ã\xa0': 'à',
    'â€™': '’',
    'â€“': '–',
    'â€”': '—',
    'â€œ': '“',
    'â€\x9d': '”',
}

_BR_RE = re.compile(r'<br\s*/?>', re.I)
_NBSP_RE = re.compile(r'&nbsp;|&#160;|&#xa0;', re.I)
_CONTROL_RE = re.compile(r'[\x00-\x08\x0b\x0c\x0e-\x1f]')


def clean_incoming_url(url: str) -> str:
    """Trim, unescape &amp; and percent-encode spaces in a scraped href."""
    url = url.strip().replace('&amp;', '&')
    parts = urlsplit(url)
    path = quote(parts.path, safe="/%:@!$&'()*+,;=~-._")
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query.replace(' ', '%20'), parts.fragment))


def apply_initial_source_html_transformations(source: str) -> str:
    """
    Normalize raw page HTML before extraction.

    - strip a leading BOM and stray control characters
    - unify line endings
    - repair common UTF-8/Windows-1252 mojibake
    - turn non-breaking spaces into plain spaces
    - turn <br> into a space so table cells don't glue words together
    """
    if not source:
        return ''
    source = source.lstrip('\ufeff')
    source = source.replace('\r\n', '\n').replace('\r', '\n')
    source = _CONTROL_RE.sub('', source)
    for bad, good in MOJIBAKE_FIXES.items():
        source = source.replace(bad, good)
    source = _NBSP_RE.sub(' ', source).replace('\xa0', ' ')
    source = _BR_RE.sub(' ', source)
    return source
