"""
Building blocks shared by department plugins.

Most disclosure pages are a two-column table (or a definition list) of
"Label: value" rows. Departments describe which labels map to which record
fields and reuse the helpers here for everything else.
"""

from __future__ import annotations

import re
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

from bs4 import BeautifulSoup

from schema import LIST_FIELDS


SESSION_PARAMS = {'jsessionid', 'phpsessid', 'sid', 'sessionid', 'cfid', 'cftoken'}

_PATH_SESSION_RE = re.compile(r';jsessionid=[^/?#]*', re.I)
_FISCAL_YEAR_RE = re.compile(r'\b((?:19|20)\d{2})\s*(?:-|–|/|to)\s*(?:(?:19|20)?\d{2})\b')
_QUARTER_WORDS = {
    'first': 1, '1st': 1,
    'second': 2, '2nd': 2,
    'third': 3, '3rd': 3,
    'fourth': 4, '4th': 4,
}
_QUARTER_RE = re.compile(
    r'\b(?:Q\s*([1-4])|quarter\s*([1-4])|(first|second|third|fourth|1st|2nd|3rd|4th)\s+quarter)\b',
    re.I,
)


def _label_key(text: str) -> str:
    return re.sub(r'\s+', ' ', text).strip().rstrip(':').strip().lower()


def label_value_pairs(html: str) -> list[tuple[str, str]]:
    """
    (label, value) pairs from table rows and definition lists, in page order.

    Table rows use their first cell (th or td) as the label and the
    remaining cells as the value.
    """
    soup = BeautifulSoup(html or '', 'lxml')
    pairs = []

    for row in soup.find_all('tr'):
        cells = row.find_all(['th', 'td'], recursive=False)
        if len(cells) < 2:
            continue
        label = _label_key(cells[0].get_text(separator=' ', strip=True))
        value = ' '.join(c.get_text(separator=' ', strip=True) for c in cells[1:]).strip()
        if label:
            pairs.append((label, value))

    for dl in soup.find_all('dl'):
        for dt in dl.find_all('dt'):
            dd = dt.find_next_sibling('dd')
            if dd is None:
                continue
            label = _label_key(dt.get_text(separator=' ', strip=True))
            if label:
                pairs.append((label, dd.get_text(separator=' ', strip=True)))

    return pairs


def extract_by_labels(html: str, labels: dict[str, tuple[str, ...]]) -> dict | None:
    """
    Map labelled values onto record fields.

    Args:
        html: Contract page (or its content subset)
        labels: record field -> accepted labels (lowercase, no colon)

    Returns:
        Dict of the fields found, or None when no label matched at all.
        List fields (amendedValues) collect every matching row.
    """
    by_label = {}
    for field, accepted in labels.items():
        for label in accepted:
            by_label[label] = field

    values: dict = {}
    for label, value in label_value_pairs(html):
        field = by_label.get(label)
        if field is None:
            continue
        if field in LIST_FIELDS:
            if value:
                values.setdefault(field, []).append(value)
        elif field not in values or not values[field]:
            values[field] = value

    return values or None


def heading_text(html: str) -> str:
    """Text of the page title and h1/h2 headings."""
    soup = BeautifulSoup(html or '', 'lxml')
    parts = [el.get_text(separator=' ', strip=True) for el in soup.find_all(['title', 'h1', 'h2'])]
    return ' '.join(p for p in parts if p)


def fiscal_year_from_text(text: str) -> int | str:
    """Starting year of a fiscal year label ("2016-2017", "2016-17"), '' if none."""
    match = _FISCAL_YEAR_RE.search(text or '')
    return int(match.group(1)) if match else ''


def fiscal_quarter_from_text(text: str) -> int | str:
    """Quarter number from "Q3", "Quarter 3" or "third quarter", '' if none."""
    match = _QUARTER_RE.search(text or '')
    if not match:
        return ''
    number = match.group(1) or match.group(2)
    if number:
        return int(number)
    return _QUARTER_WORDS[match.group(3).lower()]


def fiscal_year_from_heading(html: str, url: str = '') -> int | str:
    return fiscal_year_from_text(heading_text(html))


def fiscal_quarter_from_heading(html: str, url: str = '') -> int | str:
    return fiscal_quarter_from_text(heading_text(html))


def strip_session_ids(url: str) -> str:
    """Drop session identifiers from a URL so it names the same cache entry every run."""
    url = _PATH_SESSION_RE.sub('', url)
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k.lower() not in SESSION_PARAMS]
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))
