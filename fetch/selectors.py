"""
XPath helpers over lxml.

Department selectors are XPath expressions. A selector may return attribute
values (//a/@href), text nodes (//td/text()) or elements; elements are
reduced to their href (if any) or their text content.
"""

from __future__ import annotations

from lxml import etree, html as lxml_html

from .errors import ConfigError


def parse_html(source: str):
    """Parse a document or fragment; None for empty input."""
    if not source or not source.strip():
        return None
    try:
        return lxml_html.fromstring(source)
    except (etree.ParserError, ValueError):
        # lxml refuses str input carrying an XML encoding declaration
        try:
            return lxml_html.fromstring(source.encode('utf-8'))
        except (etree.ParserError, ValueError):
            return None


def _node_value(node) -> str:
    if isinstance(node, str):
        return str(node)
    if isinstance(node, etree._Element):
        href = node.get('href')
        if href is not None:
            return href
        return node.text_content() if hasattr(node, 'text_content') else ''.join(node.itertext())
    return str(node)


def values_via_xpath(source: str, xpath: str) -> list[str]:
    """
    Evaluate an XPath selector and return the matched values.

    Args:
        source: HTML document or fragment
        xpath: XPath expression

    Returns:
        Stripped, non-empty values in document order
    """
    if not xpath:
        return []
    tree = parse_html(source)
    if tree is None:
        return []
    try:
        result = tree.xpath(xpath)
    except etree.XPathError as exc:
        raise ConfigError(f"Invalid XPath selector {xpath!r}: {exc}") from exc

    if not isinstance(result, list):
        # string()/count() style expressions
        result = [result]

    values = []
    for node in result:
        value = _node_value(node).strip()
        if value:
            values.append(value)
    return values


def first_value_via_xpath(source: str, xpath: str) -> str:
    values = values_via_xpath(source, xpath)
    return values[0] if values else ''


def inner_html_via_xpath(source: str, xpath: str) -> str | None:
    """
    Inner HTML of the first element matched by xpath.

    Returns None when nothing matches.
    """
    tree = parse_html(source)
    if tree is None:
        return None
    try:
        matches = [m for m in tree.xpath(xpath) if isinstance(m, etree._Element)]
    except etree.XPathError as exc:
        raise ConfigError(f"Invalid XPath selector {xpath!r}: {exc}") from exc
    if not matches:
        return None

    el = matches[0]
    parts = [el.text or '']
    for child in el:
        parts.append(etree.tostring(child, encoding='unicode', method='html'))
    return ''.join(parts)
