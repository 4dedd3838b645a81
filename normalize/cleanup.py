"""
Field-level cleanup of a merged contract record.

Pure functions: whitespace normalization, monetary parsing, date
normalization. Values that can't be parsed are kept as cleaned text rather
than dropped.
"""

from __future__ import annotations

import math
import re
from datetime import datetime

from schema import DATE_FIELDS, LIST_FIELDS, MONEY_FIELDS


_WHITESPACE_RE = re.compile(r'\s+')
_MONEY_STRIP_RE = re.compile(r'[^\d,.\-()]')
_DECIMAL_COMMA_RE = re.compile(r'^-?[\d\s.]*,\d{1,2}$')
_PERIOD_SPLIT_RE = re.compile(r'\s+(?:to|au|until|-|–|—)\s+', re.I)
_ORDINAL_RE = re.compile(r'(\d)(st|nd|rd|th)\b', re.I)

DATE_FORMATS = (
    '%Y-%m-%d',
    '%Y/%m/%d',
    '%Y.%m.%d',
    '%Y-%m-%d %H:%M:%S',
    '%Y-%m-%dT%H:%M:%S',
    '%B %d, %Y',
    '%B %d %Y',
    '%b %d, %Y',
    '%b. %d, %Y',
    '%b %d %Y',
    '%d %B %Y',
    '%d %b %Y',
    '%d-%b-%Y',
    '%d-%b-%y',
    '%Y%m%d',
)


def clean_text(value) -> str:
    """Collapse whitespace (including non-breaking spaces) and trim."""
    if value is None:
        return ''
    if isinstance(value, (list, tuple)):
        value = ' '.join(clean_text(v) for v in value)
    return _WHITESPACE_RE.sub(' ', str(value).replace('\xa0', ' ')).strip()


def clean_money(value) -> float | str:
    """
    Parse a monetary value.

    Handles "$1,234.56", "1 234,56 $", "(500.00)" and plain numbers.

    Returns:
        float, or '' when there is no number to read
    """
    if value is None or isinstance(value, bool):
        return ''
    if isinstance(value, (int, float)):
        try:
            amount = float(value)
        except OverflowError:
            return ''
        return amount if math.isfinite(amount) else ''

    text = clean_text(value)
    if not text:
        return ''

    negative = text.startswith('(') and text.endswith(')')
    text = _MONEY_STRIP_RE.sub('', text).strip('()')
    if not text:
        return ''

    if _DECIMAL_COMMA_RE.match(text):
        # French-style decimals: 1.234,56 / 1234,56
        text = text.replace('.', '').replace(',', '.')
    else:
        text = text.replace(',', '')

    try:
        amount = float(text)
    except ValueError:
        return ''
    if not math.isfinite(amount):
        return ''
    return -abs(amount) if negative else amount


def normalize_date(value) -> str:
    """
    Normalize a date to YYYY-MM-DD.

    Unrecognized formats are returned as cleaned text.
    """
    text = clean_text(value)
    if not text:
        return ''
    candidate = _ORDINAL_RE.sub(r'\1', text)
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(candidate, fmt).strftime('%Y-%m-%d')
        except ValueError:
            continue
    return text


def split_period(value) -> tuple[str, str]:
    """Split "2016-04-01 to 2017-03-31" into its two ends; ('', '') if not a range."""
    text = clean_text(value)
    parts = _PERIOD_SPLIT_RE.split(text, maxsplit=1)
    if len(parts) != 2:
        return '', ''
    return parts[0].strip(), parts[1].strip()


def clean_amended_values(value) -> list[float]:
    """Amendment entries as floats, in order; unreadable entries are skipped."""
    if value in (None, ''):
        return []
    if not isinstance(value, (list, tuple)):
        value = [value]
    amounts = []
    for entry in value:
        if isinstance(entry, dict):
            entry = entry.get('value', entry.get('amendedValue', ''))
        amount = clean_money(entry)
        if amount != '':
            amounts.append(amount)
    return amounts


def clean_parsed_record(record: dict) -> dict:
    """
    Cleanup pass over a record merged with the schema defaults.

    Returns a new dict; the input is left untouched.
    """
    cleaned = {}
    for key, value in record.items():
        if key in LIST_FIELDS:
            cleaned[key] = clean_amended_values(value)
        elif key in MONEY_FIELDS:
            cleaned[key] = clean_money(value)
        else:
            cleaned[key] = clean_text(value)

    # Some departments publish the contract period as a single range
    if cleaned.get('contractPeriodStart') and not cleaned.get('contractPeriodEnd'):
        start, end = split_period(cleaned['contractPeriodStart'])
        if start and end:
            cleaned['contractPeriodStart'], cleaned['contractPeriodEnd'] = start, end

    for key in DATE_FIELDS:
        if key in cleaned:
            cleaned[key] = normalize_date(cleaned[key])

    return cleaned
