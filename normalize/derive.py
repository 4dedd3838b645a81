"""
Derived fields: object codes, fiscal labels, years, amendment handling and
the fallbacks that guarantee mandatory values.
"""

from __future__ import annotations

import math
import re

from schema import DATE_FIELDS, INTEGER_FIELDS, LIST_FIELDS, MONEY_FIELDS

from .cleanup import clean_money


UNKNOWN_VENDOR = 'Unknown vendor'

_OBJECT_CODE_RE = re.compile(r'^\s*(\d{3,4})(?!\d)')
_YEAR_RE = re.compile(r'(?<!\d)((?:19|20)\d{2})(?!\d)')
_INT_RE = re.compile(r'^\s*([+-]?\d+)(?:\.0*)?\s*$')


def extract_object_code(description: str) -> str:
    """
    Economic object code at the start of a description.

    "0491 Management consulting" -> "0491"
    "812 - Computer services"    -> "0812"
    """
    match = _OBJECT_CODE_RE.match(str(description or ''))
    if not match:
        return ''
    return match.group(1).zfill(4)


def year_of(value) -> int | str:
    """Four-digit year found in a date string, '' when none."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value if 1900 <= value <= 2099 else ''
    match = _YEAR_RE.search(str(value or ''))
    return int(match.group(1)) if match else ''


def fiscal_label(year, quarter=None) -> str:
    """
    Government fiscal year label.

    (2016, 3) -> "2016-17-Q3"; (2016, 0) -> "2016-17"
    """
    year = _as_int(year)
    if year == '' or year <= 0:
        return ''
    label = f"{year}-{(year + 1) % 100:02d}"
    quarter = _as_int(quarter)
    if quarter != '' and quarter > 0:
        label += f"-Q{quarter}"
    return label


def _derive_years(record: dict) -> None:
    start = year_of(record.get('contractPeriodStart')) or year_of(record.get('contractDate'))
    end = (
        year_of(record.get('contractPeriodEnd'))
        or year_of(record.get('deliveryDate'))
        or start
    )
    record['startYear'] = start
    record['endYear'] = end


def generate_additional_metadata(record: dict) -> dict:
    """Fill sourceFiscal, startYear/endYear and apply amendments in place."""
    record['sourceFiscal'] = fiscal_label(record.get('sourceYear'), record.get('sourceQuarter'))
    _derive_years(record)

    amended = record.get('amendedValues') or []
    if amended:
        if record.get('originalValue') in ('', None):
            record['originalValue'] = record.get('contractValue', '')
        record['contractValue'] = amended[-1]

    return record


def assure_required_values(record: dict, warn=None, context: str = '') -> dict:
    """
    Guarantee the mandatory fields are populated.

    Missing values are filled from related fields; when nothing is
    available a fixed fallback is used and a warning is raised through
    `warn`.
    """
    where = f" in {context}" if context else ''

    if record.get('contractValue') in ('', None):
        if record.get('originalValue') not in ('', None):
            record['contractValue'] = record['originalValue']
        else:
            record['contractValue'] = 0.0
            if warn:
                warn(f"No contract value{where}, using 0")

    if record.get('originalValue') in ('', None):
        record['originalValue'] = record['contractValue']

    if not record.get('contractPeriodStart'):
        record['contractPeriodStart'] = record.get('contractDate', '')

    if not record.get('contractPeriodEnd'):
        record['contractPeriodEnd'] = record.get('deliveryDate') or record.get('contractPeriodStart', '')

    if not record.get('contractDate'):
        record['contractDate'] = record.get('contractPeriodStart', '')

    if not record.get('vendorName'):
        record['vendorName'] = UNKNOWN_VENDOR
        if warn:
            warn(f"No vendor name{where}, using {UNKNOWN_VENDOR!r}")

    _derive_years(record)
    return record


def _as_int(value) -> int | str:
    if value is None or isinstance(value, bool):
        return ''
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else ''
    match = _INT_RE.match(str(value))
    return int(match.group(1)) if match else ''


def _as_money(value) -> float | str:
    amount = clean_money(value)
    return round(amount, 2) if amount != '' else ''


def cleanup_exported_values(record: dict) -> dict:
    """Coerce every field to its serialized type."""
    for key, value in record.items():
        if key in INTEGER_FIELDS:
            record[key] = _as_int(value)
        elif key in MONEY_FIELDS:
            record[key] = _as_money(value)
        elif key in LIST_FIELDS:
            values = value if isinstance(value, (list, tuple)) else []
            record[key] = [m for m in (_as_money(v) for v in values) if m != '']
        elif key in DATE_FIELDS or not isinstance(value, str):
            record[key] = '' if value is None else str(value)
    return record
