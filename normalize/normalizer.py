"""
Record normalization: raw extractor output + sidecar -> canonical record.

normalize() runs a fixed sequence of stages:

    1. merge raw values over the schema defaults (unknown keys dropped)
    2. field cleanup (whitespace, money, dates, period ranges)
    3. sidecar values (sourceURL, sourceYear, sourceQuarter)
    4. objectCode from the description
    5. derived metadata (fiscal label, years, amendments)
    6. vendor canonicalization
    7. required-value fallbacks
    8. type coercion for export
    9. provenance (sourceFilename, ownerAcronym, referenceNumber, uuid)

It never raises on odd input: whatever the extractor returned, the result
carries every schema key with a value of the right type.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import TYPE_CHECKING, Callable, Mapping

from schema import CONTRACT_FIELDS, METADATA_FIELDS, empty_record

from .cleanup import clean_parsed_record, clean_text
from .derive import (
    assure_required_values,
    cleanup_exported_values,
    extract_object_code,
    generate_additional_metadata,
)
from .vendors import VendorLookup

if TYPE_CHECKING:
    from fetch.config import RunConfig


@dataclass
class NormalizeOptions:
    clean_vendor_names: bool = True
    clean_contract_values: bool = True

    @classmethod
    def from_config(cls, config: 'RunConfig') -> 'NormalizeOptions':
        return cls(
            clean_vendor_names=config.clean_vendor_names,
            clean_contract_values=config.clean_contract_values,
        )


def normalize(
    raw: Mapping | None,
    metadata: Mapping | None,
    owner_acronym: str,
    source_filename: str,
    *,
    options: NormalizeOptions | None = None,
    vendors: VendorLookup | None = None,
    warn: Callable[[str], None] | None = None,
) -> dict:
    """
    Build the canonical contract record for one raw page.

    Args:
        raw: Field values returned by the department extractor
        metadata: Sidecar values, {} when the page has no fiscal attribution
        owner_acronym: Department acronym
        source_filename: Raw page filename ("<hash>.html")
        options: Cleanup switches (defaults: everything on)
        vendors: Vendor lookup used for canonicalization
        warn: Called with a message for each fallback applied

    Returns:
        Dict with exactly the CONTRACT_FIELDS keys, in order
    """
    options = options or NormalizeOptions()
    context = f"{owner_acronym}/{source_filename}"

    # 1. schema defaults, extractor values on top
    record = empty_record()
    for key, value in (raw or {}).items():
        if key in record and value is not None:
            record[key] = value

    # 2.
    record = clean_parsed_record(record)

    # 3. fetch-time attribution wins over anything scraped
    for key in METADATA_FIELDS:
        if key in (metadata or {}):
            record[key] = metadata[key]

    # 4.
    record['objectCode'] = extract_object_code(record['description'])

    # 5.
    generate_additional_metadata(record)

    # 6.
    if options.clean_vendor_names and vendors is not None and record['vendorName']:
        record['vendorName'] = vendors.canonicalize(record['vendorName'])

    # 7.
    if options.clean_contract_values:
        assure_required_values(record, warn=warn, context=context)

    # 8.
    cleanup_exported_values(record)

    # 9.
    record['sourceFilename'] = f"{owner_acronym}/{source_filename}"
    record['ownerAcronym'] = owner_acronym
    record['referenceNumber'] = clean_text(record['referenceNumber'])
    if not record['referenceNumber']:
        record['referenceNumber'] = PurePosixPath(source_filename).stem
        if warn:
            warn(f"No reference number in {context}, using filename")
    record['uuid'] = f"{owner_acronym}-{record['referenceNumber']}"

    return {key: record[key] for key in CONTRACT_FIELDS}
