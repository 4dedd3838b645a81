"""
Normalization of extracted contract fields into the canonical record.

    from normalize import normalize, NormalizeOptions, VendorTable

    record = normalize(raw, metadata, 'agr', 'a1b2....html',
                       options=NormalizeOptions.from_config(config),
                       vendors=VendorTable.from_file('vendors.yaml'))
"""

from .cleanup import clean_money, clean_parsed_record, normalize_date
from .derive import (
    UNKNOWN_VENDOR,
    assure_required_values,
    cleanup_exported_values,
    extract_object_code,
    fiscal_label,
    generate_additional_metadata,
)
from .normalizer import NormalizeOptions, normalize
from .vendors import VendorLookup, VendorTable


__all__ = [
    'clean_money',
    'clean_parsed_record',
    'normalize_date',
    'UNKNOWN_VENDOR',
    'assure_required_values',
    'cleanup_exported_values',
    'extract_object_code',
    'fiscal_label',
    'generate_additional_metadata',
    'NormalizeOptions',
    'normalize',
    'VendorLookup',
    'VendorTable',
]
