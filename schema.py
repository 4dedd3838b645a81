"""
Schema definitions for normalized contract records.

Every department's pages are reduced to one record shape:
- CONTRACT_FIELDS: the canonical keys, in output order
- empty_record(): a record with every key at its default
"""

from copy import deepcopy


# Canonical record, with defaults. Every output record carries all of these.
ROW_PARAMS = {
    'uuid': '',
    'vendorName': '',
    'referenceNumber': '',
    'contractDate': '',
    'description': '',
    'extraDescription': '',
    'objectCode': '',
    'contractPeriodStart': '',
    'contractPeriodEnd': '',
    'startYear': '',
    'endYear': '',
    'deliveryDate': '',
    'originalValue': '',
    'contractValue': '',
    'comments': '',
    'ownerAcronym': '',
    'sourceYear': '',
    'sourceQuarter': '',
    'sourceFiscal': '',
    'sourceFilename': '',
    'sourceURL': '',
    'amendedValues': [],
}

CONTRACT_FIELDS = tuple(ROW_PARAMS)

# Field groups used by cleanup and serialization
MONEY_FIELDS = ('originalValue', 'contractValue')
DATE_FIELDS = ('contractDate', 'contractPeriodStart', 'contractPeriodEnd', 'deliveryDate')
INTEGER_FIELDS = ('startYear', 'endYear', 'sourceYear', 'sourceQuarter')
LIST_FIELDS = ('amendedValues',)

# Values the fetch-time sidecar is authoritative for
METADATA_FIELDS = ('sourceURL', 'sourceYear', 'sourceQuarter')


def empty_record() -> dict:
    """A fresh record with every canonical key at its default."""
    return deepcopy(ROW_PARAMS)
