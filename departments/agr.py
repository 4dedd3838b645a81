"""
Agriculture and Agri-Food Canada (agr).

Quarter pages are headed "Disclosure of contracts: 2016-2017, third quarter",
which gives the fiscal context. Contract pages are a label/value table.
"""

from orchestrate.department import Department

from .common import extract_by_labels, fiscal_quarter_from_heading, fiscal_year_from_heading


LABELS = {
    'vendorName': ('vendor name', 'vendor', 'name of vendor'),
    'referenceNumber': ('reference number', 'reference no.', 'contract number'),
    'contractDate': ('contract date', 'date'),
    'description': ('description of work', 'description'),
    'contractPeriodStart': ('contract period', 'contract period start', 'period start'),
    'contractPeriodEnd': ('contract period end', 'period end'),
    'deliveryDate': ('delivery date',),
    'originalValue': ('original contract value',),
    'contractValue': ('contract value', 'total amended contract value'),
    'comments': ('comments', 'additional comments'),
    'amendedValues': ('amendment value', 'amended contract value'),
}


def raw_extract(html: str):
    return extract_by_labels(html, LABELS)


department = Department(
    acronym='agr',
    name='Agriculture and Agri-Food Canada',
    base_url='https://www.agr.gc.ca',
    index_url='https://www.agr.gc.ca/eng/about-us/transparency/proactive-disclosure/disclosure-of-contracts/',
    index_to_quarter_xpath="//main//ul[contains(@class, 'quarters')]//a/@href",
    quarter_to_contract_xpath="//table[contains(@class, 'contracts')]//td[1]//a/@href",
    raw_extract=raw_extract,
    fiscal_year_from_quarter_page=fiscal_year_from_heading,
    fiscal_quarter_from_quarter_page=fiscal_quarter_from_heading,
    contract_content_subset_xpath='//main',
)
