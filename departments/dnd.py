"""
National Defence (dnd).

All links on the disclosure site are relative. Contract pages use a
definition list, and call-ups against standing offers frequently have no
reference number of their own (the normalizer falls back to the filename).
"""

from orchestrate.department import Department

from .common import extract_by_labels, fiscal_quarter_from_text, fiscal_year_from_text, heading_text


LABELS = {
    'vendorName': ('vendor name', 'supplier'),
    'referenceNumber': ('reference number', 'contract number'),
    'contractDate': ('contract date',),
    'description': ('description of work', 'description'),
    'extraDescription': ('additional description',),
    'contractPeriodStart': ('contract period',),
    'deliveryDate': ('delivery date',),
    'originalValue': ('original value', 'original contract value'),
    'contractValue': ('contract value', 'total value'),
    'comments': ('comments',),
    'amendedValues': ('amended value', 'amendment value'),
}


def raw_extract(html: str):
    return extract_by_labels(html, LABELS)


def fiscal_year(html: str, url: str = ''):
    # The URL carries the year when the heading doesn't ("...&y=2015-2016&q=2")
    return fiscal_year_from_text(heading_text(html)) or fiscal_year_from_text(url)


def fiscal_quarter(html: str, url: str = ''):
    quarter = fiscal_quarter_from_text(heading_text(html))
    if quarter:
        return quarter
    for part in url.split('&'):
        if part.startswith('q=') and part[2:].isdigit():
            return int(part[2:])
    return ''


def contract_url(url: str) -> str:
    return url.replace('&lang=fra', '&lang=eng')


department = Department(
    acronym='dnd',
    name='National Defence',
    base_url='https://www.admfincs.forces.gc.ca',
    index_url='https://www.admfincs.forces.gc.ca/apps/dc/intro-eng.asp',
    index_to_quarter_xpath="//div[@id='quarters']//a/@href",
    quarter_to_contract_xpath="//table//td/a[contains(@href, 'contract-contrat')]/@href",
    raw_extract=raw_extract,
    quarter_to_contract_url_transform=contract_url,
    fiscal_year_from_quarter_page=fiscal_year,
    fiscal_quarter_from_quarter_page=fiscal_quarter,
)
