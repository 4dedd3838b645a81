"""
Shared fixtures: an in-memory transport and a small fake department site.
"""

import sys
from pathlib import Path

import pytest

# Ensure project root is in path
sys.path.insert(0, str(Path(__file__).parent.parent))

from fetch.config import RunConfig
from orchestrate.department import Department
from orchestrate.run_context import RunStats


SITE = "https://contracts.example.gc.ca"


class FakeTransport:
    """Serves canned pages by URL and records every request."""

    def __init__(self, pages=None):
        self.pages = dict(pages or {})
        self.calls = []

    def get(self, url):
        self.calls.append(url)
        return self.pages.get(url)

    def count(self, url):
        return self.calls.count(url)


def index_page(quarter_urls):
    links = "".join(f'<li><a href="{u}">Quarter</a></li>' for u in quarter_urls)
    return f"<html><body><ul class='quarters'>{links}</ul></body></html>"


def quarter_page(contract_urls, heading="Disclosure of contracts 2016-2017, third quarter", pager=()):
    rows = "".join(f'<tr><td><a href="{u}">Contract</a></td></tr>' for u in contract_urls)
    pager_links = "".join(f'<li><a href="{u}">page</a></li>' for u in pager)
    return (
        f"<html><head><title>Contracts</title></head><body><h1>{heading}</h1>"
        f"<table class='contracts'>{rows}</table>"
        f"<ul class='pagination'>{pager_links}</ul></body></html>"
    )


def contract_page(**fields):
    labels = {
        "vendor": "Vendor Name",
        "reference": "Reference Number",
        "date": "Contract Date",
        "description": "Description of Work",
        "value": "Contract Value",
        "period": "Contract Period",
        "delivery": "Delivery Date",
    }
    rows = "".join(
        f"<tr><th>{labels[k]}:</th><td>{v}</td></tr>" for k, v in fields.items()
    )
    return f"<html><body><main><table>{rows}</table></main></body></html>"


def extract_table(html):
    from departments.common import extract_by_labels
    return extract_by_labels(html, {
        "vendorName": ("vendor name",),
        "referenceNumber": ("reference number",),
        "contractDate": ("contract date",),
        "description": ("description of work",),
        "contractValue": ("contract value",),
        "contractPeriodStart": ("contract period",),
        "deliveryDate": ("delivery date",),
    })


def fiscal_year(html, url):
    from departments.common import fiscal_year_from_heading
    return fiscal_year_from_heading(html, url)


def fiscal_quarter(html, url):
    from departments.common import fiscal_quarter_from_heading
    return fiscal_quarter_from_heading(html, url)


def make_department(**overrides):
    values = dict(
        acronym="tst",
        name="Test Department",
        index_url=f"{SITE}/index",
        index_to_quarter_xpath="//ul[@class='quarters']//a/@href",
        quarter_to_contract_xpath="//table[@class='contracts']//a/@href",
        raw_extract=extract_table,
        fiscal_year_from_quarter_page=fiscal_year,
        fiscal_quarter_from_quarter_page=fiscal_quarter,
    )
    values.update(overrides)
    return Department(**values)


@pytest.fixture
def config(tmp_path):
    """Quiet run config rooted in a temp storage directory."""
    return RunConfig(storage_dir=tmp_path / "storage", quiet=True)


@pytest.fixture
def stats():
    return RunStats(acronym="tst", quiet=True)


@pytest.fixture
def department():
    return make_department()
