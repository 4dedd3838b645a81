"""
Tests for normalize/vendors.py - vendor alias table.
"""

import json

import pytest

from fetch.errors import ConfigError
from normalize.vendors import VendorTable, vendor_key


@pytest.fixture
def table():
    return VendorTable({
        "IBM Canada": ["IBM Canada Ltd.", "I.B.M. Canada Limited"],
        "Deloitte": ["Deloitte LLP", "Deloitte & Touche"],
    })


class TestVendorKey:

    def test_suffixes_and_punctuation_ignored(self):
        assert vendor_key("IBM Canada Ltd.") == vendor_key("ibm canada")
        assert vendor_key("Acme Inc., Ltd") == "acme"

    def test_suffix_only_name_kept(self):
        assert vendor_key("Ltd") == "ltd"


class TestCanonicalize:

    def test_alias(self, table):
        assert table.canonicalize("I.B.M. Canada Limited") == "IBM Canada"

    def test_canonical_maps_to_itself(self, table):
        assert table.canonicalize("deloitte") == "Deloitte"

    def test_unknown_returns_cleaned(self, table):
        assert table.canonicalize("  Acme   Widgets ") == "Acme Widgets"

    def test_empty(self, table):
        assert table.canonicalize("") == ""

    def test_alias_count(self, table):
        assert table.canonicalize("Deloitte & Touche") == "Deloitte"
        assert len(table) == 2


class TestFromFile:

    def test_json(self, tmp_path, table):
        path = tmp_path / "vendors.json"
        path.write_text(json.dumps({"IBM Canada": ["IBM Canada Ltd."]}))
        assert VendorTable.from_file(path).canonicalize("IBM CANADA LTD") == "IBM Canada"

    def test_yaml(self, tmp_path):
        path = tmp_path / "vendors.yaml"
        path.write_text("Deloitte:\n  - Deloitte LLP\n  - Deloitte & Touche\n")
        assert VendorTable.from_file(path).canonicalize("Deloitte & Touche") == "Deloitte"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "vendors.yml"
        path.write_text("")
        assert len(VendorTable.from_file(path)) == 0

    def test_malformed(self, tmp_path):
        path = tmp_path / "vendors.json"
        path.write_text("{not json")
        with pytest.raises(ConfigError):
            VendorTable.from_file(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "vendors.json"
        path.write_text(json.dumps(["a", "b"]))
        with pytest.raises(ConfigError):
            VendorTable.from_file(path)

    def test_missing(self, tmp_path):
        with pytest.raises(ConfigError):
            VendorTable.from_file(tmp_path / "nope.json")
