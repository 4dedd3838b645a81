"""
Tests for normalize/normalizer.py - raw extraction + sidecar -> canonical record.
"""

import json

import pytest

from normalize.normalizer import NormalizeOptions, normalize
from normalize.vendors import VendorTable
from schema import CONTRACT_FIELDS


FILENAME = "0123456789abcdef0123456789abcdef.html"


def run(raw, metadata=None, **kwargs):
    warnings = []
    record = normalize(raw, metadata or {}, "tst", FILENAME, warn=warnings.append, **kwargs)
    return record, warnings


class TestTotality:
    """normalize() always returns the full schema."""

    @pytest.mark.parametrize("raw", [
        {},
        None,
        {"unexpected": "value"},
        {"vendorName": None, "contractValue": "n/a", "amendedValues": "garbage"},
        {"vendorName": ["Acme", "Inc."], "referenceNumber": 12345},
    ])
    def test_full_schema(self, raw):
        record, _ = run(raw)
        assert list(record) == list(CONTRACT_FIELDS)

    @pytest.mark.parametrize("raw", [
        {"description": 491, "vendorName": "Acme"},
        {"vendorName": 12345, "referenceNumber": 7.5},
        {"contractValue": float("nan"), "originalValue": float("inf"), "amendedValues": [float("nan"), 10]},
        {"contractValue": 10 ** 400, "contractDate": 20160401},
        {"comments": {"nested": True}, "contractPeriodStart": 2016},
    ])
    def test_non_string_values(self, raw):
        vendors = VendorTable({"IBM Canada": ["IBM Canada Ltd."]})
        record, _ = run(raw, vendors=vendors)
        assert list(record) == list(CONTRACT_FIELDS)
        json.dumps(record, allow_nan=False)

    def test_numeric_description_gives_object_code(self):
        record, _ = run({"vendorName": "Acme", "description": 491})
        assert record["description"] == "491"
        assert record["objectCode"] == "0491"

    def test_numeric_vendor_name(self):
        vendors = VendorTable({"IBM Canada": ["IBM Canada Ltd."]})
        record, _ = run({"vendorName": 12345}, vendors=vendors)
        assert record["vendorName"] == "12345"

    def test_non_finite_values_fall_back(self):
        record, warnings = run({"vendorName": "Acme", "contractValue": float("nan")})
        assert record["contractValue"] == 0.0
        assert any("contract value" in w for w in warnings)

    def test_malformed_sidecar_values(self):
        record, _ = run({"vendorName": "Acme"}, {"sourceYear": float("nan"), "sourceQuarter": "x", "sourceURL": 5})
        assert record["sourceYear"] == ""
        assert record["sourceQuarter"] == ""
        assert record["sourceFiscal"] == ""
        assert record["sourceURL"] == "5"

    def test_unknown_keys_dropped(self):
        record, _ = run({"vendorName": "Acme", "favouriteColour": "blue"})
        assert "favouriteColour" not in record

    def test_types(self):
        record, _ = run({"vendorName": "Acme", "contractValue": "$1,234.567", "contractDate": "2016-05-01"},
                        {"sourceYear": 2016, "sourceQuarter": 1, "sourceURL": "https://x"})
        assert record["contractValue"] == 1234.57
        assert isinstance(record["sourceYear"], int)
        assert isinstance(record["startYear"], int)
        assert isinstance(record["amendedValues"], list)
        assert isinstance(record["referenceNumber"], str)


class TestFallbacks:

    def test_reference_falls_back_to_filename(self):
        record, warnings = run({"vendorName": "Acme"})
        assert record["referenceNumber"] == "0123456789abcdef0123456789abcdef"
        assert record["uuid"] == "tst-0123456789abcdef0123456789abcdef"
        assert any("reference number" in w for w in warnings)

    def test_fallback_references_unique_per_file(self):
        first = normalize({"vendorName": "Acme"}, {}, "tst", "aaaa1111.html")
        second = normalize({"vendorName": "Acme"}, {}, "tst", "bbbb2222.html")
        assert first["referenceNumber"] == "aaaa1111"
        assert second["referenceNumber"] == "bbbb2222"
        assert first["uuid"] != second["uuid"]

    def test_uuid_from_reference(self):
        record, warnings = run({"vendorName": "Acme", "referenceNumber": " R-77 ", "contractValue": "1"})
        assert record["uuid"] == "tst-R-77"
        assert warnings == []

    def test_missing_vendor_uses_placeholder(self):
        record, warnings = run({"referenceNumber": "R-1", "contractValue": "10"})
        assert record["vendorName"] == "Unknown vendor"
        assert any("vendor" in w for w in warnings)

    def test_missing_value_is_zero(self):
        record, warnings = run({"vendorName": "Acme", "referenceNumber": "R-1"})
        assert record["contractValue"] == 0.0
        assert record["originalValue"] == 0.0
        assert any("contract value" in w for w in warnings)

    def test_value_from_original(self):
        record, _ = run({"vendorName": "Acme", "originalValue": "500"})
        assert record["contractValue"] == 500.0

    def test_dates_fill_each_other(self):
        record, _ = run({"vendorName": "Acme", "contractDate": "April 3, 2016"})
        assert record["contractDate"] == "2016-04-03"
        assert record["contractPeriodStart"] == "2016-04-03"
        assert record["contractPeriodEnd"] == "2016-04-03"
        assert record["startYear"] == 2016
        assert record["endYear"] == 2016

    def test_fallbacks_disabled(self):
        record, warnings = run({}, options=NormalizeOptions(clean_contract_values=False))
        assert record["vendorName"] == ""
        assert record["contractValue"] == ""
        # the reference fallback always applies
        assert record["referenceNumber"]


class TestMetadata:

    def test_sidecar_wins(self):
        record, _ = run(
            {"vendorName": "Acme", "sourceURL": "scraped", "sourceYear": "1999"},
            {"sourceURL": "https://example/c/1", "sourceYear": 2016, "sourceQuarter": 3},
        )
        assert record["sourceURL"] == "https://example/c/1"
        assert record["sourceYear"] == 2016
        assert record["sourceQuarter"] == 3
        assert record["sourceFiscal"] == "2016-17-Q3"

    def test_year_only(self):
        record, _ = run({"vendorName": "Acme"}, {"sourceURL": "u", "sourceYear": 2019, "sourceQuarter": 0})
        assert record["sourceFiscal"] == "2019-20"
        assert record["sourceQuarter"] == 0

    def test_no_metadata(self):
        record, _ = run({"vendorName": "Acme"})
        assert record["sourceURL"] == ""
        assert record["sourceYear"] == ""
        assert record["sourceFiscal"] == ""

    def test_provenance(self):
        record, _ = run({"vendorName": "Acme"})
        assert record["sourceFilename"] == f"tst/{FILENAME}"
        assert record["ownerAcronym"] == "tst"


class TestDerivedFields:

    def test_object_code(self):
        record, _ = run({"vendorName": "Acme", "description": "491 Management consulting"})
        assert record["objectCode"] == "0491"

    def test_amendments(self):
        """Amendments: original keeps the first value, contract takes the last amendment."""
        record, _ = run({
            "vendorName": "Acme",
            "contractValue": "$10,000.00",
            "amendedValues": ["$12,000.00", "$15,500.50"],
        })
        assert record["originalValue"] == 10000.0
        assert record["contractValue"] == 15500.5
        assert record["amendedValues"] == [12000.0, 15500.5]

    def test_period_range_split(self):
        record, _ = run({"vendorName": "Acme", "contractPeriodStart": "2016-04-01 to 2018-03-31"})
        assert record["contractPeriodStart"] == "2016-04-01"
        assert record["contractPeriodEnd"] == "2018-03-31"
        assert record["startYear"] == 2016
        assert record["endYear"] == 2018


class TestVendorCanonicalization:

    def test_alias_resolved(self):
        vendors = VendorTable({"IBM Canada": ["IBM Canada Ltd.", "I.B.M. Canada Limited"]})
        record, _ = run({"vendorName": "ibm  canada  ltd."}, vendors=vendors)
        assert record["vendorName"] == "IBM Canada"

    def test_disabled(self):
        vendors = VendorTable({"IBM Canada": ["IBM Canada Ltd."]})
        record, _ = run({"vendorName": "IBM Canada Ltd."}, vendors=vendors,
                        options=NormalizeOptions(clean_vendor_names=False))
        assert record["vendorName"] == "IBM Canada Ltd."


class TestDeterminism:

    def test_same_input_same_output(self):
        raw = {"vendorName": "Acme", "contractValue": "1 234,50 $", "contractDate": "2016/07/01"}
        meta = {"sourceURL": "u", "sourceYear": 2016, "sourceQuarter": 2}
        assert run(raw, meta) == run(raw, meta)

    def test_input_not_mutated(self):
        raw = {"vendorName": "  Acme  ", "amendedValues": ["1"]}
        run(raw)
        assert raw == {"vendorName": "  Acme  ", "amendedValues": ["1"]}
