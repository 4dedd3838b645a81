"""
Tests for orchestrate/parse_run.py - cached pages -> JSON records.
"""

import json
from dataclasses import replace

from fetch.errors import ExtractionError
from fetch.hasher import url_to_filename
from fetch.paths import PathResolver
from normalize.vendors import VendorTable
from orchestrate.fetch_run import run_fetch
from orchestrate.parse_run import parse_single, raw_files, run_parse
from schema import CONTRACT_FIELDS

from conftest import SITE, FakeTransport, contract_page, index_page, make_department, quarter_page


def seed_raw(config, name, html, acronym="tst"):
    raw_dir = PathResolver(config).raw_dir(acronym)
    raw_dir.mkdir(parents=True, exist_ok=True)
    (raw_dir / name).write_text(html, encoding="utf-8")
    return raw_dir / name


def read_record(config, name, acronym="tst"):
    path = PathResolver(config).output_path_for(acronym, name)
    return json.loads(path.read_text(encoding="utf-8"))


class TestRunParse:

    def test_writes_one_record_per_page(self, config, department):
        seed_raw(config, "a.html", contract_page(vendor="Acme", reference="R-1", value="$10.00"))
        seed_raw(config, "b.html", contract_page(vendor="Beta", reference="R-2", value="$20.00"))
        stats = run_parse(department, config)

        assert stats.files_parsed == 2
        assert stats.files_failed == 0
        record = read_record(config, "a.html")
        assert list(record) == list(CONTRACT_FIELDS)
        assert record["vendorName"] == "Acme"
        assert record["contractValue"] == 10.0
        assert record["uuid"] == "tst-R-1"
        assert record["sourceFilename"] == "tst/a.html"

    def test_output_pretty_printed(self, config, department):
        seed_raw(config, "a.html", contract_page(vendor="Acme", reference="R-1"))
        run_parse(department, config)
        text = PathResolver(config).output_path_for("tst", "a.html").read_text(encoding="utf-8")
        assert text.startswith('{\n  "uuid"')

    def test_failed_extraction_skipped(self, config):
        """Pages the extractor can't read are counted, not written."""
        def extract(html):
            if "broken" in html:
                raise ExtractionError("layout not recognized")
            if "empty" in html:
                return None
            return {"vendorName": "Acme", "referenceNumber": "R-1"}

        dept = make_department(raw_extract=extract)
        seed_raw(config, "a.html", "<p>broken</p>")
        seed_raw(config, "b.html", "<p>empty</p>")
        seed_raw(config, "c.html", "<p>fine</p>")
        stats = run_parse(dept, config)

        assert stats.files_failed == 2
        assert stats.files_parsed == 1
        output_dir = PathResolver(config).output_dir("tst")
        assert [p.name for p in output_dir.iterdir()] == ["c.json"]

    def test_empty_extraction_still_normalized(self, config):
        dept = make_department(raw_extract=lambda html: {})
        seed_raw(config, "abc.html", "<p>x</p>")
        stats = run_parse(dept, config)

        assert stats.files_parsed == 1
        record = read_record(config, "abc.html")
        assert record["referenceNumber"] == "abc"
        assert record["vendorName"] == "Unknown vendor"
        assert len(stats.warnings) >= 2

    def test_limit_files(self, config, department):
        for name in ("a.html", "b.html", "c.html"):
            seed_raw(config, name, contract_page(vendor="V", reference=name))
        stats = run_parse(department, replace(config, limit_files=2))

        assert stats.files_parsed == 2
        assert not PathResolver(config).output_path_for("tst", "c.html").exists()

    def test_missing_raw_dir(self, config, department):
        stats = run_parse(department, config)
        assert stats.files_parsed == 0
        assert stats.finished_at is not None

    def test_malformed_sidecar_ignored(self, config, department):
        seed_raw(config, "a.html", contract_page(vendor="Acme", reference="R-1", value="1"))
        meta_dir = PathResolver(config).metadata_dir("tst")
        meta_dir.mkdir(parents=True)
        (meta_dir / "a.json").write_text("{broken")
        stats = run_parse(department, config)

        assert stats.files_parsed == 1
        assert read_record(config, "a.html")["sourceYear"] == ""
        assert any("metadata" in w for w in stats.warnings)

    def test_vendor_table_applied(self, config, department):
        seed_raw(config, "a.html", contract_page(vendor="IBM Canada Ltd.", reference="R-1"))
        run_parse(department, config, vendors=VendorTable({"IBM Canada": ["IBM Canada Ltd."]}))
        assert read_record(config, "a.html")["vendorName"] == "IBM Canada"

    def test_html_transformations_applied(self, config, department):
        seed_raw(config, "a.html", "\ufeff" + contract_page(vendor="SociÃ©tÃ© Acme", reference="R-1"))
        run_parse(department, config)
        assert read_record(config, "a.html")["vendorName"] == "Société Acme"


class TestParseSingle:

    def test_returns_record(self, config, department, stats):
        seed_raw(config, "a.html", contract_page(vendor="Acme", reference="R-9"))
        record = parse_single(department, "a.html", config, stats=stats)
        assert record["uuid"] == "tst-R-9"
        assert stats.files_parsed == 1

    def test_raw_files_sorted(self, config):
        for name in ("c.html", "a.html", "b.html", "notes.txt"):
            seed_raw(config, name, "<p>x</p>")
        files = raw_files(PathResolver(config), "tst")
        assert [f.name for f in files] == ["a.html", "b.html", "c.html"]


class TestFetchThenParse:
    """The two phases meet only through the filesystem."""

    def test_round_trip(self, config, department):
        q = f"{SITE}/q1"
        c = f"{SITE}/q1/c1"
        pages = {
            department.index_url: index_page([q]),
            q: quarter_page([c]),
            c: contract_page(vendor="Acme", reference="R-1", value="$5,000.00",
                             date="2016-10-03", description="0491 Consulting"),
        }
        run_fetch(department, config, transport=FakeTransport(pages), sleep=lambda s: None)
        stats = run_parse(department, config)

        assert stats.files_parsed == 1
        record = read_record(config, url_to_filename(c))
        assert record["sourceURL"] == c
        assert record["sourceYear"] == 2016
        assert record["sourceQuarter"] == 3
        assert record["sourceFiscal"] == "2016-17-Q3"
        assert record["objectCode"] == "0491"
        assert record["contractValue"] == 5000.0
        assert record["contractDate"] == "2016-10-03"
