"""Tests for document property extraction."""
import unittest
from datetime import datetime, timedelta, timezone

from docx_resolver.parser.metadata_parser import MetadataParser, parse_datetime, parse_int, split_keywords
from docx_resolver.tests.fixtures import build_package

CORE_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<cp:coreProperties xmlns:cp="http://schemas.openxmlformats.org/package/2006/metadata/core-properties"
    xmlns:dc="http://purl.org/dc/elements/1.1/" xmlns:dcterms="http://purl.org/dc/terms/"
    xmlns:xsi="http://www.w3.org/2001/XMLSchema-instance">
  <dc:title>Quarterly Report</dc:title>
  <dc:subject>Finance</dc:subject>
  <dc:creator>Jo Smith</dc:creator>
  <cp:keywords>budget; forecast,  q3</cp:keywords>
  <cp:lastModifiedBy>Sam Lee</cp:lastModifiedBy>
  <cp:revision>12</cp:revision>
  <dcterms:created xsi:type="dcterms:W3CDTF">2024-03-01T09:30:00Z</dcterms:created>
  <dcterms:modified xsi:type="dcterms:W3CDTF">not a date</dcterms:modified>
</cp:coreProperties>
"""

APP_XML = """<Properties xmlns="http://schemas.openxmlformats.org/officeDocument/2006/extended-properties">
  <Application>Microsoft Office Word</Application>
  <Pages>3</Pages>
  <Words>812</Words>
  <Characters>many</Characters>
</Properties>
"""


class MetadataParserTest(unittest.TestCase):
    def test_core_and_app_properties(self) -> None:
        package = build_package({"docProps/core.xml": CORE_XML, "docProps/app.xml": APP_XML})
        metadata = MetadataParser(package).parse()
        self.assertEqual(metadata.title, "Quarterly Report")
        self.assertEqual(metadata.subject, "Finance")
        self.assertEqual(metadata.creator, "Jo Smith")
        self.assertEqual(metadata.keywords, ["budget", "forecast", "q3"])
        self.assertEqual(metadata.last_modified_by, "Sam Lee")
        self.assertEqual(metadata.revision, 12)
        self.assertEqual(metadata.created, datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc))
        self.assertIsNone(metadata.modified)
        self.assertEqual(metadata.application, "Microsoft Office Word")
        self.assertEqual(metadata.pages, 3)
        self.assertEqual(metadata.words, 812)
        self.assertIsNone(metadata.characters)

    def test_missing_parts_leave_defaults(self) -> None:
        metadata = MetadataParser(build_package({})).parse()
        self.assertIsNone(metadata.title)
        self.assertEqual(metadata.keywords, [])

    def test_value_helpers(self) -> None:
        self.assertIsNone(parse_int(None))
        self.assertEqual(parse_int("7"), 7)
        self.assertEqual(
            parse_datetime("2023-12-31T23:00:00+02:00"),
            datetime(2023, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=2))),
        )
        self.assertIsNone(parse_datetime(""))
        self.assertEqual(split_keywords(" ; "), [])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
