"""Tests for the DOCX archive adapter and its error handling."""
import io
import unittest

from docx_resolver.parser.docx_loader import DocxPackage
from docx_resolver.parser.package_context import PackageContext
from docx_resolver.tests.fixtures import build_docx_bytes, build_package, document_xml
from docx_resolver.utils.exceptions import DocxParseError, InvalidPackage, MalformedXml, MissingRequiredPart


class DocxPackageTest(unittest.TestCase):
    """Loading parts from archives and parsing them as XML."""

    def test_load_from_bytes_and_stream(self) -> None:
        data = build_docx_bytes({"word/document.xml": document_xml("<w:p/>")})
        for source in (data, io.BytesIO(data)):
            package = DocxPackage.load(source)
            self.assertTrue(package.has_part("word/document.xml"))
            self.assertTrue(package.has_part("/word/document.xml"))

    def test_non_zip_input_raises_invalid_package(self) -> None:
        with self.assertRaises(InvalidPackage):
            DocxPackage.load(b"definitely not a zip archive")

    def test_load_text_strips_bom(self) -> None:
        package = build_package({"word/notes.txt": "\ufeffhello".encode("utf-8")})
        self.assertEqual(package.load_text("word/notes.txt"), "hello")
        self.assertIsNone(package.load_text("word/absent.txt"))

    def test_load_text_accepts_explicit_encodings(self) -> None:
        package = build_package({"word/notes.txt": "\ufeffcafé".encode("utf-8")})
        self.assertEqual(package.load_text("word/notes.txt", encoding="utf-8-sig"), "café")
        self.assertEqual(package.load_text("word/notes.txt", encoding="UTF-8"), "café")
        latin = build_package({"word/notes.txt": "café".encode("latin-1")})
        self.assertEqual(latin.load_text("word/notes.txt", encoding="latin-1"), "café")

    def test_xml_part_is_cached(self) -> None:
        package = build_package({"word/document.xml": document_xml("")})
        first = package.get_xml_part("word/document.xml")
        self.assertIs(first, package.get_xml_part("word/document.xml"))

    def test_required_part_missing(self) -> None:
        package = build_package({})
        with self.assertRaises(MissingRequiredPart) as ctx:
            package.require_document_xml()
        self.assertEqual(ctx.exception.part_name, "word/document.xml")
        self.assertIn("word/document.xml", str(ctx.exception))

    def test_malformed_required_part(self) -> None:
        package = build_package({"word/document.xml": "<w:document><w:body>"})
        with self.assertRaises(MalformedXml) as ctx:
            package.require_document_xml()
        self.assertIsInstance(ctx.exception, DocxParseError)
        self.assertIsNotNone(ctx.exception.__cause__)

    def test_malformed_optional_part_is_absent(self) -> None:
        package = build_package({"word/styles.xml": "<w:styles"})
        with self.assertLogs("docx_resolver.parser.docx_loader", level="WARNING"):
            self.assertIsNone(package.get_optional_xml_part("word/styles.xml"))


class PackageContextTest(unittest.TestCase):
    """Relationship loading without a document relationship part."""

    def test_missing_relationships_give_empty_table(self) -> None:
        context = PackageContext(build_package({"word/document.xml": document_xml("")}))
        relationships = context.load_relationships()
        self.assertEqual(len(relationships), 0)
        self.assertIsNone(context.get_relationship("rId1"))
        self.assertEqual(context.resolve_images(), 0)

    def test_part_access_delegates_to_package(self) -> None:
        context = PackageContext(build_package({"customXml/item1.xml": "\ufeff<root/>"}))
        self.assertEqual(context.load_text("/customXml/item1.xml"), "<root/>")
        self.assertIsNone(context.load_text("customXml/item2.xml"))
        self.assertEqual(context.load_part("customXml/item1.xml")[:3], b"\xef\xbb\xbf")

    def test_prefetch_parses_optional_parts(self) -> None:
        package = build_package({"word/styles.xml": '<w:styles xmlns:w="urn:w"/>'})
        context = PackageContext(package, max_workers=2)
        context.load_relationships()
        context.prefetch(["word/styles.xml", "word/numbering.xml"])
        self.assertIn("word/styles.xml", package.xml_cache)
        self.assertEqual(context.load_part("word/numbering.xml"), None)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
