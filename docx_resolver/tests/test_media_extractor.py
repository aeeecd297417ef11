"""Tests for image handle creation and concurrent resolution in the package context."""
import unittest

from docx_resolver.parser.media_extractor import build_image_handle, get_media_type
from docx_resolver.parser.rels_parser import RELTYPE_IMAGE, Relationship
from docx_resolver.tests.fixtures import PNG_BYTES, build_context, rels_xml


class MediaTypeTest(unittest.TestCase):
    """Media type detection from part names."""

    def test_known_extensions(self) -> None:
        self.assertEqual(get_media_type("word/media/image1.png"), "image/png")
        self.assertEqual(get_media_type("word/media/photo.JPEG"), "image/jpeg")
        self.assertEqual(get_media_type("word/media/chart.emf"), "image/x-emf")

    def test_unknown_extension_falls_back(self) -> None:
        self.assertEqual(get_media_type("word/media/blob.unknownext"), "application/octet-stream")

    def test_handle_wraps_bytes(self) -> None:
        rel = Relationship(
            source_part="word/document.xml",
            r_id="rId7",
            target="media/image1.png",
            rel_type=RELTYPE_IMAGE,
            resolved_target="word/media/image1.png",
        )
        handle = build_image_handle(rel, PNG_BYTES)
        assert handle is not None
        self.assertEqual(handle.relationship_id, "rId7")
        self.assertEqual(handle.part_name, "word/media/image1.png")
        self.assertEqual(handle.media_type, "image/png")
        self.assertEqual(handle.size, len(PNG_BYTES))

    def test_missing_bytes_yield_no_handle(self) -> None:
        rel = Relationship("word/document.xml", "rId7", "media/x.png", RELTYPE_IMAGE, None, "word/media/x.png")
        self.assertIsNone(build_image_handle(rel, None))


class PackageContextImagesTest(unittest.TestCase):
    """Image relationships from every part are resolved before parsing."""

    def setUp(self) -> None:
        self.context = build_context(
            {
                "word/_rels/document.xml.rels": rels_xml(
                    ("rId1", "image", "media/image1.png"),
                    ("rId2", "image", "media/missing.png"),
                    ("rId3", "image", "https://example.com/remote.png", "External"),
                    ("rId4", "header", "header1.xml"),
                ),
                "word/_rels/header1.xml.rels": rels_xml(("rId1", "image", "media/logo.gif")),
                "word/media/image1.png": PNG_BYTES,
                "word/media/logo.gif": b"GIF89a",
            }
        )

    def test_document_image_resolved(self) -> None:
        handle = self.context.get_image_handle("rId1")
        assert handle is not None
        self.assertEqual(handle.data, PNG_BYTES)
        self.assertEqual(handle.media_type, "image/png")

    def test_handles_are_keyed_by_source_part(self) -> None:
        header_handle = self.context.get_image_handle("rId1", "word/header1.xml")
        assert header_handle is not None
        self.assertEqual(header_handle.part_name, "word/media/logo.gif")
        self.assertEqual(header_handle.media_type, "image/gif")

    def test_missing_and_external_images_have_no_handle(self) -> None:
        self.assertIsNone(self.context.get_image_handle("rId2"))
        self.assertIsNone(self.context.get_image_handle("rId3"))
        self.assertIsNone(self.context.get_image_handle("rId4"))
        self.assertEqual(self.context.image_count, 2)

    def test_relationship_lookup(self) -> None:
        rel = self.context.get_relationship("rId4")
        assert rel is not None
        self.assertEqual(rel.resolved_target, "word/header1.xml")
        self.assertIsNone(self.context.get_relationship("rId99"))

    def test_parts_loaded_concurrently(self) -> None:
        loaded = self.context.load_parts(["word/media/image1.png", "word/media/nothing.png"])
        self.assertEqual(loaded["word/media/image1.png"], PNG_BYTES)
        self.assertIsNone(loaded["word/media/nothing.png"])


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
