"""Unit tests for style parsing and resolution."""
import unittest
from xml.etree import ElementTree as ET

from docx_resolver.model.elements import Indent, ParagraphProperties, RunProperties
from docx_resolver.parser.style_resolver import StyleResolver
from docx_resolver.parser.styles_parser import StylesParser
from docx_resolver.tests.fixtures import styles_xml


STYLES = styles_xml(
    """
    <w:docDefaults>
      <w:rPrDefault><w:rPr><w:rFonts w:ascii="Calibri"/><w:sz w:val="22"/></w:rPr></w:rPrDefault>
      <w:pPrDefault><w:pPr><w:spacing w:after="160" w:line="259" w:lineRule="auto"/></w:pPr></w:pPrDefault>
    </w:docDefaults>
    <w:style w:type="paragraph" w:default="1" w:styleId="Normal">
      <w:name w:val="Normal"/>
      <w:rPr><w:color w:val="111111"/></w:rPr>
    </w:style>
    <w:style w:type="paragraph" w:styleId="Heading1">
      <w:name w:val="heading 1"/>
      <w:basedOn w:val="Normal"/>
      <w:next w:val="Normal"/>
      <w:link w:val="Heading1Char"/>
      <w:pPr>
        <w:keepNext/>
        <w:spacing w:before="240"/>
        <w:jc w:val="center"/>
        <w:outlineLvl w:val="0"/>
        <w:rPr><w:i/></w:rPr>
      </w:pPr>
      <w:rPr><w:b/><w:color w:val="2F5496"/><w:sz w:val="32"/></w:rPr>
    </w:style>
    <w:style w:type="paragraph" w:styleId="Quote">
      <w:basedOn w:val="Heading1"/>
      <w:pPr><w:ind w:start="720" w:end="360"/><w:shd w:val="clear" w:fill="EEEEEE"/></w:pPr>
      <w:rPr><w:b w:val="0"/></w:rPr>
    </w:style>
    <w:style w:type="character" w:styleId="Emphasis">
      <w:rPr><w:u/><w:color w:val="FF0000"/></w:rPr>
    </w:style>
    <w:style w:type="paragraph" w:styleId="LoopA"><w:basedOn w:val="LoopB"/><w:rPr><w:b/></w:rPr></w:style>
    <w:style w:type="paragraph" w:styleId="LoopB"><w:basedOn w:val="LoopA"/><w:rPr><w:i/></w:rPr></w:style>
    <w:style w:type="paragraph" w:styleId="Self"><w:basedOn w:val="Self"/></w:style>
    """
)


class StylesParserTest(unittest.TestCase):
    """Style definitions are kept exactly as written."""

    def setUp(self) -> None:
        self.catalog = StylesParser(ET.ElementTree(ET.fromstring(STYLES))).parse()

    def test_metadata_captured(self) -> None:
        heading = self.catalog.get("Heading1")
        assert heading is not None
        self.assertEqual(heading.style_type, "paragraph")
        self.assertEqual(heading.name, "heading 1")
        self.assertEqual(heading.based_on, "Normal")
        self.assertEqual(heading.next_style, "Normal")
        self.assertEqual(heading.linked_style, "Heading1Char")
        self.assertFalse(heading.is_default)

    def test_direct_properties_not_inherited(self) -> None:
        heading = self.catalog.get("Heading1")
        assert heading is not None and heading.run_properties is not None
        self.assertTrue(heading.run_properties.bold)
        self.assertEqual(heading.run_properties.size, 32)
        self.assertIsNone(heading.run_properties.font)
        assert heading.paragraph_properties is not None
        self.assertEqual(heading.paragraph_properties.alignment, "center")
        self.assertTrue(heading.paragraph_properties.keep_next)
        self.assertEqual(heading.paragraph_properties.outline_level, 0)

    def test_doc_defaults_and_default_style(self) -> None:
        self.assertEqual(self.catalog.default_run_properties.font, "Calibri")
        self.assertEqual(self.catalog.default_run_properties.size, 22)
        spacing = self.catalog.default_paragraph_properties.spacing
        assert spacing is not None
        self.assertEqual(spacing.after, 160)
        self.assertEqual(spacing.line_rule, "auto")
        default = self.catalog.default_for("paragraph")
        assert default is not None
        self.assertEqual(default.style_id, "Normal")
        self.assertIsNone(self.catalog.default_for("table"))
        self.assertEqual(set(self.catalog.all()), {"Normal", "Heading1", "Quote", "Emphasis", "LoopA", "LoopB", "Self"})

    def test_toggle_off_and_logical_sides(self) -> None:
        quote = self.catalog.get("Quote")
        assert quote is not None and quote.run_properties is not None
        self.assertIs(quote.run_properties.bold, False)
        assert quote.paragraph_properties is not None
        self.assertEqual(quote.paragraph_properties.indent, Indent(left=720, right=360))
        self.assertEqual(quote.paragraph_properties.shading, "EEEEEE")

    def test_missing_styles_part_gives_empty_catalog(self) -> None:
        catalog = StylesParser(None).parse()
        self.assertEqual(len(catalog), 0)
        self.assertEqual(catalog.default_run_properties, RunProperties())


class StyleResolverTest(unittest.TestCase):
    """Inheritance order and merge policy of the resolver."""

    def setUp(self) -> None:
        catalog = StylesParser(ET.ElementTree(ET.fromstring(STYLES))).parse()
        self.resolver = StyleResolver(catalog)

    def test_chain_is_most_derived_first(self) -> None:
        chain = [style.style_id for style in self.resolver.style_chain("Quote")]
        self.assertEqual(chain, ["Quote", "Heading1", "Normal"])
        self.assertEqual(self.resolver.style_chain("Missing"), [])

    def test_cyclic_chain_terminates(self) -> None:
        chain = [style.style_id for style in self.resolver.style_chain("LoopA")]
        self.assertEqual(chain, ["LoopA", "LoopB"])
        self.assertEqual([s.style_id for s in self.resolver.style_chain("Self")], ["Self"])
        properties = self.resolver.resolve_run_properties(None, None, "LoopA")
        self.assertTrue(properties.bold)
        self.assertTrue(properties.italic)

    def test_paragraph_resolution_layers(self) -> None:
        effective = self.resolver.resolve_paragraph_properties(None, "Quote")
        self.assertEqual(effective.style_id, "Quote")
        self.assertEqual(effective.alignment, "center")
        self.assertEqual(effective.spacing.before, 240)
        self.assertEqual(effective.spacing.after, 160)
        self.assertEqual(effective.indent.left, 720)
        self.assertEqual(effective.shading, "EEEEEE")
        run = effective.run_properties
        self.assertEqual(run.font, "Calibri")
        self.assertEqual(run.color, "2F5496")
        self.assertIs(run.bold, False)
        self.assertTrue(run.italic)

    def test_local_properties_win_field_by_field(self) -> None:
        local = ParagraphProperties(alignment="right", indent=Indent(first_line=360))
        effective = self.resolver.resolve_paragraph_properties(local, "Quote")
        self.assertEqual(effective.alignment, "right")
        self.assertEqual(effective.indent, Indent(left=720, right=360, first_line=360))
        self.assertEqual(effective.spacing.before, 240)

    def test_nested_groups_always_present(self) -> None:
        effective = self.resolver.resolve_paragraph_properties(None, "Missing")
        self.assertIsNotNone(effective.indent)
        self.assertIsNotNone(effective.spacing)
        self.assertIsNotNone(effective.borders)
        self.assertIsNotNone(effective.run_properties)

    def test_unstyled_paragraph_uses_default_style(self) -> None:
        effective = self.resolver.resolve_paragraph_properties(None)
        self.assertEqual(effective.style_id, "Normal")
        self.assertEqual(effective.run_properties.color, "111111")

    def test_run_resolution_order(self) -> None:
        properties = self.resolver.resolve_run_properties(RunProperties(size=18), "Emphasis", "Heading1")
        self.assertEqual(properties.font, "Calibri")
        self.assertTrue(properties.bold)
        self.assertTrue(properties.italic)
        self.assertEqual(properties.underline, "single")
        self.assertEqual(properties.color, "FF0000")
        self.assertEqual(properties.size, 18)

    def test_unset_local_fields_do_not_erase(self) -> None:
        properties = self.resolver.resolve_run_properties(RunProperties(italic=False), None, "Heading1")
        self.assertTrue(properties.bold)
        self.assertEqual(properties.color, "2F5496")
        self.assertIs(properties.italic, False)

    def test_resolution_is_idempotent(self) -> None:
        local = ParagraphProperties(alignment="both")
        first = self.resolver.resolve_paragraph_properties(local, "Quote")
        second = self.resolver.resolve_paragraph_properties(local, "Quote")
        self.assertEqual(first, second)
        self.assertEqual(
            self.resolver.resolve_run_properties(None, "Emphasis", "Quote"),
            self.resolver.resolve_run_properties(None, "Emphasis", "Quote"),
        )


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
