"""Entry-point for the DOCX to resolved document model pipeline."""
from __future__ import annotations

from docx_resolver.model.document_model import DocumentModel
from docx_resolver.parser.document_assembler import DocumentAssembler
from docx_resolver.parser.document_parser import DocumentParser
from docx_resolver.parser.docx_loader import NUMBERING_XML_PATH, STYLES_XML_PATH, DocxPackage, PackageSource
from docx_resolver.parser.metadata_parser import MetadataParser
from docx_resolver.parser.numbering_parser import NumberingParser
from docx_resolver.parser.numbering_resolver import NumberingCounters
from docx_resolver.parser.package_context import DEFAULT_MAX_WORKERS, PackageContext
from docx_resolver.parser.style_resolver import StyleResolver
from docx_resolver.parser.styles_parser import StylesParser
from docx_resolver.utils.logger import get_logger

LOGGER = get_logger(__name__)


def build_document_model(source: PackageSource, max_workers: int = DEFAULT_MAX_WORKERS) -> DocumentModel:
    """Load a DOCX package, resolve styles, numbering and parts, and build the document model.

    ``source`` may be a path, the raw archive bytes or a binary file object.
    Any fatal error propagates; nothing is retried.
    """
    package = DocxPackage.load(source)
    context = PackageContext(package, max_workers=max_workers)
    context.load_relationships()

    # Styles, numbering and every image payload must be ready before the body is walked.
    context.prefetch([STYLES_XML_PATH, NUMBERING_XML_PATH])
    LOGGER.info("Prefetched optional parts and %d images", context.image_count)

    styles = StylesParser(package.get_optional_xml_part(STYLES_XML_PATH)).parse()
    numbering = NumberingParser(package.get_optional_xml_part(NUMBERING_XML_PATH)).parse()
    LOGGER.info("Loaded %d styles and %d numbering instances", len(styles), len(numbering.instances))

    parser = DocumentParser(context, StyleResolver(styles), numbering, NumberingCounters())
    raw_sections = parser.parse_body()
    document = DocumentAssembler(context, parser).assemble(raw_sections)
    LOGGER.info("Built document with %d sections", len(document.sections))

    return DocumentModel(document=document, metadata=MetadataParser(package).parse())


parse_docx = build_document_model
