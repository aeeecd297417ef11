"""
DOCX media extractor

Turns image relationships into ImageHandle payloads that drawings can point at.
"""

import mimetypes
from pathlib import Path
from typing import Optional

from docx_resolver.model.elements import ImageHandle
from docx_resolver.parser.rels_parser import Relationship
from docx_resolver.utils.logger import get_logger

LOGGER = get_logger(__name__)

# Common DOCX media types that mimetypes does not always know about
_MEDIA_TYPES = {
    '.png': 'image/png',
    '.jpg': 'image/jpeg',
    '.jpeg': 'image/jpeg',
    '.gif': 'image/gif',
    '.bmp': 'image/bmp',
    '.tif': 'image/tiff',
    '.tiff': 'image/tiff',
    '.svg': 'image/svg+xml',
    '.emf': 'image/x-emf',
    '.wmf': 'image/x-wmf',
    '.wdp': 'image/vnd.ms-photo',
}


def get_media_type(target_path: str) -> str:
    """Determine MIME type from file extension."""
    ext = Path(target_path).suffix.lower()
    if ext in _MEDIA_TYPES:
        return _MEDIA_TYPES[ext]
    mime_type, _ = mimetypes.guess_type(target_path)
    return mime_type or 'application/octet-stream'


def build_image_handle(relationship: Relationship, data: Optional[bytes]) -> Optional[ImageHandle]:
    """Wrap the media bytes behind an image relationship, or None if they are missing."""
    if relationship.is_external or not relationship.resolved_target:
        return None
    if data is None:
        LOGGER.debug(
            "Media part %s for %s/%s not found",
            relationship.resolved_target, relationship.source_part, relationship.r_id,
        )
        return None
    return ImageHandle(
        relationship_id=relationship.r_id,
        part_name=relationship.resolved_target,
        media_type=get_media_type(relationship.resolved_target),
        data=data,
    )
