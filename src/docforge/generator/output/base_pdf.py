"""
Module: generator.output.base_pdf

Purpose:
    Custom base documents: read their page sizes and lay generated
    pages over their pages, using PyMuPDF.

Key Functions:
    - read_page_geometries(): Base PDF bytes -> one PageGeometry per page
    - overlay_pages(): Stamp generated pages onto base pages

Dependencies:
    - fitz (PyMuPDF): PDF reading and page composition
"""

from __future__ import annotations

import logging
from typing import List, Sequence

import fitz

from docforge.common.units import pt2mm
from docforge.core.errors import GenerationError
from docforge.core.models import PageGeometry

logger = logging.getLogger(__name__)


def read_page_geometries(data: bytes) -> List[PageGeometry]:
    """
    Page sizes of a PDF in millimetres (no padding).

    Raises:
        ValueError: If the bytes are not a readable PDF
    """
    try:
        with fitz.open(stream=data, filetype="pdf") as doc:
            geometries = [
                PageGeometry(width=pt2mm(page.rect.width), height=pt2mm(page.rect.height))
                for page in doc
            ]
    except (RuntimeError, ValueError) as exc:
        raise ValueError(f"Base PDF could not be read: {exc}") from exc
    logger.debug(f"Base PDF has {len(geometries)} pages")
    return geometries


def overlay_pages(base_data: bytes, overlay_data: bytes, base_pages: Sequence[int]) -> bytes:
    """
    Compose output pages: base page underneath, generated page on top.

    Args:
        base_data: Base document bytes
        overlay_data: Generated pages (one per output page)
        base_pages: For each generated page, the base page index under it

    Returns:
        PDF bytes with one page per generated page

    Raises:
        GenerationError: If either document cannot be composed
    """
    try:
        with fitz.open(stream=base_data, filetype="pdf") as base, \
                fitz.open(stream=overlay_data, filetype="pdf") as overlay, \
                fitz.open() as out:
            for index, base_index in enumerate(base_pages):
                rect = base[base_index].rect
                page = out.new_page(width=rect.width, height=rect.height)
                page.show_pdf_page(page.rect, base, base_index)
                page.show_pdf_page(page.rect, overlay, index)
            return out.tobytes(garbage=3, deflate=True)
    except (RuntimeError, ValueError, IndexError) as exc:
        raise GenerationError(f"Failed to overlay generated pages on the base PDF: {exc}") from exc
