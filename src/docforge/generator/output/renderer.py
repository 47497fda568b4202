"""
Module: generator.output.renderer

Purpose:
    Render a GenerationResult to PDF using ReportLab.
    Each PageRender becomes one PDF page with its primitives drawn in
    order. Primitives arrive in points with a top-left origin; the
    y axis is flipped here, at the sink.

Key Classes:
    - ReportLabSink: Draws primitives on a ReportLab canvas

Key Functions:
    - render_pdf(): GenerationResult -> PDF bytes

Dependencies:
    - reportlab: PDF generation, barcode widgets
    - PIL (via reportlab.lib.utils.ImageReader): Raster decoding
    - generator.output.base_pdf: Custom base documents

Used By:
    - generator.controller: generate_pdf()
    - cli
"""

from __future__ import annotations

import io
import logging
from typing import BinaryIO, Optional, Union

from reportlab.graphics import renderPDF
from reportlab.graphics.barcode import createBarcodeDrawing
from reportlab.lib import colors
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from docforge.common.colors import hex_to_rgb
from docforge.core.models import (
    Barcode,
    CustomPdf,
    Ellipse,
    ImagePlacement,
    Line,
    Primitive,
    Rectangle,
    Template,
    TextRun,
)

from ..config import GeneratorConfig
from .base_pdf import overlay_pages

logger = logging.getLogger(__name__)

# Symbologies drawn without human-readable text support.
_MATRIX_CODES = frozenset({"QR"})


class ReportLabSink:
    """
    Output sink writing pages to a ReportLab canvas.

    Example:
        >>> buffer = io.BytesIO()
        >>> sink = ReportLabSink(buffer)
        >>> sink.begin_page(595.0, 842.0)
        >>> sink.draw(TextRun(text="Hi", x=72, y=72, font_name="Helvetica", font_size=12))
        >>> sink.end_page()
        >>> sink.finish()
    """

    def __init__(self, target: Union[str, BinaryIO], *, config: Optional[GeneratorConfig] = None):
        config = config or GeneratorConfig()
        self._canvas = canvas.Canvas(target, invariant=1)
        self._canvas.setTitle(config.title)
        self._canvas.setAuthor(config.author)
        self._canvas.setSubject(config.subject)
        self._canvas.setCreator(config.creator)
        if config.keywords:
            self._canvas.setKeywords(list(config.keywords))
        self._page_height = 0.0
        self.page_count = 0

    def begin_page(self, width: float, height: float) -> None:
        self._canvas.setPageSize((width, height))
        self._page_height = height

    def end_page(self) -> None:
        self._canvas.showPage()
        self.page_count += 1

    def finish(self) -> None:
        self._canvas.save()

    def _flip(self, y: float) -> float:
        """Top-left origin y -> PDF bottom-left origin y."""
        return self._page_height - y

    def draw(self, primitive: Primitive) -> None:
        """Draw one primitive (lengths in points, origin top-left)."""
        c = self._canvas
        c.saveState()
        try:
            if primitive.rotation and primitive.pivot is not None:
                # Clockwise on the page is negative in PDF space.
                px, py = primitive.pivot[0], self._flip(primitive.pivot[1])
                c.translate(px, py)
                c.rotate(-primitive.rotation)
                c.translate(-px, -py)
            if primitive.opacity < 1:
                c.setFillAlpha(primitive.opacity)
                c.setStrokeAlpha(primitive.opacity)

            if isinstance(primitive, TextRun):
                self._draw_text(primitive)
            elif isinstance(primitive, ImagePlacement):
                self._draw_image(primitive)
            elif isinstance(primitive, Line):
                self._draw_line(primitive)
            elif isinstance(primitive, Rectangle):
                self._draw_rectangle(primitive)
            elif isinstance(primitive, Ellipse):
                self._draw_ellipse(primitive)
            elif isinstance(primitive, Barcode):
                self._draw_barcode(primitive)
            else:
                raise TypeError(f"Unsupported primitive: {primitive.kind}")
        finally:
            c.restoreState()

    def _draw_text(self, run: TextRun) -> None:
        c = self._canvas
        c.setFillColorRGB(*hex_to_rgb(run.color))
        text = c.beginText(run.x, self._flip(run.y))
        text.setFont(run.font_name, run.font_size)
        if run.character_spacing:
            text.setCharSpace(run.character_spacing)
        text.textOut(run.text)
        c.drawText(text)

    def _draw_image(self, image: ImagePlacement) -> None:
        self._canvas.drawImage(
            ImageReader(io.BytesIO(image.data)),
            image.x,
            self._flip(image.y + image.height),
            width=image.width,
            height=image.height,
            mask="auto",
        )

    def _draw_line(self, line: Line) -> None:
        c = self._canvas
        c.setStrokeColorRGB(*hex_to_rgb(line.color))
        c.setLineWidth(line.stroke_width)
        c.line(line.x1, self._flip(line.y1), line.x2, self._flip(line.y2))

    def _apply_paint(self, fill_color: Optional[str], stroke_color: Optional[str], stroke_width: float):
        c = self._canvas
        if fill_color:
            c.setFillColorRGB(*hex_to_rgb(fill_color))
        stroke = bool(stroke_color) and stroke_width > 0
        if stroke:
            c.setStrokeColorRGB(*hex_to_rgb(stroke_color))
            c.setLineWidth(stroke_width)
        return int(stroke), int(bool(fill_color))

    def _draw_rectangle(self, rect: Rectangle) -> None:
        stroke, fill = self._apply_paint(rect.fill_color, rect.stroke_color, rect.stroke_width)
        if stroke or fill:
            self._canvas.rect(
                rect.x, self._flip(rect.y + rect.height), rect.width, rect.height, stroke=stroke, fill=fill
            )

    def _draw_ellipse(self, ellipse: Ellipse) -> None:
        stroke, fill = self._apply_paint(ellipse.fill_color, ellipse.stroke_color, ellipse.stroke_width)
        if stroke or fill:
            self._canvas.ellipse(
                ellipse.x,
                self._flip(ellipse.y + ellipse.height),
                ellipse.x + ellipse.width,
                self._flip(ellipse.y),
                stroke=stroke,
                fill=fill,
            )

    def _draw_barcode(self, barcode: Barcode) -> None:
        c = self._canvas
        bottom = self._flip(barcode.y + barcode.height)
        if barcode.background_color:
            c.setFillColorRGB(*hex_to_rgb(barcode.background_color))
            c.rect(barcode.x, bottom, barcode.width, barcode.height, stroke=0, fill=1)

        options = {
            "value": barcode.value,
            "width": barcode.width,
            "height": barcode.height,
            "barFillColor": colors.HexColor(barcode.bar_color),
        }
        if barcode.symbology not in _MATRIX_CODES:
            options["humanReadable"] = barcode.include_text
        if barcode.symbology == "I2of5":
            # ITF-14 payloads already carry their check digit.
            options["checksum"] = 0
        drawing = createBarcodeDrawing(barcode.symbology, **options)
        renderPDF.draw(drawing, c, barcode.x, bottom)


def render_pdf(
    result,
    template: Optional[Template] = None,
    *,
    config: Optional[GeneratorConfig] = None,
) -> bytes:
    """
    Write every page of a generation result to one PDF.

    With a custom base document, each generated page is laid over the
    base page it was generated from.

    Args:
        result: GenerationResult from generate()
        template: Template the result was generated from (needed for
            custom base documents)
        config: PDF metadata

    Returns:
        PDF bytes

    Example:
        >>> data = render_pdf(generate(template, inputs), template)
        >>> data[:4]
        b'%PDF'
    """
    if result.page_count == 0:
        logger.warning("No pages to render, creating empty PDF")

    buffer = io.BytesIO()
    sink = ReportLabSink(buffer, config=config)
    for page in result.pages:
        sink.begin_page(page.width, page.height)
        for primitive in page.primitives:
            sink.draw(primitive)
        sink.end_page()
    sink.finish()
    data = buffer.getvalue()

    if template is not None and isinstance(template.base_pdf, CustomPdf) and result.page_count:
        data = overlay_pages(template.base_pdf.data, data, [page.template_page for page in result.pages])

    logger.info(f"Rendered {sink.page_count} page(s) ({len(data)} bytes)")
    return data
