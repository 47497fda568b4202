"""
Module: generator.output

Purpose:
    Output sinks: ReportLab PDF writing and custom base document overlay.

Key Functions:
    - render_pdf(): GenerationResult -> PDF bytes
"""

from .renderer import ReportLabSink, render_pdf
from .base_pdf import read_page_geometries, overlay_pages

__all__ = [
    "ReportLabSink",
    "render_pdf",
    "read_page_geometries",
    "overlay_pages",
]
