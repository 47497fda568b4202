"""
Generator Package

Turns a template plus input records into pages of draw primitives and
writes them to PDF.

Key Functions:
    - generate(): In-memory generation (GenerationResult)
    - generate_pdf(): generate() + PDF output
    - get_dynamic_template(): Reflowed template for one record
"""

from .config import GeneratorConfig
from .controller import GenerationResult, PageRender, generate, generate_pdf
from .layout import get_dynamic_template
from .output import ReportLabSink, render_pdf

__all__ = [
    "GeneratorConfig",
    "GenerationResult",
    "PageRender",
    "generate",
    "generate_pdf",
    "get_dynamic_template",
    "ReportLabSink",
    "render_pdf",
]
