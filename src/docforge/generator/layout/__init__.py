"""
Module: generator.layout

Purpose:
    Page layout for generation: measure content-dependent heights and
    reflow templates onto pages.

Key Functions:
    - paginate_record(): Lay out one record on blank pages
    - fixed_layout(): Pages of a custom base document
    - get_dynamic_template(): Reflowed Template for one record

Key Classes:
    - SchemaPlacement, PagePlan, LayoutResult

Used By:
    - generator.controller
"""

from .models import SchemaPlacement, PagePlan, LayoutResult
from .paginator import (
    dynamic_heights,
    paginate_record,
    fixed_layout,
    record_value_of,
    get_dynamic_template,
)

__all__ = [
    # Models
    "SchemaPlacement",
    "PagePlan",
    "LayoutResult",
    # Functions
    "dynamic_heights",
    "paginate_record",
    "fixed_layout",
    "record_value_of",
    "get_dynamic_template",
]
