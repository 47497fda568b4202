"""
Module: generator.placeholders

Purpose:
    Substitute ``{name}`` placeholders in read-only content.

    Record fields are available by schema name, together with the
    built-ins ``{date}``, ``{dateTime}``, ``{currentPage}`` and
    ``{totalPages}``. Unknown placeholders are left untouched so JSON
    content with braces survives.

Key Functions:
    - placeholder_variables(): Record + date built-ins
    - replace_placeholders(): Apply variables to a string
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from docforge.plugins.utils import as_text

from .config import GeneratorConfig

PLACEHOLDER_PATTERN = re.compile(r"\{([^{}\s]+)\}")

PAGE_PLACEHOLDERS = ("currentPage", "totalPages")


def placeholder_variables(
    record: Mapping[str, Any],
    *,
    now: datetime,
    config: GeneratorConfig,
) -> Dict[str, str]:
    """Variables available to every read-only field of one record."""
    variables = {key: as_text(value) for key, value in record.items()}
    variables["date"] = now.strftime(config.placeholder_date_format)
    variables["dateTime"] = now.strftime(config.placeholder_datetime_format)
    return variables


def replace_placeholders(
    content: str,
    variables: Mapping[str, str],
    *,
    current_page: Optional[int] = None,
    total_pages: Optional[int] = None,
) -> str:
    """
    Replace known ``{name}`` placeholders in content.

    Page placeholders are only replaced when page numbers are given.

    Example:
        >>> replace_placeholders("{a} of {b} {x}", {"a": "1"}, total_pages=3)
        '1 of {b} {x}'
        >>> replace_placeholders("{currentPage}/{totalPages}", {}, current_page=1, total_pages=2)
        '1/2'
    """
    values = dict(variables)
    if current_page is not None:
        values["currentPage"] = str(current_page)
    if total_pages is not None:
        values["totalPages"] = str(total_pages)

    def _sub(match: re.Match) -> str:
        key = match.group(1)
        return values[key] if key in values else match.group(0)

    return PLACEHOLDER_PATTERN.sub(_sub, content)
