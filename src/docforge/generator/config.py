"""
Module: generator.config

Purpose:
    Configuration dataclass for a generation call. Immutable
    configuration with validation on construction.

Key Classes:
    - GeneratorConfig: Output metadata, strictness and placeholder clock

Dependencies:
    - dataclasses (std)
    - datetime (std)

Used By:
    - generator.controller: generate()
    - generator.output.renderer: PDF metadata
    - cli: Built from command-line flags
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

DEFAULT_CREATOR = "docforge"
DEFAULT_DATE_FORMAT = "%Y/%m/%d"
DEFAULT_DATETIME_FORMAT = "%Y/%m/%d %H:%M"


@dataclass(frozen=True)
class GeneratorConfig:
    """
    Configuration for one generation call (immutable).

    Attributes:
        title: PDF title metadata
        author: PDF author metadata
        subject: PDF subject metadata
        creator: PDF creator metadata
        keywords: PDF keywords
        strict: Treat non-fatal validation violations as fatal
        now: Clock for ``{date}``/``{dateTime}`` placeholders; captured
            once per call (None means the current time)
        placeholder_date_format: strftime format for ``{date}``
        placeholder_datetime_format: strftime format for ``{dateTime}``

    Example:
        >>> config = GeneratorConfig(title="Invoices", now=datetime(2024, 1, 2))
        >>> config.resolve_now().year
        2024
    """

    title: str = ""
    author: str = ""
    subject: str = ""
    creator: str = DEFAULT_CREATOR
    keywords: Tuple[str, ...] = ()

    strict: bool = False

    now: Optional[datetime] = None
    placeholder_date_format: str = DEFAULT_DATE_FORMAT
    placeholder_datetime_format: str = DEFAULT_DATETIME_FORMAT

    def __post_init__(self) -> None:
        """Validate configuration on construction."""
        if isinstance(self.keywords, str):
            raise ValueError(f"keywords must be a sequence of strings, not a string: {self.keywords!r}")
        object.__setattr__(self, "keywords", tuple(self.keywords))
        if not all(isinstance(k, str) for k in self.keywords):
            raise ValueError(f"keywords must be strings: {self.keywords!r}")
        if not self.placeholder_date_format:
            raise ValueError("placeholder_date_format must not be empty")
        if not self.placeholder_datetime_format:
            raise ValueError("placeholder_datetime_format must not be empty")
        if self.now is not None and not isinstance(self.now, datetime):
            raise ValueError(f"now must be a datetime: {self.now!r}")

    def resolve_now(self) -> datetime:
        """Clock value for this call."""
        return self.now if self.now is not None else datetime.now()
