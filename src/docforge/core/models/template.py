"""
Module: template

Purpose:
    Provides the Template and Schema dataclasses - the declarative,
    position-based description of a document. A template is an ordered
    sequence of pages, each page an ordered sequence of schema instances
    (placed fields). All geometry is in millimetres with the origin at
    the top-left corner of the page.

Key Classes:
    - Position: Top-left corner of a schema box
    - BodyRange: Slice of table rows rendered by one table instance
    - Schema: One placed field on one page
    - BlankPdf: Fixed page size with content padding
    - CustomPdf: Pre-existing base document (raw PDF bytes)
    - Template: Base document plus pages of schemas

Key Functions:
    - Template.from_dict(data): Parse template JSON
    - Template.to_dict(): Serialize for JSON

Dependencies:
    - dataclasses (std)
    - base64 (std)

Used By:
    - core.schemas.validator
    - plugins (every renderer reads Schema)
    - generator.layout.paginator
    - generator.controller

Note:
    Models are permissive on construction: geometry and colour problems
    are collected by core.schemas.validator so that every violation can
    be reported at once instead of failing on the first.
"""

from __future__ import annotations

import base64
import binascii
import copy
from dataclasses import dataclass, field, replace
from typing import Any, Iterator, Mapping, Optional, Tuple, Union

# Keys stored as dataclass fields; everything else is type-specific.
_SCHEMA_KEYS = frozenset({
    "name", "type", "position", "width", "height", "rotation", "opacity",
    "required", "readOnly", "content", "showHead", "bodyRange", "__bodyRange",
})

DATA_URI_BASE64_MARKER = ";base64,"


@dataclass(frozen=True, slots=True)
class Position:
    """Top-left corner of a schema box in millimetres."""

    x: float
    y: float

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Position":
        return cls(x=data.get("x", 0), y=data.get("y", 0))


@dataclass(frozen=True, slots=True)
class BodyRange:
    """
    Rows of a table value rendered by one table instance.

    ``start`` is inclusive, ``end`` exclusive; ``end=None`` runs to the
    last row. Used when one logical table continues across pages.

    Example:
        >>> BodyRange(start=2, end=5).slice(list("abcdefg"))
        ['c', 'd', 'e']
    """

    start: int = 0
    end: Optional[int] = None

    def slice(self, rows: list) -> list:
        return rows[self.start:self.end]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"start": self.start}
        if self.end is not None:
            data["end"] = self.end
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BodyRange":
        return cls(start=_as_index(data.get("start", 0)), end=_as_index(data.get("end")))


def _as_index(value: Any) -> Any:
    # 2.0 -> 2; anything else non-integral is left for the validator
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


@dataclass(frozen=True)
class Schema:
    """
    One placed field on one page (treated as immutable).

    Attributes:
        name: Key into input records; unique within a page
        type: Plugin type name, e.g. "text" or "table"
        position: Top-left corner in mm
        width: Box width in mm
        height: Box height in mm
        rotation: Clockwise rotation in degrees about the box centre
        opacity: 0..1
        required: Whether every input record must supply a value
            (None defers to the plugin's default schema)
        read_only: Value comes from ``content``, never from input records
        content: Default or fixed content
        show_head: Tables only; None means the header is shown
        body_range: Tables only; rows rendered by this instance
        props: Type-specific fields (fontSize, head, borderColor, ...)

    Example:
        >>> s = Schema.from_dict({"name": "a", "type": "text",
        ...     "position": {"x": 10, "y": 20}, "width": 50, "height": 10,
        ...     "fontSize": 12})
        >>> s.get("fontSize"), s.bottom
        (12, 30)
    """

    name: str
    type: str
    position: Position
    width: float
    height: float
    rotation: float = 0
    opacity: float = 1
    required: Optional[bool] = None
    read_only: bool = False
    content: Any = None
    show_head: Optional[bool] = None
    body_range: Optional[BodyRange] = None
    props: Mapping[str, Any] = field(default_factory=dict)

    # ─────────────────────────────────────────────────────────────────────────
    # Properties
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def bottom(self) -> float:
        """Y coordinate of the bottom edge in mm."""
        return self.position.y + self.height

    @property
    def shows_head(self) -> bool:
        return self.show_head is None or bool(self.show_head)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.position.x + self.width / 2, self.position.y + self.height / 2)

    def get(self, key: str, default: Any = None) -> Any:
        """Read a type-specific field."""
        return self.props.get(key, default)

    def with_changes(self, **changes: Any) -> "Schema":
        """Copy with the given fields replaced."""
        return replace(self, **changes)

    def moved_to(self, y: float) -> "Schema":
        return replace(self, position=Position(self.position.x, y))

    # ─────────────────────────────────────────────────────────────────────────
    # Serialization
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "type": self.type,
            "position": self.position.to_dict(),
            "width": self.width,
            "height": self.height,
        }
        if self.rotation:
            data["rotation"] = self.rotation
        if self.opacity != 1:
            data["opacity"] = self.opacity
        if self.required is not None:
            data["required"] = self.required
        if self.read_only:
            data["readOnly"] = True
        if self.content is not None:
            data["content"] = self.content
        if self.show_head is not None:
            data["showHead"] = self.show_head
        if self.body_range is not None:
            data["bodyRange"] = self.body_range.to_dict()
        data.update(copy.deepcopy(dict(self.props)))
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], *, name: Optional[str] = None) -> "Schema":
        """
        Build a Schema from template JSON.

        Args:
            data: Schema dictionary
            name: Name to use when the dictionary has none (legacy page form)
        """
        body_range = data.get("bodyRange", data.get("__bodyRange"))
        return cls(
            name=data.get("name", name or ""),
            type=data.get("type", ""),
            position=Position.from_dict(data.get("position") or {}),
            width=data.get("width", 0),
            height=data.get("height", 0),
            rotation=data.get("rotation", 0) or 0,
            opacity=data.get("opacity", 1) if data.get("opacity") is not None else 1,
            required=data.get("required"),
            read_only=bool(data.get("readOnly", False)),
            content=copy.deepcopy(data.get("content")),
            show_head=data.get("showHead"),
            body_range=BodyRange.from_dict(body_range) if body_range else None,
            props={k: copy.deepcopy(v) for k, v in data.items() if k not in _SCHEMA_KEYS},
        )


@dataclass(frozen=True, slots=True)
class BlankPdf:
    """
    Blank base page of fixed size.

    Attributes:
        width: Page width in mm
        height: Page height in mm
        padding: (top, right, bottom, left) in mm; dynamic content stays
            inside the padded area when it flows onto new pages
    """

    width: float
    height: float
    padding: Tuple[float, float, float, float] = (0, 0, 0, 0)

    def to_dict(self) -> dict[str, Any]:
        return {"width": self.width, "height": self.height, "padding": list(self.padding)}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BlankPdf":
        padding = tuple(data.get("padding") or (0, 0, 0, 0))
        if len(padding) != 4:
            raise ValueError(f"padding must have 4 values (top, right, bottom, left): {padding!r}")
        return cls(width=data.get("width", 0), height=data.get("height", 0), padding=padding)


@dataclass(frozen=True, slots=True)
class CustomPdf:
    """Pre-existing base document; page sizes come from the PDF itself."""

    data: bytes = field(repr=False)

    def to_dict(self) -> str:
        return "data:application/pdf;base64," + base64.b64encode(self.data).decode("ascii")


BasePdf = Union[BlankPdf, CustomPdf]


def decode_base64_payload(value: str) -> bytes:
    """
    Decode a base64 string, with or without a ``data:<mime>;base64,`` prefix.

    Raises:
        ValueError: If the payload is not valid base64
    """
    idx = value.find(DATA_URI_BASE64_MARKER)
    payload = value[idx + len(DATA_URI_BASE64_MARKER):] if idx >= 0 else value
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValueError(f"Invalid base64 payload: {exc}") from exc


def is_blank_pdf(base_pdf: object) -> bool:
    return isinstance(base_pdf, BlankPdf)


@dataclass(frozen=True)
class Template:
    """
    Base document plus pages of schema instances (immutable).

    Attributes:
        base_pdf: BlankPdf or CustomPdf
        schemas: One tuple of schemas per page, in declaration order

    Example:
        >>> t = Template.from_dict({
        ...     "basePdf": {"width": 210, "height": 297, "padding": [10, 10, 10, 10]},
        ...     "schemas": [[{"name": "a", "type": "text",
        ...                   "position": {"x": 0, "y": 0}, "width": 10, "height": 5}]],
        ... })
        >>> t.page_count
        1
    """

    base_pdf: BasePdf
    schemas: Tuple[Tuple[Schema, ...], ...]

    @property
    def page_count(self) -> int:
        return len(self.schemas)

    def iter_schemas(self) -> Iterator[Tuple[int, Schema]]:
        """Yield (page_index, schema) in page then declaration order."""
        for page_index, page in enumerate(self.schemas):
            for schema in page:
                yield page_index, schema

    def to_dict(self) -> dict[str, Any]:
        return {
            "basePdf": self.base_pdf.to_dict(),
            "schemas": [[schema.to_dict() for schema in page] for page in self.schemas],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Template":
        """
        Parse template JSON.

        ``schemas`` is a list of pages; each page is either a list of
        schema dicts or the legacy mapping of name -> schema dict.

        Raises:
            ValueError: If basePdf or schemas have the wrong shape
        """
        raw_base = data.get("basePdf")
        if isinstance(raw_base, Mapping):
            base_pdf: BasePdf = BlankPdf.from_dict(raw_base)
        elif isinstance(raw_base, (bytes, bytearray)):
            base_pdf = CustomPdf(data=bytes(raw_base))
        elif isinstance(raw_base, str):
            base_pdf = CustomPdf(data=decode_base64_payload(raw_base))
        else:
            raise ValueError(f"basePdf must be a page size dict or a base64 PDF, got {type(raw_base).__name__}")

        raw_pages = data.get("schemas")
        if not isinstance(raw_pages, list):
            raise ValueError("schemas must be a list of pages")

        pages = []
        for page in raw_pages:
            if isinstance(page, Mapping):
                pages.append(tuple(Schema.from_dict(s, name=key) for key, s in page.items()))
            elif isinstance(page, list):
                pages.append(tuple(Schema.from_dict(s) for s in page))
            else:
                raise ValueError(f"Each page must be a list of schemas, got {type(page).__name__}")
        return cls(base_pdf=base_pdf, schemas=tuple(pages))
