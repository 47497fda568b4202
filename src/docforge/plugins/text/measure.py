"""
Module: plugins.text.measure

Purpose:
    Text measurement shared by every renderer that draws text: wrapping
    into a box width, line heights, and fitting a font size into a box.

Key Functions:
    - split_text_to_lines(): Greedy word wrap with long-word breaking
    - line_height_mm(): Height of one line in mm
    - text_block_height(): Height of wrapped text in mm
    - fit_font_size(): Largest size in a range whose wrapped text fits

Dependencies:
    - common.fonts: FontSet (ReportLab metrics)
    - common.units: pt <-> mm

Used By:
    - plugins.text.render
    - plugins.table.layout
"""

from __future__ import annotations

from typing import List, Optional

from docforge.common.fonts import FontSet
from docforge.common.units import mm2pt, pt2mm

FONT_SIZE_STEP = 0.25


def text_width_pt(
    text: str,
    fonts: FontSet,
    font_name: Optional[str],
    font_size: float,
    character_spacing: float = 0,
) -> float:
    """Width of a single line in points, including character spacing."""
    width = fonts.string_width(text, font_name, font_size)
    if character_spacing and text:
        width += character_spacing * (len(text) - 1)
    return width


def _break_word(
    word: str,
    max_width_pt: float,
    fonts: FontSet,
    font_name: Optional[str],
    font_size: float,
    character_spacing: float,
) -> List[str]:
    """Split a word wider than the box into chunks that fit (at least one char each)."""
    chunks: List[str] = []
    current = ""
    for ch in word:
        candidate = current + ch
        if current and text_width_pt(candidate, fonts, font_name, font_size, character_spacing) > max_width_pt:
            chunks.append(current)
            current = ch
        else:
            current = candidate
    chunks.append(current)
    return chunks


def split_text_to_lines(
    text: str,
    width_mm: float,
    *,
    fonts: FontSet,
    font_name: Optional[str],
    font_size: float,
    character_spacing: float = 0,
) -> List[str]:
    """
    Wrap text into lines no wider than width_mm.

    Explicit newlines always break. Words are packed greedily; a word
    wider than the box is broken between characters.

    Args:
        text: Text to wrap
        width_mm: Available width in mm
        fonts: Font set for metrics
        font_name: Template font name (None for the fallback)
        font_size: Font size in points
        character_spacing: Extra space between characters in points

    Returns:
        Lines in order (at least one, possibly empty)

    Example:
        >>> split_text_to_lines("a\\nb", 100, fonts=FontSet.standard(), font_name=None, font_size=10)
        ['a', 'b']
    """
    max_width_pt = mm2pt(width_mm)
    lines: List[str] = []

    for paragraph in text.replace("\r\n", "\n").split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if text_width_pt(candidate, fonts, font_name, font_size, character_spacing) <= max_width_pt:
                current = candidate
                continue
            if current:
                lines.append(current)
            if text_width_pt(word, fonts, font_name, font_size, character_spacing) <= max_width_pt:
                current = word
            else:
                *full, current = _break_word(
                    word, max_width_pt, fonts, font_name, font_size, character_spacing
                )
                lines.extend(full)
        lines.append(current)

    return lines


def line_height_mm(font_size: float, line_height: float = 1.0) -> float:
    """Height of one line of text in mm (font size in points)."""
    return pt2mm(font_size) * line_height


def text_block_height(line_count: int, font_size: float, line_height: float = 1.0) -> float:
    return line_count * line_height_mm(font_size, line_height)


def fit_font_size(
    text: str,
    width_mm: float,
    height_mm: float,
    *,
    fonts: FontSet,
    font_name: Optional[str],
    min_size: float,
    max_size: float,
    line_height: float = 1.0,
    character_spacing: float = 0,
) -> float:
    """
    Largest font size in [min_size, max_size] whose wrapped text fits the box.

    Returns min_size when nothing in the range fits.
    """
    size = max_size
    while size > min_size:
        lines = split_text_to_lines(
            text,
            width_mm,
            fonts=fonts,
            font_name=font_name,
            font_size=size,
            character_spacing=character_spacing,
        )
        widest = max(text_width_pt(line, fonts, font_name, size, character_spacing) for line in lines)
        if text_block_height(len(lines), size, line_height) <= height_mm and widest <= mm2pt(width_mm):
            return size
        size -= FONT_SIZE_STEP
    return min_size
