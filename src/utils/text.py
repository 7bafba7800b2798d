"""
Text normalization helpers for section segmentation.

Provides:
- Whitespace collapsing applied identically to titles and page text
- Rounding of text offsets to text-unit boundaries
"""

import re
import unicodedata
from typing import Iterable, List

_WHITESPACE_RE = re.compile(r"\s+")

ZERO_WIDTH_JOINER = "\u200d"

# General categories of characters that extend the preceding character
_EXTENDING_CATEGORIES = {"Mn", "Mc", "Me"}


def normalize_whitespace(text: str) -> str:
    """
    Collapse every run of whitespace into a single space.

    Leading and trailing whitespace is collapsed too but not stripped, so
    offsets computed on normalized text stay stable when fragments are
    concatenated.
    """
    if not isinstance(text, str):
        raise TypeError(f"Expected str, got {type(text).__name__}")
    return _WHITESPACE_RE.sub(" ", text)


def normalize_titles(titles: Iterable[str]) -> List[str]:
    """Normalize a sequence of titles, preserving order."""
    return [normalize_whitespace(title) for title in titles]


def is_cluster_extension(char: str) -> bool:
    """
    Check whether a character continues the text unit before it.

    Covers combining marks, variation selectors, emoji skin tone modifiers,
    the zero-width joiner and lone low surrogates.
    """
    code = ord(char)
    if unicodedata.category(char) in _EXTENDING_CATEGORIES:
        return True
    if char == ZERO_WIDTH_JOINER:
        return True
    if 0xFE00 <= code <= 0xFE0F or 0xE0100 <= code <= 0xE01EF:
        return True
    if 0x1F3FB <= code <= 0x1F3FF:
        return True
    return 0xDC00 <= code <= 0xDFFF


def round_to_boundary(text: str, offset: int) -> int:
    """
    Round an offset down to the nearest text-unit boundary.

    An offset pointing into the middle of a character cluster (a base
    character followed by combining marks, or a joiner sequence) is moved
    left until it points at the cluster's first character.

    Args:
        text: Text the offset indexes into
        offset: Code point offset, 0 <= offset <= len(text)

    Returns:
        Offset of a boundary, never greater than the input offset
    """
    while 0 < offset < len(text):
        if is_cluster_extension(text[offset]) or text[offset - 1] == ZERO_WIDTH_JOINER:
            offset -= 1
        else:
            break
    return offset


def round_up_to_boundary(text: str, offset: int) -> int:
    """
    Round an offset up to the nearest text-unit boundary.

    Counterpart of ``round_to_boundary`` for exclusive end offsets: the
    offset moves right past the remaining characters of the cluster it
    points into.
    """
    while 0 < offset < len(text):
        if is_cluster_extension(text[offset]) or text[offset - 1] == ZERO_WIDTH_JOINER:
            offset += 1
        else:
            break
    return offset
