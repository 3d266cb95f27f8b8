"""
Lookups over a small, fixed set of candidate strings (typically line delimiters)
and the region overlap test used to locate an edit point against a content region.
"""

from typing import Optional, Sequence, Tuple

from editmerge.models import Region

DELIMITERS: Tuple[str, ...] = ("\n", "\r", "\r\n")


def index_of(search_strings: Sequence[str], text: str, offset: int = 0) -> Tuple[int, int]:
    """
    Finds the earliest occurrence of any of ``search_strings`` in ``text`` at or after ``offset``.

    If several search strings start at the same position the longest one wins.
    An empty search string only matches when nothing else does, and is then
    reported at position 0.

    Returns (position, index into search_strings) or (-1, -1) if nothing matches.
    A negative offset searches from the start of the text.
    """
    offset = max(0, offset)
    position, found = -1, -1
    zero_index = -1

    for i, candidate in enumerate(search_strings):
        if not candidate:
            zero_index = i
            continue

        idx = text.find(candidate, offset)
        if idx == -1:
            continue

        if position == -1 or idx < position:
            position, found = idx, i
        elif idx == position and len(candidate) > len(search_strings[found]):
            found = i

    if zero_index > -1 and position == -1:
        return 0, zero_index

    return position, found


def ends_with(search_strings: Sequence[str], text: str) -> int:
    """Index of the longest search string that ``text`` ends with, or -1."""
    index = -1
    for i, candidate in enumerate(search_strings):
        if text.endswith(candidate):
            if index == -1 or len(candidate) > len(search_strings[index]):
                index = i
    return index


def starts_with(search_strings: Sequence[str], text: str) -> int:
    """Index of the longest search string that ``text`` starts with, or -1."""
    index = -1
    for i, candidate in enumerate(search_strings):
        if text.startswith(candidate):
            if index == -1 or len(candidate) > len(search_strings[index]):
                index = i
    return index


def equals(compare_strings: Sequence[str], text: str) -> int:
    for i, candidate in enumerate(compare_strings):
        if candidate == text:
            return i
    return -1


def regions_overlap(left: Optional[Region], right: Optional[Region]) -> bool:
    """
    True if the two regions overlap.

    Spans overlap when their half-open ranges intersect. A zero-length region is
    a point: it overlaps a span if it lies in ``[span.offset, span end)``, so a
    point at the span start counts and a point at the span end does not. Two
    points overlap only when their offsets are equal.
    """
    if left is None or right is None:
        return False

    left_end = left.offset + left.length
    right_end = right.offset + right.length

    if right.length > 0:
        if left.length > 0:
            return left.offset < right_end and right.offset < left_end
        return right.offset <= left.offset < right_end

    if left.length > 0:
        return left.offset <= right.offset < left_end

    return left.offset == right.offset


def determine_line_delimiter(text: str, hint: Optional[str] = None) -> Optional[str]:
    """Returns the delimiter ending the first line of ``text``, or ``hint`` if the text has a single line."""
    _, index = index_of(DELIMITERS, text, 0)
    if index == -1:
        return hint
    return DELIMITERS[index]
