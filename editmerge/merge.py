"""
Collapses an ordered batch of edits into a single equivalent edit.

Every edit in a batch is expressed in the coordinates of the document as it was
right before that edit was applied. The merge keeps a running "window": the one
edit equivalent to everything seen so far, plus the net size change (delta) it
causes. Each further edit is placed relative to the window and folded into it,
without ever building intermediate documents.

Two variants exist:
- merge_unprocessed_edits: the edits have not been applied yet. Walks forward
  and builds the replacement text from the edits and the original text.
- merge_processed_edits: the edits have already been applied. Walks backward,
  tracks only lengths and reads the replacement text once from the final text.
"""

from enum import Enum
from typing import Optional, Sequence

import structlog

from editmerge.models import MergedEdit, TextEdit
from editmerge.source import InvalidRangeError, TextSource

logger = structlog.get_logger(__name__)


class EditPlacement(str, Enum):
    AFTER = "AFTER"
    BEFORE = "BEFORE"
    OVERLAP = "OVERLAP"


def classify(window_start: int, window_end: int, edit_start: int, edit_end: int) -> EditPlacement:
    """
    Places an edit relative to the merge window, both given in the same coordinates.
    Touching ranges count as overlapping so that adjacent edits are spliced, not gap-filled.
    """
    if edit_start > window_end:
        return EditPlacement.AFTER
    if edit_end < window_start:
        return EditPlacement.BEFORE
    return EditPlacement.OVERLAP


def merge_unprocessed_edits(source: TextSource, edits: Sequence[TextEdit]) -> Optional[MergedEdit]:
    """
    Merges edits that have not been applied to ``source`` yet.

    Args:
        source: The document before any of the edits were applied.
        edits: The edits in application order.

    Returns:
        An edit in ``source`` coordinates with the same effect as applying all
        edits in order, or None if ``edits`` is empty.

    Raises:
        InvalidRangeError: If the edits reach outside of ``source``.
    """
    if not edits:
        return None

    first = edits[0]
    offset = first.offset
    length = first.length
    text = first.text

    for edit in edits[1:]:
        delta = len(text) - length

        # The window currently covers [offset, offset + len(text)) of the
        # document the edit applies to.
        placement = classify(offset, offset + len(text), edit.offset, edit.end)

        if placement is EditPlacement.AFTER:
            gap_start = offset + length
            gap = source.get(gap_start, (edit.offset - delta) - gap_start)
            text = text + gap + edit.text
            length = (edit.offset - delta) + edit.length - offset

        elif placement is EditPlacement.BEFORE:
            gap = source.get(edit.end, offset - edit.end)
            text = edit.text + gap + text
            length = offset + length - edit.offset
            offset = edit.offset

        else:
            start = max(0, edit.offset - offset)
            end = min(len(text), edit.end - offset)
            text = text[:start] + edit.text + text[end:]

            offset = min(offset, edit.offset)
            total_delta = delta + len(edit.text) - edit.length
            length = len(text) - total_delta

        logger.debug(
            "Merged unprocessed edit",
            placement=placement.value,
            edit_offset=edit.offset,
            edit_length=edit.length,
            offset=offset,
            length=length,
        )

    if length < 0:
        raise InvalidRangeError(offset, length, source.get_length())
    merged = MergedEdit(offset=offset, length=length, text=text)
    logger.debug(f"Merged {len(edits)} unprocessed edits into [{offset}:{offset + length}]")
    return merged


def merge_processed_edits(edits: Sequence[TextEdit], source: TextSource) -> Optional[MergedEdit]:
    """
    Merges edits that have already been applied, producing ``source``.

    The edits are walked from last to first. Only the window's original length
    and its text length are tracked; the replacement text is fetched from
    ``source`` in one read at the end, since the final document holds exactly
    that text contiguously at the merged offset.

    Args:
        edits: The edits in application order.
        source: The document after all edits were applied.

    Returns:
        An edit whose offset and length refer to the document before the first
        edit, or None if ``edits`` is empty.

    Raises:
        InvalidRangeError: If the merged range does not fit into ``source``.
    """
    if not edits:
        return None

    last = edits[-1]
    offset = last.offset
    length = last.length
    text_length = len(last.text)

    for edit in reversed(edits[:-1]):
        delta = length - text_length
        edit_text_length = len(edit.text)

        # Walking backwards, the window covers [offset, offset + length) of the
        # document right after the edit, where the edit's text sits at
        # [edit.offset, edit.offset + len(edit.text)).
        placement = classify(offset, offset + length, edit.offset, edit.offset + edit_text_length)

        if placement is EditPlacement.AFTER:
            length = (edit.offset - delta) - (offset + text_length) + length + edit.length
            text_length = (edit.offset - delta) + edit_text_length - offset

        elif placement is EditPlacement.BEFORE:
            length = offset - (edit.offset + edit_text_length) + length + edit.length
            text_length = offset + text_length - edit.offset
            offset = edit.offset

        else:
            start = max(0, edit.offset - offset)
            end = min(length, edit_text_length + edit.offset - offset)
            length += edit.length - (end - start)

            offset = min(offset, edit.offset)
            total_delta = delta + edit.length - edit_text_length
            text_length = length - total_delta

        logger.debug(
            "Merged processed edit",
            placement=placement.value,
            edit_offset=edit.offset,
            edit_length=edit.length,
            offset=offset,
            length=length,
            text_length=text_length,
        )

    if length < 0:
        raise InvalidRangeError(offset, length, source.get_length())
    text = source.get(offset, text_length)
    logger.debug(f"Merged {len(edits)} processed edits into [{offset}:{offset + length}]")
    return MergedEdit(offset=offset, length=length, text=text)
