"""
Pure text transformation utilities for applying edits to a string
and rendering a merged edit as CriticMarkup.
"""

from typing import Iterable, Optional

import structlog

from editmerge.models import TextEdit
from editmerge.source import check_range

logger = structlog.get_logger(__name__)


def apply_edit(text: str, edit: TextEdit) -> str:
    """Replaces ``[edit.offset, edit.end)`` of ``text`` with the edit's text."""
    check_range(edit.offset, edit.length, len(text))
    return text[: edit.offset] + edit.text + text[edit.end :]


def apply_edits(text: str, edits: Iterable[TextEdit]) -> str:
    """Applies edits one after another; each edit refers to the result of the previous ones."""
    result = text
    for idx, edit in enumerate(edits):
        logger.debug(f"Applying edit {idx} at [{edit.offset}:{edit.end}] Op={edit.operation}")
        result = apply_edit(result, edit)
    return result


def _build_critic_markup(target_text: str, new_text: str, comment: Optional[str]) -> str:
    """
    Generates CriticMarkup string for a single edit.
    """
    parts = []

    has_target = bool(target_text)
    has_new = bool(new_text)

    if has_target and not has_new:
        # Deletion
        parts.append(f"{{--{target_text}--}}")
    elif not has_target and has_new:
        # Pure insertion
        parts.append(f"{{++{new_text}++}}")
    elif has_target and has_new:
        # Modification
        parts.append(f"{{--{target_text}--}}{{++{new_text}++}}")
    # else: both empty, nothing to output

    if comment:
        parts.append(f"{{>>{comment}<<}}")

    return "".join(parts)


def render_critic_markup(original_text: str, edit: Optional[TextEdit], comment: Optional[str] = None) -> str:
    """
    Returns ``original_text`` with ``edit`` shown inline as CriticMarkup.

    Args:
        original_text: The text the edit's coordinates refer to.
        edit: Usually a merged edit. None (an empty batch) leaves the text untouched.
        comment: Optional annotation rendered as {>>comment<<} after the change.
    """
    if edit is None:
        return original_text

    check_range(edit.offset, edit.length, len(original_text))
    target = original_text[edit.offset : edit.end]
    markup = _build_critic_markup(target, edit.text, comment)
    return original_text[: edit.offset] + markup + original_text[edit.end :]
