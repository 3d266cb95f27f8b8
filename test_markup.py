"""
Tests for editmerge/markup.py: applying edits and CriticMarkup rendering.

Run: pytest test_markup.py
"""

import pytest
from pydantic import ValidationError

from editmerge.markup import apply_edit, apply_edits, render_critic_markup
from editmerge.merge import merge_unprocessed_edits
from editmerge.models import EditOperationType, MergedEdit, TextEdit
from editmerge.source import InvalidRangeError, StringTextSource


def test_apply_edits_in_sequence():
    edits = [TextEdit(offset=0, length=1, text="A"), TextEdit(offset=5, length=1, text="B")]
    assert apply_edits("0123456789", edits) == "A1234B6789"
    assert apply_edits("0123456789", []) == "0123456789"


def test_apply_edit_out_of_range():
    with pytest.raises(InvalidRangeError) as exc_info:
        apply_edit("abc", TextEdit(offset=2, length=2, text=""))
    assert exc_info.value.total_length == 3


def test_edit_models_are_validated_and_frozen():
    with pytest.raises(ValidationError):
        TextEdit(offset=-1, length=0, text="x")
    with pytest.raises(ValidationError):
        TextEdit(offset=0, length=-2)

    edit = TextEdit(offset=1, length=2, text="x")
    with pytest.raises(ValidationError):
        edit.offset = 5

    assert TextEdit(offset=0, length=0, text="x").operation == EditOperationType.INSERTION
    assert TextEdit(offset=0, length=3).operation == EditOperationType.DELETION
    assert TextEdit(offset=0).operation == EditOperationType.NOOP


def test_render_merged_modification():
    original = "Payment within 30 days."
    edits = [TextEdit(offset=15, length=2, text="14"), TextEdit(offset=18, length=4, text="weeks")]
    merged = merge_unprocessed_edits(StringTextSource(original), edits)

    assert render_critic_markup(original, merged) == "Payment within {--30 days--}{++14 weeks++}."
    assert (
        render_critic_markup(original, merged, comment="Shorter term")
        == "Payment within {--30 days--}{++14 weeks++}{>>Shorter term<<}."
    )


def test_render_insertion_deletion_and_empty():
    assert render_critic_markup("ab", MergedEdit(offset=1, length=0, text="X")) == "a{++X++}b"
    assert render_critic_markup("abc", MergedEdit(offset=1, length=1, text="")) == "a{--b--}c"
    assert render_critic_markup("abc", MergedEdit(offset=1, length=0, text="")) == "abc"
    assert render_critic_markup("abc", None) == "abc"
