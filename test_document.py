"""
Tests for editmerge/document.py: the recording document and line delimiters.

Run: pytest test_document.py
"""

import os

import pytest

from editmerge.document import Document, get_default_line_delimiter
from editmerge.merge import merge_processed_edits, merge_unprocessed_edits
from editmerge.models import EditOperationType
from editmerge.source import InvalidRangeError, TextSource


def test_replace_records_edit_stream():
    doc = Document("hello world")
    first = doc.replace(0, 5, "goodbye")
    second = doc.replace(8, 5, "moon")

    assert doc.get() == "goodbye moon"
    assert first.operation == EditOperationType.MODIFICATION
    assert [(e.offset, e.length, e.text) for e in doc.events] == [(0, 5, "goodbye"), (8, 5, "moon")]


def test_batch_from_document_merges_in_both_modes():
    doc = Document("The quick brown fox")
    original = doc.snapshot()

    doc.replace(4, 5, "slow")  # The slow brown fox
    doc.replace(15, 3, "dog")  # The slow brown dog
    doc.replace(0, 0, ">> ")  # >> The slow brown dog
    edits = doc.drain_events()

    unprocessed = merge_unprocessed_edits(original, edits)
    processed = merge_processed_edits(edits, doc.snapshot())

    assert (unprocessed.offset, unprocessed.length, unprocessed.text) == (0, 19, ">> The slow brown dog")
    assert (processed.offset, processed.length, processed.text) == (0, 19, ">> The slow brown dog")
    assert doc.events == []


def test_snapshot_is_isolated_from_later_edits():
    doc = Document("abc")
    snap = doc.snapshot()
    doc.replace(0, 3, "xyz")

    assert snap.get() == "abc"
    assert isinstance(doc, TextSource)
    assert isinstance(snap, TextSource)


def test_replace_out_of_range_raises():
    doc = Document("abc")
    with pytest.raises(InvalidRangeError):
        doc.replace(2, 5, "x")
    with pytest.raises(InvalidRangeError):
        doc.get(4, 0)
    # Nothing was recorded for the failed edit
    assert doc.events == []


def test_line_delimiters():
    doc = Document("one\r\ntwo\nthree\rfour")

    assert doc.get_number_of_lines() == 4
    assert doc.get_line_delimiter(0) == "\r\n"
    assert doc.get_line_delimiter(1) == "\n"
    assert doc.get_line_delimiter(2) == "\r"
    assert doc.get_line_delimiter(3) is None
    with pytest.raises(InvalidRangeError):
        doc.get_line_delimiter(4)


def test_default_line_delimiter_prefers_explicit_default():
    doc = Document("a\nb", default_line_delimiter="\r\n")
    assert get_default_line_delimiter(doc) == "\r\n"


def test_default_line_delimiter_from_first_line():
    assert get_default_line_delimiter(Document("a\rb\nc")) == "\r"


def test_default_line_delimiter_falls_back_to_platform():
    assert get_default_line_delimiter(Document("no breaks")) == os.linesep

    doc = Document("no breaks", legal_line_delimiters=("\x1e",))
    assert get_default_line_delimiter(doc) == "\x1e"


def test_illegal_default_delimiter_rejected():
    with pytest.raises(ValueError):
        Document("", legal_line_delimiters=("\n",), default_line_delimiter="\r")


def test_document_api_is_exported():
    import editmerge

    assert editmerge.Document is Document
    assert editmerge.get_default_line_delimiter is get_default_line_delimiter
    assert "Document" in editmerge.__all__
    assert editmerge.get_default_line_delimiter(editmerge.Document("x\r\ny")) == "\r\n"
