import os
from typing import List, Optional, Sequence

import structlog

from editmerge.models import TextEdit
from editmerge.search import DELIMITERS, index_of
from editmerge.source import InvalidRangeError, StringTextSource, check_range

logger = structlog.get_logger(__name__)


class Document:
    """
    Mutable in-memory text that records every applied edit.

    The recorded edits form an edit stream in application order: each edit's
    offset and length refer to the text as it was right before that edit.
    """

    def __init__(
        self,
        text: str = "",
        legal_line_delimiters: Sequence[str] = DELIMITERS,
        default_line_delimiter: Optional[str] = None,
    ):
        if not legal_line_delimiters:
            raise ValueError("A document needs at least one legal line delimiter.")
        if default_line_delimiter is not None and default_line_delimiter not in legal_line_delimiters:
            raise ValueError(f"Line delimiter {default_line_delimiter!r} is not legal for this document.")

        self._text = text
        self.legal_line_delimiters = tuple(legal_line_delimiters)
        self.default_line_delimiter = default_line_delimiter
        self._events: List[TextEdit] = []

    def get(self, offset: int = 0, length: Optional[int] = None) -> str:
        if length is None:
            length = len(self._text) - offset
        check_range(offset, length, len(self._text))
        return self._text[offset : offset + length]

    def get_length(self) -> int:
        return len(self._text)

    def replace(self, offset: int, length: int, text: str) -> TextEdit:
        check_range(offset, length, len(self._text))
        edit = TextEdit(offset=offset, length=length, text=text)
        self._text = self._text[:offset] + text + self._text[offset + length :]
        self._events.append(edit)
        logger.debug(f"Applied edit at [{offset}:{offset + length}] Op={edit.operation}")
        return edit

    def set(self, text: str) -> TextEdit:
        return self.replace(0, len(self._text), text)

    def snapshot(self) -> StringTextSource:
        return StringTextSource(self._text)

    @property
    def events(self) -> List[TextEdit]:
        return list(self._events)

    def drain_events(self) -> List[TextEdit]:
        """Returns the edits recorded so far and starts a new batch."""
        events, self._events = self._events, []
        return events

    def get_number_of_lines(self) -> int:
        lines = 1
        offset = 0
        while True:
            position, index = index_of(self.legal_line_delimiters, self._text, offset)
            if index == -1 or not self.legal_line_delimiters[index]:
                return lines
            lines += 1
            offset = position + len(self.legal_line_delimiters[index])

    def get_line_delimiter(self, line: int) -> Optional[str]:
        """Returns the delimiter ending ``line``, or None for the last line."""
        if line < 0:
            raise InvalidRangeError(line, 0, len(self._text))

        offset = 0
        for current in range(line + 1):
            position, index = index_of(self.legal_line_delimiters, self._text, offset)
            if index == -1 or not self.legal_line_delimiters[index]:
                if current < line:
                    raise InvalidRangeError(line, 0, len(self._text))
                return None
            delimiter = self.legal_line_delimiters[index]
            offset = position + len(delimiter)

        return delimiter


def get_default_line_delimiter(document: Document) -> str:
    """
    The delimiter to use when inserting line breaks into ``document``.

    Prefers the document's own default, then the delimiter of its first line,
    then the platform separator if it is legal, then the first legal delimiter.
    """
    if document.default_line_delimiter is not None:
        return document.default_line_delimiter

    delimiter = document.get_line_delimiter(0)
    if delimiter is not None:
        return delimiter

    if os.linesep in document.legal_line_delimiters:
        return os.linesep

    return document.legal_line_delimiters[0]
