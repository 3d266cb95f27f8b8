"""
Read-only access to a document state.

The merge functions never see how a document stores its text; they only fetch
substrings through the ``TextSource`` protocol.
"""

from typing import Optional, Protocol, runtime_checkable


class InvalidRangeError(ValueError):
    """A range was requested that does not lie within ``[0, total_length]``."""

    def __init__(self, offset: int, length: int, total_length: int):
        self.offset = offset
        self.length = length
        self.total_length = total_length
        super().__init__(f"Range [{offset}, {offset + length}) is outside of text with length {total_length}")


@runtime_checkable
class TextSource(Protocol):
    def get(self, offset: int = 0, length: Optional[int] = None) -> str: ...

    def get_length(self) -> int: ...


def check_range(offset: int, length: int, total_length: int) -> None:
    if offset < 0 or length < 0 or offset + length > total_length:
        raise InvalidRangeError(offset, length, total_length)


class StringTextSource:
    """Immutable snapshot of a text. Safe to share while a merge is running."""

    __slots__ = ("_text",)

    def __init__(self, text: str):
        self._text = text

    def get(self, offset: int = 0, length: Optional[int] = None) -> str:
        if length is None:
            length = len(self._text) - offset
        check_range(offset, length, len(self._text))
        return self._text[offset : offset + length]

    def get_length(self) -> int:
        return len(self._text)

    def __len__(self) -> int:
        return len(self._text)

    def __repr__(self) -> str:
        return f"StringTextSource(length={len(self._text)})"
