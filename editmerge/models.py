from pydantic import BaseModel, ConfigDict, Field


class EditOperationType:
    """Shape of a single edit, derived from its length and replacement text"""

    INSERTION = "INSERTION"
    DELETION = "DELETION"
    MODIFICATION = "MODIFICATION"
    NOOP = "NOOP"


class TextEdit(BaseModel):
    """
    Replaces the characters in ``[offset, offset + length)`` of a reference text with ``text``.
    Which text the coordinates refer to depends on where the edit came from; the model itself does not know.
    """

    model_config = ConfigDict(frozen=True)

    offset: int = Field(..., ge=0, description="Start of the replaced range.")
    length: int = Field(0, ge=0, description="Number of characters replaced.")
    text: str = Field("", description="Replacement text. Empty for a pure deletion.")

    @property
    def end(self) -> int:
        return self.offset + self.length

    @property
    def operation(self) -> str:
        if self.length and self.text:
            return EditOperationType.MODIFICATION
        if self.length:
            return EditOperationType.DELETION
        if self.text:
            return EditOperationType.INSERTION
        return EditOperationType.NOOP


class MergedEdit(TextEdit):
    """
    Single edit equivalent to an ordered batch of edits.
    Coordinates always refer to the document as it was before the first edit of the batch.
    """


class Region(BaseModel):
    """A span of text. A zero length denotes an insertion point rather than a span."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(..., ge=0)
    length: int = Field(0, ge=0)
