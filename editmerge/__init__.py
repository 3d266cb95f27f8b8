from importlib.metadata import PackageNotFoundError, version

from editmerge.document import Document, get_default_line_delimiter
from editmerge.merge import merge_processed_edits, merge_unprocessed_edits
from editmerge.models import MergedEdit, Region, TextEdit
from editmerge.search import DELIMITERS, determine_line_delimiter, regions_overlap
from editmerge.source import InvalidRangeError, StringTextSource, TextSource

try:
    __version__ = version("editmerge")
except PackageNotFoundError:
    # Running from a source checkout without installed metadata.
    __version__ = "0.0.0-dev"

__all__ = [
    "TextEdit",
    "MergedEdit",
    "Region",
    "TextSource",
    "StringTextSource",
    "InvalidRangeError",
    "Document",
    "get_default_line_delimiter",
    "merge_unprocessed_edits",
    "merge_processed_edits",
    "regions_overlap",
    "determine_line_delimiter",
    "DELIMITERS",
    "__version__",
]
