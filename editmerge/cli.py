import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from pydantic import ValidationError

from editmerge import __version__
from editmerge.diff import GRANULARITIES, generate_edits_from_text
from editmerge.document import Document, get_default_line_delimiter
from editmerge.markup import apply_edits, render_critic_markup
from editmerge.merge import merge_processed_edits, merge_unprocessed_edits
from editmerge.models import MergedEdit, TextEdit
from editmerge.source import InvalidRangeError, StringTextSource

logger = structlog.get_logger(__name__)


def configure_logging(verbose: bool = False, json_logs: bool = False):
    # All logs go to stderr; stdout carries command output only.
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(stream=sys.stderr, level=level, force=True)

    renderer = structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _read_text(path: Path) -> str:
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)
    # newline="" keeps "\r\n" and "\r" intact; offsets count them.
    with open(path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def _load_edits_from_json(path: Path) -> List[TextEdit]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        edits = []
        for item in data:
            text = item.get("text")
            if text is None:
                text = item.get("replacement", "")
            edits.append(TextEdit(offset=item["offset"], length=item.get("length", 0), text=text))
        return edits
    except (OSError, ValueError, KeyError, TypeError, ValidationError) as e:
        print(f"Error parsing JSON edits: {e}", file=sys.stderr)
        sys.exit(1)


def _write_output(content: str, output: Optional[Path] = None):
    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        print(f"✅ Saved to {output}", file=sys.stderr)
    else:
        print(content)


def _merge(original: str, edits: List[TextEdit], processed: bool) -> Optional[MergedEdit]:
    try:
        if processed:
            final_text = apply_edits(original, edits)
            return merge_processed_edits(edits, StringTextSource(final_text))
        return merge_unprocessed_edits(StringTextSource(original), edits)
    except InvalidRangeError as e:
        logger.error("Edits do not match the document", error=str(e))
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def handle_merge(args):
    original = _read_text(args.original)
    edits = _load_edits_from_json(args.edits)

    merged = _merge(original, edits, args.processed)
    if merged is None:
        print("Warning: No edits found in JSON file.", file=sys.stderr)
        _write_output("null", args.output)
        return

    print(f"Merged {len(edits)} edits.", file=sys.stderr)
    _write_output(json.dumps(merged.model_dump(), indent=2), args.output)


def handle_diff(args):
    text_orig = _read_text(args.original)
    text_mod = _read_text(args.modified)

    edits = generate_edits_from_text(text_orig, text_mod, reverse=args.reverse, granularity=args.granularity)

    if args.merge:
        merged = _merge(text_orig, edits, processed=False)
        edits = [merged] if merged is not None else []

    if args.json:
        print(json.dumps([e.model_dump() for e in edits], indent=2))
    else:
        print(f"Found {len(edits)} changes:", file=sys.stderr)
        for e in edits:
            target = text_orig[e.offset : e.end] if args.merge or args.reverse else None
            if not e.text:
                print(f"[-] @{e.offset}+{e.length}")
            elif not e.length:
                print(f"[+] @{e.offset} '{e.text}'")
            elif target is not None:
                print(f"[~] @{e.offset}+{e.length} '{target}' -> '{e.text}'")
            else:
                print(f"[~] @{e.offset}+{e.length} -> '{e.text}'")


def handle_markup(args):
    original = _read_text(args.original)
    if not args.edits.exists():
        print(f"Error: Edits file not found: {args.edits}", file=sys.stderr)
        sys.exit(1)
    edits = _load_edits_from_json(args.edits)

    merged = _merge(original, edits, processed=False)
    _write_output(render_critic_markup(original, merged, comment=args.comment), args.output)
    print(f"Stats: {len(edits)} edits merged.", file=sys.stderr)


def handle_delimiter(args):
    doc = Document(_read_text(args.input))
    if doc.get_line_delimiter(0) is None:
        print("Warning: No line delimiter found, reporting the default.", file=sys.stderr)
    print(json.dumps(get_default_line_delimiter(doc)))


def main(argv=None):
    parser = argparse.ArgumentParser(prog="editmerge", description="Merge text edit streams into a single edit")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Log every merge step")
    parser.add_argument("--json-logs", action="store_true", help="Emit logs as JSON lines on stderr")
    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_merge = subparsers.add_parser("merge", help="Merge a JSON edit list into one edit")
    p_merge.add_argument("original", type=Path, help="Text file the edits apply to")
    p_merge.add_argument("edits", type=Path, help="JSON list of {offset, length, text} in application order")
    p_merge.add_argument(
        "--processed",
        action="store_true",
        help="Merge against the final text (edits applied first) instead of the original",
    )
    p_merge.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_merge.set_defaults(func=handle_merge)

    p_diff = subparsers.add_parser("diff", help="Compute the edit stream between two text files")
    p_diff.add_argument("original", type=Path, help="Original text file")
    p_diff.add_argument("modified", type=Path, help="Modified text file")
    p_diff.add_argument("--json", action="store_true", help="Output raw JSON edits")
    p_diff.add_argument("--reverse", action="store_true", help="Emit edits right to left in original offsets")
    p_diff.add_argument("--merge", action="store_true", help="Collapse the edit stream into one edit")
    p_diff.add_argument("--granularity", choices=GRANULARITIES, default="word", help="Diff unit (default: word)")
    p_diff.set_defaults(func=handle_diff)

    p_markup = subparsers.add_parser("markup", help="Show the merged edits inline as CriticMarkup")
    p_markup.add_argument("original", type=Path, help="Text file the edits apply to")
    p_markup.add_argument("edits", type=Path, help="JSON list of edits")
    p_markup.add_argument("-c", "--comment", type=str, help="Comment attached to the change")
    p_markup.add_argument("-o", "--output", type=Path, help="Output file (default: stdout)")
    p_markup.set_defaults(func=handle_markup)

    p_delim = subparsers.add_parser("delimiter", help="Print the line delimiter to use for a file")
    p_delim.add_argument("input", type=Path, help="Text file")
    p_delim.set_defaults(func=handle_delimiter)

    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, json_logs=args.json_logs)
    args.func(args)


if __name__ == "__main__":
    main()
