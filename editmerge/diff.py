import re
from typing import Dict, List, Optional, Tuple

import structlog
from diff_match_patch import diff_match_patch

from editmerge.models import TextEdit

logger = structlog.get_logger(__name__)

GRANULARITIES = ("word", "char")


def generate_edits_from_text(
    original_text: str,
    modified_text: str,
    reverse: bool = False,
    granularity: str = "word",
) -> List[TextEdit]:
    """
    Compares original and modified text and returns an edit stream turning one into the other.

    Applying the returned edits one after another to ``original_text`` yields ``modified_text``.

    Args:
        reverse: If False, edits run left to right and each offset accounts for
                 the size changes of the edits before it. If True, edits run right
                 to left and every offset is an ``original_text`` offset.
        granularity: "word" diffs whole words and whitespace runs, "char" diffs characters.
    """
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unknown diff granularity: {granularity!r}")

    dmp = diff_match_patch()

    if granularity == "word":
        # 1. Word-Level Tokenization & Encoding
        chars1, chars2, token_array = _words_to_chars(original_text, modified_text)
        diffs = dmp.diff_main(chars1, chars2, False)
        dmp.diff_cleanupSemantic(diffs)
        # 2. Decode back to Text
        diffs = _chars_to_words(diffs, token_array)
    else:
        diffs = dmp.diff_main(original_text, modified_text, False)
        dmp.diff_cleanupSemantic(diffs)

    # (original_offset, original_length, new_text)
    changes: List[Tuple[int, int, str]] = []
    current_original_index = 0
    pending_delete: Optional[Tuple[int, str]] = None

    for op, text in diffs:
        if op == 0:  # Equal
            if pending_delete:
                idx, del_txt = pending_delete
                changes.append((idx, len(del_txt), ""))
                pending_delete = None
            current_original_index += len(text)

        elif op == -1:  # Delete
            if pending_delete:
                idx, del_txt = pending_delete
                pending_delete = (idx, del_txt + text)
            else:
                pending_delete = (current_original_index, text)
            current_original_index += len(text)

        elif op == 1:  # Insert
            if pending_delete:
                # Delete followed by insert is one replacement
                idx, del_txt = pending_delete
                changes.append((idx, len(del_txt), text))
                pending_delete = None
            elif changes and changes[-1][0] + changes[-1][1] == current_original_index:
                idx, length, new = changes.pop()
                changes.append((idx, length, new + text))
            else:
                changes.append((current_original_index, 0, text))

    if pending_delete:
        idx, del_txt = pending_delete
        changes.append((idx, len(del_txt), ""))

    if reverse:
        edits = [TextEdit(offset=idx, length=length, text=new) for idx, length, new in reversed(changes)]
    else:
        edits = []
        delta = 0
        for idx, length, new in changes:
            edits.append(TextEdit(offset=idx + delta, length=length, text=new))
            delta += len(new) - length

    logger.info(f"Generated {len(edits)} edits", granularity=granularity, reverse=reverse)
    return edits


# Token codes skip the UTF-16 surrogate block so encoded strings stay valid text.
_SURROGATE_START = 0xD800
_SURROGATE_COUNT = 0x800
MAX_TOKENS = 0x110000 - _SURROGATE_COUNT


def _code_to_char(code: int) -> str:
    if code >= _SURROGATE_START:
        code += _SURROGATE_COUNT
    return chr(code)


def _char_to_code(char: str) -> int:
    code = ord(char)
    if code >= _SURROGATE_START:
        code -= _SURROGATE_COUNT
    return code


def _words_to_chars(text1: str, text2: str) -> Tuple[str, str, List[str]]:
    """
    Splits text into words/tokens and encodes them as unique Unicode characters.
    Once the token codes run out, the rest of a text is encoded as one token.
    """
    token_array: List[str] = []
    token_hash: Dict[str, int] = {}
    split_pattern = r"(\s+|\w+|[^\w\s])"

    def encode_text(text: str, max_tokens: int) -> str:
        tokens = [t for t in re.split(split_pattern, text) if t]
        encoded_chars = []
        for i, token in enumerate(tokens):
            folded = token not in token_hash and len(token_array) >= max_tokens - 1
            if folded:
                token = "".join(tokens[i:])
            if token in token_hash:
                encoded_chars.append(_code_to_char(token_hash[token]))
            else:
                code = len(token_array)
                token_hash[token] = code
                token_array.append(token)
                encoded_chars.append(_code_to_char(code))
            if folded:
                break
        return "".join(encoded_chars)

    # text1 stops one code short so text2 always has a code left for its tail
    chars1 = encode_text(text1, MAX_TOKENS - 1)
    chars2 = encode_text(text2, MAX_TOKENS)
    return chars1, chars2, token_array


def _chars_to_words(diffs: List[Tuple[int, str]], token_array: List[str]) -> List[Tuple[int, str]]:
    return [(op, "".join(token_array[_char_to_code(char)] for char in text)) for op, text in diffs]
