"""
    Extract the final block of an IR dump.

    `forc build --ir final` prints the program once per compiler pass, each copy preceded
    by a banner. Only the copy after the last banner is wanted, and within it only the
    top-level unit (`script { ... }` etc.), which the dump always closes with a `}` in
    column zero. This is textual delimiting, not IR parsing: nested braces are not counted.
"""
import re
from typing import Iterable

from .configuration import DEFAULT_IR_FINAL_MARKER, DEFAULT_IR_UNIT_KINDS
from .output_line import OutputLine, split_lines

def make_unit_start_regex(unit_kinds: Iterable[str]) -> re.Pattern[str]:
    """Match the opening `<kind> {` of a top-level unit."""
    kinds = "|".join(re.escape(kind) for kind in unit_kinds)
    return re.compile(rf"(?:{kinds})\s*{{")

default_unit_start_regex = make_unit_start_regex(DEFAULT_IR_UNIT_KINDS)
unit_end_regex = re.compile(r"^}", re.MULTILINE)

def extract_ir_text(text: str, final_marker: str = DEFAULT_IR_FINAL_MARKER, unit_start_regex: re.Pattern[str] = default_unit_start_regex) -> str|None:
    """The text of the final unit block, the whole post-marker remainder if no block
    is found there, or None if `final_marker` doesn't occur in `text`."""
    marker_index = text.rfind(final_marker)
    if marker_index == -1:
        return None
    # everything after the line holding the marker
    _, _, remainder = text[marker_index:].partition("\n")
    # one pass for the first unit start, one for the closing brace after it.
    # if nothing closes the first unit, nothing closes a later one either.
    if start_match := unit_start_regex.search(remainder):
        if end_match := unit_end_regex.search(remainder, start_match.end()):
            return remainder[start_match.start():end_match.end()]
    return remainder

def extract_ir_block(text: str, final_marker: str = DEFAULT_IR_FINAL_MARKER, unit_kinds: Iterable[str] = DEFAULT_IR_UNIT_KINDS) -> list[OutputLine]:
    """Lines of the final IR block. Falls back to every line of `text` when the marker
    is missing; never returns an empty list. IR lines carry no source locations."""
    unit_kinds = list(unit_kinds)
    unit_start_regex = default_unit_start_regex if unit_kinds == DEFAULT_IR_UNIT_KINDS else make_unit_start_regex(unit_kinds)
    block = extract_ir_text(text, final_marker, unit_start_regex)
    if block is None:
        block = text
    return [OutputLine(text=line) for line in split_lines(block)]
