"""
    Extract the assembly section from a `forc build --asm all` transcript.

    The transcript mixes build progress with the assembly listing. The listing starts
    after a start marker line and runs until an end marker line (the build's "Finished"
    status), or the end of the transcript if that never appears.
"""
from dataclasses import dataclass

from .configuration import DEFAULT_ASM_START_MARKER, DEFAULT_ASM_END_MARKER
from .output_line import OutputLine, split_lines

@dataclass(frozen=True)
class SectionBounds:
    start_index: int # index of the start marker line
    end_index: int # index of the end marker line, or the line count if there is none

def find_section_bounds(lines: list[str], start_marker: str, end_marker: str) -> SectionBounds|None:
    """Locate the first start marker line and the first end marker line after it.
    Returns None when there is no start marker, or when the end marker appears only
    at or before the start marker."""
    start_index = next((i for i, line in enumerate(lines) if start_marker in line), None)
    if start_index is None:
        return None
    end_index = next((i for i, line in enumerate(lines) if i > start_index and end_marker in line), None)
    if end_index is None:
        if any(end_marker in line for line in lines[:start_index + 1]):
            return None # end marker precedes the section, the transcript isn't shaped as expected
        end_index = len(lines)
    return SectionBounds(start_index=start_index, end_index=end_index)

def extract_asm_section(text: str, start_marker: str = DEFAULT_ASM_START_MARKER, end_marker: str = DEFAULT_ASM_END_MARKER, include_start_marker: bool = False) -> list[OutputLine]|None:
    """Non-blank lines between the start and end markers, or None if the section
    can't be located. The caller treats None as a failed extraction."""
    lines = split_lines(text)
    bounds = find_section_bounds(lines, start_marker, end_marker)
    if bounds is None:
        return None
    first = bounds.start_index if include_start_marker else bounds.start_index + 1
    return [OutputLine(text=line) for line in lines[first:bounds.end_index] if line.strip()]
