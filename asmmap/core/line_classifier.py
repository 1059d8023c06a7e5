"""
    Classify the lines of an annotation-style bytecode listing (MoarVM disassembly).

    The listing interleaves frame headers, annotation lines naming the source line
    that the following instructions came from, and the instructions themselves:

      Frame_0 :
         annotation: foo.raku:10
        const_s r0, "hello"

    Each line is classified into one of four kinds, and a ParseState carries the last
    annotated source line forward over plain lines. Frame headers and blank lines reset it.
    The annotation format has no cross-file identity, so no location produced here has a file.
"""
import re
from dataclasses import dataclass
from enum import Enum

from .output_line import OutputLine, split_lines
from .source_location import SourceLocation

frame_header_regex = re.compile(r"^ {2}Frame_(\d+) :$")
annotation_regex = re.compile(r"^ {5}annotation: ([^:]*):(\d+)$")

class LineKind(Enum):
    FRAME = "frame"
    ANNOTATION = "annotation"
    BLANK = "blank"
    PLAIN = "plain"

def classify_line(line: str) -> tuple[LineKind, int|None]:
    """Return the kind of `line` and, for annotation lines, the annotated source line number."""
    if re.match(frame_header_regex, line):
        return LineKind.FRAME, None
    if annotation_match := re.match(annotation_regex, line):
        return LineKind.ANNOTATION, int(annotation_match.group(2))
    if not line:
        return LineKind.BLANK, None
    return LineKind.PLAIN, None

@dataclass
class ParseState:
    last_known_line: int|None = None

    def advance(self, kind: LineKind, annotated_line: int|None) -> SourceLocation|None:
        """Update the carried line for a line of `kind` and return that line's source location."""
        match kind:
            case LineKind.FRAME | LineKind.BLANK:
                self.last_known_line = None
                return None
            case LineKind.ANNOTATION:
                self.last_known_line = annotated_line
            case LineKind.PLAIN:
                pass
        if self.last_known_line is None:
            return None
        return SourceLocation(line=self.last_known_line)

def parse_annotated_listing(text: str) -> list[OutputLine]:
    """One OutputLine per input line, blank lines included, text verbatim."""
    state = ParseState()
    result = []
    for line in split_lines(text):
        kind, annotated_line = classify_line(line)
        result.append(OutputLine(text=line, source=state.advance(kind, annotated_line)))
    return result
