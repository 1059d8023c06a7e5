"""
    Normalized output lines

    The uniform representation that every extractor produces: a sequence of
    display lines, each optionally tagged with the source location it came from.
"""
from dataclasses import dataclass, field

from .source_location import SourceLocation

@dataclass(frozen=True, slots=True)
class OutputLine:
    text: str # verbatim, without trailing newline
    source: SourceLocation|None = None

    def has_source(self) -> bool:
        return self.source is not None

@dataclass
class CompilationOutputResult:
    lines: list[OutputLine] = field(default_factory=list) # never empty once assembled
    succeeded: bool = False

@dataclass(frozen=True)
class ToolRunResult:
    """What the process executor hands back once the external tool has finished.
    The parsing code never runs tools itself; it only receives this record."""
    exit_code: int
    stdout: str = ""
    stderr: str = ""
    exec_time: float|None = None # seconds
    timed_out: bool = False

    def failed(self) -> bool:
        return self.timed_out or self.exit_code != 0

def split_lines(text: str) -> list[str]:
    """Split text into lines on `\\n` or `\\r\\n`. A trailing newline yields a final empty line."""
    return text.replace("\r\n", "\n").split("\n")
