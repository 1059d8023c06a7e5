from dataclasses import dataclass

@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Represent the location of an entity in a source file.
    e.g. the source line that a disassembled instruction originates from.
    used to correlate output lines with source lines, and in diagnostics."""
    file: str|None = None
    line: int|None = None # 1-based
    column: int|None = None # 1-based
