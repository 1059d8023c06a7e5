"""
    Map `parse-bytecode` disassembly lines to source locations through the symbol table.
"""
import re

from .output_line import OutputLine, split_lines
from .symbol_table import SymbolTable

# "<opcode index> <half-word index> ...rest"
instruction_prefix_regex = re.compile(r"^\s*(\d+)\s+(\d+)\s+")

def opcode_index_of(line: str) -> str|None:
    if prefix_match := re.match(instruction_prefix_regex, line):
        return prefix_match.group(1)
    return None

def map_bytecode_lines(text: str, symbols: SymbolTable) -> list[OutputLine]:
    """One OutputLine per non-blank line of `text`, in order. Blank lines are dropped.
    Lines without the instruction prefix, or whose instruction has no primary-source
    symbol, are kept without a source."""
    result = []
    for line in split_lines(text):
        if not line.strip():
            continue
        opcode_index = opcode_index_of(line)
        source = symbols.resolve(opcode_index) if opcode_index is not None else None
        result.append(OutputLine(text=line, source=source))
    return result
