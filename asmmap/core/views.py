"""
    Views are the named ways of turning a tool's captured output into display lines.

    Which view applies depends on which tool invocation produced the text:
    - `annotated`: MoarVM disassembly with annotation lines (line-only mapping)
    - `bytecode`: `forc parse-bytecode` output, mapped through the symbol table
    - `ir`: `forc build --ir final` dump, final unit block only
    - `asm`: `forc build --asm all` transcript, assembly section only
"""
from dataclasses import dataclass, field
from typing import Callable

from .configuration import RootConfiguration
from .logger import DiagnosticsLogger, NullDiagnosticsLogger, ScopedDiagnosticsLogger
from .output_line import OutputLine, CompilationOutputResult, ToolRunResult
from .output_assembler import assemble_output, assemble_lines
from .symbol_table import SymbolTable
from .line_classifier import parse_annotated_listing
from .bytecode_mapper import map_bytecode_lines
from .ir_extractor import extract_ir_block
from .asm_section import extract_asm_section

@dataclass
class ViewContext:
    root_config: RootConfiguration = field(default_factory=RootConfiguration)
    symbols: SymbolTable|None = None # None: no symbol information
    log: DiagnosticsLogger = field(default_factory=NullDiagnosticsLogger)

ViewFunction = Callable[[str, ViewContext], list[OutputLine]|None]

@dataclass
class View:
    name: str
    function: ViewFunction
    description: str = ""

class ViewRegistry:
    def __init__(self):
        self._views: dict[str, View] = {}

    def merge_into(self, other: 'ViewRegistry'):
        other._views.update(self._views)

    def _add_view(self, name: str, function: ViewFunction, description: str):
        if name in self._views:
            raise ValueError(f"a view named '{name}' is already registered")
        self._views[name] = View(name=name, function=function, description=description)

    def add_view(self, name: str, description: str = ""):
        """a decorator for adding views to the registry"""
        def decorator(func):
            self._add_view(name=name, function=func, description=description or (func.__doc__ or "").strip())
            return func
        return decorator

    def lookup_view(self, name: str) -> View|None:
        return self._views.get(name)

    def view_names(self) -> list[str]:
        return sorted(self._views)

builtin_views: ViewRegistry = ViewRegistry()

@builtin_views.add_view("annotated")
def annotated_view(text: str, context: ViewContext) -> list[OutputLine]:
    """annotation-style bytecode listing, mapped to source lines"""
    return parse_annotated_listing(text)

@builtin_views.add_view("bytecode")
def bytecode_view(text: str, context: ViewContext) -> list[OutputLine]:
    """bytecode disassembly, mapped through the symbol table"""
    symbols = context.symbols
    if symbols is None:
        context.log.hint("no-symbol-table", "no symbol table supplied, bytecode lines will not be mapped to source")
        symbols = SymbolTable.empty(context.root_config.symbols.primary_path_index)
    return map_bytecode_lines(text, symbols)

@builtin_views.add_view("ir")
def ir_view(text: str, context: ViewContext) -> list[OutputLine]:
    """final block of an intermediate representation dump"""
    ir_config = context.root_config.ir
    if ir_config.final_marker not in text:
        context.log.warning("ir-marker-not-found", f"IR marker '{ir_config.final_marker}' not found, showing the whole dump")
    return extract_ir_block(text, ir_config.final_marker, ir_config.unit_kinds)

@builtin_views.add_view("asm")
def asm_view(text: str, context: ViewContext) -> list[OutputLine]|None:
    """assembly section of a build transcript"""
    asm_config = context.root_config.asm
    result = extract_asm_section(text, asm_config.start_marker, asm_config.end_marker, asm_config.include_start_marker)
    if result is None:
        context.log.error("asm-section-not-found", f"could not locate the assembly section between '{asm_config.start_marker}' and '{asm_config.end_marker}'")
    return result

def run_view(view_name: str, tool_result: ToolRunResult, context: ViewContext, views: ViewRegistry = builtin_views) -> CompilationOutputResult:
    """Select the view named `view_name` and assemble its output for `tool_result`."""
    failure_text = context.root_config.output.failure_text
    view = views.lookup_view(view_name)
    if view is None:
        context.log.error("unknown-view", f"unknown view '{view_name}'. available views: {', '.join(views.view_names())}")
        return assemble_lines(None, succeeded=False, failure_text=failure_text)

    scoped_log = ScopedDiagnosticsLogger(context.log, view.name)
    scoped_context = ViewContext(root_config=context.root_config, symbols=context.symbols, log=scoped_log)
    return assemble_output(tool_result, lambda text: view.function(text, scoped_context), scoped_log, failure_text)
