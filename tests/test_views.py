"""
    View selection and the end-to-end path from tool result to assembled output
"""
import json

import pytest

from asmmap.core.configuration import RootConfiguration
from asmmap.core.output_line import OutputLine, ToolRunResult
from asmmap.core.source_location import SourceLocation
from asmmap.core.symbol_table import load_symbol_table
from asmmap.core.views import ViewContext, ViewRegistry, builtin_views, run_view

SYMBOLS = json.dumps({
    "paths": ["std/src/lib.sw", "src/main.sw"],
    "map": {"7": {"path": 1, "range": {"start": {"line": 2, "col": 3}, "end": {"line": 2, "col": 9}}}},
})

def test_builtin_view_names():
    assert builtin_views.view_names() == ["annotated", "asm", "bytecode", "ir"]
    assert builtin_views.lookup_view("ir").description == "final block of an intermediate representation dump"
    assert builtin_views.lookup_view("nope") is None

def test_duplicate_view_name_rejected():
    registry = ViewRegistry()
    @registry.add_view("x")
    def x_view(text, context):
        return []
    with pytest.raises(ValueError):
        registry.add_view("x")(x_view)

def test_merge_into():
    registry = ViewRegistry()
    builtin_views.merge_into(registry)
    @registry.add_view("upper")
    def upper_view(text, context):
        return [OutputLine(text=text.upper())]
    assert registry.view_names() == ["annotated", "asm", "bytecode", "ir", "upper"]
    assert builtin_views.lookup_view("upper") is None
    result = run_view("upper", ToolRunResult(exit_code=0, stdout="ok"), ViewContext(), registry)
    assert result.lines == [OutputLine(text="OK")]

def test_annotated_view(log):
    result = run_view("annotated", ToolRunResult(exit_code=0, stdout="  Frame_0 :\n     annotation: x:4\n  op"), ViewContext(log=log))
    assert result.succeeded
    assert [line.source for line in result.lines] == [None, SourceLocation(line=4), SourceLocation(line=4)]

def test_bytecode_view_with_symbols(log):
    context = ViewContext(symbols=load_symbol_table(SYMBOLS, log), log=log)
    result = run_view("bytecode", ToolRunResult(exit_code=0, stdout="  7  28  RET\n\n  8  32  NOOP\n"), context)
    assert result.lines == [
        OutputLine(text="  7  28  RET", source=SourceLocation(file="src/main.sw", line=2, column=3)),
        OutputLine(text="  8  32  NOOP"),
    ]

def test_bytecode_view_without_symbols(caplog, log):
    result = run_view("bytecode", ToolRunResult(exit_code=0, stdout="  7  28  RET\n"), ViewContext(log=log))
    assert result.lines == [OutputLine(text="  7  28  RET")]
    assert caplog.records[0].message_id == "no-symbol-table"
    assert caplog.records[0].scopes == ("bytecode",)

def test_ir_view_missing_marker_warns(caplog, log):
    result = run_view("ir", ToolRunResult(exit_code=0, stdout="script {\n}"), ViewContext(log=log))
    assert [line.text for line in result.lines] == ["script {", "}"]
    assert log.warning_count() == 1
    assert caplog.records[0].message_id == "ir-marker-not-found"

def test_asm_view_missing_section_gives_sentinel(caplog, log):
    result = run_view("asm", ToolRunResult(exit_code=0, stdout="Compiling\n"), ViewContext(log=log))
    assert result.succeeded
    assert result.lines == [OutputLine(text="<Compilation failed>")]
    assert log.error_count() == 1
    assert caplog.records[0].message_id == "asm-section-not-found"

def test_views_use_configuration(log):
    root_config = RootConfiguration()
    root_config.asm.start_marker = "BEGIN"
    root_config.asm.end_marker = "END"
    root_config.output.failure_text = "<no asm>"
    context = ViewContext(root_config=root_config, log=log)
    assert [line.text for line in run_view("asm", ToolRunResult(exit_code=0, stdout="BEGIN\nnop\nEND"), context).lines] == ["nop"]
    assert run_view("asm", ToolRunResult(exit_code=0, stdout="nothing"), context).lines == [OutputLine(text="<no asm>")]

def test_failed_tool_skips_view(log):
    result = run_view("bytecode", ToolRunResult(exit_code=1, stdout="  7  28  RET"), ViewContext(symbols=load_symbol_table(SYMBOLS), log=log))
    assert not result.succeeded
    assert result.lines == [OutputLine(text="<Compilation failed>")]
    assert not any(line.has_source() for line in result.lines)

def test_unknown_view(caplog, log):
    result = run_view("llvm", ToolRunResult(exit_code=0, stdout="x"), ViewContext(log=log))
    assert not result.succeeded
    assert result.lines == [OutputLine(text="<Compilation failed>")]
    assert caplog.records[0].message_id == "unknown-view"
