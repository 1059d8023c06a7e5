import pytest

from asmmap.core.source_location import SourceLocation
from asmmap.core.output_line import OutputLine, ToolRunResult, split_lines

def test_source_location():
    source_loc = SourceLocation()
    assert source_loc.file is None
    assert source_loc.line is None
    assert source_loc.column is None

    source_loc = SourceLocation(file="src/main.sw")
    assert source_loc.file == "src/main.sw"
    assert source_loc.line is None
    assert source_loc.column is None

    source_loc = SourceLocation(file="src/main.sw", line=42)
    assert source_loc.line == 42
    assert source_loc.column is None

    source_loc = SourceLocation(file="src/main.sw", line=42, column=101)
    assert source_loc.line == 42
    assert source_loc.column == 101

def test_source_location_is_immutable():
    source_loc = SourceLocation(line=1)
    with pytest.raises(AttributeError):
        source_loc.line = 2 # type: ignore[misc]
    assert source_loc == SourceLocation(line=1)

def test_output_line():
    assert not OutputLine(text="x").has_source()
    assert OutputLine(text="x", source=SourceLocation(line=3)).has_source()

def test_tool_run_result_failed():
    assert not ToolRunResult(exit_code=0).failed()
    assert ToolRunResult(exit_code=1).failed()
    assert ToolRunResult(exit_code=0, timed_out=True).failed()

def test_split_lines():
    assert split_lines("a\nb") == ["a", "b"]
    assert split_lines("a\r\nb\n") == ["a", "b", ""]
    assert split_lines("") == [""]
