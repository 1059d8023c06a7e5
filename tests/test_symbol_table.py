"""
    Symbol table loading and resolution
"""
import json

from asmmap.core.symbol_table import SymbolTable, load_symbol_table, load_symbol_table_file
from asmmap.core.source_location import SourceLocation

# as written by `forc build -g out/debug/symbols.json`
FORC_SYMBOLS = {
    "paths": [
        "/home/user/.forc/git/checkouts/std/src/lib.sw",
        "/tmp/godbolt/src/main.sw",
    ],
    "map": {
        "0": {"path": 0, "range": {"start": {"line": 12, "col": 4}, "end": {"line": 12, "col": 20}}},
        "4": {"path": 1, "range": {"start": {"line": 3, "col": 5}, "end": {"line": 3, "col": 17}}},
        "5": {"path": 1, "range": {"start": {"line": 4, "col": 9}, "end": {"line": 6, "col": 1}}},
        "9": {"path": 7, "range": {"start": {"line": 1, "col": 1}, "end": {"line": 1, "col": 2}}},
    },
}

DOCUMENTED_SYMBOLS = {
    "paths": ["lib.sw", "main.sw"],
    "entries": {
        "2": {"pathIndex": 1, "range": {"start": {"line": 8, "column": 2}, "end": {"line": 8, "column": 9}}},
    },
}

def test_resolve_primary_source():
    table = load_symbol_table(json.dumps(FORC_SYMBOLS))
    assert table.resolve("4") == SourceLocation(file="/tmp/godbolt/src/main.sw", line=3, column=5)
    assert table.resolve("5") == SourceLocation(file="/tmp/godbolt/src/main.sw", line=4, column=9)

def test_library_entries_are_not_resolved():
    """entries outside the primary source exist but are deliberately left unmapped"""
    table = load_symbol_table(json.dumps(FORC_SYMBOLS))
    assert "0" in table.entries
    assert table.resolve("0") is None
    assert table.resolve("9") is None

def test_absent_opcode_index():
    table = load_symbol_table(json.dumps(FORC_SYMBOLS))
    assert table.resolve("1") is None
    assert table.resolve("") is None

def test_documented_field_names():
    table = load_symbol_table(json.dumps(DOCUMENTED_SYMBOLS))
    assert table.resolve("2") == SourceLocation(file="main.sw", line=8, column=2)

def test_primary_path_index_is_configurable():
    table = load_symbol_table(json.dumps(FORC_SYMBOLS), primary_path_index=0)
    assert table.primary_path_index == 0
    assert table.resolve("0") == SourceLocation(file="/home/user/.forc/git/checkouts/std/src/lib.sw", line=12, column=4)
    assert table.resolve("4") is None

def test_path_index_out_of_range():
    table = load_symbol_table(json.dumps(FORC_SYMBOLS), primary_path_index=7)
    assert table.resolve("9") is None

def test_malformed_payload_degrades_to_empty_table(caplog, log):
    for data in ("{not json", json.dumps({"paths": ["a"]}), json.dumps({"paths": [], "map": {"1": {"path": "x"}}}), "[]"):
        caplog.clear()
        table = load_symbol_table(data, log)
        assert table.is_empty()
        assert table.resolve("1") is None
        assert [r.message_id for r in caplog.records if r.levelname == "WARNING"] == ["malformed-symbol-table"]

def test_missing_payload_is_empty_without_warning(caplog, log):
    table = load_symbol_table(None, log)
    assert table.is_empty()
    assert log.warning_count() == 0

def test_empty_table():
    table = SymbolTable.empty()
    assert len(table) == 0
    assert table.paths == ()
    assert table.resolve("0") is None

def test_load_symbol_table_file(tmp_path, log):
    symbols_path = tmp_path / "symbols.json"
    symbols_path.write_text(json.dumps(FORC_SYMBOLS), encoding="utf-8")
    table = load_symbol_table_file(symbols_path, log)
    assert len(table) == 4
    assert table.resolve("4") is not None

def test_load_missing_symbol_table_file(tmp_path, caplog, log):
    table = load_symbol_table_file(tmp_path / "does-not-exist.json", log)
    assert table.is_empty()
    assert caplog.records[-1].message_id == "symbol-table-unreadable"
