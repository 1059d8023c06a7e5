"""
    Symbol table: opcode index -> source location

    The toolchain writes a JSON side file next to the bytecode artifact that maps each
    instruction (keyed by its opcode index, as a string) to a source range in one of a
    list of paths. Only ranges in the primary source (the user's own file) are resolved;
    ranges in included/library code are left unmapped even though the data is there.

    The payload is validated once, here, with pydantic. A payload that can't be decoded
    gives an empty table rather than an error, so a parse never fails on symbol data.
"""
import pathlib
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, AliasChoices, ValidationError

from .logger import DiagnosticsLogger, NullDiagnosticsLogger
from .source_location import SourceLocation
from .configuration import DEFAULT_PRIMARY_PATH_INDEX

# payload models -------------------------------------------------------------
# Both the documented field names and the ones forc emits (`map`, `path`, `col`) are accepted.

class SymbolPosition(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    line: int
    column: int = Field(validation_alias=AliasChoices("column", "col"))

class SymbolRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: SymbolPosition
    end: SymbolPosition

class SymbolEntry(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    path_index: int = Field(validation_alias=AliasChoices("pathIndex", "path_index", "path"))
    range: SymbolRange

class SymbolTablePayload(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    paths: list[str]
    entries: dict[str, SymbolEntry] = Field(validation_alias=AliasChoices("entries", "map"))

# ----------------------------------------------------------------------------

class SymbolTable:
    """Immutable opcode-index -> source-location lookup, scoped to a single parse."""
    def __init__(self, paths: tuple[str, ...] = (), entries: Mapping[str, SymbolEntry]|None = None, primary_path_index: int = DEFAULT_PRIMARY_PATH_INDEX):
        self._paths: tuple[str, ...] = tuple(paths)
        self._entries: Mapping[str, SymbolEntry] = MappingProxyType(dict(entries or {}))
        self._primary_path_index: int = primary_path_index

    @classmethod
    def empty(cls, primary_path_index: int = DEFAULT_PRIMARY_PATH_INDEX) -> 'SymbolTable':
        return cls(primary_path_index=primary_path_index)

    @classmethod
    def from_payload(cls, payload: SymbolTablePayload, primary_path_index: int = DEFAULT_PRIMARY_PATH_INDEX) -> 'SymbolTable':
        return cls(paths=tuple(payload.paths), entries=payload.entries, primary_path_index=primary_path_index)

    @property
    def paths(self) -> tuple[str, ...]:
        return self._paths

    @property
    def entries(self) -> Mapping[str, SymbolEntry]:
        return self._entries

    @property
    def primary_path_index(self) -> int:
        return self._primary_path_index

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def resolve(self, opcode_index: str) -> SourceLocation|None:
        """Source location of the instruction at `opcode_index`, or None if there is no entry
        for it, or the entry belongs to a path other than the primary source."""
        entry = self._entries.get(opcode_index)
        if entry is None:
            return None
        if entry.path_index != self._primary_path_index:
            return None
        if not 0 <= entry.path_index < len(self._paths):
            return None
        start = entry.range.start
        return SourceLocation(file=self._paths[entry.path_index], line=start.line, column=start.column)

def load_symbol_table(data: str|bytes|None, log: DiagnosticsLogger|None = None, primary_path_index: int = DEFAULT_PRIMARY_PATH_INDEX, source_path: pathlib.Path|None = None) -> SymbolTable:
    """Decode and validate a JSON symbol table payload.
    A missing or malformed payload is reported as a warning and degrades to an empty table."""
    log = log or NullDiagnosticsLogger()
    extras = [source_path] if source_path else []
    if not data:
        log.detail("no symbol information available", *extras)
        return SymbolTable.empty(primary_path_index)
    try:
        payload = SymbolTablePayload.model_validate_json(data)
    except ValidationError as validation_error:
        log.warning("malformed-symbol-table", f"ignoring symbol table, it could not be decoded: {validation_error.error_count()} error(s), first: {validation_error.errors()[0]['msg']}", *extras)
        log.debug(str(validation_error))
        return SymbolTable.empty(primary_path_index)
    table = SymbolTable.from_payload(payload, primary_path_index)
    log.detail(f"loaded symbol table with {len(table)} entries over {len(table.paths)} path(s)", *extras)
    return table

def load_symbol_table_file(path: pathlib.Path, log: DiagnosticsLogger|None = None, primary_path_index: int = DEFAULT_PRIMARY_PATH_INDEX) -> SymbolTable:
    """Read and load the symbol table file at `path`. A missing or unreadable file degrades to an empty table."""
    log = log or NullDiagnosticsLogger()
    try:
        data = path.read_bytes()
    except OSError as ex:
        log.warning("symbol-table-unreadable", f"ignoring symbol table, the file could not be read: {ex}", path)
        return SymbolTable.empty(primary_path_index)
    return load_symbol_table(data, log, primary_path_index, source_path=path)
