"""
    The Configuration is a small tree of pydantic models holding the textual conventions
    of the toolchain whose output is being processed: section markers, unit-kind keywords,
    the primary source path index, and the failure sentinel text.
"""
from typing import Any
import json

from pydantic import BaseModel, Field, ConfigDict, ValidationError, field_validator

from .logger import DiagnosticsLogger
from .source_location import SourceLocation

DEFAULT_IR_FINAL_MARKER = "// IR: Final"
DEFAULT_IR_UNIT_KINDS = ["script", "library", "contract", "predicate"]
DEFAULT_ASM_START_MARKER = ";; ASM: Virtual abstract program"
DEFAULT_ASM_END_MARKER = "Finished"
DEFAULT_PRIMARY_PATH_INDEX = 1
DEFAULT_FAILURE_TEXT = "<Compilation failed>"

class IrConfiguration(BaseModel):
    """Delimiting the final block of an IR dump"""
    model_config = ConfigDict(
        validate_assignment=True, extra="forbid")

    final_marker: str = Field(default=DEFAULT_IR_FINAL_MARKER, min_length=1, description="Banner line preceding the final IR section. The last occurrence is used.")
    unit_kinds: list[str] = Field(default_factory=lambda: list(DEFAULT_IR_UNIT_KINDS), min_length=1, description="Keywords that open a top-level unit, e.g. `script {`.")

    @field_validator("unit_kinds")
    @classmethod
    def _check_unit_kinds(cls, value: list[str]) -> list[str]:
        if any(not kind.isidentifier() for kind in value):
            raise ValueError("unit kinds must be identifiers")
        return value

class AsmConfiguration(BaseModel):
    """Delimiting the assembly section of an alternate disassembly transcript"""
    model_config = ConfigDict(
        validate_assignment=True, extra="forbid")

    start_marker: str = Field(default=DEFAULT_ASM_START_MARKER, min_length=1)
    end_marker: str = Field(default=DEFAULT_ASM_END_MARKER, min_length=1)
    include_start_marker: bool = Field(default=False, description="Keep the start marker line itself in the section.")

class SymbolsConfiguration(BaseModel):
    """Symbol table resolution"""
    model_config = ConfigDict(
        validate_assignment=True, extra="forbid")

    primary_path_index: int = Field(default=DEFAULT_PRIMARY_PATH_INDEX, ge=0, description="Index into the symbol table `paths` of the user's own source file. Other paths are left unmapped.")

class OutputConfiguration(BaseModel):
    model_config = ConfigDict(
        validate_assignment=True, extra="forbid")

    failure_text: str = Field(default=DEFAULT_FAILURE_TEXT, min_length=1, description="Text of the single line emitted when there is no usable output.")

class RootConfiguration(BaseModel):
    """The root of the configuration tree"""
    model_config = ConfigDict(
        validate_assignment=True, extra="forbid")

    ir: IrConfiguration = Field(default_factory=IrConfiguration)
    asm: AsmConfiguration = Field(default_factory=AsmConfiguration)
    symbols: SymbolsConfiguration = Field(default_factory=SymbolsConfiguration)
    output: OutputConfiguration = Field(default_factory=OutputConfiguration)

# ----------------------------------------------------------------------------
# assign_field: implementation of the `--set field.path=value` command line option

def _parse_field_value(field_value_str: str, source_loc: SourceLocation|None, log: DiagnosticsLogger) -> tuple[bool, Any]:
    """Parse the right-hand-side of an assignment as JSON. Bare words that are not
    valid JSON are taken to be strings, so that `--set asm.end_marker=Done` works.
    Values that parse to non-strings are reassigned as raw text to `str` fields by `assign_field`."""
    try:
        return True, json.loads(field_value_str)
    except ValueError:
        stripped = field_value_str.strip()
        if stripped and stripped[0] not in "[{\"":
            return True, field_value_str
        log.error("config-value-json-parse-error", f"could not parse configuration value '{field_value_str}' as JSON", *([source_loc] if source_loc else []))
        return False, None

def assign_field(root_config: RootConfiguration, config_field_path: str, field_value_str: str, log: DiagnosticsLogger, source_loc: SourceLocation|None = None) -> bool:
    """Assign the parsed `field_value_str` to the field named by the dotted `config_field_path`.
    pydantic performs coercion and validation. On failure the configuration is left unchanged.
    Returns True if the assignment was made."""
    extras = [source_loc] if source_loc else []

    value_ok, parsed_field_value = _parse_field_value(field_value_str, source_loc, log)
    if not value_ok:
        return False

    # navigate '.'-separated components from `root_config` to the `target` object that has field `field_name`
    field_name = config_field_path.strip()
    target: Any = root_config
    while '.' in field_name:
        component, field_name = field_name.split('.', maxsplit=1)
        if not isinstance(target, BaseModel) or component not in type(target).model_fields:
            log.error("unknown-field-component", f"didn't perform configuration assignment. unknown configuration field '{config_field_path}', component '{component}' does not exist", *extras)
            return False
        target = getattr(target, component)

    if not isinstance(target, BaseModel) or field_name not in type(target).model_fields:
        log.error("unknown-field", f"didn't assign configuration field. unknown configuration field '{config_field_path}'", *extras)
        return False
    field_type = type(target).model_fields[field_name].annotation
    if isinstance(field_type, type) and issubclass(field_type, BaseModel):
        log.error("not-a-leaf-field", f"didn't assign configuration field. '{config_field_path}' is a configuration section, not a field", *extras)
        return False
    if field_type is str and not isinstance(parsed_field_value, str):
        # e.g. `--set asm.end_marker=2024`: the raw text is the string wanted
        parsed_field_value = field_value_str

    try:
        log.detail("set-field", f"setting configuration field: {config_field_path} = {json.dumps(parsed_field_value)}", *extras)
        setattr(target, field_name, parsed_field_value) # uses pydantic for coercion and validation, may raise exception
    except ValidationError as validation_error:
        log.error("invalid-field-assignment", f"could not assign configuration value '{json.dumps(parsed_field_value)}' to field '{config_field_path}': {str(validation_error)}", *extras)
        return False
    return True
