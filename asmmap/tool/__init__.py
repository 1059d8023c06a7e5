"""
    asmmap command line tool: normalize captured tool output and print it
"""
import argparse
import pathlib
import sys
from typing import Sequence, TextIO
from enum import Enum

from pydantic import TypeAdapter

from ..__init__ import __version__
from ..core.logger import create_root_diagnostics_logger, log_levels, RootDiagnosticsLogger
from ..core.configuration import RootConfiguration, assign_field
from ..core.load_configuration import load_config_file, default_load_config_files
from ..core.output_line import CompilationOutputResult, ToolRunResult
from ..core.symbol_table import load_symbol_table_file
from ..core.views import ViewContext, builtin_views, run_view

class ExitStatus(Enum):
    SUCCESS = 0
    FAILURE = 1

# command line args ----------------------------------------------------------

def make_argument_parser() -> argparse.ArgumentParser:
    result = argparse.ArgumentParser(prog="asmmap", description="Normalize compiler/toolchain output into source-mapped lines")
    result.add_argument('--version', action='version', version=f"%(prog)s {__version__}")
    result.add_argument("--view", help="which tool output the input is", choices=builtin_views.view_names(), default="annotated")
    result.add_argument("--symbols", help="symbol table JSON file for the bytecode view", required=False, default=None)
    result.add_argument("--exit-code", help="exit code of the tool that produced the input", type=int, default=0)
    result.add_argument("--timed-out", help="the tool that produced the input timed out", action="store_true")
    result.add_argument("--stderr", help="file holding the tool's captured standard error", metavar="FILE", dest="stderr_file", required=False, default=None)
    result.add_argument("--exec-time", help="how long the tool ran, in seconds", metavar="SECONDS", type=float, required=False, default=None)
    result.add_argument("--halt-on-error", help="fail if any errors are reported, even if output was produced", action="store_true")
    result.add_argument("--no-default-config", help="disable loading the user config file", action="store_true")
    result.add_argument("--config-file", help="specify additional config file(s)", required=False, default=[], action="append")
    result.add_argument("--set", help="set a configuration field, e.g. --set asm.end_marker=Done", metavar="FIELD=VALUE", dest="assignments", required=False, default=[], action="append")
    result.add_argument("--format", help="output format", choices=["text", "json"], default="text")

    log_level_choices = [level.lower() for level in log_levels]
    result.add_argument("--log-level", help="specify the minimum level of log messages to be printed", choices=log_level_choices, required=False, default="warning")

    result.add_argument("filename", help="file holding the tool's captured standard output, or - for stdin")
    return result

argument_parser = make_argument_parser()

# configuration --------------------------------------------------------------

def build_configuration(command_line_args: argparse.Namespace, log: RootDiagnosticsLogger) -> RootConfiguration:
    root_config = RootConfiguration()
    if not command_line_args.no_default_config:
        root_config = default_load_config_files(root_config, log)

    for config_path in map(pathlib.Path, command_line_args.config_file):
        root_config = load_config_file(config_path, root_config, log)

    for assignment in command_line_args.assignments:
        field_name, sep, value = assignment.partition("=")
        if not sep:
            log.error("bad-assignment", f"didn't perform configuration assignment. expected FIELD=VALUE, got '{assignment}'")
            continue
        assign_field(root_config, field_name, value, log)
    return root_config

# output ---------------------------------------------------------------------

def format_text(result: CompilationOutputResult) -> str:
    """Render lines with a `file:line:col` gutter for those that map to source."""
    gutters = []
    for line in result.lines:
        if line.source is None:
            gutters.append("")
        else:
            gutters.append(":".join(str(s) for s in (line.source.file or "<source>", line.source.line, line.source.column) if s is not None))
    width = max(len(gutter) for gutter in gutters)
    if width == 0:
        return "".join(line.text + "\n" for line in result.lines)
    return "".join(f"{gutter:<{width}} | {line.text}\n" for gutter, line in zip(gutters, result.lines))

result_adapter = TypeAdapter(CompilationOutputResult)

def format_json(result: CompilationOutputResult) -> str:
    return result_adapter.dump_json(result, indent=2).decode("utf-8") + "\n"

# ----------------------------------------------------------------------------

def read_input(filename: str, stdin: TextIO) -> str:
    if filename == "-":
        return stdin.read()
    return pathlib.Path(filename).read_text(encoding="utf-8")

def main(argv: Sequence[str] | None = None, test_exfil: dict|None = None) -> int:
    if not argv:
        argv = sys.argv
    command_line_args = argument_parser.parse_args(args=argv[1:])

    log_level = log_levels.get(command_line_args.log_level.upper(), None)
    if not log_level:
        print(f"error: '{command_line_args.log_level}' is not a valid log level", file=sys.stderr, flush=True)
        return ExitStatus.FAILURE.value
    log = create_root_diagnostics_logger(initial_level=log_level)

    root_config = build_configuration(command_line_args, log)

    input_path = None if command_line_args.filename == "-" else pathlib.Path(command_line_args.filename)
    try:
        stdout_text = read_input(command_line_args.filename, sys.stdin)
    except (OSError, UnicodeDecodeError) as ex:
        log.critical("error-reading-input", f"could not read input: {ex}", *([input_path] if input_path else []))
        return ExitStatus.FAILURE.value

    stderr_text = ""
    if command_line_args.stderr_file:
        stderr_path = pathlib.Path(command_line_args.stderr_file)
        try:
            stderr_text = stderr_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as ex:
            log.warning("error-reading-stderr", f"could not read the tool's standard error, continuing without it: {ex}", stderr_path)

    symbols = None
    if command_line_args.symbols:
        symbols = load_symbol_table_file(pathlib.Path(command_line_args.symbols), log, root_config.symbols.primary_path_index)

    tool_result = ToolRunResult(
        exit_code=command_line_args.exit_code,
        stdout=stdout_text,
        stderr=stderr_text,
        exec_time=command_line_args.exec_time,
        timed_out=command_line_args.timed_out)
    context = ViewContext(root_config=root_config, symbols=symbols, log=log)
    try:
        result = run_view(command_line_args.view, tool_result, context)
    except Exception as ex:
        log.critical("unhandled-exception", f"processing halted unexpectedly. an unhandled exception occurred: {repr(ex)}", *([input_path] if input_path else []))
        log.error_exception(ex)
        return ExitStatus.FAILURE.value

    if test_exfil is not None:
        test_exfil["root_config"] = root_config
        test_exfil["tool_result"] = tool_result
        test_exfil["result"] = result
        test_exfil["log"] = log

    output = format_json(result) if command_line_args.format == "json" else format_text(result)
    sys.stdout.write(output)
    sys.stdout.flush()

    if not result.succeeded:
        return ExitStatus.FAILURE.value
    if command_line_args.halt_on_error and (log.critical_count() > 0 or log.error_count() > 0):
        return ExitStatus.FAILURE.value
    return ExitStatus.SUCCESS.value
