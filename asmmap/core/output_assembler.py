"""
    Compose extractor output and the tool's exit status into the final result.

    The result always has at least one line: when the tool failed, or the extractor
    produced nothing usable, a single sentinel line stands in for the output.
"""
from typing import Callable

from .configuration import DEFAULT_FAILURE_TEXT
from .logger import DiagnosticsLogger, NullDiagnosticsLogger
from .output_line import OutputLine, CompilationOutputResult, ToolRunResult

Extractor = Callable[[str], list[OutputLine]|None]

def failure_lines(failure_text: str = DEFAULT_FAILURE_TEXT) -> list[OutputLine]:
    return [OutputLine(text=failure_text)]

def assemble_lines(lines: list[OutputLine]|None, succeeded: bool, failure_text: str = DEFAULT_FAILURE_TEXT) -> CompilationOutputResult:
    if not succeeded or not lines:
        return CompilationOutputResult(lines=failure_lines(failure_text), succeeded=succeeded)
    return CompilationOutputResult(lines=list(lines), succeeded=succeeded)

def assemble_output(tool_result: ToolRunResult, extract: Extractor, log: DiagnosticsLogger|None = None, failure_text: str = DEFAULT_FAILURE_TEXT) -> CompilationOutputResult:
    """Run `extract` over the tool's stdout, unless the tool failed, and assemble the result.
    `succeeded` reflects the tool's exit status only."""
    log = log or NullDiagnosticsLogger()
    if tool_result.exec_time is not None:
        log.detail(f"the tool ran for {tool_result.exec_time:.3f}s")
    if tool_result.failed():
        if tool_result.timed_out:
            log.warning("tool-timed-out", "the tool timed out, no output to show")
        else:
            log.warning("tool-failed", f"the tool exited with code {tool_result.exit_code}, no output to show")
        if stderr_text := tool_result.stderr.strip():
            log.info("tool-stderr", f"the tool's standard error:\n{stderr_text}")
        return assemble_lines(None, succeeded=False, failure_text=failure_text)

    lines = extract(tool_result.stdout)
    if not lines:
        log.warning("no-output-lines", "the tool succeeded but no output lines were extracted")
    else:
        mapped_count = sum(1 for line in lines if line.has_source())
        log.detail(f"extracted {len(lines)} line(s), {mapped_count} with source locations")
    return assemble_lines(lines, succeeded=True, failure_text=failure_text)
