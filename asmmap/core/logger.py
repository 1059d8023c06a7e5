"""
    Diagnostics sink, specialized for compiler-style messages about tool output processing.

    The extractors themselves never log. Diagnostics are emitted by the layers around them
    (symbol table loading, view selection, output assembly, the command line tool) through
    a DiagnosticsLogger supplied by the caller.

    Logging Levels:
    - critical: Conditions that prevent any result from being produced.
    - error: A requested operation could not be performed, e.g. an unknown view or a bad config value.
    - warning: Degraded output, e.g. the tool failed or the symbol table could not be decoded.
    - hint: Suggestions, e.g. a marker that probably needs configuring.
    - info: Key happy-path progress information.
    - detail: (Potentially verbose) user-oriented reporting on processing steps. A non-standard
      level that separates details from key information presented at the 'info' level.
    - debug: Developer-oriented logs, including dumps of internal state.
"""
from typing import Any
import logging
import pathlib
import sys
import abc
from .source_location import SourceLocation

# Add HINT and DETAIL logging levels without monkey patching anything.
def add_logging_level(level: int, name: str, lower_bound: int, upper_bound: int) -> int:
    existing_level = logging.getLevelName(name)
    # ^^^ getLevelName returns level numbers given string level names,
    # except if a level name does not exist, in which case it returns a string
    if isinstance(existing_level, str):
        existing_level = None

    if existing_level is None:
        assert level > lower_bound
        assert level < upper_bound
        logging.addLevelName(level, name)
        return level
    if existing_level > upper_bound or existing_level < lower_bound:
        print(f"warning: asmmap: log level {name} was not configured in expected range", file=sys.stderr)
    return existing_level

HINT: int = add_logging_level(25, "HINT", logging.INFO, logging.WARNING) # midway between INFO and WARNING
DETAIL: int = add_logging_level(15, "DETAIL", logging.DEBUG, logging.INFO) # midway between DEBUG and INFO

log_levels = {
    'CRITICAL': logging.CRITICAL,
    'ERROR': logging.ERROR,
    'WARNING': logging.WARNING,
    'HINT': HINT,
    'INFO': logging.INFO,
    'DETAIL': DETAIL,
    'DEBUG': logging.DEBUG,
}

class DiagnosticsLogger(metaclass=abc.ABCMeta):
    """Ergonomic facade for logging compiler-style diagnostic messages.

    Calls follow one of two patterns:
        log.warning(message, ...)
        log.warning(message_id, message, ...)
    where ... are optional extras: a SourceLocation or Path positionally,
    and/or the `line=`, `column=` and `scopes=` keywords.
    """
    @abc.abstractmethod
    def log(self, level: int, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        pass

    @abc.abstractmethod
    def error_exception(self, ex: BaseException):
        pass

    @abc.abstractmethod
    def debug_exception(self, ex: BaseException):
        pass

    def critical(self, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        self.log(logging.CRITICAL, msg_id_or_msg, *msg_and_or_extras, **kwextras)

    def error(self, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        self.log(logging.ERROR, msg_id_or_msg, *msg_and_or_extras, **kwextras)

    def warning(self, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        self.log(logging.WARNING, msg_id_or_msg, *msg_and_or_extras, **kwextras)

    def hint(self, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        self.log(HINT, msg_id_or_msg, *msg_and_or_extras, **kwextras)

    def info(self, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        self.log(logging.INFO, msg_id_or_msg, *msg_and_or_extras, **kwextras)

    def detail(self, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        self.log(DETAIL, msg_id_or_msg, *msg_and_or_extras, **kwextras)

    def debug(self, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        self.log(logging.DEBUG, msg_id_or_msg, *msg_and_or_extras, **kwextras)


def _split_message_id(msg_id_or_msg: str, msg_and_or_extras: tuple[Any, ...]) -> tuple[str|None, str, tuple[Any, ...]]:
    """interpret (msg_id_or_msg, *msg_and_or_extras) as ([message_id=None], message, *extras)"""
    if msg_and_or_extras and isinstance(msg_and_or_extras[0], str):
        return msg_id_or_msg, msg_and_or_extras[0], msg_and_or_extras[1:]
    return None, msg_id_or_msg, msg_and_or_extras

def _record_extra(message_id: str|None, extras: tuple[Any, ...], kwextras: dict[str, Any]) -> dict[str, Any]:
    """build the `extra` dict for a log record:
        - message_id
        - source_file
        - source_line # 1-based
        - source_column # 1-based
        - scopes
    """
    source = {'source_file': None, 'source_line': None, 'source_column': None}
    for obj in extras:
        if isinstance(obj, SourceLocation):
            # one source location per message, the last one wins
            source = {'source_file': obj.file, 'source_line': obj.line, 'source_column': obj.column}
        elif isinstance(obj, pathlib.Path):
            source['source_file'] = str(obj)
        else:
            assert False, f"unrecognised type-dispatched extra log argument {repr(obj)}"

    keyword_fields = {'line': 'source_line', 'column': 'source_column', 'scopes': 'scopes'}
    for name, value in kwextras.items():
        assert name in keyword_fields, f"unrecognised keyword extra log argument {name} = {repr(value)}"
        source[keyword_fields[name]] = value

    result: dict[str, Any] = {'message_id': message_id}
    result.update((k, v) for k, v in source.items() if v is not None)
    return result


class RootDiagnosticsLogger(DiagnosticsLogger):
    """Writes diagnostics to a `logging.Logger`.
    - Requires message ids for INFO and above.
    - Counts messages per level so that callers can halt on errors.
    """
    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.message_counts: dict[int, int] = {level: 0 for level in log_levels.values()}

    def critical_count(self) -> int:
        return self.message_counts[logging.CRITICAL]

    def error_count(self) -> int:
        return self.message_counts[logging.ERROR]

    def warning_count(self) -> int:
        return self.message_counts[logging.WARNING]

    def log(self, level: int, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        message_id, message, extras = _split_message_id(msg_id_or_msg, msg_and_or_extras)
        if level >= logging.INFO:
            assert message_id is not None, "message_id is required for logging at 'info' level and above"

        self.logger.log(level, message, extra=_record_extra(message_id, extras, kwextras))
        self.message_counts[level] += 1

    def error_exception(self, ex: BaseException):
        self.logger.error(ex, exc_info=True)

    def debug_exception(self, ex: BaseException):
        self.logger.debug(ex, exc_info=True)


class ScopedDiagnosticsLogger(DiagnosticsLogger):
    """wrapper logger that prepends scopes to log messages, e.g. the active view name"""
    def __init__(self, sink: DiagnosticsLogger, scopes: tuple[str,...]|str):
        self.sink = sink
        self.scopes = scopes if isinstance(scopes, tuple) else (scopes,)

    def log(self, level: int, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        kwextras["scopes"] = self.scopes + tuple(kwextras.get("scopes", ()))
        self.sink.log(level, msg_id_or_msg, *msg_and_or_extras, **kwextras)

    def error_exception(self, ex: BaseException):
        self.sink.error_exception(ex)

    def debug_exception(self, ex: BaseException):
        self.sink.debug_exception(ex)


class NullDiagnosticsLogger(DiagnosticsLogger):
    """Discards all messages. The default sink when the caller doesn't supply one."""
    def log(self, level: int, msg_id_or_msg: str, *msg_and_or_extras, **kwextras):
        pass

    def error_exception(self, ex: BaseException):
        pass

    def debug_exception(self, ex: BaseException):
        pass


class DiagnosticRecordFormatter(logging.Formatter):
    """Format log messages in a compiler-like format for console display."""
    def formatMessage(self, record) -> str:
        # filename:line:col
        source_file: str = record.__dict__.get('source_file', '')
        source_line = record.__dict__.get('source_line', None)
        source_column = record.__dict__.get('source_column', None)
        if (source_line is not None or source_column is not None) and not source_file:
            source_file = '<source>'
        source_location_str = ":".join(str(s) for s in (source_file, source_line, source_column) if s)

        levelname = record.levelname.lower()

        message_id = record.__dict__.get('message_id', None)
        message_id = f"[{message_id}]" if message_id else None

        message = record.__dict__['message']
        scopes = record.__dict__.get('scopes', tuple())

        # filename:ln:col: level: [message_id]: scopes: message
        if message:
            return ": ".join(s for s in (source_location_str, levelname, message_id) + scopes + (message,) if s)
        else:
            return ": ".join(s for s in (source_location_str, levelname, message_id) + scopes if s) + ":"


def create_root_diagnostics_logger(initial_level=logging.DEBUG) -> RootDiagnosticsLogger:
    logger = logging.getLogger(name='asmmap')
    logger.setLevel(initial_level)
    if not logger.handlers:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setLevel(logging.DEBUG)
        stream_handler.setFormatter(DiagnosticRecordFormatter())
        logger.addHandler(stream_handler)

    return RootDiagnosticsLogger(logger=logger)
