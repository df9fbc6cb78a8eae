"""
Block Race logging.

Two things live here:

* Console loggers, one per module, printed as ``[module] LEVEL: msg``.
* Record streams: structured events (the score history) appended as JSON
  lines when a stream is switched on.

Usage:
    from blockrace.logging import get_logger, emit_record

    log = get_logger('round')
    log.debug("Spawned %s", label)

    emit_record('score', {'type': 'pickup', 'score': 4})

Environment:
    BLOCKRACE_LOG_LEVEL=DEBUG              default console level
    BLOCKRACE_LOG_<MODULE>=TRACE           level for one module
    BLOCKRACE_LOG_DIR=~/blockrace-logs     where record streams are written
    BLOCKRACE_LOGGING_SCORE_ENABLED=true   write the score stream
"""

import json
import os
import time
import traceback
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, TextIO

LEVEL_ENV = 'BLOCKRACE_LOG_LEVEL'
DIR_ENV = 'BLOCKRACE_LOG_DIR'
MODULE_ENV_PREFIX = 'BLOCKRACE_LOG_'


class LogLevel(IntEnum):
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    CRITICAL = 50
    OFF = 100


def parse_level(name: str) -> LogLevel:
    """Level from its name ('warn' is accepted); unknown names mean INFO."""
    name = name.strip().upper()
    if name == 'WARN':
        return LogLevel.WARNING
    return LogLevel.__members__.get(name, LogLevel.INFO)


# Console levels: a default plus per-module overrides, keyed by lowercase name
_default_level = LogLevel.INFO
_module_levels: Dict[str, LogLevel] = {}


def configure_logging(level: str = 'INFO', modules: Optional[Dict[str, str]] = None) -> None:
    """Set the default console level and, optionally, per-module levels."""
    global _default_level
    _default_level = parse_level(level)
    for module, module_level in (modules or {}).items():
        _module_levels[module.lower()] = parse_level(module_level)


def load_env_levels() -> None:
    """Apply BLOCKRACE_LOG_LEVEL and BLOCKRACE_LOG_<MODULE> from the environment."""
    global _default_level
    for key, value in os.environ.items():
        if key == LEVEL_ENV:
            _default_level = parse_level(value)
        elif key.startswith(MODULE_ENV_PREFIX) and key != DIR_ENV:
            _module_levels[key[len(MODULE_ENV_PREFIX):].lower()] = parse_level(value)


def level_for(module: str) -> LogLevel:
    return _module_levels.get(module.lower(), _default_level)


load_env_levels()


class BlockRaceLogger:
    """Prints messages for one module at or above its effective level."""

    def __init__(self, module: str):
        self.module = module

    @property
    def level(self) -> LogLevel:
        return level_for(self.module)

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(self, level: LogLevel, msg: str, args: tuple) -> None:
        if not self.is_enabled_for(level):
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {level.name}: {msg}")

    def trace(self, msg: str, *args) -> None:
        """Per-frame detail."""
        self._log(LogLevel.TRACE, msg, args)

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, msg, args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, msg, args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, msg, args)

    def error(self, msg: str, *args) -> None:
        self._log(LogLevel.ERROR, msg, args)

    def critical(self, msg: str, *args) -> None:
        self._log(LogLevel.CRITICAL, msg, args)

    def exception(self, msg: str, *args) -> None:
        """Log at ERROR, followed by the traceback being handled."""
        self._log(LogLevel.ERROR, msg, args)
        if not self.is_enabled_for(LogLevel.ERROR):
            return
        tb = traceback.format_exc().rstrip()
        if tb and tb != 'NoneType: None':
            for line in tb.splitlines():
                print(f"[{self.module}]   {line}")


@lru_cache(maxsize=64)
def get_logger(module: str) -> BlockRaceLogger:
    """Logger for a module. Repeated calls return the same instance."""
    return BlockRaceLogger(module)


# =============================================================================
# Record streams
# =============================================================================

class NullSink:
    """Accepts records and drops them."""

    def emit(self, record: Dict[str, Any]) -> None:
        pass

    def close(self) -> None:
        pass


class JsonlSink(NullSink):
    """
    Appends one stream's records to a JSON lines file.

    The file is opened on the first record. It starts with a header line
    naming the stream and ends, on close, with a footer carrying the
    record count. Records without a ``wall_time`` get one.
    """

    def __init__(self, path: Path, stream: str):
        self.path = Path(path)
        self.stream = stream
        self.count = 0
        self._file: Optional[TextIO] = None

    def _write(self, data: Dict[str, Any]) -> None:
        self._file.write(json.dumps(data) + "\n")

    def emit(self, record: Dict[str, Any]) -> None:
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, 'a')
            self._write({'type': 'header', 'stream': self.stream, 'start_time': time.time()})
        self._write({'wall_time': time.time(), **record})
        self.count += 1

    def close(self) -> None:
        if self._file is None:
            return
        self._write({'type': 'footer', 'stream': self.stream, 'records': self.count,
                     'end_time': time.time()})
        self._file.close()
        self._file = None

    def __enter__(self) -> 'JsonlSink':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


_sinks: Dict[str, NullSink] = {}


def get_log_dir() -> Path:
    """BLOCKRACE_LOG_DIR, else blockrace/logs under the XDG data directory."""
    if os.environ.get(DIR_ENV):
        return Path(os.environ[DIR_ENV]).expanduser()
    data_home = os.environ.get('XDG_DATA_HOME') or Path.home() / '.local' / 'share'
    return Path(data_home) / 'blockrace' / 'logs'


def stream_enabled(stream: str) -> bool:
    """True when BLOCKRACE_LOGGING_<STREAM>_ENABLED is set to a true value."""
    value = os.environ.get(f'BLOCKRACE_LOGGING_{stream.upper()}_ENABLED', '')
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def create_sink(stream: str, session_name: Optional[str] = None) -> NullSink:
    """A JsonlSink for an enabled stream, a NullSink otherwise."""
    if not stream_enabled(stream):
        return NullSink()
    session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
    return JsonlSink(get_log_dir() / f"{session_name}_{stream}.jsonl", stream)


def register_sink(stream: str, sink: NullSink) -> None:
    """Route a stream's records to sink, closing any sink it replaces."""
    previous = _sinks.get(stream)
    if previous is not None and previous is not sink:
        previous.close()
    _sinks[stream] = sink


def emit_record(stream: str, record: Dict[str, Any]) -> bool:
    """Send a record to the stream's sink. Returns False if none is registered."""
    sink = _sinks.get(stream)
    if sink is None:
        return False
    sink.emit(record)
    return True


def close_all_sinks() -> None:
    for sink in _sinks.values():
        sink.close()
    _sinks.clear()
