import os
import sys
import time
from contextvars import ContextVar
from enum import Enum
from typing import Any, ClassVar, NamedTuple

from .primitives import TPrimitive

ERR = sys.stderr

# SEE: https://no-color.org/
NO_COLOR: bool = "NO_COLOR" in os.environ
FORCE_COLOR: bool = "FORCE_COLOR" in os.environ
COLOR: bool = FORCE_COLOR or NO_COLOR is False

LogOrigin: ContextVar[str] = ContextVar("LogOrigin", default="apis")


class Term:
	BOLD: ClassVar[str] = "" if not COLOR else "\033[1m"
	RESET: ClassVar[str] = "" if not COLOR else "\033[0m"

	@staticmethod
	def Color(color: int) -> str:
		return f"\033[0;38;5;{color}m" if COLOR else ""


class LogLevel(Enum):
	Debug = 0
	Info = 10
	Warning = 30
	Error = 40  # A managed error
	Exception = 50  # An un-managed error


LOG_LEVEL_COLOR = {
	LogLevel.Debug: 31,
	LogLevel.Info: 75,
	LogLevel.Warning: 202,
	LogLevel.Error: 160,
	LogLevel.Exception: 124,
}


def parseLevel(name: str | None, default: LogLevel = LogLevel.Info) -> LogLevel:
	"""Returns the log level matching the given (case insensitive) name."""
	if not name:
		return default
	for level in LogLevel:
		if level.name.lower() == name.strip().lower():
			return level
	return default


LOG_LEVEL: LogLevel = parseLevel(os.getenv("APIS_LOG_LEVEL"))


class LogEntry(NamedTuple):
	origin: str
	time: float
	level: LogLevel = LogLevel.Info
	message: str | None = None
	code: int | str | None = None
	context: dict[str, TPrimitive] | None = None


def formatData(value: Any) -> str:
	if value is None or value == () or value == [] or value == {}:
		return "◌"
	elif isinstance(value, dict):
		return " ".join(
			f"{Term.BOLD}{k}{Term.RESET}={formatData(v)}" for k, v in value.items()
		)
	elif isinstance(value, list) or isinstance(value, tuple):
		return ",".join(formatData(v) for v in value)
	elif isinstance(value, str):
		return repr(value) if " " in value else value
	elif isinstance(value, bool):
		return "✓" if value else "✗"
	elif isinstance(value, float):
		return f"{value:0.2f}"
	else:
		return str(value)


def logged(level: LogLevel) -> bool:
	"""Tells if entries at the given level are currently output. This guards
	against building entries that would be discarded."""
	return level.value >= LOG_LEVEL.value


def send(entry: LogEntry) -> LogEntry:
	if not logged(entry.level):
		return entry
	clr: str = Term.Color(LOG_LEVEL_COLOR[entry.level])
	code: str = f" [{entry.code}]" if entry.code is not None else ""
	ERR.write(
		f"{clr}{Term.BOLD}[{entry.origin}]{Term.RESET}{clr}{code} {entry.message} {formatData(entry.context)}{Term.RESET}\n"
	)
	ERR.flush()
	return entry


def entry(
	message: str,
	*,
	level: LogLevel = LogLevel.Info,
	code: int | str | None = None,
	origin: str | None = None,
	context: dict[str, TPrimitive],
) -> LogEntry:
	return LogEntry(
		origin=origin or LogOrigin.get(),
		time=time.time(),
		level=level,
		message=message,
		code=code,
		context=context,
	)


def debug(message: str, *, origin: str | None = None, **context: TPrimitive) -> LogEntry:
	return send(entry(message, level=LogLevel.Debug, origin=origin, context=context))


def info(message: str, *, origin: str | None = None, **context: TPrimitive) -> LogEntry:
	return send(entry(message, origin=origin, context=context))


def warning(
	message: str, *, origin: str | None = None, **context: TPrimitive
) -> LogEntry:
	return send(entry(message, level=LogLevel.Warning, origin=origin, context=context))


def error(
	message: str,
	code: int | str | None,
	*,
	origin: str | None = None,
	**context: TPrimitive,
) -> LogEntry:
	return send(
		entry(message, level=LogLevel.Error, code=code, origin=origin, context=context)
	)


# EOF
