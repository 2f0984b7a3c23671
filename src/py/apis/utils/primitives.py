from base64 import b64encode
from dataclasses import fields, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from pathlib import Path
from typing import Any

TLiteral = bool | int | float | str | bytes
TComposite = (
	list[TLiteral] | dict[TLiteral, TLiteral] | set[TLiteral] | tuple[TLiteral, ...]
)
TComposite2 = (
	list[TLiteral | TComposite]
	| dict[TLiteral, TLiteral | TComposite]
	| tuple[TLiteral | TComposite, ...]
)
TPrimitive = bool | int | float | str | bytes | TComposite | TComposite2 | None

# Deeper structures are most likely cyclic
MAX_DEPTH: int = 256


def asPrimitive(value: Any, *, currentDepth: int = 0) -> Any:
	"""Converts the given value to a primitive value that can be converted
	to JSON. Values that have no primitive representation are returned as-is,
	so that the JSON encoder can reject them."""
	if currentDepth > MAX_DEPTH:
		raise ValueError(f"Value is nested deeper than {MAX_DEPTH} levels")
	depth: int = currentDepth + 1
	if value is None or type(value) in (bool, float, int, str):
		return value
	elif isinstance(value, tuple) and hasattr(value, "_fields"):
		f = getattr(type(value), "asPrimitive", None)
		return (
			f(value)
			if f
			else {k: asPrimitive(getattr(value, k), currentDepth=depth) for k in value._fields}
		)
	elif isinstance(value, list) or isinstance(value, tuple) or isinstance(value, set):
		return [asPrimitive(v, currentDepth=depth) for v in value]
	elif is_dataclass(value) and not isinstance(value, type):
		return {
			_.name: asPrimitive(getattr(value, _.name), currentDepth=depth)
			for _ in fields(value)
		}
	elif isinstance(value, Enum):
		return asPrimitive(value.value, currentDepth=depth)
	elif isinstance(value, dict):
		return {
			asPrimitive(k, currentDepth=depth): asPrimitive(v, currentDepth=depth)
			for k, v in value.items()
		}
	elif isinstance(value, bytes) or isinstance(value, bytearray):
		return b64encode(value).decode("ascii")
	elif isinstance(value, Decimal):
		return str(value)
	elif isinstance(value, Path):
		return str(value)
	elif isinstance(value, datetime) or isinstance(value, date):
		return value.isoformat()
	else:
		return value


# EOF
