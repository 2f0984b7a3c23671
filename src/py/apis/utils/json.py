import json as basejson
from typing import Any, TypeAlias, cast

from .primitives import asPrimitive

TJSON: TypeAlias = None | int | float | bool | str | list[Any] | dict[str, Any]


def json(value: Any) -> bytes:
	"""Encodes the value as compact JSON, raising `TypeError` or `ValueError`
	when the value can't be represented (unknown types, NaN, cycles)."""
	return basejson.dumps(
		asPrimitive(value), separators=(",", ":"), allow_nan=False
	).encode("utf8")


def unjson(value: bytes | str) -> TJSON:
	"""Decodes a JSON document, raising `ValueError` when malformed."""
	return cast(TJSON, basejson.loads(value))


# EOF
