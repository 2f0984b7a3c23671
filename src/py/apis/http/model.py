from enum import Enum
from typing import Iterator, NamedTuple
from urllib.parse import quote_plus

from ..utils.uri import URI

# -----------------------------------------------------------------------------
#
# HELPERS
#
# -----------------------------------------------------------------------------


def headername(name: str, *, headers: dict[str, str] = {}) -> str:
	"""Normalizes the header name as `Kebab-Case`."""
	if name in headers:
		return headers[name]
	key: str = name.lower()
	if key in headers:
		return headers[key]
	else:
		normalized: str = "-".join(_.capitalize() for _ in key.strip().split("-"))
		headers[key] = normalized
		return normalized


# -----------------------------------------------------------------------------
#
# DATA MODEL
#
# -----------------------------------------------------------------------------


class HTTPResponseLine(NamedTuple):
	"""Represents a response status line"""

	protocol: str
	status: int
	message: str


class HTTPProcessingStatus(Enum):
	"""Internal parser/processor state management"""

	Processing = 0
	Body = 1
	Complete = 2
	Timeout = 10
	NoData = 11
	BadFormat = 12
	Refused = 13
	TooManyRedirects = 14


class HTTPHeaders:
	"""Multi-valued HTTP headers, keyed by normalized header name and
	preserving insertion order."""

	__slots__ = ["values"]

	def __init__(
		self, headers: "dict[str, str | list[str]] | HTTPHeaders | None" = None
	) -> None:
		self.values: dict[str, list[str]] = {}
		if isinstance(headers, HTTPHeaders):
			for k, v in headers.items():
				self.add(k, v)
		elif headers:
			for k, v in headers.items():
				for _ in [v] if isinstance(v, str) else v:
					self.add(k, _)

	def get(self, name: str, default: str | None = None) -> str | None:
		"""Returns the first value for the given header."""
		v = self.values.get(headername(name))
		return v[0] if v else default

	def getAll(self, name: str) -> list[str]:
		return list(self.values.get(headername(name), ()))

	def set(self, name: str, value: str) -> "HTTPHeaders":
		self.values[headername(name)] = [value]
		return self

	def add(self, name: str, value: str) -> "HTTPHeaders":
		self.values.setdefault(headername(name), []).append(value)
		return self

	def delete(self, name: str) -> "HTTPHeaders":
		self.values.pop(headername(name), None)
		return self

	def items(self) -> Iterator[tuple[str, str]]:
		"""Iterates on each `(name, value)`, a multi-valued header yielding
		one pair per value."""
		for k, vl in self.values.items():
			for v in vl:
				yield k, v

	def copy(self) -> "HTTPHeaders":
		return HTTPHeaders(self)

	@property
	def contentType(self) -> str | None:
		return self.get("Content-Type")

	def __contains__(self, name: object) -> bool:
		return isinstance(name, str) and headername(name) in self.values

	def __str__(self) -> str:
		return f"HTTPHeaders({self.values})"


class QueryValues:
	"""Query parameters, mapping a key to its ordered list of values."""

	__slots__ = ["values"]

	def __init__(self) -> None:
		self.values: dict[str, list[str]] = {}

	def set(self, key: str, value: str) -> "QueryValues":
		self.values[key] = [value]
		return self

	def add(self, key: str, value: str) -> "QueryValues":
		self.values.setdefault(key, []).append(value)
		return self

	def encode(self) -> str:
		"""Encodes as `application/x-www-form-urlencoded`, sorted by key."""
		return "&".join(
			f"{quote_plus(k)}={quote_plus(v)}"
			for k in sorted(self.values)
			for v in self.values[k]
		)

	def __bool__(self) -> bool:
		return bool(self.values)


# -----------------------------------------------------------------------------
#
# REQUESTS
#
# -----------------------------------------------------------------------------


class HTTPRequest:
	"""An outbound HTTP request."""

	__slots__ = ["method", "uri", "headers", "body"]

	def __init__(
		self,
		method: str,
		uri: URI,
		headers: HTTPHeaders | None = None,
		body: bytes | None = None,
	):
		self.method: str = method
		self.uri: URI = uri
		self.headers: HTTPHeaders = headers if headers is not None else HTTPHeaders()
		self.body: bytes | None = body

	def head(self, transport: HTTPHeaders | None = None) -> bytes:
		"""Serializes the request line and headers. The `transport` headers
		are managed by the connection and take precedence over the request's
		headers of the same name."""
		lines: list[str] = [f"{self.method} {self.uri.target} HTTP/1.1"]
		for k, v in self.headers.items():
			if not transport or k not in transport:
				lines.append(f"{k}: {v}")
		for k, v in transport.items() if transport else ():
			lines.append(f"{k}: {v}")
		lines.append("")
		lines.append("")
		# NOTE: Header values are expected to be latin-1 per RFC 9110
		return "\r\n".join(lines).encode("latin-1")

	def __str__(self) -> str:
		return f"Request({self.method} {self.uri} {self.headers})"


# -----------------------------------------------------------------------------
#
# RESPONSE
#
# -----------------------------------------------------------------------------


class HTTPResponse:
	"""An HTTP response with a fully loaded body."""

	__slots__ = ["protocol", "status", "message", "headers", "body"]

	def __init__(
		self,
		protocol: str,
		status: int,
		message: str | None,
		headers: HTTPHeaders,
		body: bytes = b"",
	):
		self.protocol: str = protocol
		self.status: int = status
		self.message: str | None = message
		self.headers: HTTPHeaders = headers
		self.body: bytes = body

	def __str__(self) -> str:
		return f"Response({self.protocol} {self.status} {self.message} {self.headers} {len(self.body)}b)"


# EOF
