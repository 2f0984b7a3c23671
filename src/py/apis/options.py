from enum import Enum
from typing import Any, Iterable, NamedTuple

from .errors import OptionError
from .http.model import HTTPHeaders, QueryValues, headername
from .utils.io import asBytes
from .utils.json import json
from .utils.logging import error

# --
# Options are immutable values describing one change to the parameters of
# a request. They are created ahead of the request, and applied in order
# to a fresh `RequestParams` when the request is made. Constructors never
# raise: an option that can't be created carries its error, which is
# reported when the options are applied.

# -----------------------------------------------------------------------------
#
# PARAMETERS
#
# -----------------------------------------------------------------------------

JSON_CONTENT_TYPE: str = "application/json"


class HeaderMode(Enum):
	"""Tells how header values merge with the client's default headers."""

	Overwrite = 0
	Append = 1


class HeaderField(NamedTuple):
	values: tuple[str, ...]
	mode: HeaderMode = HeaderMode.Overwrite


class RequestParams:
	"""The parameters of a request, built up by applying options."""

	__slots__ = ["method", "path", "body", "contentType", "query", "headers"]

	def __init__(self) -> None:
		self.method: str = "GET"
		self.path: str = ""
		self.body: bytes | None = None
		self.contentType: str | None = None
		self.query: QueryValues = QueryValues()
		self.headers: dict[str, HeaderField] = {}

	def withMethod(self, method: str) -> "RequestParams":
		self.method = method.strip().upper()
		return self

	def withPath(self, path: str) -> "RequestParams":
		self.path = path
		return self

	def withBody(
		self, body: bytes | None, contentType: str | None = None
	) -> "RequestParams":
		self.body = body
		self.contentType = contentType
		return self

	def withQuery(self, key: str, value: str, append: bool = False) -> "RequestParams":
		if append:
			self.query.add(key, value)
		else:
			self.query.set(key, value)
		return self

	def withHeader(
		self, key: str, value: str, mode: HeaderMode = HeaderMode.Overwrite
	) -> "RequestParams":
		"""Sets the header value, or adds it to the existing values in
		`Append` mode. The last operation on a key decides its mode."""
		name = headername(key)
		if mode is HeaderMode.Append:
			existing = self.headers.get(name)
			self.headers[name] = HeaderField(
				(existing.values if existing else ()) + (value,), mode
			)
		else:
			self.headers[name] = HeaderField((value,), mode)
		return self

	def mergeHeaders(self, defaults: HTTPHeaders) -> HTTPHeaders:
		"""Merges the headers into a copy of `defaults`. An `Overwrite` header
		replaces the defaults of the same name, an `Append` header adds its
		values after them."""
		res = defaults.copy()
		for name, field in self.headers.items():
			if field.mode is HeaderMode.Overwrite:
				res.delete(name)
			for value in field.values:
				res.add(name, value)
		return res


# -----------------------------------------------------------------------------
#
# OPTIONS
#
# -----------------------------------------------------------------------------


class OptionKind(Enum):
	Method = "method"
	Path = "path"
	Body = "body"
	Query = "query"
	Header = "header"


class Option(NamedTuple):
	"""A deferred change to the request parameters."""

	kind: OptionKind
	key: str | None = None
	value: Any = None
	mode: HeaderMode = HeaderMode.Overwrite
	error: Exception | None = None

	@staticmethod
	def Method(method: str) -> "Option":
		return Option(OptionKind.Method, value=method)

	@staticmethod
	def Path(path: str) -> "Option":
		return Option(OptionKind.Path, value=path)

	@staticmethod
	def Body(value: Any) -> "Option":
		"""Encodes the value as JSON right away. When encoding fails, the
		option carries the error."""
		try:
			payload = json(value)
		except (TypeError, ValueError) as e:
			error("Encoding JSON data failed", "EJSON", Error=str(e))
			return Option(
				OptionKind.Body,
				key=JSON_CONTENT_TYPE,
				value=b"",
				error=OptionError("body", e),
			)
		return Option(OptionKind.Body, key=JSON_CONTENT_TYPE, value=payload)

	@staticmethod
	def Raw(data: bytes | str, contentType: str | None = None) -> "Option":
		"""Sends the data as-is, text being UTF8 encoded."""
		try:
			payload = asBytes(data)
		except ValueError as e:
			return Option(OptionKind.Body, value=b"", error=OptionError("raw", e))
		return Option(OptionKind.Body, key=contentType, value=payload)

	@staticmethod
	def QueryParam(key: str, value: str, append: bool = False) -> "Option":
		return Option(
			OptionKind.Query,
			key=key,
			value=value,
			mode=HeaderMode.Append if append else HeaderMode.Overwrite,
		)

	@staticmethod
	def Header(key: str, value: str, append: bool = False) -> "Option":
		return Option(
			OptionKind.Header,
			key=key,
			value=value,
			mode=HeaderMode.Append if append else HeaderMode.Overwrite,
		)

	def apply(self, params: RequestParams) -> RequestParams:
		if self.kind is OptionKind.Method:
			return params.withMethod(str(self.value))
		elif self.kind is OptionKind.Path:
			return params.withPath(str(self.value))
		elif self.kind is OptionKind.Body:
			return params.withBody(self.value, self.key)
		elif self.kind is OptionKind.Query:
			return params.withQuery(
				str(self.key), str(self.value), self.mode is HeaderMode.Append
			)
		elif self.kind is OptionKind.Header:
			return params.withHeader(str(self.key), str(self.value), self.mode)
		else:
			raise ValueError(f"Unsupported option kind: {self.kind}")


def applyOptions(
	options: Iterable[Option], params: RequestParams | None = None
) -> tuple[RequestParams, list[Exception]]:
	"""Applies all the options in order, returning the parameters along with
	the errors carried by the options."""
	res: RequestParams = RequestParams() if params is None else params
	errors: list[Exception] = []
	for option in options:
		if option.error is not None:
			errors.append(option.error)
		res = option.apply(res)
	return res, errors


method = Option.Method
path = Option.Path
body = Option.Body
raw = Option.Raw
query = Option.QueryParam
header = Option.Header

# EOF
