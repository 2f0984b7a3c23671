from dataclasses import fields, is_dataclass
from io import BytesIO
from typing import Any

from .errors import DecodeError
from .http.model import HTTPHeaders, HTTPResponse
from .utils.io import DEFAULT_ENCODING
from .utils.json import TJSON, unjson
from .utils.logging import warning


def populate(target: Any, value: TJSON) -> Any:
	"""Populates the target with the decoded JSON value: dicts are updated,
	lists extended, and dataclasses or objects have their matching
	attributes set. Keys with no matching attribute are ignored."""
	if isinstance(target, dict):
		if not isinstance(value, dict):
			raise DecodeError(f"Expected a JSON object, got: {type(value).__name__}")
		target.update(value)
	elif isinstance(target, list):
		if not isinstance(value, list):
			raise DecodeError(f"Expected a JSON array, got: {type(value).__name__}")
		target.extend(value)
	elif isinstance(target, type) or target is None:
		raise DecodeError(f"Can't decode into {target!r}, an instance is expected")
	elif is_dataclass(target) or hasattr(target, "__dict__"):
		if not isinstance(value, dict):
			raise DecodeError(f"Expected a JSON object, got: {type(value).__name__}")
		names: set[str] = (
			{_.name for _ in fields(target)}
			if is_dataclass(target)
			else set(getattr(type(target), "__annotations__", {})) | set(vars(target))
		)
		for k, v in value.items():
			if k not in names:
				continue
			current = getattr(target, k, None)
			if isinstance(v, dict) and (
				is_dataclass(current) or isinstance(current, dict)
			):
				populate(current, v)
			else:
				try:
					setattr(target, k, v)
				except (AttributeError, TypeError) as e:
					raise DecodeError(
						f"Can't set {k!r} on {type(target).__name__}: {e}"
					) from e
	else:
		raise DecodeError(f"Can't decode into {type(target).__name__}")
	return target


class Response:
	"""The uniform result of a request. When `err` is set, the status
	and body are not meaningful."""

	__slots__ = ["statusCode", "headers", "body", "length", "err"]

	@staticmethod
	def Failed(err: Exception) -> "Response":
		return Response(err=err)

	@staticmethod
	def FromHTTP(response: HTTPResponse) -> "Response":
		return Response(
			statusCode=response.status,
			headers=response.headers,
			body=response.body,
		)

	def __init__(
		self,
		statusCode: int = 0,
		body: bytes = b"",
		headers: HTTPHeaders | None = None,
		err: Exception | None = None,
	):
		self.statusCode: int = statusCode
		self.headers: HTTPHeaders = headers if headers is not None else HTTPHeaders()
		self.body: bytes = body
		self.length: int = len(body)
		self.err: Exception | None = err

	@property
	def ok(self) -> bool:
		return self.err is None

	def bodyLen(self) -> int:
		return self.length

	def bodyReader(self) -> BytesIO:
		"""Returns a new reader over the buffered body."""
		return BytesIO(self.body)

	def text(self, encoding: str = DEFAULT_ENCODING) -> str:
		return self.body.decode(encoding, errors="replace")

	def json(self) -> TJSON:
		"""Returns the decoded JSON body, raising the request error if any,
		or a `DecodeError` when the body is not valid JSON."""
		if self.err is not None:
			raise self.err
		try:
			return unjson(self.body)
		except ValueError as e:
			raise DecodeError(f"Invalid JSON body: {e}") from e

	def scan(self, target: Any) -> Exception | None:
		"""Decodes the JSON body into `target`, returning the request error
		without decoding if there is one, the decoding error if any, or
		`None` on success."""
		if self.err is not None:
			return self.err
		try:
			populate(target, self.json())
		except DecodeError as e:
			warning("Could not decode response body", Status=self.statusCode, Error=str(e))
			return e
		return None

	def __repr__(self) -> str:
		return (
			f"Response(error={self.err!r})"
			if self.err
			else f"Response({self.statusCode} {self.length}b)"
		)


# EOF
