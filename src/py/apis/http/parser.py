from enum import Enum

from ..utils.codec import BytesTransform, ChunkedDecoder, GZipDecoder
from ..utils.io import LineParser
from .model import (
	HTTPHeaders,
	HTTPProcessingStatus,
	HTTPResponse,
	HTTPResponseLine,
)

# Statuses that never carry a body
NO_BODY_STATUS: frozenset[int] = frozenset((204, 304))


class ParserError(ValueError):
	def __init__(self, message: str):
		super().__init__(message)
		self.status = HTTPProcessingStatus.BadFormat


class ParserState(Enum):
	Line = 0
	Headers = 1
	Body = 2
	Complete = 3


def parseResponseLine(line: bytes) -> HTTPResponseLine:
	try:
		ln = line.decode("ascii")
		protocol, rest = ln.split(" ", 1)
		status, _, message = rest.partition(" ")
		if not protocol.startswith("HTTP/"):
			raise ValueError(protocol)
		return HTTPResponseLine(protocol, int(status), message.strip())
	except ValueError as e:
		raise ParserError(f"Malformed response line: {line!r}") from e


def parseHeader(line: bytes) -> tuple[str, str]:
	ln = line.decode("latin-1")
	i = ln.find(":")
	if i <= 0:
		raise ParserError(f"Malformed header line: {line!r}")
	return ln[:i].strip(), ln[i + 1 :].strip()


class ResponseParser:
	"""A stateful HTTP/1.1 response parser. Bytes are fed as they are read
	from the connection, and `feed` returns `Complete` once the response
	is fully read. Bodies are delimited by `Content-Length`, by the chunked
	transfer encoding or by the connection being closed (see `eof`)."""

	def __init__(self, method: str = "GET") -> None:
		self.method: str = method
		self.state: ParserState = ParserState.Line
		self.line: LineParser = LineParser()
		self.responseLine: HTTPResponseLine | None = None
		self.headers: HTTPHeaders = HTTPHeaders()
		self.body: bytearray = bytearray()
		self.expected: int | None = None
		self.chunked: ChunkedDecoder | None = None
		self.encoding: BytesTransform | None = None

	def feed(self, chunk: bytes) -> HTTPProcessingStatus:
		offset: int = 0
		size: int = len(chunk)
		while offset < size and self.state is not ParserState.Complete:
			if self.state is ParserState.Body:
				self._feedBody(chunk[offset:] if offset else chunk)
				offset = size
				continue
			try:
				ln, read = self.line.feed(chunk, offset)
			except ValueError as e:
				raise ParserError(str(e)) from e
			offset += read
			if ln is None:
				break
			elif self.state is ParserState.Line:
				line = parseResponseLine(ln)
				# Informational responses are skipped, the final one follows
				if 100 <= line.status < 200:
					self.state = ParserState.Headers
					self.responseLine = None
				else:
					self.responseLine = line
					self.state = ParserState.Headers
			elif ln:
				if self.responseLine is not None:
					self.headers.add(*parseHeader(ln))
			elif self.responseLine is None:
				# End of an informational response
				self.state = ParserState.Line
			else:
				self._startBody()
		return (
			HTTPProcessingStatus.Complete
			if self.state is ParserState.Complete
			else HTTPProcessingStatus.Body
			if self.state is ParserState.Body
			else HTTPProcessingStatus.Processing
		)

	def eof(self) -> HTTPResponse:
		"""Signals that the connection was closed, returning the response
		if it is complete, which is the case for bodies that are read
		until the connection closes."""
		if self.state is ParserState.Body and self.expected is None and not self.chunked:
			self._complete()
		if self.state is not ParserState.Complete:
			raise ParserError(f"Connection closed while parsing response {self.state.name}")
		return self.response()

	def response(self) -> HTTPResponse:
		if self.responseLine is None or self.state is not ParserState.Complete:
			raise ParserError("Response is not complete")
		body = bytes(self.body)
		if self.encoding:
			decoded = self.encoding.feed(body) if body else b""
			rest = self.encoding.flush()
			if decoded is False or rest is False:
				raise ParserError(
					f"Malformed {self.headers.get('Content-Encoding')} body"
				)
			body = (decoded or b"") + (rest or b"")
		return HTTPResponse(
			protocol=self.responseLine.protocol,
			status=self.responseLine.status,
			message=self.responseLine.message,
			headers=self.headers,
			body=body,
		)

	def _startBody(self) -> None:
		status = self.responseLine.status if self.responseLine else 0
		encoding = (self.headers.get("Content-Encoding") or "").strip().lower()
		if encoding in ("gzip", "x-gzip", "deflate"):
			self.encoding = GZipDecoder()
		if self.method == "HEAD" or status in NO_BODY_STATUS:
			self._complete()
		elif "chunked" in (self.headers.get("Transfer-Encoding") or "").lower():
			self.chunked = ChunkedDecoder()
			self.state = ParserState.Body
		elif (length := self.headers.get("Content-Length")) is not None:
			try:
				self.expected = int(length)
			except ValueError as e:
				raise ParserError(f"Invalid Content-Length: {length!r}") from e
			if self.expected < 0:
				raise ParserError(f"Invalid Content-Length: {length!r}")
			self.state = ParserState.Body
			if self.expected == 0:
				self._complete()
		else:
			self.state = ParserState.Body

	def _feedBody(self, chunk: bytes) -> None:
		if self.chunked:
			data = self.chunked.feed(chunk)
			if data is False:
				raise ParserError("Malformed chunked body")
			elif data:
				self.body += data
			if self.chunked.complete:
				self._complete()
		elif self.expected is not None:
			self.body += chunk[: self.expected - len(self.body)]
			if len(self.body) >= self.expected:
				self._complete()
		else:
			self.body += chunk

	def _complete(self) -> None:
		self.state = ParserState.Complete


# EOF
