import asyncio
import ssl
from abc import ABC, abstractmethod

from . import config
from .errors import TransportError
from .http.model import HTTPHeaders, HTTPProcessingStatus, HTTPRequest, HTTPResponse
from .http.parser import ParserError, ResponseParser
from .utils.logging import debug, info

# --
# A minimal async HTTP/1.1 client. Each exchange opens its own connection
# and closes it once the response is fully read, so a client holds no state
# across requests and can be shared between concurrent tasks.

# -----------------------------------------------------------------------------
#
# SSL
#
# -----------------------------------------------------------------------------

SSL_CLIENT_CONTEXT: ssl.SSLContext = ssl.create_default_context(ssl.Purpose.SERVER_AUTH)

# -----------------------------------------------------------------------------
#
# TRANSPORT
#
# -----------------------------------------------------------------------------

REDIRECT_STATUS: frozenset[int] = frozenset((301, 302, 303, 307, 308))
# Redirects with these statuses are followed with a `GET` and no body
REDIRECT_AS_GET: frozenset[int] = frozenset((301, 302, 303))
METHOD_HAS_BODY: frozenset[str] = frozenset(("POST", "PUT", "PATCH"))


class Transport(ABC):
	"""Sends a request and returns its fully read response, raising
	`TransportError` on failure."""

	@abstractmethod
	async def send(
		self, request: HTTPRequest, *, timeout: float | None = None
	) -> HTTPResponse: ...


class HTTPClient(Transport):
	def __init__(
		self,
		*,
		timeout: float | None = None,
		maxRedirects: int | None = None,
		buffer: int | None = None,
		sslContext: ssl.SSLContext | None = None,
	):
		self.timeout: float = config.TIMEOUT if timeout is None else timeout
		self.maxRedirects: int = (
			config.MAX_REDIRECTS if maxRedirects is None else maxRedirects
		)
		self.buffer: int = buffer or config.BUFFER
		self.sslContext: ssl.SSLContext = sslContext or SSL_CLIENT_CONTEXT

	async def send(
		self, request: HTTPRequest, *, timeout: float | None = None
	) -> HTTPResponse:
		"""Sends the request, following redirects. At most `maxRedirects`
		requests are sent in total."""
		current: HTTPRequest = request
		for _ in range(max(self.maxRedirects, 1)):
			res = await self.exchange(current, timeout=timeout)
			location = res.headers.get("Location")
			if res.status not in REDIRECT_STATUS or not location:
				return res
			current = self.redirect(current, res, location)
		raise TransportError(
			f"Stopped after {max(self.maxRedirects, 1)} requests: {request.uri}",
			HTTPProcessingStatus.TooManyRedirects,
		)

	def redirect(
		self, request: HTTPRequest, response: HTTPResponse, location: str
	) -> HTTPRequest:
		"""Returns the request to send to follow the redirect `response`."""
		try:
			uri = request.uri.resolve(location)
		except ValueError as e:
			raise TransportError(f"Invalid redirect location {location!r}: {e}") from e
		if uri.scheme not in ("http", "https") or not uri.host:
			raise TransportError(f"Unsupported redirect location: {location!r}")
		method: str = request.method
		body: bytes | None = request.body
		headers: HTTPHeaders = request.headers.copy()
		if response.status in REDIRECT_AS_GET and method != "HEAD":
			method = "GET"
			body = None
			headers.delete("Content-Type")
		# Credentials are not forwarded to other hosts
		if uri.host != request.uri.host:
			headers.delete("Authorization")
			headers.delete("Cookie")
		if config.LOG_REQUESTS:
			info("Following redirect", Status=response.status, Location=str(uri))
		return HTTPRequest(method, uri, headers, body)

	def transportHeaders(self, request: HTTPRequest) -> HTTPHeaders:
		"""Headers that are managed by the connection, not the caller."""
		res = HTTPHeaders()
		res.set("Host", request.uri.authority)
		if request.body is not None:
			res.set("Content-Length", str(len(request.body)))
		elif request.method in METHOD_HAS_BODY:
			res.set("Content-Length", "0")
		res.set("Connection", "close")
		return res

	async def exchange(
		self, request: HTTPRequest, *, timeout: float | None = None
	) -> HTTPResponse:
		"""Sends the request on a new connection and reads the response."""
		uri = request.uri
		t: float = self.timeout if timeout is None else timeout
		if config.LOG_REQUESTS:
			info("Request", Method=request.method, URL=str(uri))
		try:
			head: bytes = request.head(self.transportHeaders(request))
		except UnicodeError as e:
			raise TransportError(
				f"Can't encode request head for {uri}: {e}", HTTPProcessingStatus.BadFormat
			) from e
		try:
			reader, writer = await asyncio.wait_for(
				asyncio.open_connection(
					host=uri.host,
					port=uri.effectivePort,
					ssl=self.sslContext if uri.ssl else None,
				),
				timeout=t,
			)
		except asyncio.TimeoutError as e:
			raise TransportError(
				f"Connection to {uri.host}:{uri.effectivePort} timed out",
				HTTPProcessingStatus.Timeout,
			) from e
		except ConnectionRefusedError as e:
			raise TransportError(
				f"Connection to {uri.host}:{uri.effectivePort} refused: {e}",
				HTTPProcessingStatus.Refused,
			) from e
		except OSError as e:
			raise TransportError(
				f"Connection to {uri.host}:{uri.effectivePort} failed: {e}",
				HTTPProcessingStatus.NoData,
			) from e
		try:
			writer.write(head)
			if request.body:
				writer.write(request.body)
			await asyncio.wait_for(writer.drain(), timeout=t)
			parser = ResponseParser(request.method)
			read_count: int = 0
			while True:
				chunk = await asyncio.wait_for(reader.read(self.buffer), timeout=t)
				if not chunk:
					if not read_count:
						raise TransportError(
							f"Connection to {uri.host}:{uri.effectivePort} closed without response",
							HTTPProcessingStatus.NoData,
						)
					return parser.eof()
				read_count += len(chunk)
				if parser.feed(chunk) is HTTPProcessingStatus.Complete:
					return parser.response()
		except asyncio.TimeoutError as e:
			raise TransportError(
				f"Reading response from {uri} timed out", HTTPProcessingStatus.Timeout
			) from e
		except ParserError as e:
			raise TransportError(f"Malformed response from {uri}: {e}", e.status) from e
		except OSError as e:
			raise TransportError(
				f"Connection to {uri.host}:{uri.effectivePort} failed: {e}",
				HTTPProcessingStatus.NoData,
			) from e
		finally:
			writer.close()
			try:
				await writer.wait_closed()
			except OSError as e:
				# The response is already read at this point
				debug("Error while closing connection", URL=str(uri), Error=str(e))


# The client shared by all requests, unless one is given
DEFAULT_CLIENT: HTTPClient = HTTPClient()

# EOF
