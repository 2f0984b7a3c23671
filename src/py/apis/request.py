import asyncio
import re
from typing import Any

from . import config
from .client import DEFAULT_CLIENT, Transport
from .errors import RequestBuildError, RequestOptionsError, TransportError, URLJoinError
from .http.model import HTTPHeaders, HTTPRequest
from .options import Option, RequestParams, applyOptions
from .response import Response
from .utils.logging import error
from .utils.uri import URI, joinPath

# SEE: https://httpwg.org/specs/rfc9110.html#tokens
RE_TOKEN = re.compile(r"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
RE_INVALID_VALUE = re.compile(r"[\r\n\x00]")
SCHEMES: frozenset[str] = frozenset(("http", "https"))


def defaultHeaders(params: RequestParams) -> HTTPHeaders:
	"""The headers every request starts with, before the option headers
	are merged in."""
	res = HTTPHeaders()
	res.set("User-Agent", config.USER_AGENT)
	res.set("Accept-Encoding", "gzip")
	if params.body is not None and params.contentType:
		res.set("Content-Type", params.contentType)
	return res


def buildRequest(endpoint: URI, params: RequestParams) -> HTTPRequest:
	"""Creates the outbound request, raising `RequestBuildError` when the
	parameters can't make a valid request."""
	if not RE_TOKEN.match(params.method):
		raise RequestBuildError(f"Invalid method: {params.method!r}")
	if endpoint.scheme not in SCHEMES:
		raise RequestBuildError(f"Unsupported protocol scheme: {endpoint.scheme!r}")
	if not endpoint.host:
		raise RequestBuildError(f"Missing host in URL: {str(endpoint)!r}")
	try:
		endpoint.authority
	except UnicodeError as e:
		raise RequestBuildError(f"Invalid host in URL: {endpoint.host!r}") from e
	headers = params.mergeHeaders(defaultHeaders(params))
	for name, value in headers.items():
		if not RE_TOKEN.match(name):
			raise RequestBuildError(f"Invalid header name: {name!r}")
		if RE_INVALID_VALUE.search(value):
			raise RequestBuildError(f"Invalid value for header {name}: {value!r}")
		try:
			value.encode("latin-1")
		except UnicodeEncodeError as e:
			raise RequestBuildError(
				f"Header {name} value is not latin-1 encodable: {value!r}"
			) from e
	# Query parameters, when given, replace the query of the base URL
	uri = endpoint.derive(query=params.query.encode()) if params.query else endpoint
	return HTTPRequest(params.method, uri, headers, params.body)


async def makeRequest(
	url: str,
	*options: Option,
	client: Transport | None = None,
	timeout: float | None = None,
) -> Response:
	"""Applies the options, sends the request and returns its buffered
	response. Errors are never raised, they are logged and returned
	as the response's `err`."""
	params, errors = applyOptions(options)
	if errors:
		err = RequestOptionsError(errors)
		error("Failed to parse request options", "EOPTIONS", Error=str(err), URL=url)
		return Response.Failed(err)
	try:
		endpoint = joinPath(url, params.path)
	except ValueError as e:
		error(
			"Failed to join base server URL with path",
			"EURL",
			Error=str(e),
			URL=url,
			Path=params.path,
		)
		return Response.Failed(URLJoinError(url, params.path, e))
	try:
		request = buildRequest(endpoint, params)
	except RequestBuildError as e:
		error("Failed to create request", "EREQUEST", Error=str(e), Endpoint=str(endpoint))
		return Response.Failed(e)
	try:
		res = await (client or DEFAULT_CLIENT).send(request, timeout=timeout)
	except TransportError as e:
		error(
			"Request failed",
			"ETRANSPORT",
			Error=str(e),
			Endpoint=str(request.uri),
			Method=request.method,
		)
		return Response.Failed(e)
	return Response.FromHTTP(res)


def makeRequestSync(url: str, *options: Option, **kwargs: Any) -> Response:
	"""Runs `makeRequest` in a new event loop, for synchronous callers."""
	return asyncio.run(makeRequest(url, *options, **kwargs))


# EOF
