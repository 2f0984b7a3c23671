import gzip

from apis.http.model import HTTPProcessingStatus
from apis.http.parser import ParserError, ResponseParser
from apis.utils.codec import ChunkedDecoder
from apis.utils.io import LineParser


def feed(parser: ResponseParser, *chunks: bytes) -> HTTPProcessingStatus:
	status = HTTPProcessingStatus.Processing
	for chunk in chunks:
		status = parser.feed(chunk)
	return status


def test_line_parser_split_eol():
	parser = LineParser()
	assert parser.feed(b"HTTP/1.1 200 OK\r") == (None, 16)
	line, read = parser.feed(b"\nHost: x")
	assert line == b"HTTP/1.1 200 OK"
	assert read == 1


def test_content_length_across_chunks():
	parser = ResponseParser()
	status = feed(
		parser,
		b"HTTP/1.1 404 Not ",
		b"Found\r\nContent-Type: application/json\r\nContent-Le",
		b'ngth: 19\r\n\r\n{"msg":"not',
		b' found"}',
	)
	assert status is HTTPProcessingStatus.Complete
	res = parser.response()
	assert res.status == 404
	assert res.message == "Not Found"
	assert res.headers.contentType == "application/json"
	assert res.body == b'{"msg":"not found"}'


def test_chunked_body():
	parser = ResponseParser()
	status = feed(
		parser,
		b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n",
		b"5\r\nhello\r\n6;ext=1\r\n world\r\n",
		b"0\r\nX-Trailer: 1\r\n\r\n",
	)
	assert status is HTTPProcessingStatus.Complete
	assert parser.response().body == b"hello world"


def test_gzip_body():
	payload = gzip.compress(b'{"a":1}')
	parser = ResponseParser()
	feed(
		parser,
		b"HTTP/1.1 200 OK\r\nContent-Encoding: gzip\r\n",
		f"Content-Length: {len(payload)}\r\n\r\n".encode(),
		payload,
	)
	assert parser.response().body == b'{"a":1}'


def test_body_until_close():
	parser = ResponseParser()
	status = feed(parser, b"HTTP/1.0 200 OK\r\n\r\nsome", b" data")
	assert status is HTTPProcessingStatus.Body
	assert parser.eof().body == b"some data"


def test_no_body_responses():
	parser = ResponseParser()
	assert feed(parser, b"HTTP/1.1 204 No Content\r\n\r\n") is HTTPProcessingStatus.Complete
	parser = ResponseParser("HEAD")
	status = feed(parser, b"HTTP/1.1 200 OK\r\nContent-Length: 100\r\n\r\n")
	assert status is HTTPProcessingStatus.Complete
	assert parser.response().body == b""


def test_informational_response_skipped():
	parser = ResponseParser()
	feed(
		parser,
		b"HTTP/1.1 100 Continue\r\n\r\nHTTP/1.1 201 Created\r\nContent-Length: 2\r\n\r\nok",
	)
	res = parser.response()
	assert res.status == 201
	assert res.body == b"ok"


def test_multi_valued_headers():
	parser = ResponseParser()
	feed(parser, b"HTTP/1.1 200 OK\r\nSet-Cookie: a=1\r\nset-cookie: b=2\r\nContent-Length: 0\r\n\r\n")
	assert parser.response().headers.getAll("Set-Cookie") == ["a=1", "b=2"]


def test_malformed():
	for data in (b"NOT HTTP\r\n", b"HTTP/1.1 abc OK\r\n", b"HTTP/1.1 200 OK\r\nbad header\r\n"):
		try:
			ResponseParser().feed(data)
		except ParserError as e:
			assert e.status is HTTPProcessingStatus.BadFormat
		else:
			raise AssertionError(f"Expected {data!r} to fail")
	parser = ResponseParser()
	feed(parser, b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\nshort")
	try:
		parser.eof()
	except ParserError:
		pass
	else:
		raise AssertionError("Expected a truncated body to fail")


def test_chunked_decoder_malformed():
	decoder = ChunkedDecoder()
	assert decoder.feed(b"zz\r\n") is False
	decoder = ChunkedDecoder()
	assert decoder.feed(b"3\r\nabc") is None
	assert decoder.flush() is False


# EOF
