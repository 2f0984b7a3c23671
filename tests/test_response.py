from dataclasses import dataclass, field

from apis import DecodeError, Response, TransportError


@dataclass
class Message:
	msg: str = ""
	code: int = 0


@dataclass
class Page:
	items: list = field(default_factory=list)
	meta: dict = field(default_factory=dict)
	message: Message = field(default_factory=Message)


def test_scan_dataclass():
	res = Response(404, b'{"msg":"not found","extra":true}')
	target = Message()
	assert res.scan(target) is None
	assert target.msg == "not found"
	assert not hasattr(target, "extra")
	assert res.statusCode == 404
	assert res.err is None
	assert res.bodyLen() == len(res.body) == 32


def test_scan_nested():
	res = Response(200, b'{"items":[1,2],"meta":{"n":2},"message":{"code":7}}')
	page = Page()
	assert res.scan(page) is None
	assert page.items == [1, 2]
	assert page.meta == {"n": 2}
	assert page.message.code == 7


def test_scan_containers():
	res = Response(200, b'{"a":1}')
	target: dict = {"b": 2}
	assert res.scan(target) is None
	assert target == {"a": 1, "b": 2}
	items: list = [0]
	assert Response(200, b"[1,2]").scan(items) is None
	assert items == [0, 1, 2]
	assert isinstance(Response(200, b"[1]").scan({}), DecodeError)


def test_scan_objects():
	class Target:
		name: str

		def __init__(self) -> None:
			self.count = 0

	t = Target()
	assert Response(200, b'{"name":"n","count":3,"other":1}').scan(t) is None
	assert t.name == "n"
	assert t.count == 3
	assert not hasattr(t, "other")
	assert isinstance(Response(200, b"{}").scan(Target), DecodeError)


@dataclass(frozen=True)
class Frozen:
	msg: str = ""


def test_scan_read_only_targets():
	res = Response(200, b'{"msg":"hello","size":3}')
	frozen = Frozen()
	err = res.scan(frozen)
	assert isinstance(err, DecodeError)
	assert frozen.msg == ""

	class Computed:
		size: int

		def __init__(self) -> None:
			self.msg = ""

		@property  # type: ignore[no-redef]
		def size(self) -> int:
			return len(self.msg)

	computed = Computed()
	assert isinstance(res.scan(computed), DecodeError)


def test_scan_malformed():
	for body in (b"", b"not json", b'{"a":', b"\xff\xfe"):
		err = Response(200, body).scan({})
		assert isinstance(err, DecodeError), body


def test_scan_returns_stored_error():
	err = TransportError("refused")
	res = Response.Failed(err)
	assert res.scan({}) is err
	assert not res.ok
	try:
		res.json()
	except TransportError as e:
		assert e is err
	else:
		raise AssertionError("Expected the stored error to be raised")


def test_body_reader_is_rereadable():
	res = Response(200, b"payload")
	assert res.bodyReader().read() == b"payload"
	assert res.bodyReader().read() == b"payload"
	assert res.text() == "payload"


# EOF
