DEFAULT_ENCODING: str = "utf8"
EOL: bytes = b"\r\n"
# Maximum length of a status or header line
LINE_LIMIT: int = 64_000


def asBytes(value: str | bytes | bytearray | None) -> bytes:
	if isinstance(value, bytes):
		return value
	elif isinstance(value, bytearray):
		return bytes(value)
	elif isinstance(value, str):
		return value.encode(DEFAULT_ENCODING)
	elif value is None:
		return b""
	else:
		raise ValueError(f"Expected bytes or str, got: {value}")


class LineParser:
	"""Accumulates fed bytes until an end of line is found."""

	__slots__ = ["buffer", "offset", "eol", "eolsize", "limit"]

	def __init__(self, eol: bytes = EOL, limit: int = LINE_LIMIT) -> None:
		self.buffer: bytearray = bytearray()
		self.offset: int = 0
		self.eol: bytes = eol
		self.eolsize: int = len(eol)
		self.limit: int = limit

	def reset(self) -> "LineParser":
		self.buffer.clear()
		self.offset = 0
		return self

	def feed(self, chunk: bytes, start: int = 0) -> tuple[bytes | None, int]:
		"""Returns the line (without its end of line) and how many bytes were
		read from `chunk` starting at `start`. When the line is `None`, the
		whole chunk was consumed without finding an end of line."""
		pos = len(self.buffer)
		self.buffer += chunk[start:]
		end = self.buffer.find(self.eol, self.offset)
		if end == -1:
			if len(self.buffer) > self.limit:
				raise ValueError(f"Line exceeds {self.limit} bytes")
			# The end of line may be split across chunks
			self.offset = max(0, len(self.buffer) - self.eolsize + 1)
			return None, len(chunk) - start
		else:
			line = bytes(self.buffer[:end])
			self.reset()
			return line, (end - pos) + self.eolsize


# EOF
