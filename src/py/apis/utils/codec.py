import zlib
from abc import ABC, abstractmethod
from typing import Literal


class BytesTransform(ABC):
	"""An abstract bytes transform."""

	@abstractmethod
	def feed(self, chunk: bytes) -> bytes | None | Literal[False]:
		"""Feeds bytes to the transform, may return a value. `False` denotes
		malformed input."""

	@abstractmethod
	def flush(self) -> bytes | None | Literal[False]:
		"""Returns any data still held by the transform."""


class GZipDecoder(BytesTransform):
	"""Decodes gzip or zlib wrapped deflate streams."""

	__slots__ = ["decompressor"]

	def __init__(self) -> None:
		super().__init__()
		# NOTE: 32 enables automatic gzip/zlib header detection
		self.decompressor = zlib.decompressobj(wbits=zlib.MAX_WBITS | 32)

	def feed(self, chunk: bytes) -> bytes | None | Literal[False]:
		try:
			return self.decompressor.decompress(chunk)
		except zlib.error:
			return False

	def flush(self) -> bytes | None | Literal[False]:
		try:
			return self.decompressor.flush()
		except zlib.error:
			return False


# SEE: https://httpwg.org/specs/rfc9112.html#chunked.encoding
class ChunkedDecoder(BytesTransform):
	"""Decodes a chunked transfer encoding. `complete` is set once the
	last chunk and its trailers have been read."""

	__slots__ = ["buffer", "chunkSize", "readingSize", "inTrailer", "complete"]

	def __init__(self) -> None:
		super().__init__()
		self.buffer = bytearray()
		self.chunkSize = 0
		self.readingSize = True
		self.inTrailer = False
		self.complete = False

	def feed(self, chunk: bytes) -> bytes | None | Literal[False]:
		if self.complete:
			return None
		self.buffer.extend(chunk)
		res = bytearray()
		while self.buffer:
			if self.inTrailer:
				# Trailer fields are skipped up to the empty line
				i = self.buffer.find(b"\r\n")
				if i == -1:
					break
				line = self.buffer[:i]
				del self.buffer[: i + 2]
				if not line:
					self.complete = True
					self.buffer.clear()
					break
			elif self.readingSize:
				i = self.buffer.find(b"\r\n")
				if i == -1:
					break
				# Chunk extensions are ignored
				size_line = bytes(self.buffer[:i]).split(b";", 1)[0].strip()
				try:
					self.chunkSize = int(size_line, 16)
				except ValueError:
					return False
				del self.buffer[: i + 2]
				if self.chunkSize == 0:
					self.inTrailer = True
				else:
					self.readingSize = False
			else:
				if len(self.buffer) < self.chunkSize + 2:
					break
				if self.buffer[self.chunkSize : self.chunkSize + 2] != b"\r\n":
					return False
				res.extend(self.buffer[: self.chunkSize])
				del self.buffer[: self.chunkSize + 2]
				self.readingSize = True
		return bytes(res) if res else None

	def flush(self) -> bytes | None | Literal[False]:
		# An incomplete chunked body is malformed
		return None if self.complete else False


# EOF
