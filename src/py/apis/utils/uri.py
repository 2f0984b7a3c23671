from __future__ import annotations

import posixpath
from urllib.parse import quote, urlsplit

# Characters that are kept as-is when escaping a path, `%` included so that
# already escaped paths are left untouched.
PATH_SAFE: str = "/:@!$&'()*+,;=-._~%"


class URI:
	__slots__ = (
		"scheme",
		"netloc",
		"host",
		"port",
		"path",
		"query",
		"fragment",
	)

	@classmethod
	def Parse(cls, link: URI | str) -> URI:
		"""Parses the given link, raising a `ValueError` when it is malformed."""
		if isinstance(link, URI):
			return link
		if not isinstance(link, str):
			raise ValueError(f"Expected an URL string, got: {type(link).__name__}")
		if any(ord(c) < 0x20 or c == "\x7f" for c in link):
			raise ValueError(f"Invalid control character in URL: {link!r}")
		if link.startswith(":"):
			raise ValueError(f"Missing protocol scheme in URL: {link!r}")
		res = urlsplit(link)
		# NOTE: Accessing the port validates it
		port = res.port
		return URI(
			scheme=res.scheme or None,
			netloc=res.netloc or None,
			host=res.hostname,
			port=port,
			path=res.path,
			query=res.query or None,
			fragment=res.fragment or None,
		)

	def __init__(
		self,
		*,
		scheme: str | None = None,
		netloc: str | None = None,
		host: str | None = None,
		port: int | None = None,
		path: str = "",
		query: str | None = None,
		fragment: str | None = None,
	):
		self.scheme = scheme
		self.netloc = netloc
		self.host = host
		self.port = port
		self.path = path
		self.query = query
		self.fragment = fragment

	@property
	def ssl(self) -> bool:
		return self.scheme == "https"

	@property
	def effectivePort(self) -> int:
		return self.port if self.port else 443 if self.ssl else 80

	@property
	def authority(self) -> str:
		"""The `host[:port]` value of the `Host` header, with user info
		dropped and internationalized names converted to ASCII."""
		host: str = self.host or ""
		if ":" in host:
			host = f"[{host}]"
		elif not host.isascii():
			host = host.encode("idna").decode("ascii")
		return f"{host}:{self.port}" if self.port else host

	@property
	def target(self) -> str:
		"""The request target, as found in an HTTP request line."""
		p = quote(self.path, safe=PATH_SAFE) or "/"
		if not p.startswith("/"):
			p = f"/{p}"
		return f"{p}?{self.query}" if self.query else p

	def derive(
		self,
		*,
		path: str | None = None,
		query: str | None = None,
		fragment: str | None = None,
	) -> URI:
		return URI(
			scheme=self.scheme,
			netloc=self.netloc,
			host=self.host,
			port=self.port,
			path=self.path if path is None else path,
			query=self.query if query is None else query or None,
			fragment=self.fragment if fragment is None else fragment or None,
		)

	def resolve(self, location: str) -> URI:
		"""Resolves a (possibly relative) location against this URI, as
		done for redirects."""
		loc = URI.Parse(location)
		if loc.scheme and loc.netloc:
			return loc
		elif location.startswith("//"):
			return URI.Parse(f"{self.scheme}:{location}")
		elif loc.path.startswith("/"):
			return self.derive(path=cleanPath(loc.path), query=loc.query or "", fragment="")
		else:
			base = self.path.rsplit("/", 1)[0] if "/" in self.path else ""
			return self.derive(
				path=cleanPath(f"{base}/{loc.path}") if loc.path else self.path,
				query=loc.query or ("" if loc.path else self.query or ""),
				fragment="",
			)

	def __repr__(self) -> str:
		return f"URI({self})"

	def __str__(self) -> str:
		res: list[str] = []
		if self.scheme:
			res.append(self.scheme)
			res.append(":")
		if self.netloc:
			res.append("//")
			res.append(self.netloc)
		if self.path:
			p = quote(self.path, safe=PATH_SAFE)
			res.append(f"/{p}" if self.netloc and not p.startswith("/") else p)
		if self.query:
			res.append("?")
			res.append(self.query)
		if self.fragment:
			res.append("#")
			res.append(self.fragment)
		return "".join(res)


def cleanPath(path: str) -> str:
	"""Normalizes an absolute path, resolving `.` and `..` segments and
	collapsing repeated slashes."""
	res = posixpath.normpath(path) if path else "/"
	# NOTE: POSIX preserves a leading `//`, URLs don't
	return f"/{res.lstrip('/')}" if res.startswith("//") else res


def joinPath(base: URI | str, *elements: str) -> URI:
	"""Joins the path elements to the base URL path. Empty elements are
	skipped, the result is cleaned and a trailing slash on the last element
	is preserved. Query and fragment of the base are kept."""
	uri = URI.Parse(base)
	parts: list[str] = [uri.path, *elements]
	relative: bool = not parts[0].startswith("/")
	joined = cleanPath("/" + "/".join(_ for _ in parts if _))
	p = joined[1:] if relative else joined
	if parts[-1].endswith("/") and not p.endswith("/"):
		p += "/"
	return uri.derive(path=p)


# EOF
