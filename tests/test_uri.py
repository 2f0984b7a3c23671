from apis.utils.uri import URI, cleanPath, joinPath

JOINS = {
	("http://host", ""): "http://host",
	("http://host", "users"): "http://host/users",
	("http://host/", "users"): "http://host/users",
	("http://host/api", "/users"): "http://host/api/users",
	("http://host/api/", "users/"): "http://host/api/users/",
	("http://host/api", "a//b/../c"): "http://host/api/a/c",
	("http://host/api", "../../.."): "http://host/",
	("http://host:8080/api?k=v", "x"): "http://host:8080/api/x?k=v",
	("http://host", "a b"): "http://host/a%20b",
}


def test_join_path():
	for (base, p), expected in JOINS.items():
		res = str(joinPath(base, p))
		assert res == expected, f"joinPath({base!r}, {p!r}) = {res!r}, expected {expected!r}"


def test_join_path_malformed():
	for url in ("http://[::1", "http://host:99999", ":no-scheme", "http://host/\x00"):
		try:
			joinPath(url, "x")
		except ValueError:
			pass
		else:
			raise AssertionError(f"Expected {url!r} to be rejected")


def test_clean_path():
	assert cleanPath("") == "/"
	assert cleanPath("//a//b/") == "/a/b"
	assert cleanPath("/a/./b/..") == "/a"


def test_parse():
	uri = URI.Parse("https://user@example.com:8443/p?q=1#f")
	assert uri.ssl
	assert uri.host == "example.com"
	assert uri.effectivePort == 8443
	assert uri.target == "/p?q=1"
	assert uri.authority == "example.com:8443"
	assert URI.Parse("http://[::1]:8000/").host == "::1"
	assert URI.Parse("http://example.com").effectivePort == 80


def test_resolve():
	base = URI.Parse("http://host/a/b?x=1")
	assert str(base.resolve("/c")) == "http://host/c"
	assert str(base.resolve("c?y=2")) == "http://host/a/c?y=2"
	assert str(base.resolve("https://other/d")) == "https://other/d"
	assert str(base.resolve("//other/e")) == "http://other/e"


# EOF
