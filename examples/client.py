import asyncio
import sys

from apis import header, makeRequest, path, query
from apis.utils.logging import info

"""
API Client Example

Sends a GET request built from options and prints the decoded response.

Usage:
    python client.py [BASE_URL] [PATH]
    python client.py https://httpbin.org anything
    python client.py http://localhost:8000/api time

Default: https://httpbin.org get
"""


async def main(base: str, p: str) -> int:
	res = await makeRequest(
		base,
		path(p),
		query("page", "1"),
		query("tag", "a"),
		query("tag", "b", True),
		header("Accept", "application/json"),
		header("X-Example", "1", True),
	)
	if res.err:
		info("Request failed", Error=str(res.err))
		return 1
	data: dict = {}
	if res.scan(data) is not None:
		info("Response is not JSON", Status=res.statusCode, Size=res.bodyLen())
		return 1
	info("Response received", Status=res.statusCode, Size=res.bodyLen(), Keys=list(data))
	return 0


if __name__ == "__main__":
	base = sys.argv[1] if len(sys.argv) > 1 else "https://httpbin.org"
	p = sys.argv[2] if len(sys.argv) > 2 else "get"
	sys.exit(asyncio.run(main(base, p)))

# EOF
