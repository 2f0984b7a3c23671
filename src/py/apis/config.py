from os import getenv

from .utils.io import DEFAULT_ENCODING  # NOQA: F401

VERSION: str = "1.0.0"

# Default timeout (in seconds) for connecting and for each read
TIMEOUT: float = float(getenv("APIS_TIMEOUT", 10.0))

USER_AGENT: str = getenv("APIS_USER_AGENT", f"apis/{VERSION}")

MAX_REDIRECTS: int = int(getenv("APIS_MAX_REDIRECTS", 10))

BUFFER: int = int(getenv("APIS_BUFFER", 64_000))

LOG_REQUESTS: bool = getenv("APIS_LOG_REQUESTS", "0") == "1"

# EOF
