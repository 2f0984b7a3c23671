from .config import VERSION as __version__  # NOQA: F401
from .client import DEFAULT_CLIENT, HTTPClient, Transport  # NOQA: F401
from .errors import (  # NOQA: F401
	APIError,
	DecodeError,
	OptionError,
	RequestBuildError,
	RequestOptionsError,
	TransportError,
	URLJoinError,
)
from .options import (  # NOQA: F401
	HeaderMode,
	Option,
	RequestParams,
	body,
	header,
	method,
	path,
	query,
	raw,
)
from .request import makeRequest, makeRequestSync  # NOQA: F401
from .response import Response  # NOQA: F401

# EOF
