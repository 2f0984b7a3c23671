from typing import Iterable

from .http.model import HTTPProcessingStatus

# -----------------------------------------------------------------------------
#
# ERRORS
#
# -----------------------------------------------------------------------------


class APIError(Exception):
	"""Base class for all the errors reported by requests."""


class OptionError(APIError):
	"""An option could not be created, typically because its body could
	not be encoded as JSON."""

	def __init__(self, option: str, cause: Exception):
		super().__init__(f"Invalid {option} option: {cause}")
		self.option: str = option
		self.cause: Exception = cause


class RequestOptionsError(APIError):
	"""Aggregates the errors of all the options applied to a request."""

	def __init__(self, errors: Iterable[Exception]):
		self.errors: list[Exception] = list(errors)
		super().__init__(
			"; ".join(str(_) for _ in self.errors) or "Invalid request options"
		)


class URLJoinError(APIError):
	def __init__(self, url: str, path: str, cause: Exception):
		super().__init__(f"Could not join URL {url!r} with path {path!r}: {cause}")
		self.url: str = url
		self.path: str = path
		self.cause: Exception = cause


class RequestBuildError(APIError):
	"""The request could not be created from its parameters."""


class TransportError(APIError):
	"""The request failed to be sent or its response failed to be read."""

	def __init__(
		self,
		message: str,
		status: HTTPProcessingStatus = HTTPProcessingStatus.BadFormat,
	):
		super().__init__(message)
		self.status: HTTPProcessingStatus = status


class DecodeError(APIError):
	"""The response body could not be decoded into the given target."""


# EOF
