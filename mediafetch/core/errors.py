"""Error kinds surfaced by catalog providers."""

from enum import Enum


class ErrorKind(str, Enum):
    """Tag delivered alongside a failure."""

    TRANSPORT_FAILURE = "transport_failure"
    EMPTY_RESPONSE = "empty_response"
    MALFORMED_ENVELOPE = "malformed_envelope"
    EMPTY_RESULT = "empty_result"
    # Never delivered: a cancelled call stays silent.
    CANCELLED = "cancelled"


class MediaFetchError(Exception):
    """Base class for failures reported to a provider callback."""

    kind: ErrorKind

    def __init__(self, message: str, original_exception: Exception | None = None):
        super().__init__(message)
        self.original_exception = original_exception


class TransportFailure(MediaFetchError):
    """Connection error, timeout or non-2xx status. Triggers mirror failover."""

    kind = ErrorKind.TRANSPORT_FAILURE


class EmptyResponse(MediaFetchError):
    """The request succeeded but the body was empty."""

    kind = ErrorKind.EMPTY_RESPONSE


class MalformedEnvelope(MediaFetchError):
    """The body could not be decoded into the shape the source uses."""

    kind = ErrorKind.MALFORMED_ENVELOPE


class EmptyResult(MediaFetchError):
    """Normalization produced nothing where at least one item was expected."""

    kind = ErrorKind.EMPTY_RESULT
