from enum import Enum


class ErrorKind(str, Enum):
    RATE_LIMITED = "RATE_LIMITED"
    NOT_FOUND = "NOT_FOUND"
    API_ERROR = "API_ERROR"
    MALFORMED_RESPONSE = "MALFORMED_RESPONSE"
    OVERSIZED_RESPONSE = "OVERSIZED_RESPONSE"
    DISALLOWED_TARGET = "DISALLOWED_TARGET"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"


class FetchError(Exception):
    """
    Base class for failures raised while talking to the GitHub API.
    Subclasses set `kind` so callers can pick a message without isinstance chains.
    """

    kind = None

    def __init__(self, detail=""):
        super().__init__(detail)
        self.detail = detail


class RateLimited(FetchError):
    kind = ErrorKind.RATE_LIMITED


class NotFound(FetchError):
    kind = ErrorKind.NOT_FOUND


class ApiError(FetchError):
    kind = ErrorKind.API_ERROR

    def __init__(self, detail="", status=None):
        super().__init__(detail)
        self.status = status


class MalformedResponse(FetchError):
    kind = ErrorKind.MALFORMED_RESPONSE


class OversizedResponse(FetchError):
    kind = ErrorKind.OVERSIZED_RESPONSE


class DisallowedTarget(FetchError):
    kind = ErrorKind.DISALLOWED_TARGET


class TransportError(FetchError):
    kind = ErrorKind.TRANSPORT_ERROR
