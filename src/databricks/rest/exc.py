import json
import logging
from typing import Any, Dict, Optional, Type

logger = logging.getLogger(__name__)

__all__ = [
    "Error",
    "ConfigurationError",
    "TransportError",
    "RequestTimeoutError",
    "SerializationError",
    "ApiError",
    "BadRequestError",
    "UnauthorizedError",
    "PermissionDeniedError",
    "NotFoundError",
    "RequestLimitExceededError",
    "InternalServerError",
    "TemporarilyUnavailableError",
]


class Error(Exception):
    """Base class for every error raised by the REST client.
    `message`: A short, user-facing description of the failure
    `context`: Optional extra context about the error. MUST be JSON serializable
    """

    def __init__(self, message=None, context=None, *args, **kwargs):
        super().__init__(message, *args, **kwargs)
        self.message = message
        self.context = context or {}

    def __str__(self):
        return self.message

    def message_with_context(self):
        return self.message + ": " + json.dumps(self.context, default=str)


class ConfigurationError(Error):
    """Thrown if a required configuration value is missing or empty.
    Raised before any network activity takes place.
    """

    pass


class TransportError(Error):
    """Thrown if the HTTP exchange could not be completed (DNS, connect, TLS, read).
    Its context will have the following keys:
    "method": The HTTP method of the failed request (if available)
    "path": The API path of the failed request (if available)
    "original-exception": The Python level original exception
    """

    def __init__(self, message=None, original_exception=None, context=None):
        context = dict(context or {})
        if original_exception is not None:
            context.setdefault("original-exception", repr(original_exception))
        super().__init__(message, context)
        self.original_exception = original_exception


class RequestTimeoutError(TransportError):
    """Thrown if the request did not complete within the configured timeout"""


class SerializationError(Error):
    """Thrown if a request body cannot be encoded or a response body cannot be
    decoded into the expected shape. `field` names the offending path when known.
    """

    def __init__(self, message=None, field=None, context=None):
        context = dict(context or {})
        if field is not None:
            context.setdefault("field", field)
        super().__init__(message, context)
        self.field = field


class ApiError(Error):
    """Thrown if the server answered with a non-success HTTP status.
    Its context will have the following keys:
    "http-code": HTTP response code
    "error-code": Error code reported by the server (or "UNKNOWN")
    """

    def __init__(
        self,
        message=None,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
        context=None,
    ):
        context = dict(context or {})
        context.setdefault("http-code", status_code)
        context.setdefault("error-code", error_code)
        super().__init__(message, context)
        self.status_code = status_code
        self.error_code = error_code

    @classmethod
    def from_response(
        cls,
        status_code: int,
        error_code: Optional[str],
        message: Optional[str],
        context: Optional[Dict[str, Any]] = None,
    ) -> "ApiError":
        """Build the ApiError subclass matching the server error code, falling back to the status."""
        error_cls = _ERROR_CODE_TO_CLASS.get(error_code or "")
        if error_cls is None:
            error_cls = _error_class_for_status(status_code)
        return error_cls(
            message or f"Unknown error with status code: {status_code}",
            status_code=status_code,
            error_code=error_code,
            context=context,
        )


class BadRequestError(ApiError):
    """Thrown on BAD_REQUEST / INVALID_PARAMETER_VALUE or HTTP 400"""


class UnauthorizedError(ApiError):
    """Thrown on UNAUTHORIZED or HTTP 401"""


class PermissionDeniedError(ApiError):
    """Thrown on PERMISSION_DENIED or HTTP 403"""


class NotFoundError(ApiError):
    """Thrown on NOT_FOUND / RESOURCE_DOES_NOT_EXIST or HTTP 404"""


class RequestLimitExceededError(ApiError):
    """Thrown on REQUEST_LIMIT_EXCEEDED or HTTP 429"""


class InternalServerError(ApiError):
    """Thrown on INTERNAL_SERVER_ERROR or any other HTTP 5xx"""


class TemporarilyUnavailableError(ApiError):
    """Thrown on TEMPORARILY_UNAVAILABLE or HTTP 503"""


_ERROR_CODE_TO_CLASS: Dict[str, Type[ApiError]] = {
    "BAD_REQUEST": BadRequestError,
    "INVALID_PARAMETER_VALUE": BadRequestError,
    "UNAUTHORIZED": UnauthorizedError,
    "PERMISSION_DENIED": PermissionDeniedError,
    "NOT_FOUND": NotFoundError,
    "RESOURCE_DOES_NOT_EXIST": NotFoundError,
    "REQUEST_LIMIT_EXCEEDED": RequestLimitExceededError,
    "INTERNAL_SERVER_ERROR": InternalServerError,
    "TEMPORARILY_UNAVAILABLE": TemporarilyUnavailableError,
}

_STATUS_TO_CLASS: Dict[int, Type[ApiError]] = {
    400: BadRequestError,
    401: UnauthorizedError,
    403: PermissionDeniedError,
    404: NotFoundError,
    429: RequestLimitExceededError,
    503: TemporarilyUnavailableError,
}


def _error_class_for_status(status_code: int) -> Type[ApiError]:
    if status_code in _STATUS_TO_CLASS:
        return _STATUS_TO_CLASS[status_code]
    if 500 <= status_code < 600:
        return InternalServerError
    return ApiError
