"""Full error hierarchy for notionbridge.

Every public error class inherits from NotionBridgeError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Upstream conditions reported by the Notion API form a closed family under
:class:`NotionError`.  Local failures (unknown sources, property codec
failures) are distinct kinds that never come from the wire.

Error codes are defined as a :class:`str` enum so that they serialise
naturally to JSON and can be matched with simple ``==`` comparisons.
"""

from __future__ import annotations

import uuid
from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error notionbridge can raise."""

    INVALID_API_KEY = "INVALID_API_KEY"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    BAD_REQUEST = "BAD_REQUEST"
    CONFLICT = "CONFLICT"
    RATE_LIMITED = "RATE_LIMITED"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    REQUEST_TIMEOUT = "REQUEST_TIMEOUT"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    SOURCE_CONFIG_ERROR = "SOURCE_CONFIG_ERROR"
    DECODE_ERROR = "DECODE_ERROR"
    ENCODE_ERROR = "ENCODE_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionBridgeError(Exception):
    """Base exception for all notionbridge errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` (or any string) identifying the
        error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
        Keys and expected types are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    def __init__(
        self,
        code: str,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.code: str = code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# Upstream (Notion API) errors
# ---------------------------------------------------------------------------

class NotionError(NotionBridgeError):
    """Base class for conditions reported by, or while talking to, Notion.

    ``retryable`` tells the request executor whether another attempt can
    possibly succeed.  Only timeouts and internal server errors are.
    """

    code_value: ErrorCode = ErrorCode.INTERNAL_SERVER_ERROR
    retryable: bool = False

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self.code_value,
            message=message,
            context=context,
            cause=cause,
        )


class InvalidApiKeyError(NotionError):
    """Notion returned 401: the integration token was rejected."""

    code_value = ErrorCode.INVALID_API_KEY


class ForbiddenError(NotionError):
    """Notion returned 403: authenticated but not allowed.

    Context keys: ``status_code``, ``body``.
    """

    code_value = ErrorCode.FORBIDDEN


class NotFoundError(NotionError):
    """Notion returned 404.

    Context keys: ``status_code``, ``path``.
    """

    code_value = ErrorCode.NOT_FOUND


class BadRequestError(NotionError):
    """Notion returned 400 or 422: the request shape was rejected.

    The response body is preserved as the diagnostic ``detail`` and in
    ``context["body"]``.
    """

    code_value = ErrorCode.BAD_REQUEST

    @property
    def detail(self) -> str:
        return str(self.context.get("detail", ""))


class ConflictError(NotionError):
    """Notion returned 409."""

    code_value = ErrorCode.CONFLICT


class RateLimitedError(NotionError):
    """Notion returned 429.

    ``retry_after_seconds`` is parsed from the ``Retry-After`` header when
    present.  It is surfaced for the caller to honour; the executor does not
    retry rate-limited calls itself.
    """

    code_value = ErrorCode.RATE_LIMITED

    def __init__(
        self,
        message: str,
        retry_after_seconds: float | None = None,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.retry_after_seconds = retry_after_seconds
        ctx = dict(context or {})
        ctx["retry_after_seconds"] = retry_after_seconds
        super().__init__(message, context=ctx, cause=cause)


class ServiceUnavailableError(NotionError):
    """Notion returned 503."""

    code_value = ErrorCode.SERVICE_UNAVAILABLE


class RequestTimeoutError(NotionError):
    """A request exceeded its local timeout budget."""

    code_value = ErrorCode.REQUEST_TIMEOUT
    retryable = True

    def __init__(
        self,
        message: str,
        timeout_ms: int,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.timeout_ms = timeout_ms
        ctx = dict(context or {})
        ctx["timeout_ms"] = timeout_ms
        super().__init__(message, context=ctx, cause=cause)


class InternalServerError(NotionError):
    """A 5xx response, a transport failure, or an unreadable response body."""

    code_value = ErrorCode.INTERNAL_SERVER_ERROR
    retryable = True


# ---------------------------------------------------------------------------
# Local errors
# ---------------------------------------------------------------------------

class SourceNotFoundError(NotionBridgeError):
    """No source is registered under the requested kind and alias.

    Context keys: ``kind``, ``source``.
    """

    def __init__(self, kind: str, source: str) -> None:
        super().__init__(
            code=ErrorCode.SOURCE_NOT_FOUND,
            message=f"Source not found: {kind}/{source}",
            context={"kind": kind, "source": source},
        )


class SourceConfigError(NotionBridgeError):
    """The sources configuration could not be read or is malformed."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.SOURCE_CONFIG_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class DecodeError(NotionBridgeError):
    """A wire property could not be decoded into its domain value.

    Context keys: ``property`` (wire name) when known, ``errors`` for a
    list of per-field messages.
    """

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.DECODE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


class EncodeError(NotionBridgeError):
    """A domain value could not be encoded to its wire property shape."""

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=ErrorCode.ENCODE_ERROR,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# HTTP boundary mapping
# ---------------------------------------------------------------------------

_HTTP_STATUS: dict[str, int] = {
    ErrorCode.BAD_REQUEST: 400,
    ErrorCode.DECODE_ERROR: 400,
    ErrorCode.ENCODE_ERROR: 400,
    ErrorCode.INVALID_API_KEY: 401,
    ErrorCode.FORBIDDEN: 403,
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.SOURCE_NOT_FOUND: 404,
    ErrorCode.CONFLICT: 409,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.INTERNAL_SERVER_ERROR: 500,
    ErrorCode.SOURCE_CONFIG_ERROR: 500,
    ErrorCode.SERVICE_UNAVAILABLE: 503,
    ErrorCode.REQUEST_TIMEOUT: 504,
}


def http_status_for(error: BaseException) -> int:
    """Return the HTTP status a routing layer should answer *error* with."""
    if isinstance(error, NotionBridgeError):
        return _HTTP_STATUS.get(error.code, 500)
    return 500


def error_response(
    error: BaseException,
    request_id: str | None = None,
) -> tuple[int, dict[str, Any]]:
    """Map *error* to an ``(http_status, body)`` pair for a routing layer.

    The body always carries ``error``, ``code`` and ``request_id``; a
    request id is generated when none is supplied.  ``detail`` is added for
    bad requests and ``errors`` when the error lists per-field problems.
    Unknown exceptions are reported as internal errors without leaking
    their message.
    """
    rid = request_id or str(uuid.uuid4())
    status = http_status_for(error)

    if not isinstance(error, NotionBridgeError):
        return status, {
            "error": "Internal server error",
            "code": ErrorCode.INTERNAL_SERVER_ERROR.value,
            "request_id": rid,
        }

    code = error.code.value if isinstance(error.code, ErrorCode) else str(error.code)
    body: dict[str, Any] = {
        "error": error.message,
        "code": code,
        "request_id": rid,
    }
    if isinstance(error, BadRequestError) and error.detail:
        body["detail"] = error.detail
    if isinstance(error, RateLimitedError) and error.retry_after_seconds is not None:
        body["retry_after_seconds"] = error.retry_after_seconds
    errors = error.context.get("errors")
    if errors:
        body["errors"] = list(errors)
    return status, body
