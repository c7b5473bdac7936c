"""Full error hierarchy for notioncache.

Every public error class inherits from NotioncacheError. Each carries a
machine-readable ``code`` (from :class:`ErrorCode`), a human-readable
``message``, an optional structured ``context`` dict, and an optional
``cause`` (chained exception).

Error codes are defined as a :class:`str` enum so that they serialise
naturally to JSON and can be matched with simple ``==`` comparisons.

Unrecognised remote block or property kinds are *not* errors: the
connector drops them with a logged warning and carries on.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error notioncache can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    DOCUMENT_NOT_FOUND = "DOCUMENT_NOT_FOUND"
    RATE_LIMITED = "RATE_LIMITED"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    MAPPING_ERROR = "MAPPING_ERROR"
    HANDLER_NOT_SET = "HANDLER_NOT_SET"
    FILE_STORE_ERROR = "FILE_STORE_ERROR"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotioncacheError(Exception):
    """Base exception for all notioncache errors.

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


class _CodedError(NotioncacheError):
    """Shared constructor for subclasses bound to a single error code."""

    _code: ErrorCode

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(
            code=self._code,
            message=message,
            context=context,
            cause=cause,
        )


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class NotioncacheValidationError(_CodedError):
    """Notion API returned 400 (or another non-retryable 4xx).

    Context keys: ``status_code``, ``notion_code``, ``body``.
    """

    _code = ErrorCode.VALIDATION_ERROR


class NotioncacheAuthError(_CodedError):
    """Notion API returned 401: the integration token is invalid or expired.

    Context keys: ``status_code``, ``notion_code``.
    """

    _code = ErrorCode.AUTH_ERROR


class NotioncachePermissionError(_CodedError):
    """Notion API returned 403: the integration lacks access to the resource.

    Context keys: ``status_code``, ``notion_code``, ``operation``.
    """

    _code = ErrorCode.PERMISSION_ERROR


class NotioncacheNotFoundError(_CodedError):
    """A requested resource does not exist.

    Raised for a remote 404 and for a local lookup of an unknown database.

    Context keys: ``resource_type``, ``resource_id`` or ``path``.
    """

    _code = ErrorCode.NOT_FOUND


class NotioncacheRateLimitError(_CodedError):
    """Notion API kept answering 429 until the attempt budget ran out.

    Raised as the ``cause`` of :class:`NotioncacheRetryExhaustedError`.

    Context keys: ``retry_after_seconds``, ``attempt``.
    """

    _code = ErrorCode.RATE_LIMITED


class NotioncacheRetryExhaustedError(_CodedError):
    """All retry attempts have been exhausted for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    _code = ErrorCode.RETRY_EXHAUSTED


class NotioncacheNetworkError(_CodedError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``url``, ``attempt``.
    """

    _code = ErrorCode.NETWORK_ERROR


# ---------------------------------------------------------------------------
# Cache errors
# ---------------------------------------------------------------------------

class NotioncacheDocumentNotFoundError(_CodedError):
    """Block content was cached for a document whose properties were never
    synced.

    Context keys: ``document_id``.
    """

    _code = ErrorCode.DOCUMENT_NOT_FOUND


# ---------------------------------------------------------------------------
# Mapping / wiring errors
# ---------------------------------------------------------------------------

class NotioncacheMappingError(_CodedError):
    """The remote-to-canonical mapper hit an impossible state.

    This signals a bug in the mapper, never bad remote data.

    Context keys: ``block_id``, ``block_type``.
    """

    _code = ErrorCode.MAPPING_ERROR


class NotioncacheHandlerNotSetError(_CodedError):
    """A connector fetch was issued before a file-cache handler was bound.

    Context keys: ``operation``.
    """

    _code = ErrorCode.HANDLER_NOT_SET


# ---------------------------------------------------------------------------
# File store errors
# ---------------------------------------------------------------------------

class NotioncacheFileStoreError(_CodedError):
    """A remote file could not be downloaded or persisted.

    Context keys: ``url``, ``url_key``, ``status_code``.
    """

    _code = ErrorCode.FILE_STORE_ERROR
