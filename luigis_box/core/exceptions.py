"""
Luigi's Box Client - Custom Exceptions

Namespaced exception hierarchy for the client library.

Patterns Applied:
- All custom exceptions inherit from LuigisBoxError
- Names end with "Error" and never shadow builtins (TransportError, not ConnectionError)

Per-item failures reported by the API are NOT exceptions. They are carried as
ItemError entries inside OperationResult / JobStatus.
"""

from __future__ import annotations


class LuigisBoxError(Exception):
    """Base exception for the Luigi's Box client.

    All custom exceptions inherit from this base class.
    """


class ConfigurationError(LuigisBoxError):
    """Raised when configuration is invalid or missing.

    Covers unknown config names and configs missing a required field.
    """


class TooManyItemsError(LuigisBoxError):
    """Raised before any network call when a batch exceeds its limit.

    Attributes:
        limit: Maximum number of items the operation accepts
        actual: Number of items that were submitted
    """

    def __init__(self, limit: int, actual: int) -> None:
        """Initialize TooManyItemsError with the limit and the batch size.

        Args:
            limit: Maximum number of items the operation accepts
            actual: Number of items that were submitted
        """
        self.limit = limit
        self.actual = actual
        super().__init__(f"Expect less than or equal {limit} items. Got {actual}.")


class InvalidPayloadError(LuigisBoxError, ValueError):
    """Raised when a payload cannot be turned into a request.

    Examples: empty item url, non-positive job id, wrong item type in a batch.
    """


class TransportError(LuigisBoxError):
    """Raised when the HTTP round trip fails.

    Either the connection failed (status_code is None) or the API answered
    with a non-2xx status.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        body: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class ProtocolError(LuigisBoxError):
    """Raised when a response body is not valid JSON or misses a required field."""
