"""
HTTP transport for signed Luigi's Box requests.

Patterns Applied:
- Connection pooling (reuse one httpx.Client)
- Protocol for duck typing, FakeTransport for tests
- Custom namespaced exceptions (TransportError, not ConnectionError)

No retries: each send() is exactly one round trip. Business failures come
back inside 2xx bodies, so any non-2xx status is raised as TransportError.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

import httpx

from luigis_box.builders import SignedRequest
from luigis_box.core.exceptions import TransportError
from luigis_box.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class RawResponse:
    """Undecoded HTTP response."""

    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        return 200 <= self.status_code < 300


# =============================================================================
# Protocol for Duck Typing
# =============================================================================


@runtime_checkable
class TransportProtocol(Protocol):
    """Sends a signed request and returns the raw response.

    Implementations raise TransportError on I/O failure or non-2xx status.
    """

    def send(self, request: SignedRequest) -> RawResponse:
        ...

    def close(self) -> None:
        ...


# =============================================================================
# HttpxTransport Implementation
# =============================================================================


class HttpxTransport:
    """Synchronous transport backed by a pooled httpx.Client.

    Timeouts come from each SignedRequest: connect_timeout bounds the
    connection, request_timeout bounds read, write and pool waits.
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """Initialize the transport.

        Args:
            client: Preconfigured httpx.Client (tests pass one with MockTransport)
            timeout: Fallback timeout when a request carries none
        """
        self.timeout = timeout
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout))

    def _timeout_for(self, request: SignedRequest) -> httpx.Timeout:
        return httpx.Timeout(
            request.request_timeout or self.timeout,
            connect=request.connect_timeout or self.timeout,
        )

    def send(self, request: SignedRequest) -> RawResponse:
        """Send one request.

        Raises:
            TransportError: On connection failure, timeout or non-2xx status
        """
        try:
            response = self._client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=request.body or None,
                timeout=self._timeout_for(request),
            )
        except httpx.TimeoutException as e:
            msg = f"Timeout calling {request.method} {request.url}: {e}"
            raise TransportError(msg) from e
        except httpx.HTTPError as e:
            msg = f"HTTP error calling {request.method} {request.url}: {e}"
            raise TransportError(msg) from e

        raw = RawResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.content,
        )

        if not raw.is_success:
            logger.warning(
                "luigis_box_http_error",
                method=request.method,
                url=request.url,
                status_code=raw.status_code,
            )
            msg = f"Luigi's Box returned status {raw.status_code} for {request.method} {request.url}"
            raise TransportError(msg, status_code=raw.status_code, body=raw.body)

        return raw

    def close(self) -> None:
        """Close the HTTP connection pool."""
        self._client.close()


# =============================================================================
# FakeTransport for Testing
# =============================================================================


class FakeTransport:
    """Fake transport for unit testing without real HTTP.

    Implements TransportProtocol. Returns queued responses in order and
    records every request it was given.

    Usage:
        fake = FakeTransport([RawResponse(200, body=b'{"ok_count": 1, ...}')])
        client = LuigisBoxClient(registry, transport=fake)
    """

    def __init__(
        self,
        responses: Iterable[RawResponse] | None = None,
        error: TransportError | None = None,
    ) -> None:
        """Initialize with queued responses.

        Args:
            responses: Responses returned by successive send() calls
            error: Optional error raised by every send() call
        """
        self._responses: list[RawResponse] = list(responses or [])
        self._error = error
        self.requests: list[SignedRequest] = []
        self.closed = False

    @classmethod
    def from_json(cls, *payloads: Any, status_code: int = 200) -> FakeTransport:
        """Queue one JSON response per payload."""
        return cls(
            RawResponse(status_code=status_code, body=json.dumps(payload).encode("utf-8"))
            for payload in payloads
        )

    def send(self, request: SignedRequest) -> RawResponse:
        self.requests.append(request)
        if self._error:
            raise self._error
        if not self._responses:
            raise TransportError("FakeTransport has no queued response")

        response = self._responses.pop(0)
        if not response.is_success:
            msg = f"Luigi's Box returned status {response.status_code}"
            raise TransportError(msg, status_code=response.status_code, body=response.body)
        return response

    def close(self) -> None:
        self.closed = True
