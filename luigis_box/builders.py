"""
Request builders for the Luigi's Box content API.

One builder per operation; each turns a payload into a fully-formed signed
request. Builders never send anything.

Endpoints:
    POST   /v1/content                       full content update (<= 100 items)
    PATCH  /v1/content                       partial content update (<= 50 items)
    DELETE /v1/content                       content removal
    PATCH  /v1/update_by_query               update-by-query job submission
    GET    /v1/update_by_query?job_id=<id>   update-by-query job status

Signing always covers the path without its query string.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, ClassVar, Final
from urllib.parse import urlencode

from luigis_box.auth.signing import request_headers
from luigis_box.core.config import ConfigRegistry, EndpointConfig
from luigis_box.core.exceptions import InvalidPayloadError
from luigis_box.core.logging import get_logger
from luigis_box.models.content import (
    ContentItem,
    OperationKind,
    RemovalItem,
    UpdateByQuery,
    validate_batch,
)

logger = get_logger(__name__)

# =============================================================================
# Module Constants
# =============================================================================

API_VERSION: Final[str] = "v1"
ENDPOINT_CONTENT: Final[str] = f"/{API_VERSION}/content"
ENDPOINT_UPDATE_BY_QUERY: Final[str] = f"/{API_VERSION}/update_by_query"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: current time in UTC."""
    return datetime.now(timezone.utc)


def encode_body(payload: Any) -> bytes:
    """Encode a JSON payload as compact UTF-8."""
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":")).encode("utf-8")


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(frozen=True, slots=True)
class SignedRequest:
    """A request ready to be handed to a transport.

    Attributes:
        method: HTTP verb
        url: Absolute URL including any query string
        headers: Content-Type, Date and Authorization headers
        body: Encoded JSON body, empty for GET
        connect_timeout: Seconds allowed to establish the connection
        request_timeout: Seconds allowed for the whole exchange
        path: Endpoint path the signature was computed for
    """

    method: str
    url: str
    headers: Mapping[str, str]
    body: bytes = b""
    connect_timeout: float | None = None
    request_timeout: float | None = None
    path: str = field(default="", compare=False)


# =============================================================================
# Builders
# =============================================================================


class RequestBuilder:
    """Shared signing and URL assembly for all builders."""

    method: ClassVar[str]
    path: ClassVar[str]

    def __init__(self, registry: ConfigRegistry, clock: Clock = utc_now) -> None:
        """Initialize the builder.

        Args:
            registry: Source of the active endpoint configuration
            clock: Callable returning the signing time
        """
        self._registry = registry
        self._clock = clock

    def _prepare(
        self,
        body: bytes,
        config: EndpointConfig | None,
        query: Mapping[str, Any] | None = None,
    ) -> SignedRequest:
        if config is None:
            config = self._registry.active()
        headers = request_headers(
            config.public_key,
            config.private_key,
            self.method,
            self.path,
            self._clock(),
        )

        url = f"{config.host}{self.path}"
        if query:
            url = f"{url}?{urlencode(query)}"

        return SignedRequest(
            method=self.method,
            url=url,
            headers=headers.as_dict(),
            body=body,
            connect_timeout=config.connection_timeout,
            request_timeout=config.request_timeout,
            path=self.path,
        )


class _ContentBatchBuilder(RequestBuilder):
    """Builds {"objects": [...]} requests against /v1/content."""

    path = ENDPOINT_CONTENT
    kind: ClassVar[OperationKind]
    item_type: ClassVar[type]

    def build(
        self,
        items: Sequence[Any],
        config: EndpointConfig | None = None,
    ) -> SignedRequest:
        """Validate the batch and build the signed request.

        Raises:
            TooManyItemsError: If the batch exceeds the operation limit
            InvalidPayloadError: If an item has the wrong type
        """
        return self.build_batch(validate_batch(self.kind, items, self.item_type), config)

    def build_batch(
        self,
        batch: tuple[Any, ...],
        config: EndpointConfig | None = None,
    ) -> SignedRequest:
        """Build the signed request for a batch validate_batch() already accepted."""
        logger.debug(
            "request_built",
            operation=self.kind.label,
            method=self.method,
            items=len(batch),
        )
        return self._prepare(
            encode_body({"objects": [item.to_dict() for item in batch]}),
            config,
        )


class ContentUpdateBuilder(_ContentBatchBuilder):
    """Full content update: replaces every field of each object."""

    method = "POST"
    kind = OperationKind.CONTENT_UPDATE
    item_type = ContentItem


class PartialContentUpdateBuilder(_ContentBatchBuilder):
    """Partial content update: only the given fields are overwritten."""

    method = "PATCH"
    kind = OperationKind.PARTIAL_CONTENT_UPDATE
    item_type = ContentItem


class ContentRemovalBuilder(_ContentBatchBuilder):
    method = "DELETE"
    kind = OperationKind.CONTENT_REMOVAL
    item_type = RemovalItem


class UpdateByQueryBuilder(RequestBuilder):
    """Submits an asynchronous update-by-query job."""

    method = "PATCH"
    path = ENDPOINT_UPDATE_BY_QUERY

    def build(
        self,
        query: UpdateByQuery,
        config: EndpointConfig | None = None,
    ) -> SignedRequest:
        if not isinstance(query, UpdateByQuery):
            msg = f"Expected UpdateByQuery, got {type(query).__name__}."
            raise InvalidPayloadError(msg)
        return self._prepare(encode_body(query.to_dict()), config)


class UpdateByQueryStatusBuilder(RequestBuilder):
    """Queries the status of an update-by-query job.

    The job id goes into the URL query string only; the signature covers
    the bare endpoint path.
    """

    method = "GET"
    path = ENDPOINT_UPDATE_BY_QUERY

    def build(
        self,
        job_id: int,
        config: EndpointConfig | None = None,
    ) -> SignedRequest:
        """Build the status request for job_id.

        Raises:
            InvalidPayloadError: If job_id is not a positive integer
        """
        if isinstance(job_id, bool) or not isinstance(job_id, int) or job_id <= 0:
            msg = f"Job id must be a positive integer, got {job_id!r}."
            raise InvalidPayloadError(msg)
        return self._prepare(b"", config, query={"job_id": job_id})
