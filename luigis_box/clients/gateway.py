"""
Luigi's Box Client - operation gateway.

Façade used by application code. Every operation:
1. validates the payload locally (no request on failure)
2. builds a signed request with the matching builder
3. sends it through the transport, exactly once
4. parses the JSON body into a typed result

Usage:
    registry = ConfigRegistry("default", {"default": {...}})
    with LuigisBoxClient(registry) as client:
        result = client.update([ContentItem("/p/1", "products", {"title": "Shoe"})])
        if not result.is_success():
            for error in result.errors:
                ...
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from types import TracebackType
from typing import Any, TypeVar

from luigis_box.builders import (
    Clock,
    ContentRemovalBuilder,
    ContentUpdateBuilder,
    PartialContentUpdateBuilder,
    SignedRequest,
    UpdateByQueryBuilder,
    UpdateByQueryStatusBuilder,
    utc_now,
)
from luigis_box.clients.transport import HttpxTransport, TransportProtocol
from luigis_box.core.config import ConfigRegistry, EndpointConfig, Settings, get_settings
from luigis_box.core.exceptions import LuigisBoxError
from luigis_box.core.logging import configure_logging, get_logger
from luigis_box.core.tracing import configure_tracing, get_tracer
from luigis_box.models.content import (
    ContentItem,
    OperationKind,
    RemovalItem,
    UpdateByQuery,
    validate_batch,
)
from luigis_box.models.responses import (
    JobStatus,
    OperationResult,
    UpdateByQueryResult,
    decode_body,
    parse_job_status,
    parse_operation_result,
    parse_update_by_query_result,
)

logger = get_logger(__name__)

ResultT = TypeVar("ResultT")


class LuigisBoxClient:
    """Synchronous client for the Luigi's Box content API.

    Attributes:
        registry: Named endpoint configurations; the active one is used unless
            an explicit config is passed to an operation
        transport: Collaborator performing the HTTP round trip
    """

    def __init__(
        self,
        registry: ConfigRegistry,
        transport: TransportProtocol | None = None,
        clock: Clock = utc_now,
        tracer_provider: Any = None,
    ) -> None:
        """Initialize the client and one builder per operation.

        Args:
            registry: Endpoint configurations
            transport: HTTP transport (default: HttpxTransport)
            clock: Callable returning the signing time
            tracer_provider: OpenTelemetry provider for operation spans
                (default: the global provider)
        """
        self.registry = registry
        self.transport = transport if transport is not None else HttpxTransport()
        self._tracer = get_tracer(__name__, tracer_provider)

        self._content_update = ContentUpdateBuilder(registry, clock)
        self._partial_update = PartialContentUpdateBuilder(registry, clock)
        self._removal = ContentRemovalBuilder(registry, clock)
        self._update_by_query = UpdateByQueryBuilder(registry, clock)
        self._update_by_query_status = UpdateByQueryStatusBuilder(registry, clock)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> LuigisBoxClient:
        """Build a client from environment settings with an HttpxTransport.

        Process-wide logging and tracing are left alone unless log_to_stderr
        or tracing_enabled is set.
        """
        settings = settings or get_settings()
        if settings.log_to_stderr:
            configure_logging(settings.log_level, json_output=settings.log_json)
        if settings.tracing_enabled:
            configure_tracing(console_export=settings.tracing_console_export)
        return cls(ConfigRegistry.from_settings(settings))

    # -------------------------------------------------------------------------
    # Content operations
    # -------------------------------------------------------------------------

    def update(
        self,
        items: Sequence[ContentItem],
        config: EndpointConfig | None = None,
    ) -> OperationResult:
        """Replace up to 100 objects in the index.

        Raises:
            TooManyItemsError: More than 100 items (nothing is sent)
            TransportError: Connection failure or non-2xx status
            ProtocolError: Malformed response body
        """
        batch = validate_batch(OperationKind.CONTENT_UPDATE, items, ContentItem)
        return self._execute(
            OperationKind.CONTENT_UPDATE.label,
            self._content_update.build_batch(batch, config),
            parse_operation_result,
            items=len(batch),
        )

    def partial_update(
        self,
        items: Sequence[ContentItem],
        config: EndpointConfig | None = None,
    ) -> OperationResult:
        """Overwrite the given fields of up to 50 objects.

        Raises:
            TooManyItemsError: More than 50 items (nothing is sent)
            TransportError: Connection failure or non-2xx status
            ProtocolError: Malformed response body
        """
        batch = validate_batch(OperationKind.PARTIAL_CONTENT_UPDATE, items, ContentItem)
        return self._execute(
            OperationKind.PARTIAL_CONTENT_UPDATE.label,
            self._partial_update.build_batch(batch, config),
            parse_operation_result,
            items=len(batch),
        )

    def remove(
        self,
        items: Sequence[RemovalItem],
        config: EndpointConfig | None = None,
    ) -> OperationResult:
        """Remove objects from the index."""
        batch = validate_batch(OperationKind.CONTENT_REMOVAL, items, RemovalItem)
        return self._execute(
            OperationKind.CONTENT_REMOVAL.label,
            self._removal.build_batch(batch, config),
            parse_operation_result,
            items=len(batch),
        )

    # -------------------------------------------------------------------------
    # Update by query
    # -------------------------------------------------------------------------

    def submit_update_job(
        self,
        query: UpdateByQuery,
        config: EndpointConfig | None = None,
    ) -> UpdateByQueryResult:
        """Start an asynchronous update-by-query job.

        Returns:
            UpdateByQueryResult whose job_id is passed to get_status()
        """
        return self._execute(
            "update_by_query",
            self._update_by_query.build(query, config),
            parse_update_by_query_result,
        )

    def get_status(
        self,
        job_id: int,
        config: EndpointConfig | None = None,
    ) -> JobStatus:
        """Fetch the current state of an update-by-query job.

        Job state is not cached; every call queries the API.

        Raises:
            InvalidPayloadError: job_id is not a positive integer
            TransportError: Connection failure or non-2xx status
            ProtocolError: Response misses status or tracker_id
        """
        return self._execute(
            "update_by_query_status",
            self._update_by_query_status.build(job_id, config),
            parse_job_status,
            job_id=job_id,
        )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _execute(
        self,
        operation: str,
        request: SignedRequest,
        parse: Callable[[dict[str, Any]], ResultT],
        **context: Any,
    ) -> ResultT:
        log = logger.bind(operation=operation, method=request.method, path=request.path, **context)

        with self._tracer.start_as_current_span(f"luigis_box.{operation}") as span:
            span.set_attribute("http.method", request.method)
            span.set_attribute("luigis_box.path", request.path)
            for key, value in context.items():
                span.set_attribute(f"luigis_box.{key}", value)

            log.info("luigis_box_request_started")
            try:
                response = self.transport.send(request)
                result = parse(decode_body(response.body))
            except LuigisBoxError as e:
                log.error("luigis_box_request_failed", error=str(e))
                raise

            errors_count = getattr(result, "errors_count", None)
            if errors_count:
                span.set_attribute("luigis_box.errors_count", errors_count)
            log.info(
                "luigis_box_request_finished",
                status_code=response.status_code,
                errors_count=errors_count,
            )
            return result

    def close(self) -> None:
        """Close the underlying transport."""
        self.transport.close()

    def __enter__(self) -> LuigisBoxClient:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
