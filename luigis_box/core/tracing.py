"""
Luigi's Box Client - OpenTelemetry Tracing Module

Every client operation runs in one span. Spans go to the tracer provider the
client was given, or to the global one; without either the OpenTelemetry
no-op provider drops them.

The client never installs a global provider on its own. Applications that
want the client to own tracing call configure_tracing() at startup.
"""

from typing import Any

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor

from luigis_box import __version__

SERVICE_NAME = "luigis-box-client"

# Provider installed by configure_tracing(), None until then
_provider: TracerProvider | None = None


def build_tracer_provider(
    service_name: str = SERVICE_NAME,
    console_export: bool = False,
) -> TracerProvider:
    """Create a provider tagged with the client version, without installing it.

    Args:
        service_name: Value of the service.name resource attribute
        console_export: Whether to print finished spans (for development)
    """
    provider = TracerProvider(
        resource=Resource.create(
            {
                "service.name": service_name,
                "service.version": __version__,
            }
        )
    )
    if console_export:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))
    return provider


def configure_tracing(
    service_name: str = SERVICE_NAME,
    console_export: bool = False,
) -> TracerProvider:
    """Install build_tracer_provider() as the global provider, once.

    Returns:
        The installed provider
    """
    global _provider

    if _provider is None:
        _provider = build_tracer_provider(service_name, console_export)
        trace.set_tracer_provider(_provider)
    return _provider


def get_tracer(name: str, tracer_provider: Any = None) -> Any:
    """Get a tracer for client spans.

    Args:
        name: Tracer name (typically module name)
        tracer_provider: Provider to use instead of the global one

    Returns:
        OpenTelemetry Tracer instance
    """
    return trace.get_tracer(name, __version__, tracer_provider=tracer_provider)


def reset_tracing() -> None:
    """Forget the provider installed by configure_tracing() for testing."""
    global _provider
    _provider = None
