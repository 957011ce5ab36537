"""
OpenTelemetry Tracing - Tracer provider setup

Spans cover each pixel count run and each API request. Spans are only
exported when OTLP_ENDPOINT is configured.
"""

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.sdk.resources import Resource

from ..core.config import settings
from .. import __version__


def setup_tracing():
    """
    Install the SDK tracer provider once per process.

    Later calls keep the provider already installed, since OpenTelemetry
    refuses to replace a global provider.
    """
    if isinstance(trace.get_tracer_provider(), TracerProvider):
        return

    provider = TracerProvider(resource=Resource.create({
        "service.name": settings.service_name,
        "service.version": __version__,
        "deployment.environment": settings.environment,
    }))

    # Exporter is an optional extra (lazy import to avoid grpcio dep)
    if settings.otlp_endpoint:
        try:
            from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
        except ImportError:
            import logging
            logging.getLogger(__name__).warning(
                "opentelemetry-exporter-otlp not installed; tracing export disabled"
            )
        else:
            provider.add_span_processor(BatchSpanProcessor(
                OTLPSpanExporter(endpoint=settings.otlp_endpoint, insecure=True)
            ))

    trace.set_tracer_provider(provider)


def get_tracer(name: str = None):
    """Get a tracer instance"""
    return trace.get_tracer(name or __name__)
