import logging
from fastapi import FastAPI
from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor  # type: ignore
from opentelemetry.sdk.resources import SERVICE_NAME, SERVICE_VERSION, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from task_api.config import Settings

logger = logging.getLogger(__name__)

UNTRACED_URLS = ["healthcheck"]


def create_tracer_provider(service_name: str, service_version: str) -> TracerProvider:
    resource = Resource.create(
        {SERVICE_NAME: service_name, SERVICE_VERSION: service_version}
    )
    tracer_provider = TracerProvider(resource=resource)
    tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
    return tracer_provider


def setup_opentelemetry(app: FastAPI, settings: Settings) -> TracerProvider:
    """
    Export request spans over OTLP/HTTP.

    The exporter reads its endpoint from the standard ``OTEL_EXPORTER_OTLP_*``
    environment variables. The returned provider must be shut down on exit
    to flush buffered spans.
    """
    tracer_provider = create_tracer_provider(
        settings.OTEL_SERVICE_NAME, settings.TASK_API_VERSION
    )
    trace.set_tracer_provider(tracer_provider)

    FastAPIInstrumentor.instrument_app(  # type: ignore
        app,
        tracer_provider=tracer_provider,
        excluded_urls=",".join(UNTRACED_URLS),
    )
    logger.info(f"Tracing enabled for service {settings.OTEL_SERVICE_NAME}")
    return tracer_provider
