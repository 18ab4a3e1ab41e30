"""
OpenTelemetry instrumentation setup.

This module configures OpenTelemetry for distributed tracing and starts the
Prometheus metrics endpoint.
"""

import logging
import os
import socket

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.django import DjangoInstrumentor
from opentelemetry.instrumentation.psycopg2 import Psycopg2Instrumentor
from opentelemetry.instrumentation.redis import RedisInstrumentor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import Status, StatusCode
from prometheus_client import start_http_server

logger = logging.getLogger(__name__)

__all__ = ["setup_opentelemetry", "get_tracer", "current_trace_id", "Status", "StatusCode"]


def setup_opentelemetry():
    """
    Configure OpenTelemetry instrumentation.

    Sets up:
    - Distributed tracing (exported via OTLP)
    - Auto-instrumentation for Django, PostgreSQL, Redis
    - Prometheus metrics server
    """
    service_name = os.environ.get("OTEL_SERVICE_NAME", "softcontrol-crm")
    service_version = os.environ.get("OTEL_SERVICE_VERSION", "1.0.0")
    environment = os.environ.get("ENVIRONMENT", "development")

    resource = Resource.create(
        {
            "service.name": service_name,
            "service.version": service_version,
            "deployment.environment": environment,
        }
    )

    trace_provider = TracerProvider(resource=resource)
    trace.set_tracer_provider(trace_provider)

    otlp_endpoint = os.environ.get("OTEL_EXPORTER_OTLP_ENDPOINT")
    if otlp_endpoint:
        otlp_exporter = OTLPSpanExporter(endpoint=otlp_endpoint, insecure=True)
        trace_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))
    else:
        logger.info("OTEL_EXPORTER_OTLP_ENDPOINT not set, spans are not exported")

    DjangoInstrumentor().instrument()
    Psycopg2Instrumentor().instrument()
    RedisInstrumentor().instrument()

    prometheus_port = int(os.environ.get("PROMETHEUS_PORT", "9090"))
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        port_in_use = sock.connect_ex(("127.0.0.1", prometheus_port)) == 0
    finally:
        sock.close()

    if port_in_use:
        logger.info("Prometheus metrics server already running on port %s", prometheus_port)
    else:
        try:
            start_http_server(prometheus_port, addr="0.0.0.0")
            logger.info("Prometheus metrics server started on 0.0.0.0:%s", prometheus_port)
        except OSError as e:
            logger.warning("Could not start Prometheus metrics server: %s", e)

    logger.info("OpenTelemetry instrumentation configured")


def get_tracer(name: str):
    """
    Get a tracer instance for manual instrumentation.

    Without a configured provider OpenTelemetry hands out a no-op tracer,
    so callers can always open spans.

    Args:
        name: Tracer name (usually module name)

    Returns:
        Tracer instance
    """
    return trace.get_tracer(name)


def current_trace_id():
    """Hex trace id of the active span, or None outside a recorded trace."""
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return None
    return format(span_context.trace_id, "032x")
