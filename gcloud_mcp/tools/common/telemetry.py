"""Telemetry setup for the gcloud MCP server using OpenTelemetry and GCP OTLP."""

import json
import logging
import os
import sys
from typing import Any

import google.auth
import google.auth.transport.grpc
import google.auth.transport.requests
import grpc
from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.semconv.resource import ResourceAttributes

SERVICE_NAME = "gcloud-mcp"
OTLP_ENDPOINT = "telemetry.googleapis.com:443"


def setup_telemetry(level: int = logging.INFO) -> None:
    """Configures Telemetry (Trace, Metrics, Logs) for the gcloud MCP server.

    Configures:
    - Traces: OTLP gRPC to telemetry.googleapis.com
    - Metrics: OTLP gRPC to telemetry.googleapis.com
    - Logs: text or structured JSON to stderr

    Logs never go to stdout, which belongs to the stdio transport.

    Args:
        level: The logging level to use (default: INFO)
    """
    # Override level from env if set
    env_level = os.environ.get("LOG_LEVEL", "").upper()
    if env_level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        level = getattr(logging, env_level)

    from opentelemetry.instrumentation.logging import LoggingInstrumentor

    # Initialize Trace-Log correlation
    LoggingInstrumentor().instrument(set_logging_format=False)

    project_id = os.environ.get("GOOGLE_CLOUD_PROJECT")
    if project_id and "," in project_id:
        project_id = project_id.split(",")[0].strip()
        os.environ["GOOGLE_CLOUD_PROJECT"] = project_id

    if project_id:
        resource = Resource.create(
            {
                ResourceAttributes.SERVICE_NAME: SERVICE_NAME,
                "gcp.project_id": project_id,
            }
        )
        composite_creds = _get_gcp_otlp_credentials(project_id)

        # -- TRACES --
        if os.environ.get("OTEL_TRACES_EXPORTER", "").lower() != "none":
            span_exporter = OTLPSpanExporter(
                endpoint=OTLP_ENDPOINT,
                credentials=composite_creds,
                headers=(("x-goog-user-project", project_id),),
            )
            tracer_provider = TracerProvider(resource=resource)
            tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
            trace.set_tracer_provider(tracer_provider)

        # -- METRICS --
        if os.environ.get("OTEL_METRICS_EXPORTER", "").lower() != "none":
            metric_exporter = OTLPMetricExporter(
                endpoint=OTLP_ENDPOINT,
                credentials=composite_creds,
                headers=(("x-goog-user-project", project_id),),
            )
            reader = PeriodicExportingMetricReader(
                metric_exporter, export_interval_millis=60000
            )
            metrics.set_meter_provider(
                MeterProvider(resource=resource, metric_readers=[reader])
            )
    else:
        # Fallback for local/testing without Project ID
        if not isinstance(trace.get_tracer_provider(), TracerProvider):
            trace.set_tracer_provider(TracerProvider())
        if not isinstance(metrics.get_meter_provider(), MeterProvider):
            metrics.set_meter_provider(MeterProvider())

    _configure_logging_handlers(level, project_id)


def _get_gcp_otlp_credentials(project_id: str) -> grpc.ChannelCredentials:
    """Get gRPC channel credentials for Google Cloud OTLP."""
    credentials, _ = google.auth.default()

    # Ensure quota project is set to fix INVALID_ARGUMENT errors in OTLP export
    if hasattr(credentials, "with_quota_project"):
        credentials = credentials.with_quota_project(project_id)
    request = google.auth.transport.requests.Request()

    call_creds = grpc.metadata_call_credentials(
        google.auth.transport.grpc.AuthMetadataPlugin(  # type: ignore[no-untyped-call]
            credentials=credentials, request=request
        )
    )
    return grpc.composite_channel_credentials(grpc.ssl_channel_credentials(), call_creds)


class JsonFormatter(logging.Formatter):
    """Basic JSON log formatter with OTel correlation."""

    def __init__(self, project_id: str | None = None) -> None:
        super().__init__()
        self.project_id = project_id

    def format(self, record: logging.LogRecord) -> str:
        log_obj: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "severity": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "func": record.funcName,
        }

        span_context = trace.get_current_span().get_span_context()
        if span_context.is_valid:
            trace_id = format(span_context.trace_id, "032x")
            span_id = format(span_context.span_id, "016x")
            log_obj["trace_id"] = trace_id
            log_obj["span_id"] = span_id

            # GCP-specific correlation fields
            if self.project_id:
                log_obj["logging.googleapis.com/trace"] = (
                    f"projects/{self.project_id}/traces/{trace_id}"
                )
                log_obj["logging.googleapis.com/spanId"] = span_id

        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_obj)


def _configure_logging_handlers(level: int, project_id: str | None) -> None:
    """Internal helper to configure logging handlers."""
    log_format = os.environ.get("LOG_FORMAT", "TEXT").upper()

    if log_format == "JSON":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JsonFormatter(project_id))
        logging.getLogger().handlers = [handler]
        logging.getLogger().setLevel(level)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s [trace_id=%(otelTraceID)s span_id=%(otelSpanID)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            stream=sys.stderr,
            force=True,
        )


def set_span_attribute(key: str, value: Any) -> None:
    """Sets an attribute on the current OTel span. Safe to call if no span active."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute(key, value)
