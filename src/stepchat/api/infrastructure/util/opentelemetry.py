import logging
import os
from datetime import datetime
from typing import Any

from openinference.instrumentation.pydantic_ai import OpenInferenceSpanProcessor
from opentelemetry import metrics, trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.instrumentation.asyncpg import AsyncPGInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor, ConsoleLogExporter, SimpleLogRecordProcessor
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import ReadableSpan, TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.semconv.attributes import service_attributes
from pydantic_ai import Agent

from stepchat.core.settings import Settings

# Span attributes set by the planner and executor, echoed on the console line.
CONSOLE_SPAN_ATTRIBUTES = ("step.position", "step.kind", "pipeline.length", "http.status_code")


def otlp_enabled() -> bool:
    return os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", "").strip() != ""


def format_log_line(log_data: Any) -> str:
    # Exporters hand over either a LogData or a ReadableLogRecord, both wrap `log_record`.
    record = getattr(log_data, "log_record", log_data)
    ts = datetime.fromtimestamp((record.timestamp or 1) / 1e9)
    att = record.attributes or {}
    source = str(att.get("code.file.path", att.get("code.filepath", ""))).rsplit("/", 1)[-1]
    lineno = att.get("code.line.number", att.get("code.lineno", 0))
    return f"::LOG:: [{ts:%Y-%m-%d %H:%M:%S}] {record.severity_text or 'INFO'} ({source}:{lineno}) {record.body}\n"


def format_span_line(span: ReadableSpan) -> str:
    duration_ms = 0
    if isinstance(span.end_time, int) and isinstance(span.start_time, int):
        duration_ms = round((span.end_time - span.start_time) / 1e6)
    ts = datetime.fromtimestamp((span.end_time or 1) / 1e9)
    attributes = span.attributes or {}
    details = " ".join(f"{key}={attributes[key]}" for key in CONSOLE_SPAN_ATTRIBUTES if key in attributes)
    line = f"::SPN:: [{ts:%Y-%m-%d %H:%M:%S}] ({span.name}) {span.status.status_code.name} {duration_ms}ms"
    return f"{line} {details}\n" if details else f"{line}\n"


class TelemetrySetup:
    """Installs the process-wide log, trace and metric providers once, at startup."""

    def __init__(self, settings: Settings) -> None:
        self.level = logging.DEBUG if settings.DEBUG_MODE else logging.INFO
        self.resource = Resource.create({service_attributes.SERVICE_NAME: "stepchat"})
        self.export = otlp_enabled()

    def configure(self) -> None:
        self.configure_logs()
        self.configure_traces()
        self.configure_metrics()
        self.instrument_libraries()

    def configure_logs(self) -> None:
        logger_provider = LoggerProvider(resource=self.resource)
        console = ConsoleLogExporter(formatter=format_log_line)
        logger_provider.add_log_record_processor(SimpleLogRecordProcessor(console))
        if self.export:
            logger_provider.add_log_record_processor(BatchLogRecordProcessor(OTLPLogExporter()))
        set_logger_provider(logger_provider)
        handler = LoggingHandler(level=self.level, logger_provider=logger_provider)
        logging.basicConfig(handlers=[handler], level=self.level)

    def configure_traces(self) -> None:
        tracer_provider = TracerProvider(resource=self.resource)
        tracer_provider.add_span_processor(OpenInferenceSpanProcessor())
        tracer_provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter(formatter=format_span_line)))
        if self.export:
            tracer_provider.add_span_processor(BatchSpanProcessor(OTLPSpanExporter()))
        trace.set_tracer_provider(tracer_provider)

    def configure_metrics(self) -> None:
        if not self.export:
            return
        reader = PeriodicExportingMetricReader(OTLPMetricExporter())
        metrics.set_meter_provider(MeterProvider(resource=self.resource, metric_readers=[reader]))

    def instrument_libraries(self) -> None:
        Agent.instrument_all()
        AsyncPGInstrumentor().instrument()
        HTTPXClientInstrumentor().instrument()
        os.environ["LANGSMITH_OTEL_ENABLED"] = "true"
        os.environ["LANGSMITH_TRACING"] = "true"
        os.environ["LANGSMITH_OTEL_ONLY"] = "true"
