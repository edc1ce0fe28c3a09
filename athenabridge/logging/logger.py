"""
Process logging for athenabridge, exporting through OpenTelemetry when enabled.
"""

from __future__ import annotations

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from opentelemetry import _logs, trace
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter as GrpcLogExporter
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter as GrpcSpanExporter
from opentelemetry.exporter.otlp.proto.http._log_exporter import OTLPLogExporter as HttpLogExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter as HttpSpanExporter
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_LOG_FILE = "athenabridge.log"
DEFAULT_SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "athenabridge")

_configured = False


def get_root_logger() -> logging.Logger:
    return logging.getLogger("")


def otel_disabled() -> bool:
    return os.getenv("OTEL_SDK_DISABLED", "").strip().lower() in {"1", "true", "yes", "on"}


def _uses_http(signal: str) -> bool:
    protocol = os.getenv(f"OTEL_EXPORTER_OTLP_{signal}_PROTOCOL") or os.getenv("OTEL_EXPORTER_OTLP_PROTOCOL", "grpc")
    return protocol.strip().lower() in {"http", "http/protobuf"}


def _exporter_enabled(signal: str) -> bool:
    return os.getenv(f"OTEL_{signal}_EXPORTER", "otlp").strip().lower() not in {"none", "disabled"}


def _otel_handlers(service_name: str, level: str | int) -> list[logging.Handler]:
    resource = Resource.create({"service.name": service_name})

    tracer_provider = TracerProvider(resource=resource)
    if _exporter_enabled("TRACES"):
        span_exporter = HttpSpanExporter() if _uses_http("TRACES") else GrpcSpanExporter()
        tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter))
    trace.set_tracer_provider(tracer_provider)

    logger_provider = LoggerProvider(resource=resource)
    _logs.set_logger_provider(logger_provider)
    if not _exporter_enabled("LOGS"):
        return []
    log_exporter = HttpLogExporter() if _uses_http("LOGS") else GrpcLogExporter()
    logger_provider.add_log_record_processor(BatchLogRecordProcessor(log_exporter))
    return [LoggingHandler(level=level, logger_provider=logger_provider)]


def setup_logging(
    *,
    service_name: Optional[str] = None,
    level: str | int = "INFO",
    log_dir: Optional[str] = None,
    log_file: str = DEFAULT_LOG_FILE,
    with_console: bool = True,
) -> logging.Logger:
    """
    Configure the root logger once per process.

    A rotating file handler is added when OpenTelemetry is disabled and a
    ``log_dir`` is given; otherwise records are exported over OTLP.
    """
    global _configured

    root = get_root_logger()
    root.setLevel(level)
    if _configured:
        return root
    _configured = True

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = []
    if with_console:
        handlers.append(logging.StreamHandler())

    if otel_disabled():
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
            handlers.append(
                RotatingFileHandler(
                    os.path.join(log_dir, log_file),
                    maxBytes=10 * 1024 * 1024,
                    backupCount=5,
                    encoding="utf-8",
                )
            )
    else:
        handlers.extend(_otel_handlers(service_name or DEFAULT_SERVICE_NAME, level))

    for handler in handlers:
        if not isinstance(handler, LoggingHandler):
            handler.setFormatter(formatter)
        if handler not in root.handlers:
            root.addHandler(handler)
    return root
