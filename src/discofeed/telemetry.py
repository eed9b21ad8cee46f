"""Tracing and JSON-lines file logging for discofeed.

Feed loads run inside OpenTelemetry spans opened through ``Telemetry``.
Once ``configure_file_logging()`` is called, every record logged under the
``discofeed`` logger tree is written as one JSON object per line, stamped
with the trace and span ids current at the moment it was logged.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

LOGGER_NAME = "discofeed"
FILE_HANDLER_NAME = "discofeed-jsonl"

_NO_TRACE = "0" * 32
_NO_SPAN = "0" * 16


class Telemetry:
    """Tracer owner for feed load spans.

    Hosts pass one instance to ``create_session``; tests use
    ``for_testing()`` to read finished spans back.
    """

    def __init__(self, provider: TracerProvider) -> None:
        self.provider = provider
        self._tracer = provider.get_tracer(LOGGER_NAME)

    @contextmanager
    def span(self, name: str, **attributes: object) -> Iterator[trace.Span]:
        """Open *name* as the current span, seeded with *attributes*."""
        with self._tracer.start_as_current_span(name, attributes=attributes or None) as span:
            yield span

    @classmethod
    def for_testing(cls) -> tuple[Telemetry, InMemorySpanExporter]:
        """Telemetry plus the in-memory exporter its spans finish into."""
        exporter = InMemorySpanExporter()
        provider = TracerProvider()
        provider.add_span_processor(SimpleSpanProcessor(exporter))
        return cls(provider), exporter

    @classmethod
    def noop(cls) -> Telemetry:
        # No span processors: spans are created and dropped
        return cls(TracerProvider())


class _TraceContextFilter(logging.Filter):
    """Copy the current span's ids onto the record (zeros outside a span)."""

    def filter(self, record: logging.LogRecord) -> bool:
        ctx = trace.get_current_span().get_span_context()
        if ctx.is_valid:
            record.trace_id = format(ctx.trace_id, "032x")
            record.span_id = format(ctx.span_id, "016x")
        else:
            record.trace_id = _NO_TRACE
            record.span_id = _NO_SPAN
        return True


class _JsonLinesFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "trace": getattr(record, "trace_id", _NO_TRACE),
            "span": getattr(record, "span_id", _NO_SPAN),
            "msg": record.getMessage(),
        }
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def configure_file_logging(log_dir: str | Path = "logs") -> Path:
    """Write the ``discofeed`` logger tree to ``{log_dir}/discofeed-YYYYMMDD.log``.

    Idempotent: a second call finds the named handler and returns its path.
    Called by ``run_tui()``; the CLI and tests leave logging alone.
    """
    root = logging.getLogger(LOGGER_NAME)
    for handler in root.handlers:
        if handler.get_name() == FILE_HANDLER_NAME:
            return Path(handler.baseFilename)  # type: ignore[attr-defined]

    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    log_path = directory / f"discofeed-{datetime.now():%Y%m%d}.log"

    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.set_name(FILE_HANDLER_NAME)
    handler.setLevel(logging.DEBUG)
    handler.addFilter(_TraceContextFilter())
    handler.setFormatter(_JsonLinesFormatter())

    root.setLevel(logging.DEBUG)
    root.addHandler(handler)
    return log_path
