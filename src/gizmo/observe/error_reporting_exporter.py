# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import Logger, getLogger
from typing import Callable, Optional, Sequence

from typing_extensions import override

from opentelemetry.sdk.metrics.export import MetricExporter, MetricExportResult, MetricsData
from opentelemetry.sdk.trace import ReadableSpan
from opentelemetry.sdk.trace.export import SpanExporter, SpanExportResult

_logger: Logger = getLogger(__name__)


class ExportError(Exception):
    """Reported to the error callback when a delegate exporter returns a failure result."""


def _report(on_error: Optional[Callable[[Exception], None]], error: Exception) -> None:
    if on_error is None:
        _logger.error("Failed to export telemetry to GCP: %s", error)
        return
    try:
        on_error(error)
    # pylint: disable=broad-exception-caught
    except Exception as callback_error:
        _logger.exception("Export error callback raised: %s", callback_error)


class ErrorReportingSpanExporter(SpanExporter):
    """
    Delegates export to the wrapped SpanExporter and reports every failed export to the error callback.
    An exception raised by the delegate is reported and turned into a FAILURE result, so it never reaches
    the span processor's worker thread. Without a callback, failures are logged.
    """

    def __init__(self, delegate: SpanExporter, on_error: Optional[Callable[[Exception], None]] = None):
        self._delegate = delegate
        self._on_error = on_error

    @override
    def export(self, spans: Sequence[ReadableSpan]) -> SpanExportResult:
        try:
            result = self._delegate.export(spans)
        # pylint: disable=broad-exception-caught
        except Exception as exc:
            _report(self._on_error, exc)
            return SpanExportResult.FAILURE
        if result == SpanExportResult.FAILURE:
            _report(self._on_error, ExportError(f"failed to export {len(spans)} span(s)"))
        return result

    @override
    def force_flush(self, timeout_millis: int = 30000) -> bool:
        return self._delegate.force_flush(timeout_millis)

    @override
    def shutdown(self) -> None:
        return self._delegate.shutdown()


class ErrorReportingMetricExporter(MetricExporter):
    """MetricExporter counterpart of ErrorReportingSpanExporter.

    Keeps the delegate's preferred temporality and aggregation so readers treat it like the delegate.
    """

    def __init__(self, delegate: MetricExporter, on_error: Optional[Callable[[Exception], None]] = None):
        super().__init__(
            preferred_temporality=getattr(delegate, "_preferred_temporality", None),
            preferred_aggregation=getattr(delegate, "_preferred_aggregation", None),
        )
        self._delegate = delegate
        self._on_error = on_error

    @override
    def export(self, metrics_data: MetricsData, timeout_millis: float = 10_000, **kwargs) -> MetricExportResult:
        try:
            result = self._delegate.export(metrics_data, timeout_millis=timeout_millis, **kwargs)
        # pylint: disable=broad-exception-caught
        except Exception as exc:
            _report(self._on_error, exc)
            return MetricExportResult.FAILURE
        if result == MetricExportResult.FAILURE:
            _report(self._on_error, ExportError("failed to export metrics"))
        return result

    @override
    def force_flush(self, timeout_millis: float = 10_000) -> bool:
        return self._delegate.force_flush(timeout_millis=timeout_millis)

    @override
    def shutdown(self, timeout_millis: float = 30_000, **kwargs) -> None:
        self._delegate.shutdown(timeout_millis=timeout_millis, **kwargs)
