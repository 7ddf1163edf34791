# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from abc import ABC, abstractmethod
from logging import Logger, getLogger
from typing import Mapping, Optional

from gizmo.observe._utils import get_env
from gizmo.observe.default_attributes_span_processor import DefaultAttributesSpanProcessor
from gizmo.observe.gcp_exporter import GcpExporter
from opentelemetry.metrics import set_meter_provider
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.trace import set_tracer_provider

METRIC_EXPORT_INTERVAL_CONFIG = "OTEL_METRIC_EXPORT_INTERVAL"
DEFAULT_METRIC_EXPORT_INTERVAL = 60000.0
# Cloud Monitoring accepts at most one point every 5 seconds per time series.
MIN_METRIC_EXPORT_INTERVAL = 5000.0

_logger: Logger = getLogger(__name__)


class TraceRegistry(ABC):
    @abstractmethod
    def register(self, exporter: GcpExporter) -> None:
        """Makes the exporter receive the spans of the process."""


class MetricsRegistry(ABC):
    @abstractmethod
    def register(self, exporter: GcpExporter) -> None:
        """Makes the exporter receive the metrics of the process."""


class TracerProviderRegistry(TraceRegistry):
    """Installs a global TracerProvider exporting through the GcpExporter's span exporter."""

    def register(self, exporter: GcpExporter) -> None:
        tracer_provider: TracerProvider = TracerProvider(resource=exporter.resource)
        tracer_provider.add_span_processor(DefaultAttributesSpanProcessor(exporter.default_attributes))
        tracer_provider.add_span_processor(BatchSpanProcessor(span_exporter=exporter.span_exporter))
        set_tracer_provider(tracer_provider)
        _logger.info("Registered Cloud Trace exporter")


class MeterProviderRegistry(MetricsRegistry):
    """Installs a global MeterProvider periodically exporting through the GcpExporter's metric exporter."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self._environ = environ

    def register(self, exporter: GcpExporter) -> None:
        reader = PeriodicExportingMetricReader(
            exporter=exporter.metric_exporter,
            export_interval_millis=get_metric_export_interval(self._environ),
        )
        meter_provider: MeterProvider = MeterProvider(resource=exporter.resource, metric_readers=[reader])
        set_meter_provider(meter_provider)
        _logger.info("Registered Cloud Monitoring exporter")


def get_metric_export_interval(environ: Optional[Mapping[str, str]] = None) -> float:
    configured = get_env(METRIC_EXPORT_INTERVAL_CONFIG, environ)
    try:
        export_interval_millis = float(configured) if configured else DEFAULT_METRIC_EXPORT_INTERVAL
    except ValueError as error:
        _logger.error("%s must be a number: %s", METRIC_EXPORT_INTERVAL_CONFIG, error)
        export_interval_millis = DEFAULT_METRIC_EXPORT_INTERVAL
    _logger.debug("Metrics export interval: %s", export_interval_millis)
    if export_interval_millis < MIN_METRIC_EXPORT_INTERVAL:
        export_interval_millis = MIN_METRIC_EXPORT_INTERVAL
        _logger.info("Cloud Monitoring metrics export interval raised to %s", export_interval_millis)
    return export_interval_millis
