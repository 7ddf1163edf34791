# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import Logger, getLogger
from typing import Dict, Optional

from google.cloud.monitoring_v3 import MetricServiceClient
from google.cloud.trace_v2 import TraceServiceClient

from gizmo.observe.error_reporting_exporter import ErrorReportingMetricExporter, ErrorReportingSpanExporter
from gizmo.observe.exporter_config import SERVICE_ATTRIBUTE, VERSION_ATTRIBUTE, ExporterConfig
from opentelemetry.exporter.cloud_monitoring import CloudMonitoringMetricsExporter
from opentelemetry.exporter.cloud_trace import CloudTraceSpanExporter
from opentelemetry.sdk.metrics.export import MetricExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace.export import SpanExporter
from opentelemetry.semconv.resource import ResourceAttributes

_logger: Logger = getLogger(__name__)


class GcpExporter:
    """
    Handle on the Cloud Trace span exporter and the Cloud Monitoring metric exporter built for one
    ExporterConfig, together with the resource and default span attributes they should be used with.

    Callers building the exporter themselves must call shutdown (or at least force_flush) on termination
    so buffered telemetry is sent.
    """

    def __init__(
        self,
        span_exporter: SpanExporter,
        metric_exporter: MetricExporter,
        resource: Resource,
        default_attributes: Dict[str, str],
    ):
        self.span_exporter = span_exporter
        self.metric_exporter = metric_exporter
        self.resource = resource
        self.default_attributes = default_attributes

    def force_flush(self, timeout_millis: int = 30000) -> bool:
        span_flushed = self.span_exporter.force_flush(timeout_millis)
        metric_flushed = self.metric_exporter.force_flush(timeout_millis=timeout_millis)
        return bool(span_flushed and metric_flushed)

    def shutdown(self) -> None:
        self.span_exporter.shutdown()
        self.metric_exporter.shutdown()


def build_resource(config: ExporterConfig) -> Resource:
    """Detected GCP resource, if any, with the service identity attributes on top."""
    service_attributes: Dict[str, str] = {}
    service = config.default_attributes.get(SERVICE_ATTRIBUTE)
    version = config.default_attributes.get(VERSION_ATTRIBUTE)
    if service:
        service_attributes[ResourceAttributes.SERVICE_NAME] = service
    if version:
        service_attributes[ResourceAttributes.SERVICE_VERSION] = version

    resource = Resource.create(service_attributes)
    if config.monitored_resource is not None:
        resource = config.monitored_resource.merge(resource)
    return resource


def create_gcp_exporter(config: ExporterConfig) -> GcpExporter:
    """Default exporter factory: Cloud Trace and Cloud Monitoring exporters authenticated with the config's
    credentials, each reporting export failures to the config's error callback."""
    project_id: Optional[str] = config.project_id or None

    span_exporter = CloudTraceSpanExporter(
        project_id=project_id,
        client=TraceServiceClient(credentials=config.credentials),
    )
    metric_exporter = CloudMonitoringMetricsExporter(
        project_id=project_id,
        client=MetricServiceClient(credentials=config.credentials),
    )
    _logger.debug("Created Cloud Trace and Cloud Monitoring exporters for project %r", config.project_id)

    return GcpExporter(
        span_exporter=ErrorReportingSpanExporter(span_exporter, config.on_error),
        metric_exporter=ErrorReportingMetricExporter(metric_exporter, config.on_error),
        resource=build_resource(config),
        default_attributes=dict(config.default_attributes),
    )
