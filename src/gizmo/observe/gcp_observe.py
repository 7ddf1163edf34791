# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Cloud Trace, Cloud Monitoring and Cloud Profiler setup for processes running on GCP.

Typical use, once at startup::

    from gizmo.observe.gcp_observe import register_and_observe_gcp

    register_and_observe_gcp(on_error=lambda err: logging.error("telemetry export failed: %s", err))

Setting GIZMO_SKIP_OBSERVE turns the whole setup into a no-op, which avoids the metadata server
lookup when developing locally.
"""
from logging import Logger, getLogger
from typing import Callable, Mapping, Optional

from gizmo.observe.environment import get_service_info, skip_observe
from gizmo.observe.errors import ExporterInitError, PlatformUnsupportedError, ProfilerInitError
from gizmo.observe.exporter_config import (
    CredentialsFinder,
    ErrorCallback,
    ExporterConfig,
    ExportUnavailable,
    find_default_credentials,
    get_exporter_config,
)
from gizmo.observe.gcp_exporter import GcpExporter, create_gcp_exporter
from gizmo.observe.monitored_resource import ResourceDetector, detect_monitored_resource, is_gcp_enabled
from gizmo.observe.profiler import ProfilerConfig, ProfilerStarter, start_profiler
from gizmo.observe.registries import MeterProviderRegistry, MetricsRegistry, TraceRegistry, TracerProviderRegistry

_logger: Logger = getLogger(__name__)

ExporterFactory = Callable[[ExporterConfig], GcpExporter]


class GcpObserver:
    """
    Runs the GCP observability setup against a set of collaborators. Every collaborator defaults to the
    production one: the process environment, Application Default Credentials, the GCP resource detector,
    the Cloud Trace / Cloud Monitoring exporters, the global OpenTelemetry providers and Cloud Profiler.

    Nothing is cached: each call re-reads the environment and re-runs detection.
    """

    # pylint: disable=too-many-arguments
    def __init__(
        self,
        environ: Optional[Mapping[str, str]] = None,
        credentials_finder: Optional[CredentialsFinder] = None,
        resource_detector: Optional[ResourceDetector] = None,
        exporter_factory: Optional[ExporterFactory] = None,
        trace_registry: Optional[TraceRegistry] = None,
        metrics_registry: Optional[MetricsRegistry] = None,
        profiler_starter: Optional[ProfilerStarter] = None,
    ):
        self._environ = environ
        self._credentials_finder = credentials_finder or find_default_credentials
        self._resource_detector = resource_detector or detect_monitored_resource
        self._exporter_factory = exporter_factory or create_gcp_exporter
        self._trace_registry = trace_registry or TracerProviderRegistry()
        self._metrics_registry = metrics_registry or MeterProviderRegistry(environ)
        self._profiler_starter = profiler_starter or start_profiler

    def register_and_observe(self, on_error: Optional[ErrorCallback] = None) -> None:
        """
        Registers Cloud Trace and Cloud Monitoring exporters with the global OpenTelemetry providers and
        starts Cloud Profiler, all using the identity returned by get_service_info.

        Returns without doing anything when GIZMO_SKIP_OBSERVE is set. Raises PlatformUnsupportedError when
        the process is neither on App Engine nor on a detectable GCP resource, ExporterInitError when the
        exporters cannot be created and ProfilerInitError when the profiler cannot be started. A profiler
        failure leaves the exporters registered.
        """
        if skip_observe(self._environ):
            _logger.info("GIZMO_SKIP_OBSERVE is set, skipping GCP observability setup")
            return
        if not is_gcp_enabled(self._environ, self._resource_detector):
            raise PlatformUnsupportedError("environment is not GCP enabled, no observe tools will be run")

        project_id, service, version = get_service_info(self._environ)

        try:
            exporter = self.new_gcp_exporter(project_id, on_error)
        except Exception as exc:
            raise ExporterInitError("unable to initiate error tracing exporter") from exc

        if exporter is None:
            _logger.warning("Trace and metrics export is unavailable, no exporter registered")
        else:
            self._trace_registry.register(exporter)
            self._metrics_registry.register(exporter)

        try:
            self._profiler_starter(ProfilerConfig(project_id, service, version))
        except Exception as exc:
            raise ProfilerInitError("unable to initiate profiling client") from exc

    def new_gcp_exporter(self, project_id: str, on_error: Optional[ErrorCallback] = None) -> Optional[GcpExporter]:
        """
        Returns the Cloud Trace / Cloud Monitoring exporter for project_id, or None when the platform offers
        no way to export (no credentials, or neither App Engine nor a detected GCP resource).

        The exporter is not registered; callers doing so themselves should shut it down on termination.
        Errors from the exporter factory propagate.
        """
        _, service, version = get_service_info(self._environ)
        decision = get_exporter_config(
            project_id,
            service,
            version,
            on_error,
            environ=self._environ,
            credentials_finder=self._credentials_finder,
            resource_detector=self._resource_detector,
        )
        if isinstance(decision, ExportUnavailable):
            _logger.info("GCP export unavailable: %s", decision.reason)
            return None
        return self._exporter_factory(decision)


def register_and_observe_gcp(on_error: Optional[ErrorCallback] = None) -> None:
    """Runs GcpObserver.register_and_observe with the production collaborators."""
    GcpObserver().register_and_observe(on_error)


def new_gcp_exporter(project_id: str, on_error: Optional[ErrorCallback] = None) -> Optional[GcpExporter]:
    """Runs GcpObserver.new_gcp_exporter with the production collaborators."""
    return GcpObserver().new_gcp_exporter(project_id, on_error)
