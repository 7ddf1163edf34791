# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import Logger, getLogger

from typing_extensions import override

from gizmo.observe.errors import ObserveError
from gizmo.observe.gcp_observe import register_and_observe_gcp
from opentelemetry.sdk._configuration import _OTelSDKConfigurator

_logger: Logger = getLogger(__name__)


def _log_export_error(error: Exception) -> None:
    _logger.error("Failed to export telemetry to GCP: %s", error)


class GcpObserveConfigurator(_OTelSDKConfigurator):
    """
    Configurator loaded through the opentelemetry_configurator entry point when the process is started with
    opentelemetry-instrument. It replaces the SDK's OTLP based setup with register_and_observe_gcp.

    Setup errors are logged rather than raised so an application never fails to start because of them.
    """

    # pylint: disable=no-self-use
    @override
    def _configure(self, **kwargs):
        try:
            register_and_observe_gcp(_log_export_error)
        except ObserveError as error:
            _logger.warning("GCP observability not configured: %s", error)
