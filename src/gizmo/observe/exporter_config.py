# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import Logger, getLogger
from typing import Callable, Dict, Mapping, NamedTuple, Optional, Sequence, Union

import google.auth
from google.auth.credentials import Credentials

from gizmo.observe.environment import is_gae
from gizmo.observe.monitored_resource import ResourceDetector, detect_monitored_resource
from opentelemetry.sdk.resources import Resource

_logger: Logger = getLogger(__name__)

# Scopes required by the Cloud Trace v2 API client.
TRACE_API_SCOPES = (
    "https://www.googleapis.com/auth/cloud-platform",
    "https://www.googleapis.com/auth/trace.append",
)

SERVICE_ATTRIBUTE = "service"
VERSION_ATTRIBUTE = "version"

ErrorCallback = Callable[[Exception], None]
CredentialsFinder = Callable[[Sequence[str]], Credentials]


class ExporterConfig(NamedTuple):
    project_id: str
    monitored_resource: Optional[Resource]
    credentials: Credentials
    on_error: Optional[ErrorCallback]
    default_attributes: Dict[str, str]


class ExportUnavailable(NamedTuple):
    reason: str


ExportDecision = Union[ExportUnavailable, ExporterConfig]


def find_default_credentials(scopes: Sequence[str]) -> Credentials:
    """Finds the Application Default Credentials for the given scopes.

    Raises google.auth.exceptions.DefaultCredentialsError when none can be found.
    """
    credentials, _ = google.auth.default(scopes=list(scopes))
    return credentials


def get_exporter_config(
    project_id: str,
    service: str,
    version: str,
    on_error: Optional[ErrorCallback] = None,
    environ: Optional[Mapping[str, str]] = None,
    credentials_finder: Optional[CredentialsFinder] = None,
    resource_detector: Optional[ResourceDetector] = None,
) -> ExportDecision:
    """Decides whether traces and metrics can be exported and, if so, returns the exporter configuration.

    Export needs both credentials and a way to attribute telemetry to a resource: either App Engine or a
    detected GCP resource. Missing credentials always make export unavailable, even when a resource is
    detected. This also lets a local server export views to GCP when credentials are present.
    """
    if credentials_finder is None:
        credentials_finder = find_default_credentials
    if resource_detector is None:
        resource_detector = detect_monitored_resource

    try:
        credentials = credentials_finder(TRACE_API_SCOPES)
    # pylint: disable=broad-exception-caught
    except Exception as exc:
        _logger.debug("Unable to find default credentials: %s", exc)
        return ExportUnavailable(f"no default credentials: {exc}")

    can_export = is_gae(environ)
    monitored_resource = resource_detector()
    if monitored_resource is not None:
        can_export = True
    if not can_export:
        return ExportUnavailable("not running on App Engine and no GCP resource detected")

    return ExporterConfig(
        project_id=project_id,
        monitored_resource=monitored_resource,
        credentials=credentials,
        on_error=on_error,
        default_attributes={SERVICE_ATTRIBUTE: service, VERSION_ATTRIBUTE: version},
    )
