# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
"""Inspection of the environment variables that describe where and as what the process runs.

All functions accept an optional ``environ`` mapping that defaults to ``os.environ``. Unset variables
read as empty strings; values are never validated.
"""
from typing import Mapping, NamedTuple, Optional

from gizmo.observe._utils import get_env

GAE_DEPLOYMENT_ID_CONFIG = "GAE_DEPLOYMENT_ID"
GAE_SERVICE_CONFIG = "GAE_SERVICE"
GAE_VERSION_CONFIG = "GAE_VERSION"
GOOGLE_CLOUD_PROJECT_CONFIG = "GOOGLE_CLOUD_PROJECT"
SERVICE_NAME_CONFIG = "SERVICE_NAME"
SERVICE_VERSION_CONFIG = "SERVICE_VERSION"
SKIP_OBSERVE_CONFIG = "GIZMO_SKIP_OBSERVE"


class ServiceInfo(NamedTuple):
    project_id: str
    service: str
    version: str


def google_project_id(environ: Optional[Mapping[str, str]] = None) -> str:
    """Returns the GCP project ID that can be used to instantiate GCP clients such as Cloud Trace."""
    return get_env(GOOGLE_CLOUD_PROJECT_CONFIG, environ)


def is_gae(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Is the program running within the App Engine platform?"""
    return get_env(GAE_DEPLOYMENT_ID_CONFIG, environ) != ""


def get_gae_info(environ: Optional[Mapping[str, str]] = None) -> ServiceInfo:
    """Returns the GCP project ID along with the App Engine service and version of the application."""
    return ServiceInfo(
        google_project_id(environ),
        get_env(GAE_SERVICE_CONFIG, environ),
        get_env(GAE_VERSION_CONFIG, environ),
    )


def get_service_info(environ: Optional[Mapping[str, str]] = None) -> ServiceInfo:
    """Returns the GCP project ID, the service name and the version.

    On App Engine the GAE_SERVICE/GAE_VERSION variables are used. Elsewhere the service identity comes
    from SERVICE_NAME/SERVICE_VERSION. Those two are not standard, but an application can set them to
    have them included in its trace attributes.
    """
    if is_gae(environ):
        return get_gae_info(environ)
    return ServiceInfo(
        google_project_id(environ),
        get_env(SERVICE_NAME_CONFIG, environ),
        get_env(SERVICE_VERSION_CONFIG, environ),
    )


def skip_observe(environ: Optional[Mapping[str, str]] = None) -> bool:
    """Has GIZMO_SKIP_OBSERVE been populated?

    Useful in local development to avoid the slow metadata server lookup done by resource detection.
    """
    return get_env(SKIP_OBSERVE_CONFIG, environ) != ""
