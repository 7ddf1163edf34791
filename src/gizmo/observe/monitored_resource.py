# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import Logger, getLogger
from typing import Callable, Mapping, Optional

from gizmo.observe.environment import is_gae
from opentelemetry.resourcedetector.gcp_resource_detector import GoogleCloudResourceDetector
from opentelemetry.sdk.resources import Resource

_logger: Logger = getLogger(__name__)

ResourceDetector = Callable[[], Optional[Resource]]


def detect_monitored_resource() -> Optional[Resource]:
    """Returns the GCP resource the process runs on, or None when it is not running on GCP.

    Detection is done from scratch on every call and may block on the GCE metadata server.
    """
    try:
        resource = GoogleCloudResourceDetector().detect()
    # pylint: disable=broad-exception-caught
    except Exception as exc:
        _logger.debug("GCP resource detection failed: %s", exc)
        return None

    if resource is None or not resource.attributes:
        _logger.debug("No GCP resource detected")
        return None
    _logger.debug("Detected GCP resource: %s", dict(resource.attributes))
    return resource


def is_gcp_enabled(
    environ: Optional[Mapping[str, str]] = None, resource_detector: Optional[ResourceDetector] = None
) -> bool:
    """Is the running application inside GCP, or does it have access to its products?"""
    if is_gae(environ):
        return True
    if resource_detector is None:
        resource_detector = detect_monitored_resource
    return resource_detector() is not None
