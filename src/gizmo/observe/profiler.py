# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0
from logging import Logger, getLogger
from typing import Callable, NamedTuple

from gizmo.observe import _utils

_logger: Logger = getLogger(__name__)


class ProfilerConfig(NamedTuple):
    project_id: str
    service: str
    service_version: str


ProfilerStarter = Callable[[ProfilerConfig], None]


def start_profiler(config: ProfilerConfig) -> None:
    """
    Starts the Cloud Profiler agent for the given service identity.

    googlecloudprofiler is an optional dependency (the "profiler" extra) as it ships a native extension.
    A RuntimeError is raised when it is not installed; errors raised by the agent itself propagate.
    An empty project ID lets the agent discover the project on its own.
    """
    if not _utils.IS_GOOGLECLOUDPROFILER_INSTALLED:
        raise RuntimeError("google-cloud-profiler is not installed, install gizmo-observe[profiler]")

    # pylint: disable=import-outside-toplevel
    import googlecloudprofiler

    googlecloudprofiler.start(
        service=config.service,
        service_version=config.service_version,
        project_id=config.project_id or None,
    )
    _logger.info("Started Cloud Profiler for service %r version %r", config.service, config.service_version)
