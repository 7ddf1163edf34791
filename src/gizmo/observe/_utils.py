# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0

import os
from importlib.metadata import PackageNotFoundError, version
from logging import Logger, getLogger
from typing import Mapping, Optional

from packaging.requirements import Requirement

_logger: Logger = getLogger(__name__)


def is_installed(req: str) -> bool:
    """Is the given required package installed?"""
    req = Requirement(req)

    try:
        dist_version = version(req.name)
    except PackageNotFoundError as exc:
        _logger.debug("Package %s is not installed, exception: %s", req, exc)
        return False

    if not list(req.specifier.filter([dist_version])):
        _logger.debug(
            "package %s is available but version %s is installed. Skipping.",
            req,
            dist_version,
        )
        return False
    return True


def get_env(name: str, environ: Optional[Mapping[str, str]] = None) -> str:
    """Returns the value of the environment variable, or an empty string when it is unset.

    environ defaults to the process environment. Passing a plain dict lets callers inspect
    an environment other than the current one.
    """
    if environ is None:
        environ = os.environ
    return environ.get(name) or ""


IS_GOOGLECLOUDPROFILER_INSTALLED: bool = is_installed("google-cloud-profiler")
