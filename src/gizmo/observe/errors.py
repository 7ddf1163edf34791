# Copyright Amazon.com, Inc. or its affiliates. All Rights Reserved.
# SPDX-License-Identifier: Apache-2.0


class ObserveError(Exception):
    """Base class for errors raised while setting up GCP observability."""


class PlatformUnsupportedError(ObserveError):
    """Neither App Engine nor GCP resource detection confirms a GCP environment."""


class ExporterInitError(ObserveError):
    """The Cloud Trace / Cloud Monitoring exporter could not be created."""


class ProfilerInitError(ObserveError):
    """The Cloud Profiler agent could not be started."""
