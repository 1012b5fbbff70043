# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Unified exception hierarchy for epimetheus.

All exporter exceptions inherit from EpimetheusException. None of the
source or metric exceptions is meant to escape a collection cycle: they
are raised at the seam where the problem is detected and caught by the
collector, which logs them and moves on to the next key or source.

Categories:
- SourceException: fetching and decoding a configured source
- MetricException: turning a flattened value into a registered gauge
- ConfigurationException: invalid startup options (process-fatal)
"""

from __future__ import annotations


# =============================================================================
# Base Exception
# =============================================================================


class EpimetheusException(Exception):
    """Base exception for all epimetheus errors.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "FETCH_NETWORK").
        context: Arbitrary key-value pairs for error context and logging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Source Exceptions
# =============================================================================


class SourceException(EpimetheusException):
    """A configured source could not be turned into a flat mapping."""


class FetchException(SourceException):
    """The raw content of a source could not be read."""


class NetworkFetchException(FetchException):
    """Transport failure or non-success HTTP status for a URL source."""


class FileFetchException(FetchException):
    """Filesystem I/O (or text decoding) failure for a local source."""


class DecodeException(SourceException):
    """The content could not be parsed in its detected format."""


class UnsupportedFormatException(SourceException):
    """No decoder is registered for the detected format tag."""


# =============================================================================
# Metric Exceptions
# =============================================================================


class MetricException(EpimetheusException):
    """A single flattened key could not be exposed as a gauge."""


class ValueCoercionException(MetricException):
    """The value is not a number and does not parse as one."""


class RegistrationConflictException(MetricException):
    """The metric registry refused the gauge (duplicate or invalid name)."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationException(EpimetheusException):
    """Startup configuration is invalid."""
