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
"""Self-metrics describing the exporter's own health."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge


class InternalMetrics:
    """Exporter health metrics, registered alongside the exported gauges.

    ``sources_total`` is set once at startup, the two counters accumulate
    over the process lifetime, and ``metrics_total`` is overwritten at the
    end of every collection cycle.
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        self.sources_total = Gauge(
            "epimetheus_sources_total",
            "Total number of file/url sources",
            registry=registry,
        )
        self.source_reads_total = Counter(
            "epimetheus_source_reads_total",
            "Total number of source read attempts",
            registry=registry,
        )
        self.source_read_failures_total = Counter(
            "epimetheus_source_read_failures_total",
            "Total number of source read failures",
            registry=registry,
        )
        self.metrics_total = Gauge(
            "epimetheus_metrics_total",
            "Total number of metrics being tracked",
            registry=registry,
        )
