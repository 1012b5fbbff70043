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
"""Tests for InternalMetrics — exporter self-metrics."""

from __future__ import annotations

from prometheus_client import CollectorRegistry

from epimetheus.metrics.internal import InternalMetrics


class TestInternalMetrics:
    def test_registers_all_metrics_at_zero(self) -> None:
        registry = CollectorRegistry()
        InternalMetrics(registry)

        assert registry.get_sample_value("epimetheus_sources_total") == 0.0
        assert registry.get_sample_value("epimetheus_source_reads_total") == 0.0
        assert registry.get_sample_value("epimetheus_source_read_failures_total") == 0.0
        assert registry.get_sample_value("epimetheus_metrics_total") == 0.0

    def test_counters_accumulate(self) -> None:
        registry = CollectorRegistry()
        metrics = InternalMetrics(registry)

        metrics.source_reads_total.inc()
        metrics.source_reads_total.inc()
        metrics.source_read_failures_total.inc()

        assert registry.get_sample_value("epimetheus_source_reads_total") == 2.0
        assert registry.get_sample_value("epimetheus_source_read_failures_total") == 1.0

    def test_separate_registries_do_not_collide(self) -> None:
        first_registry = CollectorRegistry()
        second_registry = CollectorRegistry()
        InternalMetrics(first_registry).sources_total.set(3)
        InternalMetrics(second_registry)

        assert first_registry.get_sample_value("epimetheus_sources_total") == 3.0
        assert second_registry.get_sample_value("epimetheus_sources_total") == 0.0
