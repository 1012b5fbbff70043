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
"""Application bootstrap — wires the collection engine for one exporter process."""

from __future__ import annotations

from datetime import timedelta

import structlog
from prometheus_client import CollectorRegistry

from epimetheus.client.adapters.httpx_adapter import HttpxClientAdapter
from epimetheus.client.ports.outbound import HttpClientPort
from epimetheus.collector import SourceCollector
from epimetheus.config.properties import ExporterProperties
from epimetheus.metrics.internal import InternalMetrics
from epimetheus.metrics.registry import GaugeRegistry
from epimetheus.scheduling.task_scheduler import TaskScheduler
from epimetheus.sources.fetcher import SourceFetcher

logger = structlog.get_logger("epimetheus.core")


class ExporterApplication:
    """Owns the shared state of the exporter for the lifetime of the process.

    The metric registry, the gauge map and the self-metrics are created
    once here and handed to the collector (the single writer) and to the
    scrape route (which only reads the registry).

    Startup sequence:
    1. Register self-metrics and record the configured source count
    2. Start the fixed-rate collection loop (first cycle runs immediately)

    Shutdown stops the loop and closes the HTTP client.
    """

    def __init__(
        self,
        properties: ExporterProperties,
        client: HttpClientPort | None = None,
        registry: CollectorRegistry | None = None,
    ) -> None:
        self.properties = properties
        self.registry = registry if registry is not None else CollectorRegistry()
        self.internal_metrics = InternalMetrics(self.registry)
        self.internal_metrics.sources_total.set(len(properties.files))
        self.gauges = GaugeRegistry(self.registry)

        self._client: HttpClientPort = client or HttpxClientAdapter(
            timeout=timedelta(seconds=properties.timeout)
        )
        self.collector = SourceCollector(
            sources=properties.files,
            fetcher=SourceFetcher(self._client),
            gauges=self.gauges,
            internal_metrics=self.internal_metrics,
            ignore_keys=properties.ignore_keys,
            metric_prefix=properties.metric_prefix,
        )
        self.scheduler = TaskScheduler()
        self.scheduler.schedule(
            "collect-sources",
            self.collector.collect,
            fixed_rate=timedelta(seconds=properties.interval),
        )

    async def startup(self) -> None:
        """Start the background collection loop."""
        await self.scheduler.start()
        logger.info(
            "collection_started",
            sources=len(self.properties.files),
            interval_seconds=self.properties.interval,
        )

    async def shutdown(self) -> None:
        """Stop collecting and release the HTTP client."""
        await self.scheduler.stop()
        await self._client.close()
        logger.info("collection_stopped")
