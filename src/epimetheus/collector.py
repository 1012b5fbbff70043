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
"""Collection cycle — fetch, decode and reconcile every configured source once."""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum

import structlog

from epimetheus.decoding.decoders import decoder_for
from epimetheus.kernel.exceptions import (
    DecodeException,
    FetchException,
    UnsupportedFormatException,
)
from epimetheus.metrics.internal import InternalMetrics
from epimetheus.metrics.registry import GaugeRegistry
from epimetheus.sources.fetcher import SourceFetcher

logger = structlog.get_logger("epimetheus.collector")


class CollectorState(Enum):
    """Collector state."""

    IDLE = "IDLE"
    COLLECTING = "COLLECTING"


class SourceCollector:
    """Runs collection cycles over a fixed, ordered list of sources.

    Sources are processed one after another so that the gauge registry
    has a single writer. A failure in one source is logged and counted,
    and the cycle carries on with the next source.
    """

    def __init__(
        self,
        sources: Sequence[str],
        fetcher: SourceFetcher,
        gauges: GaugeRegistry,
        internal_metrics: InternalMetrics,
        ignore_keys: Sequence[str] = (),
        metric_prefix: str = "",
    ) -> None:
        self._sources = tuple(sources)
        self._fetcher = fetcher
        self._gauges = gauges
        self._internal = internal_metrics
        self._ignore_keys = frozenset(ignore_keys)
        self._metric_prefix = metric_prefix
        self._state = CollectorState.IDLE

    @property
    def state(self) -> CollectorState:
        return self._state

    @property
    def sources(self) -> tuple[str, ...]:
        return self._sources

    async def collect(self) -> int:
        """Run one cycle and return the number of gauges updated in it.

        The total is also published as ``epimetheus_metrics_total``,
        replacing the value of the previous cycle.
        """
        self._state = CollectorState.COLLECTING
        try:
            metric_count = 0
            for source in self._sources:
                metric_count += await self._collect_source(source)
            self._internal.metrics_total.set(metric_count)
        finally:
            self._state = CollectorState.IDLE
        logger.debug("collection_cycle_finished", metrics=metric_count)
        return metric_count

    async def _collect_source(self, source: str) -> int:
        logger.debug("processing_file", file=source)
        self._internal.source_reads_total.inc()

        try:
            document = await self._fetcher.fetch(source)
        except FetchException as exc:
            self._internal.source_read_failures_total.inc()
            logger.error("source_read_failed", file=source, error=str(exc))
            return 0

        logger.debug("processing_content", file=source, file_type=document.format)
        try:
            decoder = decoder_for(document.format)
        except UnsupportedFormatException:
            logger.warning("unsupported_file_format", file=source, file_type=document.format)
            return 0

        try:
            flat = decoder.decode(document.content)
        except DecodeException as exc:
            logger.error("source_decode_failed", file=source, file_type=document.format, error=str(exc))
            return 0

        return await self._gauges.reconcile(flat, self._ignore_keys, self._metric_prefix)
