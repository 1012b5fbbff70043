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
"""Gauge registry — reconciles flattened documents into Prometheus gauges."""

from __future__ import annotations

import asyncio
from collections.abc import Collection, Mapping
from typing import Any

import structlog
from prometheus_client import CollectorRegistry, Gauge

from epimetheus.decoding.numbers import parse_number
from epimetheus.kernel.exceptions import RegistrationConflictException, ValueCoercionException

logger = structlog.get_logger("epimetheus.metrics")


def coerce_value(value: Any) -> float:
    """Convert a flattened leaf value to a float.

    Numbers pass through and strings are parsed strictly. Booleans,
    ``None``, integers beyond the float range and any other kind are
    rejected.

    Raises:
        ValueCoercionException: if the value cannot be used as a gauge value.
    """
    if isinstance(value, bool):
        raise ValueCoercionException("Unsupported value type for metric", code="VALUE_UNSUPPORTED")
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            raise ValueCoercionException(
                "Number too large for a metric value", code="VALUE_OUT_OF_RANGE"
            ) from None
    if isinstance(value, str):
        try:
            return parse_number(value)
        except ValueError:
            raise ValueCoercionException(
                "Failed to parse string as number", code="VALUE_NOT_NUMERIC"
            ) from None
    raise ValueCoercionException("Unsupported value type for metric", code="VALUE_UNSUPPORTED")


class GaugeRegistry:
    """Owns the process-wide map of exported gauges.

    Each metric name is registered with the underlying CollectorRegistry
    exactly once, the first time it is observed; later observations only
    overwrite the value. Gauges are never removed, so a key that vanishes
    from its source keeps reporting its last value.

    The map is guarded by an asyncio lock held for a whole
    :meth:`reconcile` call. Scrapes read the CollectorRegistry, not this
    map.

    Usage::

        registry = CollectorRegistry()
        gauges = GaugeRegistry(registry)
        count = await gauges.reconcile({"cpu": 0.5}, ignore_keys={"secret"}, prefix="app_")
    """

    def __init__(self, registry: CollectorRegistry) -> None:
        self._registry = registry
        self._gauges: dict[str, Gauge] = {}
        self._lock = asyncio.Lock()

    @property
    def registry(self) -> CollectorRegistry:
        return self._registry

    async def reconcile(
        self,
        flat: Mapping[str, Any],
        ignore_keys: Collection[str] = (),
        prefix: str = "",
    ) -> int:
        """Create or update one gauge per key of *flat*.

        Keys listed in *ignore_keys* (matched before prefixing) are skipped
        silently. Values that cannot be coerced, and names the registry
        refuses, are logged and skipped without affecting sibling keys.

        Returns:
            The number of keys turned into gauge updates.
        """
        updated = 0
        async with self._lock:
            for key, value in flat.items():
                if key in ignore_keys:
                    continue
                metric_name = f"{prefix}{key}"
                try:
                    number = coerce_value(value)
                except ValueCoercionException as exc:
                    logger.warning("metric_value_rejected", metric=metric_name, value=value, reason=str(exc))
                    continue
                try:
                    gauge = self._get_or_create(metric_name, key)
                except RegistrationConflictException as exc:
                    logger.error("metric_registration_failed", metric=metric_name, error=str(exc))
                    continue
                gauge.set(number)
                updated += 1
                logger.debug("updated_metric", metric=metric_name, value=number)
        return updated

    def _get_or_create(self, metric_name: str, help_text: str) -> Gauge:
        gauge = self._gauges.get(metric_name)
        if gauge is None:
            try:
                gauge = Gauge(metric_name, help_text, registry=self._registry)
            except ValueError as exc:
                raise RegistrationConflictException(
                    str(exc), code="METRIC_REGISTRATION", context={"metric": metric_name}
                ) from exc
            self._gauges[metric_name] = gauge
        return gauge

    async def snapshot(self) -> dict[str, float]:
        """Current value of every exported gauge, keyed by metric name."""
        async with self._lock:
            return {name: self._registry.get_sample_value(name) for name in self._gauges}

    def __contains__(self, metric_name: object) -> bool:
        return metric_name in self._gauges

    def __len__(self) -> int:
        return len(self._gauges)
