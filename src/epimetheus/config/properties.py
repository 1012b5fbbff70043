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
"""Exporter configuration properties."""

from __future__ import annotations

import dataclasses
import ipaddress
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from epimetheus.core.config import Config, config_properties, split_list
from epimetheus.kernel.exceptions import ConfigurationException


_LIST_FIELDS = frozenset({"files", "ignore_keys"})


@config_properties(prefix="epimetheus")
@dataclass
class ExporterProperties:
    """Configuration for the exporter (epimetheus.*)."""

    listen_addr: str = field(default="0.0.0.0", metadata={"env": "EPI_IP"})
    port: int = 8080
    files: list[str] = field(default_factory=list)
    ignore_keys: list[str] = field(default_factory=list)
    interval: int = 60
    metric_prefix: str = ""
    log_format: str = "json"
    log_level: str = "info"
    timeout: float = 30.0

    def validate(self) -> None:
        """Reject settings the exporter cannot start with.

        Raises:
            ConfigurationException: on the first invalid setting.
        """
        if not self.files:
            raise ConfigurationException(
                "At least one source must be configured (--files / EPI_FILES)",
                code="CONFIG_NO_SOURCES",
            )
        try:
            ipaddress.ip_address(self.listen_addr)
        except ValueError:
            raise ConfigurationException(
                f"Invalid listen address: {self.listen_addr!r}", code="CONFIG_LISTEN_ADDR"
            ) from None
        if not 1 <= self.port <= 65535:
            raise ConfigurationException(f"Invalid port: {self.port}", code="CONFIG_PORT")
        if self.interval < 1:
            raise ConfigurationException(
                f"Interval must be at least 1 second, got {self.interval}", code="CONFIG_INTERVAL"
            )
        if self.timeout <= 0:
            raise ConfigurationException(
                f"Timeout must be positive, got {self.timeout}", code="CONFIG_TIMEOUT"
            )


def load_properties(
    config_path: str | Path | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> ExporterProperties:
    """Resolve and validate the exporter settings.

    Priority (highest wins): *overrides* (command-line flags), ``EPI_*``
    environment variables, the optional YAML/TOML file, dataclass defaults.
    Overrides that are ``None`` or empty sequences count as not given.

    Raises:
        ConfigurationException: if a setting is missing or invalid.
    """
    config = Config.from_file(config_path) if config_path else Config()
    properties = config.bind(ExporterProperties)

    given: dict[str, Any] = {}
    for name, value in (overrides or {}).items():
        if value is None or value == ():
            continue
        given[name] = split_list(value) if name in _LIST_FIELDS else value
    properties = dataclasses.replace(properties, **given)

    properties.validate()
    return properties

