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
"""StructlogAdapter — structured logging for the exporter, JSON or terminal output."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from epimetheus import __version__

LOG_FORMATS = ("json", "term")

_LEVEL_ALIASES = {
    "trace": "DEBUG",
    "warn": "WARNING",
    "crit": "CRITICAL",
}


def resolve_level(level: str) -> int:
    """Map a level name to a stdlib level, falling back to INFO."""
    name = _LEVEL_ALIASES.get(level.lower(), level.upper())
    value = logging.getLevelName(name)
    return value if isinstance(value, int) else logging.INFO


def _add_version(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("version", __version__)
    return event_dict


class StructlogAdapter:
    """Logging adapter backed by structlog."""

    def __init__(self) -> None:
        self._level: int = logging.INFO
        self._format: str = "json"

    def configure(self, log_format: str = "json", log_level: str = "info") -> None:
        """Configure structlog and stdlib logging.

        Args:
            log_format: ``json`` for JSON lines, ``term`` for colored
                console output. Anything else falls back to JSON with a
                notice on stderr.
            log_level: Level name (``trace``, ``debug``, ``info``, ``warn``,
                ``error``, ``critical``); unknown names mean ``info``.
        """
        log_format = log_format.lower()
        if log_format not in LOG_FORMATS:
            print("Invalid log format specified. Defaulting to JSON.", file=sys.stderr)
            log_format = "json"
        self._format = log_format
        self._level = resolve_level(log_level)

        self._setup_structlog()

    def _setup_structlog(self) -> None:
        """Configure structlog processors and stdlib logging."""
        processors: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            _add_version,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]

        if self._format == "json":
            processors.append(structlog.processors.format_exc_info)
            processors.append(structlog.processors.JSONRenderer())
        else:
            processors.append(structlog.dev.ConsoleRenderer())

        structlog.configure(
            processors=processors,
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        logging.basicConfig(
            format="%(message)s",
            stream=sys.stdout,
            level=self._level,
            force=True,
        )
