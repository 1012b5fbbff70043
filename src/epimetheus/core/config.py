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
"""Configuration with YAML/TOML files, env vars, and dataclass binding."""

from __future__ import annotations

import dataclasses
import os
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_type_hints

import yaml  # type: ignore[import-untyped]

from epimetheus.kernel.exceptions import ConfigurationException

T = TypeVar("T")

ENV_PREFIX = "EPI_"

_CONFIG_PROPERTIES_ATTR = "__epimetheus_config_prefix__"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    A field may name its environment variable explicitly with
    ``field(metadata={"env": "EPI_IP"})``; otherwise the variable is
    ``EPI_<FIELD_NAME>``.

    Usage:
        @config_properties(prefix="epimetheus")
        @dataclass
        class ExporterProperties:
            port: int = 8080
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


class Config:
    """Hierarchical configuration with env var overrides applied on binding.

    Priority (highest wins):
    1. Environment variables (EPI_KEY format)
    2. Configuration dict / file values
    3. Dataclass defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load configuration from a YAML or TOML file.

        Raises:
            ConfigurationException: if the file cannot be read or parsed.
        """
        path = Path(path)
        try:
            data = cls._load_config_data(path)
        except (OSError, yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationException(
                f"Cannot load configuration file {path}: {exc}", code="CONFIG_FILE"
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Configuration file {path} must contain a mapping", code="CONFIG_FILE"
            )
        return cls(data)

    @staticmethod
    def _load_config_data(path: Path) -> Any:
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return tomllib.load(f) or {}
        with open(path) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def env_name(key: str) -> str:
        """Environment variable consulted for *key* (the first segment is dropped)."""
        _, _, rest = key.partition(".")
        return ENV_PREFIX + (rest or key).upper().replace(".", "_").replace("-", "_")

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix as a dict."""
        parts = prefix.split(".")
        current: Any = self._data
        for part in parts:
            if isinstance(current, dict):
                current = current.get(part, {})
            else:
                return {}
        return current if isinstance(current, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a @config_properties dataclass.

        Raises:
            ConfigurationException: if a value cannot be converted to the
                field's declared type.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        section = self.get_section(prefix)
        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            env_key = field.metadata.get("env") or self.env_name(f"{prefix}.{field.name}")
            value = os.environ.get(env_key)
            if value is None:
                if field.name not in section:
                    continue
                value = section[field.name]
            kwargs[field.name] = _convert(field.name, value, hints.get(field.name))

        return config_cls(**kwargs)


def _convert(name: str, value: Any, expected_type: Any) -> Any:
    try:
        if expected_type is int and not isinstance(value, int):
            return int(value)
        if expected_type is float and not isinstance(value, float):
            return float(value)
        if expected_type is bool and isinstance(value, str):
            return value.lower() in ("true", "1", "yes")
        if expected_type == list[str]:
            return split_list(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationException(
            f"Invalid value for '{name}': {value!r}", code="CONFIG_VALUE"
        ) from exc
    return value


def split_list(value: Any) -> list[str]:
    """Normalize a comma-separated string or a sequence into a list of strings."""
    if value is None:
        return []
    if isinstance(value, str):
        items: Any = [value]
    elif isinstance(value, (list, tuple)):
        items = value
    else:
        raise TypeError(f"Expected a string or a list, got {type(value).__name__}")
    parts = (part.strip() for item in items for part in str(item).split(","))
    return [part for part in parts if part]
