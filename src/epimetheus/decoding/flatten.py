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
"""Flattening of nested documents into joined key paths."""

from __future__ import annotations

from typing import Any

SEPARATOR = "__"

FlatMap = dict[str, Any]


def flatten(tree: Any) -> FlatMap:
    """Flatten a JSON-shaped tree into a single-level mapping.

    Mapping keys are joined with ``__``. Sequence indices are always
    appended with a leading ``__``, even at the top level, so a top-level
    list produces keys such as ``__0`` and ``__1``. Scalar leaves
    (numbers, strings, booleans and ``None``) become the values.

    Usage::

        flatten({"a": {"b": 1, "c": [2, 3]}})
        # {"a__b": 1, "a__c__0": 2, "a__c__1": 3}
    """
    result: FlatMap = {}
    _flatten_into(tree, "", result)
    return result


def _flatten_into(value: Any, prefix: str, result: FlatMap) -> None:
    if isinstance(value, dict):
        for key, child in value.items():
            child_prefix = str(key) if not prefix else f"{prefix}{SEPARATOR}{key}"
            _flatten_into(child, child_prefix, result)
    elif isinstance(value, list):
        for index, child in enumerate(value):
            _flatten_into(child, f"{prefix}{SEPARATOR}{index}", result)
    else:
        result[prefix] = value
