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
"""Tests for the flattening algorithm."""

from __future__ import annotations

from epimetheus.decoding.flatten import flatten


class TestFlattenMappings:
    def test_nested_mappings_and_sequences(self) -> None:
        result = flatten({"a": {"b": 1, "c": [2, 3]}})
        assert result == {"a__b": 1, "a__c__0": 2, "a__c__1": 3}

    def test_top_level_keys_have_no_separator(self) -> None:
        assert flatten({"cpu": 0.5, "mem": 128}) == {"cpu": 0.5, "mem": 128}

    def test_deep_nesting(self) -> None:
        assert flatten({"a": {"b": {"c": {"d": 4}}}}) == {"a__b__c__d": 4}

    def test_empty_containers_produce_nothing(self) -> None:
        assert flatten({"a": {}, "b": []}) == {}

    def test_scalar_kinds_are_kept_as_is(self) -> None:
        result = flatten({"s": "text", "t": True, "n": None, "f": 1.5})
        assert result == {"s": "text", "t": True, "n": None, "f": 1.5}


class TestFlattenSequences:
    def test_top_level_list_keeps_leading_separator(self) -> None:
        assert flatten([10, 20]) == {"__0": 10, "__1": 20}

    def test_list_of_mappings(self) -> None:
        result = flatten([{"x": 1}, {"x": 2}])
        assert result == {"__0__x": 1, "__1__x": 2}

    def test_nested_lists(self) -> None:
        assert flatten({"m": [[1, 2], [3]]}) == {"m__0__0": 1, "m__0__1": 2, "m__1__0": 3}


class TestFlattenScalars:
    def test_top_level_scalar_uses_empty_key(self) -> None:
        assert flatten(5) == {"": 5}

    def test_top_level_null(self) -> None:
        assert flatten(None) == {"": None}


class TestFlattenPurity:
    def test_same_tree_twice_gives_equal_maps(self) -> None:
        tree = {"a": {"b": [1, {"c": 2}]}, "d": "3"}
        assert flatten(tree) == flatten(tree)

    def test_input_is_not_modified(self) -> None:
        tree = {"a": {"b": [1, 2]}}
        flatten(tree)
        assert tree == {"a": {"b": [1, 2]}}

    def test_calls_do_not_share_state(self) -> None:
        first = flatten({"a": 1})
        second = flatten({"b": 2})
        assert first == {"a": 1}
        assert second == {"b": 2}
