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
"""Format decoders — normalize JSON, YAML and CSV content into flat mappings."""

from __future__ import annotations

import csv
import io
import json
from typing import Any, Protocol, runtime_checkable

import yaml  # type: ignore[import-untyped]

from epimetheus.decoding.flatten import FlatMap, flatten
from epimetheus.decoding.numbers import parse_number
from epimetheus.kernel.exceptions import DecodeException, UnsupportedFormatException


@runtime_checkable
class Decoder(Protocol):
    """Turns the text of one document into a flat key/value mapping."""

    format_name: str

    def decode(self, content: str) -> FlatMap:
        """Decode *content*, raising DecodeException when it is malformed."""
        ...


class JsonDecoder:
    """Parses a JSON document and flattens the resulting tree."""

    format_name = "json"

    def decode(self, content: str) -> FlatMap:
        try:
            tree = json.loads(content)
        except (ValueError, RecursionError) as exc:
            raise DecodeException(
                f"Failed to parse JSON content: {exc}", code="DECODE_JSON"
            ) from exc
        return _flatten_document(tree)


class YamlDecoder:
    """Parses a YAML document and flattens it through the JSON tree model.

    The parsed YAML is round-tripped through JSON so that both formats
    share one tree shape: mapping keys become strings, and values with no
    JSON counterpart (timestamps, binary, recursive anchors) are rejected.
    """

    format_name = "yaml"

    def decode(self, content: str) -> FlatMap:
        try:
            document = yaml.safe_load(content)
        except (yaml.YAMLError, RecursionError) as exc:
            raise DecodeException(
                f"Failed to parse YAML content: {exc}", code="DECODE_YAML"
            ) from exc
        return _flatten_document(self._to_json_tree(document))

    @staticmethod
    def _to_json_tree(document: Any) -> Any:
        try:
            return json.loads(json.dumps(document))
        except (TypeError, ValueError, RecursionError) as exc:
            raise DecodeException(
                f"Failed to convert YAML to JSON: {exc}", code="DECODE_YAML_CONVERT"
            ) from exc


def _flatten_document(tree: Any) -> FlatMap:
    try:
        return flatten(tree)
    except RecursionError as exc:
        raise DecodeException(
            "Document is nested too deeply to flatten", code="DECODE_DEPTH"
        ) from exc


class CsvDecoder:
    """Reads the header row and the first data row of a CSV document.

    Each header is paired with the cell beneath it. Cells that do not
    parse as floats are dropped silently; any further data rows are
    ignored.
    """

    format_name = "csv"

    def decode(self, content: str) -> FlatMap:
        # Blank lines are not records.
        rows = (row for row in csv.reader(io.StringIO(content)) if row)
        try:
            headers = next(rows, None)
            if headers is None:
                raise DecodeException("Failed to read CSV headers", code="DECODE_CSV_HEADERS")
            first_row = next(rows, None)
        except csv.Error as exc:
            raise DecodeException(f"Failed to parse CSV content: {exc}", code="DECODE_CSV") from exc

        if first_row is None:
            raise DecodeException("Failed to read first CSV row", code="DECODE_CSV_ROW")
        if len(first_row) != len(headers):
            raise DecodeException(
                "Failed to read first CSV row",
                code="DECODE_CSV_ROW",
                context={"headers": len(headers), "fields": len(first_row)},
            )

        flat: FlatMap = {}
        for header, cell in zip(headers, first_row):
            value = _parse_float(cell)
            if value is not None:
                flat[header] = value
        return flat


def _parse_float(cell: str) -> float | None:
    try:
        return parse_number(cell)
    except ValueError:
        return None


_DECODERS: dict[str, Decoder] = {
    "json": JsonDecoder(),
    "yaml": YamlDecoder(),
    "yml": YamlDecoder(),
    "csv": CsvDecoder(),
}


def decoder_for(format_name: str) -> Decoder:
    """Return the decoder registered for *format_name*.

    Raises:
        UnsupportedFormatException: for ``unknown``, an empty extension or
            any other tag without a decoder.
    """
    try:
        return _DECODERS[format_name]
    except KeyError:
        raise UnsupportedFormatException(
            f"Unsupported file format: {format_name!r}",
            code="FORMAT_UNSUPPORTED",
            context={"file_type": format_name},
        ) from None


def supported_formats() -> list[str]:
    """Format tags that have a decoder."""
    return sorted(_DECODERS)
