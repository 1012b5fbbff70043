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
"""Strict parsing of numeric text found in documents."""

from __future__ import annotations

import re

# ASCII digits only, no surrounding whitespace and no digit-group underscores.
_NUMBER = re.compile(
    r"[+-]?(?:inf|infinity|nan|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?)",
    re.IGNORECASE,
)


def parse_number(text: str) -> float:
    """Parse *text* as a float.

    Accepts decimal and exponent notation plus ``inf``/``infinity``/``nan``
    in any case, with an optional sign. Rejects what ``float()`` would
    otherwise tolerate: surrounding whitespace, ``1_000`` and non-ASCII
    digits.

    Raises:
        ValueError: if *text* is not a number in that notation.
    """
    if not _NUMBER.fullmatch(text):
        raise ValueError(f"could not convert string to float: {text!r}")
    return float(text)
