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
"""Source fetcher — reads local files and HTTP(S) resources with format detection."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path

import httpx
import structlog

from epimetheus.client.ports.outbound import HttpClientPort
from epimetheus.kernel.exceptions import FileFetchException, NetworkFetchException

logger = structlog.get_logger("epimetheus.sources")

UNKNOWN_FORMAT = "unknown"

JSON_TYPES = ("application/json",)
YAML_TYPES = ("application/yaml", "application/x-yaml", "text/x-yaml")
CSV_TYPES = ("text/csv",)


@dataclass(frozen=True)
class RawDocument:
    """Content fetched from one source, tagged with its detected format."""

    source: str
    content: str
    format: str


def is_url(source: str) -> bool:
    """True when *source* is an ``http://`` or ``https://`` URL."""
    return source.startswith(("http://", "https://"))


def detect_format_from_content_type(content_type: str | None) -> str:
    """Map a ``Content-Type`` header value to a format tag.

    Matching is a case-insensitive substring test, so parameters such as
    ``; charset=utf-8`` do not matter. Returns ``"unknown"`` when nothing
    matches or the header is absent.
    """
    if not content_type:
        return UNKNOWN_FORMAT
    content_type = content_type.lower()
    if any(t in content_type for t in JSON_TYPES):
        return "json"
    if any(t in content_type for t in YAML_TYPES):
        return "yaml"
    if any(t in content_type for t in CSV_TYPES):
        return "csv"
    return UNKNOWN_FORMAT


def detect_format_from_path(path: str) -> str:
    """Use the literal file extension (without the dot) as the format tag."""
    return Path(path).suffix.removeprefix(".")


class SourceFetcher:
    """Resolves a source identifier into a RawDocument.

    URLs are fetched with a GET through the injected HTTP client and
    classified by their ``Content-Type``; anything else is read as a
    UTF-8 file and classified by its extension. Callers own the attempt
    and failure counters.
    """

    def __init__(self, client: HttpClientPort) -> None:
        self._client = client

    async def fetch(self, source: str) -> RawDocument:
        """Fetch *source*.

        Raises:
            NetworkFetchException: malformed URL, transport error or non-2xx
                status.
            FileFetchException: the file cannot be read as UTF-8 text.
        """
        if is_url(source):
            return await self._fetch_url(source)
        return await self._read_file(source)

    async def _fetch_url(self, url: str) -> RawDocument:
        logger.debug("fetching_url", url=url)
        try:
            response = await self._client.request("GET", url)
            response.raise_for_status()
            content = response.text
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise NetworkFetchException(
                f"Error fetching URL {url}: {exc}",
                code="FETCH_NETWORK",
                context={"url": url},
            ) from exc

        file_type = detect_format_from_content_type(response.headers.get("content-type"))
        logger.debug("detected_file_type_from_headers", url=url, file_type=file_type)
        return RawDocument(source=url, content=content, format=file_type)

    async def _read_file(self, path: str) -> RawDocument:
        loop = asyncio.get_running_loop()
        try:
            content = await loop.run_in_executor(None, _read_text, path)
        except (OSError, UnicodeDecodeError) as exc:
            raise FileFetchException(
                f"Error reading file {path}: {exc}",
                code="FETCH_IO",
                context={"file": path},
            ) from exc

        extension = detect_format_from_path(path)
        logger.debug("local_file_read", file=path, extension=extension)
        return RawDocument(source=path, content=content, format=extension)


def _read_text(path: str) -> str:
    return Path(path).read_text(encoding="utf-8")
