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
"""Tests for HttpxClientAdapter."""

from __future__ import annotations

import httpx
import pytest

from epimetheus import __version__
from epimetheus.client.adapters.httpx_adapter import HttpxClientAdapter
from epimetheus.client.ports.outbound import HttpClientPort


class TestHttpxClientAdapter:
    def test_implements_port(self) -> None:
        adapter = HttpxClientAdapter(transport=httpx.MockTransport(lambda request: httpx.Response(200)))
        assert isinstance(adapter, HttpClientPort)

    @pytest.mark.asyncio
    async def test_sends_user_agent(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["user-agent"])
            return httpx.Response(200)

        adapter = HttpxClientAdapter(transport=httpx.MockTransport(handler))
        response = await adapter.request("GET", "http://example.com/")
        await adapter.close()

        assert response.status_code == 200
        assert seen == [f"epimetheus/{__version__}"]

    @pytest.mark.asyncio
    async def test_custom_headers(self) -> None:
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["authorization"])
            return httpx.Response(200)

        adapter = HttpxClientAdapter(
            headers={"Authorization": "Bearer t"},
            transport=httpx.MockTransport(handler),
        )
        await adapter.request("GET", "http://example.com/")
        await adapter.close()

        assert seen == ["Bearer t"]
