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
"""Tests for the scrape route and the application lifespan."""

from __future__ import annotations

import time
from pathlib import Path

from prometheus_client import CollectorRegistry, Gauge
from starlette.applications import Starlette
from starlette.testclient import TestClient

from epimetheus.application import ExporterApplication
from epimetheus.config.properties import ExporterProperties
from epimetheus.web.app import create_app, make_metrics_route


def _wait_for(client: TestClient, text: str, timeout: float = 3.0) -> str:
    deadline = time.monotonic() + timeout
    body = ""
    while time.monotonic() < deadline:
        body = client.get("/metrics").text
        if text in body:
            return body
        time.sleep(0.02)
    return body


class TestMetricsRoute:
    def test_serves_registry_in_text_format(self) -> None:
        registry = CollectorRegistry()
        Gauge("temperature", "temperature", registry=registry).set(21.5)
        client = TestClient(Starlette(routes=[make_metrics_route(registry)]))

        response = client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert "version=" in response.headers["content-type"]
        assert "temperature 21.5" in response.text

    def test_reads_the_registry_on_every_request(self) -> None:
        registry = CollectorRegistry()
        gauge = Gauge("temperature", "temperature", registry=registry)
        client = TestClient(Starlette(routes=[make_metrics_route(registry)]))

        gauge.set(1)
        assert "temperature 1.0" in client.get("/metrics").text
        gauge.set(2)
        assert "temperature 2.0" in client.get("/metrics").text

    def test_other_routes_are_not_found(self) -> None:
        client = TestClient(Starlette(routes=[make_metrics_route(CollectorRegistry())]))
        assert client.get("/").status_code == 404
        assert client.get("/health").status_code == 404

    def test_only_get_is_allowed(self) -> None:
        client = TestClient(Starlette(routes=[make_metrics_route(CollectorRegistry())]))
        assert client.post("/metrics").status_code == 405


class TestExporterApp:
    def test_internal_metrics_are_exposed_without_lifespan(self, tmp_path: Path) -> None:
        properties = ExporterProperties(files=[str(tmp_path / "a.json"), str(tmp_path / "b.json")])
        application = ExporterApplication(properties, registry=CollectorRegistry())
        client = TestClient(create_app(application))

        body = client.get("/metrics").text

        assert "epimetheus_sources_total 2.0" in body
        assert "epimetheus_metrics_total 0.0" in body

    def test_lifespan_runs_the_first_cycle_immediately(self, tmp_path: Path) -> None:
        source = tmp_path / "metrics.json"
        source.write_text('{"app": {"requests": 42}}')
        properties = ExporterProperties(files=[str(source)], metric_prefix="svc_", interval=60)
        application = ExporterApplication(properties, registry=CollectorRegistry())

        with TestClient(create_app(application)) as client:
            body = _wait_for(client, "svc_app__requests 42.0")

        assert "svc_app__requests 42.0" in body
        assert "epimetheus_source_reads_total 1.0" in body
        assert application.scheduler.running is False
