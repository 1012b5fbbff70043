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
"""Starlette application exposing the scrape route."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import structlog
from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, generate_latest
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import Response
from starlette.routing import Route

from epimetheus.application import ExporterApplication

logger = structlog.get_logger("epimetheus.web")


def make_metrics_route(registry: CollectorRegistry) -> Route:
    """``GET /metrics`` — the registry in Prometheus text exposition format."""

    async def handler(request: Request) -> Response:
        logger.debug("handling_metrics_request")
        return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

    return Route("/metrics", handler, methods=["GET"])


def create_app(application: ExporterApplication) -> Starlette:
    """Build the ASGI app; its lifespan starts and stops the collection loop."""

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        await application.startup()
        try:
            yield
        finally:
            await application.shutdown()

    return Starlette(routes=[make_metrics_route(application.registry)], lifespan=lifespan)
