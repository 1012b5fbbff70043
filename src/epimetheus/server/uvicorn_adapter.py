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
"""Uvicorn ASGI server adapter."""

from __future__ import annotations

from typing import Any

import uvicorn


class UvicornServerAdapter:
    """Serves the exporter's ASGI app with Uvicorn.

    Uvicorn's own access logging is kept at ``warning`` so that scrapes do
    not flood the structured log. A bind failure makes Uvicorn exit the
    process with status 1.
    """

    def build_config(self, app: Any, host: str, port: int) -> uvicorn.Config:
        return uvicorn.Config(
            app,
            host=host,
            port=port,
            lifespan="on",
            log_level="warning",
            access_log=False,
        )

    def serve(self, app: Any, host: str, port: int) -> None:
        """Start Uvicorn (blocking)."""
        uvicorn.Server(self.build_config(app, host, port)).run()
