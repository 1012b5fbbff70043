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
"""Epimetheus CLI — start the exporter."""

from __future__ import annotations

from typing import Any

import click
import structlog

from epimetheus import __version__
from epimetheus.application import ExporterApplication
from epimetheus.cli.console import err_console
from epimetheus.config.properties import ExporterProperties, load_properties
from epimetheus.kernel.exceptions import ConfigurationException
from epimetheus.logging.structlog_adapter import StructlogAdapter
from epimetheus.server.uvicorn_adapter import UvicornServerAdapter
from epimetheus.web.app import create_app

logger = structlog.get_logger("epimetheus.core")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="epimetheus")
@click.option("--config", "config_path", type=click.Path(dir_okay=False), default=None,
              help="Optional YAML/TOML file with an 'epimetheus' section.")
@click.option("--listen-addr", default=None, help="Bind address [env: EPI_IP] (default: 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port [env: EPI_PORT] (default: 8080).")
@click.option("--files", multiple=True,
              help="Comma-separated file paths and/or URLs to read; repeatable [env: EPI_FILES].")
@click.option("--ignore-keys", multiple=True,
              help="Comma-separated flattened keys to skip; repeatable [env: EPI_IGNORE_KEYS].")
@click.option("--interval", default=None, type=int,
              help="Seconds between collection cycles [env: EPI_INTERVAL] (default: 60).")
@click.option("--metric-prefix", default=None,
              help="Prefix prepended to every metric name [env: EPI_METRIC_PREFIX].")
@click.option("--log-format", default=None, help="json|term [env: EPI_LOG_FORMAT] (default: json).")
@click.option("--log-level", default=None, help="Log level [env: EPI_LOG_LEVEL] (default: info).")
@click.option("--timeout", default=None, type=float,
              help="HTTP source timeout in seconds [env: EPI_TIMEOUT] (default: 30).")
def cli(config_path: str | None, **overrides: Any) -> None:
    """Expose JSON, YAML and CSV files (local or over HTTP) as Prometheus metrics."""
    try:
        properties = load_properties(config_path, overrides)
    except ConfigurationException as exc:
        err_console.print(f"[error]Configuration error:[/error] {exc}")
        raise SystemExit(1) from None

    StructlogAdapter().configure(properties.log_format, properties.log_level)
    run(properties)


def run(properties: ExporterProperties, server: UvicornServerAdapter | None = None) -> None:
    """Build the exporter and serve it until the process is stopped."""
    logger.info("starting_epimetheus", listen_addr=properties.listen_addr, port=properties.port)

    application = ExporterApplication(properties)
    app = create_app(application)

    logger.info("listening", address=f"{properties.listen_addr}:{properties.port}")
    (server or UvicornServerAdapter()).serve(app, properties.listen_addr, properties.port)
