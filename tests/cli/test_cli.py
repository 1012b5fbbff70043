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
"""Tests for the command-line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner
from starlette.applications import Starlette

from epimetheus import __version__
from epimetheus.cli.main import cli, run
from epimetheus.config.properties import ExporterProperties


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("EPI_IP", "EPI_PORT", "EPI_FILES", "EPI_IGNORE_KEYS", "EPI_INTERVAL", "EPI_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)


class _RecordingServer:
    def __init__(self) -> None:
        self.calls: list[tuple[Any, str, int]] = []

    def serve(self, app: Any, host: str, port: int) -> None:
        self.calls.append((app, host, port))


class TestCLI:
    def test_help(self) -> None:
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "--files" in result.output
        assert "--metric-prefix" in result.output

    def test_version(self) -> None:
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_missing_sources_exits_with_error(self) -> None:
        with patch("epimetheus.cli.main.run") as run_mock:
            result = CliRunner().invoke(cli, [])
        assert result.exit_code == 1
        run_mock.assert_not_called()

    def test_invalid_listen_address_exits_with_error(self) -> None:
        with patch("epimetheus.cli.main.run") as run_mock:
            result = CliRunner().invoke(cli, ["--files", "a.json", "--listen-addr", "nowhere"])
        assert result.exit_code == 1
        run_mock.assert_not_called()

    def test_malformed_list_in_config_file_exits_with_error(self, tmp_path: Path) -> None:
        path = tmp_path / "epimetheus.yaml"
        path.write_text("epimetheus:\n  files: [a.json]\n  ignore_keys: 5\n")
        with patch("epimetheus.cli.main.run") as run_mock:
            result = CliRunner().invoke(cli, ["--config", str(path)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        run_mock.assert_not_called()

    def test_options_are_passed_to_run(self) -> None:
        with (
            patch("epimetheus.cli.main.run") as run_mock,
            patch("epimetheus.cli.main.StructlogAdapter") as adapter_cls,
        ):
            result = CliRunner().invoke(
                cli,
                [
                    "--files", "a.json,b.yaml",
                    "--files", "http://example.com/c",
                    "--ignore-keys", "secret",
                    "--port", "9100",
                    "--interval", "5",
                    "--metric-prefix", "app_",
                    "--log-format", "term",
                    "--log-level", "debug",
                ],
            )

        assert result.exit_code == 0, result.output
        properties = run_mock.call_args.args[0]
        assert properties.files == ["a.json", "b.yaml", "http://example.com/c"]
        assert properties.ignore_keys == ["secret"]
        assert properties.port == 9100
        assert properties.interval == 5
        assert properties.metric_prefix == "app_"
        adapter_cls.return_value.configure.assert_called_once_with("term", "debug")

    def test_files_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EPI_FILES", "env.json")
        with (
            patch("epimetheus.cli.main.run") as run_mock,
            patch("epimetheus.cli.main.StructlogAdapter"),
        ):
            result = CliRunner().invoke(cli, [])

        assert result.exit_code == 0, result.output
        assert run_mock.call_args.args[0].files == ["env.json"]


class TestRun:
    def test_serves_the_app_on_the_configured_address(self) -> None:
        server = _RecordingServer()
        properties = ExporterProperties(files=["a.json"], listen_addr="127.0.0.1", port=9300)

        run(properties, server=server)  # type: ignore[arg-type]

        assert len(server.calls) == 1
        app, host, port = server.calls[0]
        assert isinstance(app, Starlette)
        assert (host, port) == ("127.0.0.1", 9300)
