"""Tests for the process entrypoint."""

from __future__ import annotations

from unittest.mock import patch

from episodarr.interfaces.cli import cli


class TestParseArgs:
    def test_defaults(self) -> None:
        args = cli._parse_args([])
        assert args.host is None
        assert args.port is None
        assert cli.build_cli_overrides(args) == {}

    def test_overrides(self) -> None:
        args = cli._parse_args(
            ["--log-level", "DEBUG", "--log-format", "json", "--slug-cache-ttl", "60"]
        )
        assert cli.build_cli_overrides(args) == {
            "log_level": "DEBUG",
            "log_format": "json",
            "slug_cache_ttl_seconds": 60,
        }


class TestStart:
    def test_runs_uvicorn_with_built_app(self, monkeypatch) -> None:
        monkeypatch.delenv("HOST", raising=False)
        monkeypatch.delenv("PORT", raising=False)
        with (
            patch.object(cli, "configure_logging", return_value={"version": 1}) as cfg_log,
            patch.object(cli.uvicorn, "run") as run,
        ):
            cli.start(["--port", "8080", "--log-level", "WARNING"])

        config = cfg_log.call_args.args[0]
        assert config.log_level == "WARNING"
        _, kwargs = run.call_args
        assert kwargs["host"] == "0.0.0.0"
        assert kwargs["port"] == 8080
        assert kwargs["log_config"] == {"version": 1}
