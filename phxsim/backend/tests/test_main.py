"""
tests/test_main.py

Tests for main.py argument parsing and the run() wiring (uvicorn patched out).
"""

from __future__ import annotations

from unittest.mock import patch

from phxsim.backend import main as main_mod


class TestParseArgs:

    def test_defaults_come_from_settings(self):
        args = main_mod._parse_args([])
        assert args.port == main_mod.settings.PORT
        assert args.host == main_mod.settings.API_HOST
        assert args.log_level == main_mod.settings.LOG_LEVEL.upper()

    def test_overrides(self):
        args = main_mod._parse_args(["--port", "4555", "--host", "127.0.0.1", "--log-level", "DEBUG"])
        assert args.port == 4555
        assert args.host == "127.0.0.1"
        assert args.log_level == "DEBUG"


class TestRun:

    def test_run_serves_app_on_host_and_port(self):
        with patch.object(main_mod.uvicorn, "run") as mock_run:
            main_mod.run(host="127.0.0.1", port=4999)
        mock_run.assert_called_once()
        _, kwargs = mock_run.call_args
        assert kwargs["host"] == "127.0.0.1"
        assert kwargs["port"] == 4999
        assert kwargs["log_level"] == "warning"
