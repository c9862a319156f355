"""Tests for the command-line entry point."""

import json
import sys
from unittest.mock import AsyncMock, patch

import pytest

from lingua_bridge.tutor.cli import ask, cli
from lingua_bridge.tutor.gateway import GatewayResponse

HANDLE = "lingua_bridge.tutor.cli.handle_request"


class TestAsk:
    """Tests for ask() async function."""

    @pytest.mark.asyncio
    async def test_success_returns_zero(self, capsys):
        response = GatewayResponse(
            status_code=200,
            headers={"Content-Type": "application/json"},
            body=json.dumps({"text": "Hello there!", "translation": "你好！", "success": True}),
        )
        with patch(HANDLE, new_callable=AsyncMock, return_value=response) as mock_handle:
            exit_code = await ask("Say hello")

        assert exit_code == 0
        printed = json.loads(capsys.readouterr().out)
        assert printed["statusCode"] == 200
        assert printed["body"]["translation"] == "你好！"

        request = mock_handle.call_args[0][0]
        assert request.method == "POST"
        assert json.loads(request.body) == {"message": "Say hello"}
        assert request.origin == "http://localhost:8888"

    @pytest.mark.asyncio
    async def test_failure_returns_one(self, settings_without_key, capsys):
        exit_code = await ask("Say hello")
        assert exit_code == 1
        printed = json.loads(capsys.readouterr().out)
        assert printed["statusCode"] == 500


class TestCli:
    """Tests for cli() argument parsing."""

    def test_ask_command(self):
        with (
            patch.object(sys, "argv", ["lingua-tutor", "ask", "What is a noun?"]),
            patch("lingua_bridge.tutor.cli.ask", new_callable=AsyncMock, return_value=0) as m,
            pytest.raises(SystemExit) as exc_info,
        ):
            cli()
        assert exc_info.value.code == 0
        m.assert_awaited_once_with("What is a noun?")

    def test_serve_command(self):
        with (
            patch.object(sys, "argv", ["lingua-tutor", "serve", "--port", "9000"]),
            patch("lingua_bridge.tutor.cli.serve", return_value=0) as m,
            pytest.raises(SystemExit) as exc_info,
        ):
            cli()
        assert exc_info.value.code == 0
        m.assert_called_once_with("127.0.0.1", 9000)

    def test_requires_command(self):
        with (
            patch.object(sys, "argv", ["lingua-tutor"]),
            pytest.raises(SystemExit) as exc_info,
        ):
            cli()
        assert exc_info.value.code == 2
