"""Tests for the planboard CLI (chat, send, config)."""

from __future__ import annotations

import logging
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from typer.testing import CliRunner

from conftest import FakeProvider, make_response
from planboard.cli import app
from planboard.generation import GenerationOrchestrator
from planboard.llm.gemini import GeminiProvider
from planboard.llm.models import LLMConfig, LLMError
from planboard.publisher import PublishError
from planboard.session import ConversationSession

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    # the app callback attaches a handler bound to the runner's stderr
    logger = logging.getLogger("planboard")
    level, handlers = logger.level, list(logger.handlers)
    yield tmp_path
    logger.setLevel(level)
    logger.handlers = handlers


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def wired(provider, mock_publisher):
    """Patch from_config so commands run against the fake provider."""
    orch = GenerationOrchestrator(ConversationSession(provider, "SYSTEM"), mock_publisher)
    with patch.object(GenerationOrchestrator, "from_config", return_value=orch) as factory:
        yield factory


# ── planboard config ────────────────────────────────────────────────


def test_config_init_creates_file(isolated):
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 0
    assert (isolated / "planboard.yaml").is_file()


def test_config_init_refuses_overwrite(isolated):
    (isolated / "planboard.yaml").write_text("log_level: debug\n")
    result = runner.invoke(app, ["config", "init"])
    assert result.exit_code == 1
    assert "already exists" in result.output
    assert (isolated / "planboard.yaml").read_text() == "log_level: debug\n"


def test_config_init_force(isolated):
    (isolated / "planboard.yaml").write_text("log_level: debug\n")
    result = runner.invoke(app, ["config", "init", "--force"])
    assert result.exit_code == 0
    assert "gemini-2.5-flash" in (isolated / "planboard.yaml").read_text()


def test_config_show():
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 0
    assert "gemini-2.5-flash" in result.output


def test_invalid_config_exits(isolated):
    (isolated / "planboard.yaml").write_text("llm: [unclosed\n")
    result = runner.invoke(app, ["config", "show"])
    assert result.exit_code == 1
    assert "Invalid YAML" in result.output


# ── planboard send ──────────────────────────────────────────────────


def test_send_publishes_board(wired, provider):
    provider.queue(make_response(prompt=120, output=340))
    result = runner.invoke(app, ["send", "Plan a 3-day trip to Lisbon"])
    assert result.exit_code == 0
    assert "Board Published" in result.output
    assert "https://x/p1" in result.output
    assert "340" in result.output


def test_send_passes_mode_override(wired, provider):
    provider.queue(make_response())
    result = runner.invoke(app, ["send", "Plan", "--mode", "full_history"])
    assert result.exit_code == 0
    cfg = wired.call_args.args[0]
    assert cfg.session.mode == "full_history"


def test_send_existing_project(wired, provider, mock_publisher):
    provider.queue(make_response())
    result = runner.invoke(app, ["send", "Add a budget", "--project-id", "p0"])
    assert result.exit_code == 0
    assert mock_publisher.publish.await_args.args[1] == "p0"


def test_send_blank_text():
    result = runner.invoke(app, ["send", "   "])
    assert result.exit_code == 1
    assert "empty" in result.output


def test_send_empty_model_output(wired, provider, mock_publisher):
    provider.queue(make_response(content=""))
    result = runner.invoke(app, ["send", "Plan"])
    assert result.exit_code == 0
    assert "Empty model response" in result.output
    assert "Generation Complete" in result.output
    mock_publisher.publish.assert_not_awaited()


def test_send_publish_failure(wired, provider, mock_publisher):
    mock_publisher.publish.side_effect = PublishError(
        "xTiles API error 500: boom", status_code=500, body="boom"
    )
    provider.queue(make_response(content="# Saved board"))
    result = runner.invoke(app, ["send", "Plan", "--show-markdown"])
    assert result.exit_code == 1
    assert "Publish failed" in result.output
    assert "HTTP 500" in result.output
    assert "Saved board" in result.output


def test_send_llm_failure(wired, provider):
    provider.queue(LLMError("gemini", "chat", RuntimeError("quota")))
    result = runner.invoke(app, ["send", "Plan"])
    assert result.exit_code == 1
    assert "Generation failed" in result.output


def test_send_missing_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    result = runner.invoke(app, ["send", "Plan"])
    assert result.exit_code == 1
    assert "Missing API key" in result.output


# ── planboard chat ──────────────────────────────────────────────────


def test_chat_usage_and_quit(wired):
    result = runner.invoke(app, ["chat"], input="/usage\n/quit\n")
    assert result.exit_code == 0
    assert "What would you like" in result.output
    assert "Token usage" in result.output


def test_chat_turn_shows_project_link(wired, provider, mock_publisher):
    provider.queue(make_response(prompt=10, output=20))
    result = runner.invoke(app, ["chat"], input="Plan a wedding\n/quit\n")
    assert result.exit_code == 0
    assert "Open project" in result.output
    mock_publisher.publish.assert_awaited_once()


def test_chat_error_is_rendered_and_loop_continues(wired, provider, mock_publisher):
    mock_publisher.publish.side_effect = PublishError(
        "xTiles API error 502: bad gateway", status_code=502
    )
    provider.queue(make_response(), make_response())
    result = runner.invoke(app, ["chat"], input="first\nsecond\n/quit\n")
    assert result.exit_code == 0
    assert result.output.count("Sorry, something went wrong") == 2
    assert "HTTP 502" in result.output


def test_chat_mode_switch(wired):
    result = runner.invoke(app, ["chat"], input="/mode full_history\n/mode bogus\n/quit\n")
    assert result.exit_code == 0
    assert "Mode: full_history" in result.output
    assert "Unknown mode" in result.output


def test_chat_eof_exits_cleanly(wired):
    result = runner.invoke(app, ["chat"], input="")
    assert result.exit_code == 0


def test_chat_survives_gemini_network_failure(mock_publisher):
    with patch("planboard.llm.gemini.genai"):
        gemini = GeminiProvider(LLMConfig(provider="google", model="gemini-2.5-flash", api_key="k"))
    sdk_chat = MagicMock()
    sdk_chat.send_message = AsyncMock(
        side_effect=[
            httpx.ConnectError("connection refused"),
            SimpleNamespace(text="# Board", usage_metadata=None, candidates=None),
        ]
    )
    gemini._client.aio.chats.create.return_value = sdk_chat
    orch = GenerationOrchestrator(ConversationSession(gemini, "SYSTEM"), mock_publisher)

    with patch.object(GenerationOrchestrator, "from_config", return_value=orch):
        result = runner.invoke(app, ["chat"], input="hello\nagain\n/quit\n")

    assert result.exit_code == 0
    assert "Sorry, something went wrong" in result.output
    assert "connection refused" in result.output
    assert "Open project" in result.output
    assert sdk_chat.send_message.await_count == 2
