"""Tests for the Claude-backed LLM client (Anthropic SDK mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import httpx
import pytest
from anthropic import APIConnectionError, APITimeoutError

from src.llm.client import JSON_OBJECT, AnthropicClient, CompletionRequest, LLMError


def _block(block_type: str, text: str = "") -> MagicMock:
    block = MagicMock()
    block.type = block_type
    block.text = text
    return block


def _mock_claude_response(*blocks: MagicMock, stop_reason: str = "end_turn") -> MagicMock:
    """Build a mock Anthropic messages.create response."""
    mock_response = MagicMock()
    mock_response.content = list(blocks)
    mock_response.model = "claude-sonnet-4-20250514"
    mock_response.stop_reason = stop_reason
    mock_response.usage = MagicMock(input_tokens=100, output_tokens=50)
    return mock_response


REQUEST = CompletionRequest(
    model="claude-3-5-haiku-latest",
    system_prompt="You analyze interviews.",
    user_prompt="Interview transcript:\n\n面试官：你好",
    temperature=0.3,
    max_tokens=2000,
    timeout=30.0,
)


class TestAnthropicClient:
    @patch("src.llm.client.Anthropic")
    def test_sends_request_fields(self, mock_anthropic_cls: MagicMock) -> None:
        mock_client = MagicMock()
        mock_anthropic_cls.return_value = mock_client
        mock_client.messages.create.return_value = _mock_claude_response(_block("text", "{}"))

        AnthropicClient(api_key="test-key").complete(REQUEST)

        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert call_kwargs["model"] == "claude-3-5-haiku-latest"
        assert call_kwargs["max_tokens"] == 2000
        assert call_kwargs["temperature"] == 0.3
        assert call_kwargs["system"] == "You analyze interviews."
        assert call_kwargs["timeout"] == 30.0
        assert call_kwargs["messages"] == [
            {"role": "user", "content": "Interview transcript:\n\n面试官：你好"}
        ]

    @patch("src.llm.client.Anthropic")
    def test_no_sdk_retries_by_default(self, mock_anthropic_cls: MagicMock) -> None:
        AnthropicClient(api_key="test-key")
        assert mock_anthropic_cls.call_args.kwargs["max_retries"] == 0

    @patch("src.llm.client.Anthropic")
    def test_json_format_adds_instruction(self, mock_anthropic_cls: MagicMock) -> None:
        mock_client = MagicMock()
        mock_anthropic_cls.return_value = mock_client
        mock_client.messages.create.return_value = _mock_claude_response(_block("text", "{}"))

        request = CompletionRequest(
            model="m", system_prompt="Analyze.", user_prompt="u", response_format=JSON_OBJECT
        )
        AnthropicClient(api_key="test-key").complete(request)

        system = mock_client.messages.create.call_args.kwargs["system"]
        assert system.startswith("Analyze.")
        assert "Return ONLY a single valid JSON object" in system

    @patch("src.llm.client.Anthropic")
    def test_joins_text_blocks_only(self, mock_anthropic_cls: MagicMock) -> None:
        mock_client = MagicMock()
        mock_anthropic_cls.return_value = mock_client
        mock_client.messages.create.return_value = _mock_claude_response(
            _block("text", '{"strengths": '), _block("tool_use"), _block("text", "[]}")
        )

        response = AnthropicClient(api_key="test-key").complete(REQUEST)

        assert response.text == '{"strengths": []}'
        assert response.model == "claude-sonnet-4-20250514"
        assert response.usage == {"input_tokens": 100, "output_tokens": 50}
        assert response.truncated is False

    @patch("src.llm.client.Anthropic")
    @pytest.mark.parametrize("error_cls", [APITimeoutError, APIConnectionError])
    def test_sdk_errors_become_llm_error(
        self, mock_anthropic_cls: MagicMock, error_cls: type[Exception]
    ) -> None:
        mock_client = MagicMock()
        mock_anthropic_cls.return_value = mock_client
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        mock_client.messages.create.side_effect = error_cls(request=request)

        with pytest.raises(LLMError, match=error_cls.__name__):
            AnthropicClient(api_key="test-key").complete(REQUEST)

    @patch("src.llm.client.Anthropic")
    def test_truncation_logged(
        self, mock_anthropic_cls: MagicMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        mock_client = MagicMock()
        mock_anthropic_cls.return_value = mock_client
        mock_client.messages.create.return_value = _mock_claude_response(
            _block("text", '{"str'), stop_reason="max_tokens"
        )

        with caplog.at_level("WARNING", logger="src.llm.client"):
            response = AnthropicClient(api_key="test-key").complete(REQUEST)

        assert "hit max_tokens=2000" in caplog.text
        assert response.truncated is True
