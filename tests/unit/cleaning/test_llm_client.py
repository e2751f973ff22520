"""
Unit tests for the LLM client abstraction layer.

Tests model string parsing, the client factory and response parsing with
mocked provider SDKs; no API calls are made.
"""

import json
import pytest
from unittest.mock import Mock, patch

from textify.cleaning.llm_client import (
    LLMResponse,
    OllamaClient,
    OpenAICompatibleClient,
    create_llm_client,
    create_llm_client_from_model_string,
    parse_model_string,
    OLLAMA_AVAILABLE,
    OPENAI_AVAILABLE,
)
from textify.cleaning.tool_definitions import CLEAN_TOOL_NAME


class TestModelStringParsing:
    """Test model string parsing utilities."""

    def test_parse_model_string_with_provider(self):
        assert parse_model_string("ollama/llama3.1:8b") == ("ollama", "llama3.1:8b")

    def test_parse_model_string_without_provider(self):
        assert parse_model_string("llama3.1:8b") == (None, "llama3.1:8b")

    def test_parse_model_string_multiple_slashes(self):
        """Only the first slash separates the provider."""
        provider, model = parse_model_string("openrouter/meta-llama/llama-3.1-70b")
        assert provider == "openrouter"
        assert model == "meta-llama/llama-3.1-70b"


class TestFactory:
    """Test create_llm_client()."""

    def test_unknown_provider(self):
        with pytest.raises(ValueError, match="Unknown LLM provider"):
            create_llm_client(provider="nope", model="x")

    def test_openai_requires_api_key(self):
        with pytest.raises(ValueError, match="API key required"):
            create_llm_client(provider="openai", model="gpt-4o-mini", api_key=None)

    @pytest.mark.skipif(not OPENAI_AVAILABLE, reason="openai library not installed")
    @patch("textify.cleaning.llm_client.OpenAI")
    def test_deepseek_uses_its_base_url(self, mock_openai):
        client = create_llm_client(provider="deepseek", model="deepseek-chat", api_key="sk-test")

        assert isinstance(client, OpenAICompatibleClient)
        assert client.base_url == "https://api.deepseek.com"
        assert client.provider_name == "deepseek"
        assert mock_openai.call_args.kwargs["max_retries"] == 0

    @pytest.mark.skipif(not OLLAMA_AVAILABLE, reason="ollama library not installed")
    @patch("textify.cleaning.llm_client.ollama.Client")
    def test_model_string_selects_ollama(self, mock_client_class):
        client = create_llm_client_from_model_string(
            "ollama/qwen2.5:7b", base_url="http://ollama:11434"
        )

        assert isinstance(client, OllamaClient)
        assert client.model == "qwen2.5:7b"
        mock_client_class.assert_called_once_with(host="http://ollama:11434", timeout=client.timeout_seconds)


class TestOllamaClient:

    @pytest.mark.skipif(not OLLAMA_AVAILABLE, reason="ollama library not installed")
    @patch("textify.cleaning.llm_client.ollama.Client")
    def test_call_tool_success(self, mock_client_class):
        mock_client = Mock()
        mock_client.chat.return_value = {
            "message": {
                "tool_calls": [
                    {"function": {"name": CLEAN_TOOL_NAME, "arguments": {"cleaned_text": "Hello"}}}
                ]
            },
            "prompt_eval_count": 30,
            "eval_count": 5,
            "done_reason": "stop",
        }
        mock_client_class.return_value = mock_client

        client = OllamaClient(model="llama3.1:8b")
        response = client.call_tool("system", "user")

        assert isinstance(response, LLMResponse)
        assert response.tool_result == {"cleaned_text": "Hello"}
        assert response.provider == "ollama"
        assert response.tokens_total == 35
        tools = mock_client.chat.call_args.kwargs["tools"]
        assert tools[0]["function"]["name"] == CLEAN_TOOL_NAME

    @pytest.mark.skipif(not OLLAMA_AVAILABLE, reason="ollama library not installed")
    @patch("textify.cleaning.llm_client.ollama.Client")
    def test_string_arguments_are_parsed(self, mock_client_class):
        mock_client = Mock()
        mock_client.chat.return_value = {
            "message": {
                "tool_calls": [
                    {"function": {"arguments": json.dumps({"cleaned_text": "Hi"})}}
                ]
            }
        }
        mock_client_class.return_value = mock_client

        response = OllamaClient(model="llama3.1:8b").call_tool("system", "user")

        assert response.tool_result == {"cleaned_text": "Hi"}
        assert response.tokens_total is None

    @pytest.mark.skipif(not OLLAMA_AVAILABLE, reason="ollama library not installed")
    @patch("textify.cleaning.llm_client.ollama.Client")
    def test_no_tool_call_raises(self, mock_client_class):
        mock_client = Mock()
        mock_client.chat.return_value = {"message": {"content": "Hello"}}
        mock_client_class.return_value = mock_client

        with pytest.raises(ValueError, match="No tool calls"):
            OllamaClient(model="llama3.1:8b").call_tool("system", "user")


class TestOpenAICompatibleClient:

    def _completion(self, name, arguments):
        tool_call = Mock()
        tool_call.function.name = name
        tool_call.function.arguments = arguments
        choice = Mock()
        choice.message.tool_calls = [tool_call]
        choice.finish_reason = "tool_calls"
        completion = Mock()
        completion.choices = [choice]
        completion.usage.prompt_tokens = 10
        completion.usage.completion_tokens = 4
        completion.usage.total_tokens = 14
        return completion

    @pytest.mark.skipif(not OPENAI_AVAILABLE, reason="openai library not installed")
    @patch("textify.cleaning.llm_client.OpenAI")
    def test_call_tool_success(self, mock_openai):
        mock_openai.return_value.chat.completions.create.return_value = self._completion(
            CLEAN_TOOL_NAME, json.dumps({"cleaned_text": "Hello"})
        )

        client = OpenAICompatibleClient(model="gpt-4o-mini", api_key="sk-test")
        response = client.call_tool("system", "user")

        assert response.tool_result == {"cleaned_text": "Hello"}
        assert response.tokens_total == 14
        kwargs = mock_openai.return_value.chat.completions.create.call_args.kwargs
        assert kwargs["tool_choice"]["function"]["name"] == CLEAN_TOOL_NAME

    @pytest.mark.skipif(not OPENAI_AVAILABLE, reason="openai library not installed")
    @patch("textify.cleaning.llm_client.OpenAI")
    def test_unexpected_tool_raises(self, mock_openai):
        mock_openai.return_value.chat.completions.create.return_value = self._completion(
            "something_else", "{}"
        )

        client = OpenAICompatibleClient(model="gpt-4o-mini", api_key="sk-test")

        with pytest.raises(ValueError, match="Unexpected tool call"):
            client.call_tool("system", "user")
