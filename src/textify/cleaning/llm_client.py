"""
Model clients for the cleaning collaborator.

A client sends one system prompt and one user prompt together with the
``return_cleaned_text`` tool, and hands back the arguments of the tool call.
Two transports are supported:

- Ollama (self-hosted: llama3.1, qwen2.5, mistral-nemo...)
- OpenAI-compatible chat completions (OpenAI, DeepSeek, OpenRouter)

Each call is a single attempt. Timeouts, connection errors and replies
without the expected tool call all raise; the cleaner turns them into
CleaningError.
"""

import json
import time
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional, Tuple
from dataclasses import dataclass
import structlog

# LLM client imports
try:
    import ollama
    OLLAMA_AVAILABLE = True
except ImportError:
    OLLAMA_AVAILABLE = False

try:
    from openai import OpenAI
    OPENAI_AVAILABLE = True
except ImportError:
    OPENAI_AVAILABLE = False

from textify.cleaning.tool_definitions import (
    CLEAN_TOOL_NAME,
    get_cleaning_tool_definition,
    get_forced_tool_choice,
)
from textify.config import settings


logger = structlog.get_logger(__name__)

Messages = List[Dict[str, str]]
Tools = List[Dict[str, Any]]


@dataclass
class LLMResponse:
    """Arguments of the model's tool call plus usage metadata."""
    tool_result: Dict[str, Any]

    model: str
    provider: str
    tokens_input: Optional[int] = None
    tokens_output: Optional[int] = None
    tokens_total: Optional[int] = None
    latency_ms: int = 0
    finish_reason: str = "unknown"


def _parse_arguments(arguments: Any) -> Dict[str, Any]:
    """Tool arguments arrive as a mapping (Ollama) or a JSON string (OpenAI)."""
    if isinstance(arguments, str):
        arguments = json.loads(arguments)
    return dict(arguments or {})


class LLMClient(ABC):
    """
    Base class for model clients.

    ``call_tool`` builds the chat messages, times the request and logs the
    outcome; subclasses only implement ``_send`` for their transport.
    """

    provider = "unknown"

    def __init__(
        self,
        model: str,
        temperature: float = 0.0,
        max_tokens: int = 4096,
        timeout_seconds: int = 120,
    ):
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout_seconds = timeout_seconds

        self.logger = logger.bind(llm_client=self.__class__.__name__, model=model)

    def call_tool(
        self,
        system_prompt: str,
        user_prompt: str,
        tool_definitions: Optional[Tools] = None
    ) -> LLMResponse:
        """
        Ask the model to answer through a tool call.

        Args:
            system_prompt: System instructions
            user_prompt: Cleaning instructions and the original text
            tool_definitions: Tools offered to the model (the cleaning tool by default)

        Returns:
            LLMResponse with the tool arguments and usage metadata

        Raises:
            ValueError: If the reply carries no usable tool call
            Exception: Any transport error from the provider SDK
        """
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_prompt},
        ]
        tools = tool_definitions or [get_cleaning_tool_definition()]

        start = time.perf_counter()
        try:
            response = self._send(messages, tools)
        except Exception as e:
            self.logger.error(
                "llm_tool_call_failed",
                provider=self.provider,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        response.latency_ms = int((time.perf_counter() - start) * 1000)
        self.logger.debug(
            "llm_tool_call_completed",
            provider=self.provider,
            latency_ms=response.latency_ms,
            tokens_total=response.tokens_total,
            finish_reason=response.finish_reason,
        )
        return response

    @abstractmethod
    def _send(self, messages: Messages, tools: Tools) -> LLMResponse:
        """Perform the request and parse the first tool call."""


class OllamaClient(LLMClient):
    """Client for an Ollama server; the model must support tool calling."""

    provider = "ollama"

    def __init__(
        self,
        model: str,
        base_url: str = "http://localhost:11434",
        **kwargs
    ):
        if not OLLAMA_AVAILABLE:
            raise ImportError(
                "ollama library not installed. Install with: pip install ollama"
            )

        super().__init__(model=model, **kwargs)
        self.base_url = base_url
        self.client = ollama.Client(host=base_url, timeout=self.timeout_seconds)

    def _send(self, messages: Messages, tools: Tools) -> LLMResponse:
        response = self.client.chat(
            model=self.model,
            messages=messages,
            tools=tools,
            options={"temperature": self.temperature, "num_predict": self.max_tokens},
        )

        tool_calls = response.get("message", {}).get("tool_calls") or []
        if not tool_calls:
            raise ValueError("No tool calls in Ollama response")

        arguments = tool_calls[0].get("function", {}).get("arguments", {})

        tokens_input = response.get("prompt_eval_count")
        tokens_output = response.get("eval_count")

        return LLMResponse(
            tool_result=_parse_arguments(arguments),
            model=self.model,
            provider=self.provider,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            tokens_total=tokens_input + tokens_output if tokens_input and tokens_output else None,
            finish_reason=response.get("done_reason") or "stop",
        )


class OpenAICompatibleClient(LLMClient):
    """
    Client for chat-completions endpoints (OpenAI, DeepSeek, OpenRouter...).

    The cleaning tool is forced through ``tool_choice``. SDK retries are
    turned off: a failed clean is reported to the user, not replayed.
    """

    def __init__(
        self,
        model: str,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        provider_name: str = "openai",
        **kwargs
    ):
        if not OPENAI_AVAILABLE:
            raise ImportError(
                "openai library not installed. Install with: pip install openai"
            )

        super().__init__(model=model, **kwargs)
        self.base_url = base_url
        self.provider = provider_name
        self.client = OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=self.timeout_seconds,
            max_retries=0,
        )

    @property
    def provider_name(self) -> str:
        return self.provider

    def _send(self, messages: Messages, tools: Tools) -> LLMResponse:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            tools=tools,
            tool_choice=get_forced_tool_choice(),
            temperature=self.temperature,
            max_tokens=self.max_tokens,
        )

        choice = completion.choices[0]
        if not choice.message.tool_calls:
            raise ValueError("No tool calls in OpenAI response")

        function = choice.message.tool_calls[0].function
        if function.name != CLEAN_TOOL_NAME:
            raise ValueError(f"Unexpected tool call: {function.name}")

        usage = completion.usage

        return LLMResponse(
            tool_result=_parse_arguments(function.arguments),
            model=self.model,
            provider=self.provider,
            tokens_input=usage.prompt_tokens if usage else None,
            tokens_output=usage.completion_tokens if usage else None,
            tokens_total=usage.total_tokens if usage else None,
            finish_reason=choice.finish_reason,
        )


# ============================================================================
# CLIENT FACTORY
# ============================================================================

_OPENAI_COMPATIBLE_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "deepseek": "https://api.deepseek.com",
    "openrouter": "https://openrouter.ai/api/v1",
}


def create_llm_client(
    provider: Optional[str] = None,
    model: Optional[str] = None,
    **override_kwargs
) -> LLMClient:
    """
    Build a client from explicit arguments, falling back to settings.

    Args:
        provider: "ollama", "openai", "deepseek" or "openrouter"
        model: Provider-specific model name
        **override_kwargs: temperature, max_tokens, timeout_seconds, base_url, api_key

    Returns:
        Configured LLMClient

    Raises:
        ValueError: If the provider is unknown or a cloud provider has no API key
    """
    provider = provider or settings.llm_provider
    model = model or settings.llm_model

    client_params = {
        "temperature": override_kwargs.get("temperature", settings.llm_temperature),
        "max_tokens": override_kwargs.get("max_tokens", settings.llm_max_tokens),
        "timeout_seconds": override_kwargs.get("timeout_seconds", settings.llm_timeout_seconds),
    }

    logger.info("creating_llm_client", provider=provider, model=model)

    if provider == "ollama":
        return OllamaClient(
            model=model,
            base_url=override_kwargs.get("base_url", settings.llm_api_base_url),
            **client_params
        )

    if provider in _OPENAI_COMPATIBLE_BASE_URLS:
        api_key = override_kwargs.get("api_key", settings.llm_api_key)
        if not api_key:
            raise ValueError(f"{provider} API key required (set LLM_API_KEY env var)")

        return OpenAICompatibleClient(
            model=model,
            api_key=api_key,
            base_url=override_kwargs.get("base_url", _OPENAI_COMPATIBLE_BASE_URLS[provider]),
            provider_name=provider,
            **client_params
        )

    raise ValueError(
        f"Unknown LLM provider: {provider}. "
        f"Supported: ollama, {', '.join(_OPENAI_COMPATIBLE_BASE_URLS)}"
    )


def parse_model_string(model_string: str) -> Tuple[Optional[str], str]:
    """
    Split "provider/model-name"; only the first slash separates the provider.

    Examples:
        >>> parse_model_string("ollama/llama3.1:8b")
        ('ollama', 'llama3.1:8b')
        >>> parse_model_string("llama3.1:8b")
        (None, 'llama3.1:8b')
    """
    if "/" in model_string:
        provider, model_name = model_string.split("/", 1)
        return provider, model_name
    return None, model_string


def create_llm_client_from_model_string(
    model_string: str,
    **override_kwargs
) -> LLMClient:
    """Build a client from "provider/model"; a bare model name uses the configured provider."""
    provider_prefix, model_name = parse_model_string(model_string)

    return create_llm_client(
        provider=provider_prefix or settings.llm_provider,
        model=model_name,
        **override_kwargs
    )
