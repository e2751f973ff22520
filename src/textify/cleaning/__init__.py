"""
Cleaning collaborator: the LLM call that produces cleaned text.

Main components:
- prompts: Prompt construction from cleaning flags
- tool_definitions: Structured-output tool schema
- llm_client: Ollama / OpenAI-compatible client abstraction
- cleaner: TextCleaner protocol and the LLM-backed implementation
"""

from textify.cleaning.cleaner import LLMTextCleaner, TextCleaner
from textify.cleaning.llm_client import (
    LLMClient,
    LLMResponse,
    create_llm_client,
    create_llm_client_from_model_string,
)
from textify.cleaning.prompts import build_cleaning_prompt

__all__ = [
    "LLMTextCleaner",
    "TextCleaner",
    "LLMClient",
    "LLMResponse",
    "create_llm_client",
    "create_llm_client_from_model_string",
    "build_cleaning_prompt",
]
