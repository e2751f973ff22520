"""
Tool definitions for LLM function calling.

The cleaning model returns its output through a single function call, which
gives a structured ``cleaned_text`` field instead of free-form chat text that
might carry preambles or code fences.

Based on OpenAI function calling format, compatible with:
- OpenAI API
- DeepSeek API
- Ollama (with tool calling support)
- OpenRouter
"""

from typing import Dict, Any


TOOL_CALLING_VERSION = "openai-tool-calling-2026"

CLEAN_TOOL_NAME = "return_cleaned_text"


def get_cleaning_tool_definition() -> Dict[str, Any]:
    """
    Get the tool definition the model must call with the cleaned text.

    Returns:
        OpenAI-format function tool definition
    """
    return {
        "type": "function",
        "function": {
            "name": CLEAN_TOOL_NAME,
            "description": "Return the full cleaned text. Never return a partial result or commentary.",
            "parameters": {
                "type": "object",
                "required": ["cleaned_text"],
                "additionalProperties": False,
                "properties": {
                    "cleaned_text": {
                        "type": "string",
                        "description": "The cleaned text, with unwanted symbols and formatting characters removed."
                    }
                }
            }
        }
    }


def get_forced_tool_choice() -> Dict[str, Any]:
    """Tool choice that forces the cleaning function (OpenAI format)."""
    return {"type": "function", "function": {"name": CLEAN_TOOL_NAME}}
