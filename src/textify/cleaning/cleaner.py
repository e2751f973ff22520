"""
Cleaning collaborator.

The revision session only depends on the ``TextCleaner`` protocol: an async
call that resolves to the full cleaned text or raises ``CleaningError``. The
LLM-backed implementation builds the prompt from the request flags and runs
the blocking SDK call in a worker thread so the event loop stays responsive
and the awaiting task can be cancelled.
"""

import asyncio
from typing import Optional, Protocol

import structlog

from textify.cleaning.llm_client import (
    LLMClient,
    create_llm_client_from_model_string,
)
from textify.cleaning.prompts import build_cleaning_prompt
from textify.config import settings
from textify.exceptions import CleaningError
from textify.models.cleaning import CleanRequest, CleanResponse


logger = structlog.get_logger(__name__)

FAILED_OUTPUT_MESSAGE = "Failed to get cleaned text from the model."


class TextCleaner(Protocol):
    async def clean(self, request: CleanRequest) -> CleanResponse:
        ...


class LLMTextCleaner:
    """
    Cleans text by asking an LLM to call the ``return_cleaned_text`` tool.

    Args:
        llm_client: Optional pre-configured LLM client
        model_override: Optional model string (e.g., "ollama/llama3.1:8b")
    """

    def __init__(
        self,
        llm_client: Optional[LLMClient] = None,
        model_override: Optional[str] = None
    ):
        if llm_client is None:
            llm_client = create_llm_client_from_model_string(
                model_override or f"{settings.llm_provider}/{settings.llm_model}"
            )

        self.llm_client = llm_client
        self.logger = logger.bind(cleaner="LLMTextCleaner", model=llm_client.model)

    async def clean(self, request: CleanRequest) -> CleanResponse:
        """
        Clean ``request.text`` according to its flags.

        Raises:
            CleaningError: If the model call fails or returns no text
        """
        system_prompt, user_prompt = build_cleaning_prompt(request)

        self.logger.info(
            "cleaning_started",
            text_length=len(request.text),
            flags=request.enabled_flags(),
            regex=bool(request.regex_pattern),
        )

        try:
            response = await asyncio.to_thread(
                self.llm_client.call_tool,
                system_prompt=system_prompt,
                user_prompt=user_prompt,
            )
        except Exception as e:
            self.logger.error("cleaning_call_failed", error=str(e), error_type=type(e).__name__)
            raise CleaningError(FAILED_OUTPUT_MESSAGE) from e

        cleaned_text = response.tool_result.get("cleaned_text")
        if not isinstance(cleaned_text, str):
            self.logger.error("cleaning_output_missing", tool_result_keys=list(response.tool_result))
            raise CleaningError(FAILED_OUTPUT_MESSAGE)

        self.logger.info(
            "cleaning_completed",
            cleaned_length=len(cleaned_text),
            latency_ms=response.latency_ms,
            tokens_total=response.tokens_total,
        )

        return CleanResponse(cleaned_text=cleaned_text)
