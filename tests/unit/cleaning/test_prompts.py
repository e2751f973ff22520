"""
Unit tests for cleaning prompt construction.
"""

import pytest

from textify.cleaning.prompts import (
    FLAG_INSTRUCTIONS,
    SYSTEM_PROMPT,
    build_cleaning_prompt,
    build_instructions,
)
from textify.cleaning.tool_definitions import (
    CLEAN_TOOL_NAME,
    get_cleaning_tool_definition,
    get_forced_tool_choice,
)
from textify.models.cleaning import CLEANING_FLAGS, CleanRequest


class TestBuildInstructions:

    @pytest.mark.unit
    def test_no_flags_no_instructions(self):
        assert build_instructions(CleanRequest(text="x")) == []

    @pytest.mark.unit
    def test_every_flag_has_an_instruction(self):
        assert set(FLAG_INSTRUCTIONS) == set(CLEANING_FLAGS)

    @pytest.mark.unit
    def test_enabled_flags_only(self):
        request = CleanRequest(text="x", remove_emojis=True, remove_urls=False)

        assert build_instructions(request) == [FLAG_INSTRUCTIONS["remove_emojis"]]

    @pytest.mark.unit
    def test_contradictory_case_flags_are_both_kept(self):
        request = CleanRequest(
            text="x", convert_to_lowercase=True, convert_to_sentence_case=True
        )

        instructions = build_instructions(request)

        assert FLAG_INSTRUCTIONS["convert_to_lowercase"] in instructions
        assert FLAG_INSTRUCTIONS["convert_to_sentence_case"] in instructions

    @pytest.mark.unit
    def test_regex_instruction(self):
        request = CleanRequest(text="x", regex_pattern=r"\d+", regex_replace="#", case_sensitive=True)

        instruction = build_instructions(request)[-1]

        assert r"/\d+/" in instruction
        assert "case-sensitive" in instruction
        assert '"#"' in instruction


class TestBuildCleaningPrompt:

    @pytest.mark.unit
    def test_prompt_layout(self):
        request = CleanRequest(text="# Hello *world*", trim_trailing_spaces=True)

        system_prompt, user_prompt = build_cleaning_prompt(request)

        assert system_prompt == SYSTEM_PROMPT
        assert user_prompt == (
            f"{FLAG_INSTRUCTIONS['trim_trailing_spaces']}\n\n"
            "Original Text: # Hello *world*\n\n"
            "Cleaned Text:"
        )

    @pytest.mark.unit
    def test_system_prompt_names_the_tool(self):
        assert CLEAN_TOOL_NAME in SYSTEM_PROMPT


class TestToolDefinitions:

    @pytest.mark.unit
    def test_tool_requires_cleaned_text(self):
        definition = get_cleaning_tool_definition()

        assert definition["function"]["name"] == CLEAN_TOOL_NAME
        assert definition["function"]["parameters"]["required"] == ["cleaned_text"]

    @pytest.mark.unit
    def test_forced_tool_choice(self):
        assert get_forced_tool_choice()["function"]["name"] == CLEAN_TOOL_NAME
