"""
Prompt construction for the cleaning model.

The base instruction always applies; every enabled flag appends one extra
instruction. Contradictory flags (lowercase and sentence case) are both
included as-is and left to the model.
"""

from typing import Dict, List, Tuple

from textify.cleaning.tool_definitions import CLEAN_TOOL_NAME
from textify.models.cleaning import CleanRequest


# ============================================================================
# PROMPT VERSIONS
# ============================================================================

CURRENT_PROMPT_VERSION = "clean-prompt-1.0.0"


# ============================================================================
# SYSTEM PROMPT
# ============================================================================

SYSTEM_PROMPT = f"""You are a text cleaning expert. Your job is to remove unwanted symbols and formatting characters from AI-generated text.

Remove symbols like #, *, and any other characters that are not part of the main text content. Preserve intentional line breaks from the original text.

Return the complete cleaned text by calling the {CLEAN_TOOL_NAME} function. Do not add explanations, preambles or code fences."""


FLAG_INSTRUCTIONS: Dict[str, str] = {
    "remove_emojis": "Also, remove all emojis from the text.",
    "normalize_quotes": (
        "Also, convert all curly \"smart\" quotes (e.g., “ ”, ‘ ’) "
        "to straight quotes (e.g., \" \", ' ')."
    ),
    "trim_trailing_spaces": "Also, trim any trailing whitespace from the end of each line.",
    "convert_to_lowercase": "Also, convert the entire text to lowercase.",
    "convert_to_sentence_case": (
        "Also, convert the text to sentence case, where the first letter of each "
        "sentence is capitalized."
    ),
    "remove_urls": "Also, remove all URLs (e.g., http://, https://, www.) from the text.",
    "remove_line_numbers": (
        "Also, remove any line numbers from the beginning of each line. For example, "
        "if a line starts with \"1. \" or \"1) \", remove it."
    ),
}


def build_instructions(request: CleanRequest) -> List[str]:
    """
    Collect the extra instructions for the flags enabled on ``request``.

    Args:
        request: Cleaning request

    Returns:
        Instructions in a fixed order (the order of FLAG_INSTRUCTIONS)
    """
    instructions = [
        FLAG_INSTRUCTIONS[name]
        for name in FLAG_INSTRUCTIONS
        if getattr(request, name)
    ]

    if request.regex_pattern:
        sensitivity = "case-sensitive" if request.case_sensitive else "case-insensitive"
        instructions.append(
            f"Also, replace every match of the regular expression /{request.regex_pattern}/ "
            f"({sensitivity}) with \"{request.regex_replace or ''}\"."
        )

    return instructions


def build_cleaning_prompt(request: CleanRequest) -> Tuple[str, str]:
    """
    Build the system and user prompts for a cleaning request.

    Args:
        request: Cleaning request with text and flags

    Returns:
        (system_prompt, user_prompt) tuple
    """
    parts = build_instructions(request)
    parts.append(f"Original Text: {request.text}")
    parts.append("Cleaned Text:")

    return SYSTEM_PROMPT, "\n\n".join(parts)
