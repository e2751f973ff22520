"""
Cleaning configuration and the request/response contract of the cleaning collaborator.

CleaningConfig is the ConfigModel of the revision engine: a pure data holder of
independent toggles plus the regex find/replace sub-mode. Field names are
snake_case in Python and camelCase on the wire (``removeEmojis``, ``regexPattern``...).
"""

from typing import List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


CAMEL_CASE_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "validate_assignment": True,
}

CLEANING_FLAGS = (
    "remove_emojis",
    "normalize_quotes",
    "trim_trailing_spaces",
    "convert_to_lowercase",
    "convert_to_sentence_case",
    "remove_urls",
    "remove_line_numbers",
)


class RegexOptions(BaseModel):
    """Find/replace sub-mode parameters."""

    enabled: bool = Field(default=False, description="Whether the regex sub-mode is open")
    pattern: str = Field(default="", description="Regular expression to search for")
    replacement: str = Field(default="", description="Replacement template (Python re syntax)")
    case_sensitive: bool = Field(default=False, description="Match case-sensitively")

    model_config = CAMEL_CASE_CONFIG


class CleanRequest(BaseModel):
    """
    Request sent to the cleaning collaborator.

    Flags are optional; an absent flag means "do not apply". The regex fields
    are only present when the regex sub-mode is enabled.
    """

    text: str = Field(..., description="The text to be cleaned")
    remove_emojis: Optional[bool] = Field(default=None, description="Remove emojis from the text")
    normalize_quotes: Optional[bool] = Field(
        default=None, description="Convert curly smart quotes to straight quotes"
    )
    trim_trailing_spaces: Optional[bool] = Field(
        default=None, description="Trim trailing whitespace from each line"
    )
    convert_to_lowercase: Optional[bool] = Field(
        default=None, description="Convert the entire text to lowercase"
    )
    convert_to_sentence_case: Optional[bool] = Field(
        default=None, description="Convert the text to sentence case"
    )
    remove_urls: Optional[bool] = Field(default=None, description="Remove URLs from the text")
    remove_line_numbers: Optional[bool] = Field(
        default=None, description="Remove line numbers from the beginning of each line"
    )
    regex_pattern: Optional[str] = Field(default=None, description="Regex pattern to replace")
    regex_replace: Optional[str] = Field(default=None, description="Replacement for regex matches")
    case_sensitive: Optional[bool] = Field(
        default=None, description="Whether regex matching is case-sensitive"
    )

    model_config = CAMEL_CASE_CONFIG

    def enabled_flags(self) -> List[str]:
        """Names of the boolean cleanup flags that are switched on."""
        return [
            name
            for name in CLEANING_FLAGS
            if getattr(self, name)
        ]


class CleanResponse(BaseModel):
    """Response of the cleaning collaborator: the full cleaned text, never partial."""

    cleaned_text: str = Field(..., description="The cleaned text")

    model_config = CAMEL_CASE_CONFIG


class CleaningConfig(BaseModel):
    """
    Set of cleanup toggles and regex parameters owned by a revision session.

    All flags default to off and are independent of each other. Setting both
    ``convert_to_lowercase`` and ``convert_to_sentence_case`` is allowed: both
    are passed to the collaborator, which decides how to reconcile them.
    """

    remove_emojis: bool = False
    normalize_quotes: bool = False
    trim_trailing_spaces: bool = False
    convert_to_lowercase: bool = False
    convert_to_sentence_case: bool = False
    remove_urls: bool = False
    remove_line_numbers: bool = False
    regex: RegexOptions = Field(default_factory=RegexOptions)

    model_config = CAMEL_CASE_CONFIG

    def to_request(self, text: str) -> CleanRequest:
        """
        Build the collaborator request for ``text`` from the current toggles.

        Args:
            text: Original text to clean

        Returns:
            CleanRequest with every flag set and, when the sub-mode is open,
            the regex pattern, replacement and case sensitivity
        """
        payload = {name: getattr(self, name) for name in CLEANING_FLAGS}
        if self.regex.enabled and self.regex.pattern:
            payload.update(
                regex_pattern=self.regex.pattern,
                regex_replace=self.regex.replacement,
                case_sensitive=self.regex.case_sensitive,
            )
        return CleanRequest(text=text, **payload)

