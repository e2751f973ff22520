"""
Value types produced by the revision engine.

Diff segments and session snapshots are frozen: once produced they are only
read by the rendering layer and by undo.
"""

from typing import Tuple

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


FROZEN_CAMEL_CASE_CONFIG = {
    "alias_generator": to_camel,
    "populate_by_name": True,
    "frozen": True,
}


class TextSegment(BaseModel):
    """
    A maximal run of characters sharing one edit status.

    Exactly one of ``added``/``removed`` may be true, or neither for an
    unchanged run.
    """

    value: str = Field(..., description="Characters in this run")
    added: bool = Field(default=False, description="Present only in the cleaned text")
    removed: bool = Field(default=False, description="Present only in the original text")

    model_config = FROZEN_CAMEL_CASE_CONFIG

    @model_validator(mode="after")
    def check_single_status(self) -> "TextSegment":
        if self.added and self.removed:
            raise ValueError("A segment cannot be both added and removed")
        return self

    @property
    def unchanged(self) -> bool:
        return not (self.added or self.removed)

    @property
    def status(self) -> Tuple[bool, bool]:
        return (self.added, self.removed)


class SessionSnapshot(BaseModel):
    """Saved (original, cleaned, diff) triple used for one-level undo."""

    original_text: str = ""
    cleaned_text: str = ""
    diff: Tuple[TextSegment, ...] = ()

    model_config = {"frozen": True}


class DiffStats(BaseModel):
    """Character counts per edit status."""

    added_chars: int = 0
    removed_chars: int = 0
    unchanged_chars: int = 0
    segments: int = 0

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class RegexSpan(BaseModel):
    """Piece of the subject text, tagged when it is a regex match."""

    text: str
    is_match: bool = False

    model_config = FROZEN_CAMEL_CASE_CONFIG


class RegexMatchResult(BaseModel):
    """
    Result of a live-highlighting pass.

    Concatenating ``spans`` in order always reconstructs the subject.
    """

    match_count: int = 0
    spans: Tuple[RegexSpan, ...] = ()
    valid_pattern: bool = True

    model_config = FROZEN_CAMEL_CASE_CONFIG


class ExportedFile(BaseModel):
    """A downloadable rendition of the cleaned text."""

    filename: str
    content_type: str
    content: str
