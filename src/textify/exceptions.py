"""
Exception hierarchy for the text revision engine.

Every error raised by the engine is local and recoverable: the session turns
them into user-facing notifications and the API maps them to status codes.
"""


class TextifyError(Exception):
    """Base class for all engine errors."""


class CleaningError(TextifyError):
    """The cleaning collaborator failed; no partial output is available."""


class ShareTokenError(TextifyError):
    """A share token could not be decoded back into text."""


class InvalidPatternError(TextifyError):
    """A regex pattern or replacement template is not usable."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid regex pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason
