"""
Regex find/replace for the revision sub-mode.

Live highlighting runs on every keystroke in the pattern field, so
``find_matches`` never raises: a pattern that does not compile simply yields
no matches and a single pass-through span. The pattern is compiled per call
and no compiled object outlives it.
"""

import re
from typing import List, Optional, Pattern

import structlog

from ..exceptions import InvalidPatternError
from ..models.revision import RegexMatchResult, RegexSpan


logger = structlog.get_logger(__name__)

# A backslash that starts a group reference or escapes another backslash
_TEMPLATE_ESCAPE = re.compile(r"\\(\\|\d|g<)?")


def _compile(pattern: str, case_sensitive: bool) -> Pattern[str]:
    flags = 0 if case_sensitive else re.IGNORECASE
    return re.compile(pattern, flags)


def _escape_plain_backslashes(replacement: str) -> str:
    """Double every backslash that is not a group reference, so it stays literal."""
    return _TEMPLATE_ESCAPE.sub(
        lambda m: m.group(0) if m.group(1) else "\\\\", replacement
    )


def is_valid_pattern(pattern: str) -> bool:
    """Check whether ``pattern`` compiles."""
    try:
        re.compile(pattern)
    except re.error:
        return False
    return True


def find_matches(
    pattern: str, subject: str, case_sensitive: bool = False
) -> RegexMatchResult:
    """
    Find all non-overlapping matches of ``pattern`` in ``subject``.

    Args:
        pattern: Regular expression typed by the user
        subject: Text to search (the original-text buffer)
        case_sensitive: Match case-sensitively; case-insensitive by default

    Returns:
        RegexMatchResult whose spans interleave matched and unmatched text.
        Zero-width matches are neither counted nor highlighted.

    Examples:
        >>> find_matches("a", "Banana").match_count
        3
        >>> find_matches("(", "Banana").match_count
        0
    """
    if not pattern:
        return _pass_through(subject)

    try:
        regex = _compile(pattern, case_sensitive)
    except re.error as e:
        logger.debug("invalid_regex_pattern", pattern=pattern, error=str(e))
        return _pass_through(subject, valid_pattern=False)

    spans: List[RegexSpan] = []
    match_count = 0
    cursor = 0

    for match in regex.finditer(subject):
        start, end = match.span()
        if start == end:
            continue
        if start > cursor:
            spans.append(RegexSpan(text=subject[cursor:start]))
        spans.append(RegexSpan(text=subject[start:end], is_match=True))
        match_count += 1
        cursor = end

    if cursor < len(subject):
        spans.append(RegexSpan(text=subject[cursor:]))

    return RegexMatchResult(match_count=match_count, spans=tuple(spans))


def _pass_through(subject: str, valid_pattern: bool = True) -> RegexMatchResult:
    return RegexMatchResult(
        match_count=0,
        spans=(RegexSpan(text=subject),),
        valid_pattern=valid_pattern,
    )


def replace_all(
    pattern: str,
    subject: str,
    replacement: str,
    case_sensitive: bool = False,
    count: Optional[int] = None,
) -> str:
    """
    Substitute every match of ``pattern`` in ``subject`` with ``replacement``.

    The replacement is a Python ``re`` template: ``\\1`` and ``\\g<name>``
    refer to groups and ``\\\\`` is one backslash. Any other backslash is
    literal, so ``C:\\path`` is inserted as typed.

    Args:
        pattern: Regular expression
        subject: Text to rewrite
        replacement: Replacement template
        case_sensitive: Match case-sensitively
        count: Maximum number of substitutions (all when None)

    Returns:
        Rewritten text

    Raises:
        InvalidPatternError: If the pattern or the template is invalid
    """
    if not pattern:
        raise InvalidPatternError(pattern, "empty pattern")

    try:
        regex = _compile(pattern, case_sensitive)
        result = regex.sub(_escape_plain_backslashes(replacement), subject, count=count or 0)
    except (re.error, IndexError) as e:
        raise InvalidPatternError(pattern, str(e)) from e

    logger.debug(
        "regex_replace_applied",
        pattern=pattern,
        subject_length=len(subject),
        result_length=len(result),
    )
    return result
