"""
Character-level diff between original and cleaned text.

Produces the segment sequence rendered by the before/after comparison view.
The edit script comes from diff-match-patch (Myers' O(N*D) bisection). With
no deadline the script is always minimal and identical inputs give identical
output. diff-match-patch shifts a lone insertion or deletion leftwards past
equal text, which matches the later of two equal characters; the script is
shifted back rightwards afterwards so ties resolve to the earliest possible
common characters.
"""

from typing import Iterable, List, Optional, Tuple, Union

import structlog
from diff_match_patch import diff_match_patch

from ..config import settings
from ..models.revision import DiffStats, TextSegment


logger = structlog.get_logger(__name__)

_OP_STATUS = {
    diff_match_patch.DIFF_EQUAL: (False, False),
    diff_match_patch.DIFF_INSERT: (True, False),
    diff_match_patch.DIFF_DELETE: (False, True),
}


def compute_diff(
    original: str, cleaned: str, timeout_seconds: Optional[float] = None
) -> List[TextSegment]:
    """
    Compute the character-level edit script from ``original`` to ``cleaned``.

    Every character of ``original`` lands in exactly one removed or unchanged
    segment, every character of ``cleaned`` in exactly one added or unchanged
    segment, and no two adjacent segments share the same status.

    Args:
        original: Text before cleaning
        cleaned: Text after cleaning
        timeout_seconds: Deadline for the bisection; ``0`` disables it.
            Defaults to ``settings.diff_timeout_seconds``.

    Returns:
        Ordered list of TextSegment

    Examples:
        >>> [(s.value, s.added, s.removed) for s in compute_diff("# Hi", "Hi")]
        [('# ', False, True), ('Hi', False, False)]
        >>> compute_diff("", "")
        []
    """
    dmp = diff_match_patch()
    dmp.Diff_Timeout = (
        settings.diff_timeout_seconds if timeout_seconds is None else timeout_seconds
    )

    diffs = dmp.diff_main(original, cleaned, False)
    segments = _coalesce(_shift_edits_forward(diffs))

    logger.debug(
        "diff_computed",
        original_length=len(original),
        cleaned_length=len(cleaned),
        segments_count=len(segments),
    )

    return segments


def _group_runs(diffs: Iterable[Tuple[int, str]]) -> List[Union[str, List[str]]]:
    """Group dmp tuples into equal strings and ``[deleted, inserted]`` edit pairs."""
    groups: List[Union[str, List[str]]] = []

    for op, text in diffs:
        if not text:
            continue
        if op == diff_match_patch.DIFF_EQUAL:
            if groups and isinstance(groups[-1], str):
                groups[-1] += text
            else:
                groups.append(text)
            continue
        if not groups or isinstance(groups[-1], str):
            groups.append(["", ""])
        groups[-1][0 if op == diff_match_patch.DIFF_DELETE else 1] += text

    return groups


def _shift_edits_forward(diffs: Iterable[Tuple[int, str]]) -> List[Tuple[int, str]]:
    """
    Slide each pure insertion or deletion rightwards through the equal text
    that follows it, for as long as the leading edited character equals the
    next equal character.

    "A{+BA+}C" and "{+AB+}AC" are both minimal; this picks the first. When
    the following equal text is used up, the edit merges with the next edit
    region and keeps sliding if it is still one-sided. The edit count is
    unchanged, so the script stays minimal.
    """
    groups = _group_runs(diffs)
    shifted: List[Union[str, List[str]]] = []

    def emit_equal(text: str) -> None:
        if shifted and isinstance(shifted[-1], str):
            shifted[-1] += text
        else:
            shifted.append(text)

    i = 0
    while i < len(groups):
        group = groups[i]
        i += 1
        if isinstance(group, str):
            emit_equal(group)
            continue

        deleted, inserted = group
        while i < len(groups):
            following = groups[i]
            if not isinstance(following, str):
                deleted += following[0]
                inserted += following[1]
                i += 1
                continue
            if deleted and inserted:
                break

            edit = deleted or inserted
            moved = 0
            while moved < len(following) and edit[0] == following[moved]:
                edit = edit[1:] + following[moved]
                moved += 1
            if moved:
                emit_equal(following[:moved])
            if deleted:
                deleted = edit
            else:
                inserted = edit

            if moved < len(following):
                groups[i] = following[moved:]
                break
            i += 1
        shifted.append([deleted, inserted])

    result: List[Tuple[int, str]] = []
    for group in shifted:
        if isinstance(group, str):
            result.append((diff_match_patch.DIFF_EQUAL, group))
        else:
            result.append((diff_match_patch.DIFF_DELETE, group[0]))
            result.append((diff_match_patch.DIFF_INSERT, group[1]))
    return result


def _coalesce(diffs: Iterable[Tuple[int, str]]) -> List[TextSegment]:
    """Turn (op, text) tuples into segments, merging runs with equal status."""
    runs: List[Tuple[Tuple[bool, bool], str]] = []

    for op, text in diffs:
        if not text:
            continue
        status = _OP_STATUS[op]
        if runs and runs[-1][0] == status:
            runs[-1] = (status, runs[-1][1] + text)
        else:
            runs.append((status, text))

    return [
        TextSegment(value=text, added=added, removed=removed)
        for (added, removed), text in runs
    ]


def reconstruct_original(segments: Iterable[TextSegment]) -> str:
    """Concatenate every segment not marked ``added``."""
    return "".join(s.value for s in segments if not s.added)


def reconstruct_cleaned(segments: Iterable[TextSegment]) -> str:
    """Concatenate every segment not marked ``removed``."""
    return "".join(s.value for s in segments if not s.removed)


def summarize_diff(segments: Iterable[TextSegment]) -> DiffStats:
    """
    Count characters per edit status.

    Args:
        segments: Diff segments

    Returns:
        DiffStats with added/removed/unchanged character counts
    """
    stats = DiffStats()
    for segment in segments:
        stats.segments += 1
        if segment.added:
            stats.added_chars += len(segment.value)
        elif segment.removed:
            stats.removed_chars += len(segment.value)
        else:
            stats.unchanged_chars += len(segment.value)
    return stats


def render_inline(segments: Iterable[TextSegment]) -> str:
    """
    Render segments as plain text with ``[-removed-]`` and ``{+added+}`` markers.

    Used by the CLI, where there is no styled comparison view.
    """
    parts = []
    for segment in segments:
        if segment.removed:
            parts.append(f"[-{segment.value}-]")
        elif segment.added:
            parts.append(f"{{+{segment.value}+}}")
        else:
            parts.append(segment.value)
    return "".join(parts)
