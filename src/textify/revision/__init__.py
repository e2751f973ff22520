"""
Text revision engine.

Main components:
- diff_engine: Character-level diff between original and cleaned text
- regex_matcher: Find/replace sub-mode with live match highlighting
- share_codec: Shareable link token encoding
- history: Single-level undo buffer
- scheduler: Debounced auto-clean on paste
- session: Orchestrator composing the above around the cleaning collaborator
"""

from .diff_engine import (
    compute_diff,
    reconstruct_cleaned,
    reconstruct_original,
    render_inline,
    summarize_diff,
)
from .exporter import ExportFormat, export_text
from .history import HistoryBuffer
from .regex_matcher import find_matches, is_valid_pattern, replace_all
from .scheduler import AutoCleanScheduler, SchedulerState
from .scroll_sync import ScrollCoordinator, ScrollPane
from .session import LoggingNotifier, Notifier, RevisionSession, RunOutcome, UndoOutcome
from .shortcuts import ShortcutMap, next_focus_index

__all__ = [
    "compute_diff",
    "reconstruct_cleaned",
    "reconstruct_original",
    "render_inline",
    "summarize_diff",
    "ExportFormat",
    "export_text",
    "HistoryBuffer",
    "find_matches",
    "is_valid_pattern",
    "replace_all",
    "AutoCleanScheduler",
    "SchedulerState",
    "ScrollCoordinator",
    "ScrollPane",
    "LoggingNotifier",
    "Notifier",
    "RevisionSession",
    "RunOutcome",
    "UndoOutcome",
    "ShortcutMap",
    "next_focus_index",
]
