"""
Revision session: the orchestrator of the text revision engine.

A session owns every piece of per-tab state: the cleaning configuration, the
original and cleaned text, the current diff, the undo buffer, the in-flight
flag and the auto-clean scheduler. Rendering code reads this state; only the
session mutates it, in response to discrete events.

Clean and replace share one pipeline:

1. ignore the trigger while a run is in flight; reject empty input with a
   shake instead of an error
2. push the current (original, cleaned, diff) into the undo buffer
3. clear the cleaned text and diff and mark the run in flight
4. produce the new text (cleaning collaborator, or regex replace-all)
5. on success store the text and its character diff
6. on failure leave cleaned text and diff empty and notify the user; the
   pushed snapshot stays available for undo
"""

from enum import Enum
from typing import Awaitable, Callable, Optional, Protocol, Tuple, Union

import structlog

from ..cleaning.cleaner import TextCleaner
from ..config import settings
from ..exceptions import InvalidPatternError, ShareTokenError
from ..models.cleaning import CleaningConfig
from ..models.revision import ExportedFile, RegexMatchResult, SessionSnapshot, TextSegment
from . import regex_matcher, share_codec
from .diff_engine import compute_diff
from .exporter import ExportFormat, export_text
from .history import HistoryBuffer
from .scheduler import AutoCleanScheduler
from .shortcuts import EXIT_REGEX_MODE, TOGGLE_PALETTE, UNDO, ShortcutMap


logger = structlog.get_logger(__name__)

Clipboard = Callable[[str], None]

CLEAN_FAILED_TITLE = "Error"
CLEAN_FAILED_DESCRIPTION = "Failed to clean text. Please try again."


class RunOutcome(str, Enum):
    """Result of a clean or replace trigger."""
    COMPLETED = "completed"
    IGNORED = "ignored"      # another run was in flight
    REJECTED = "rejected"    # nothing to do; user got a shake
    FAILED = "failed"


class UndoOutcome(str, Enum):
    """Result of an undo."""
    RESTORED = "restored"
    CLEARED = "cleared"
    IGNORED = "ignored"


class Notifier(Protocol):
    """User-facing feedback channel (toasts and the shake animation)."""

    def error(self, title: str, description: str) -> None:
        ...

    def info(self, title: str, description: str) -> None:
        ...

    def shake(self) -> None:
        ...


class LoggingNotifier:
    """Notifier used when no UI is attached: feedback goes to the log."""

    def error(self, title: str, description: str) -> None:
        logger.warning("user_error", title=title, description=description)

    def info(self, title: str, description: str) -> None:
        logger.info("user_info", title=title, description=description)

    def shake(self) -> None:
        logger.info("user_shake")


class RevisionSession:
    """
    Orchestrates clean, replace, undo and share around a cleaning collaborator.

    Args:
        cleaner: Object with ``async clean(CleanRequest) -> CleanResponse``
        config: Initial cleaning configuration (all flags off by default)
        notifier: Feedback channel; defaults to LoggingNotifier
        auto_clean: Clean automatically after a paste burst
        auto_clean_delay_ms: Debounce delay (``settings.auto_clean_delay_ms`` by default)
    """

    def __init__(
        self,
        cleaner: TextCleaner,
        config: Optional[CleaningConfig] = None,
        notifier: Optional[Notifier] = None,
        auto_clean: Optional[bool] = None,
        auto_clean_delay_ms: Optional[int] = None,
    ):
        self.cleaner = cleaner
        self.config = config if config is not None else CleaningConfig()
        self.notifier = notifier if notifier is not None else LoggingNotifier()
        self.auto_clean = settings.auto_clean_enabled if auto_clean is None else auto_clean

        self.original_text = ""
        self.cleaned_text = ""
        self.diff: Tuple[TextSegment, ...] = ()
        self.in_flight = False

        self.history = HistoryBuffer()
        self.scheduler = AutoCleanScheduler(trigger=self.clean, delay_ms=auto_clean_delay_ms)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            original_text=self.original_text,
            cleaned_text=self.cleaned_text,
            diff=self.diff,
        )

    def _restore(self, snapshot: SessionSnapshot) -> None:
        self.original_text = snapshot.original_text
        self.cleaned_text = snapshot.cleaned_text
        self.diff = tuple(snapshot.diff)

    def set_original_text(self, text: str) -> None:
        self.original_text = text

    def on_paste(self, text: Optional[str] = None) -> None:
        """
        Handle a paste into the original-text buffer.

        Args:
            text: New buffer content, if the caller has it
        """
        if text is not None:
            self.original_text = text
        if self.auto_clean:
            self.scheduler.notify_paste()

    # ------------------------------------------------------------------
    # Clean / replace
    # ------------------------------------------------------------------

    async def clean(self) -> RunOutcome:
        """Send the original text and config to the cleaning collaborator."""

        async def transform(text: str) -> str:
            response = await self.cleaner.clean(self.config.to_request(text))
            return response.cleaned_text

        return await self._run("clean", transform)

    async def replace_all(self) -> RunOutcome:
        """Apply the regex sub-mode's replace-all to the original text."""
        options = self.config.regex

        if not self.in_flight and not (
            options.enabled and options.pattern and regex_matcher.is_valid_pattern(options.pattern)
        ):
            logger.info("replace_rejected", enabled=options.enabled, pattern=options.pattern)
            self.notifier.shake()
            return RunOutcome.REJECTED

        async def transform(text: str) -> str:
            return regex_matcher.replace_all(
                options.pattern,
                text,
                options.replacement,
                case_sensitive=options.case_sensitive,
            )

        return await self._run("replace", transform)

    async def _run(
        self, operation: str, transform: Callable[[str], Awaitable[str]]
    ) -> RunOutcome:
        log = logger.bind(operation=operation)

        if self.in_flight:
            log.debug("trigger_ignored_in_flight")
            return RunOutcome.IGNORED

        text = self.original_text
        if not text.strip():
            log.info("trigger_rejected_empty_input")
            self.notifier.shake()
            return RunOutcome.REJECTED

        self.history.push(self.snapshot())
        self.cleaned_text = ""
        self.diff = ()
        self.in_flight = True

        log.info("revision_started", text_length=len(text))

        try:
            result = await transform(text)
        except InvalidPatternError as e:
            log.warning("revision_failed", error=str(e))
            self.notifier.error("Invalid pattern", e.reason)
            return RunOutcome.FAILED
        except Exception as e:
            log.error("revision_failed", error=str(e), error_type=type(e).__name__)
            self.notifier.error(CLEAN_FAILED_TITLE, CLEAN_FAILED_DESCRIPTION)
            return RunOutcome.FAILED
        finally:
            self.in_flight = False

        self.cleaned_text = result
        self.diff = tuple(compute_diff(text, result))

        log.info(
            "revision_completed",
            cleaned_length=len(result),
            segments_count=len(self.diff),
        )
        return RunOutcome.COMPLETED

    # ------------------------------------------------------------------
    # Undo
    # ------------------------------------------------------------------

    def undo(self) -> UndoOutcome:
        """
        Restore the state saved before the last clean.

        With nothing left to restore the workspace is cleared instead, so a
        second undo after a restore wipes original text, cleaned text and diff.
        """
        if self.in_flight:
            logger.debug("undo_ignored_in_flight")
            return UndoOutcome.IGNORED

        snapshot = self.history.pop()
        if snapshot is not None:
            self._restore(snapshot)
            logger.info("undo_restored", original_length=len(self.original_text))
            return UndoOutcome.RESTORED

        self._restore(SessionSnapshot())
        logger.info("undo_cleared_workspace")
        return UndoOutcome.CLEARED

    # ------------------------------------------------------------------
    # Regex sub-mode
    # ------------------------------------------------------------------

    def match_preview(self) -> RegexMatchResult:
        """Live highlighting of the current pattern over the original text."""
        options = self.config.regex
        return regex_matcher.find_matches(
            options.pattern, self.original_text, case_sensitive=options.case_sensitive
        )

    def toggle_regex_mode(self, enabled: Optional[bool] = None) -> bool:
        self.config.regex.enabled = (not self.config.regex.enabled) if enabled is None else enabled
        return self.config.regex.enabled

    def exit_regex_mode(self) -> None:
        self.config.regex.enabled = False

    # ------------------------------------------------------------------
    # Share, clipboard, export
    # ------------------------------------------------------------------

    def share_fragment(self) -> Optional[str]:
        if not self.cleaned_text:
            return None
        return share_codec.build_share_fragment(self.cleaned_text)

    def share_url(self, base_url: str) -> Optional[str]:
        if not self.cleaned_text:
            return None
        return share_codec.build_share_url(base_url, self.cleaned_text)

    def apply_share_fragment(self, fragment: Optional[str]) -> bool:
        """
        Load shared text from a URL fragment.

        Both text buffers are set to the decoded text and the diff is emptied.
        The caller clears the fragment when this returns True.

        Returns:
            True if the fragment was a share link and was applied
        """
        token = share_codec.parse_share_fragment(fragment)
        if token is None:
            return False

        try:
            text = share_codec.decode(token)
        except ShareTokenError as e:
            logger.warning("share_token_rejected", error=str(e))
            self.notifier.error("Invalid share link", "The shared text could not be loaded.")
            return False

        self.original_text = text
        self.cleaned_text = text
        self.diff = ()
        logger.info("share_fragment_applied", text_length=len(text))
        return True

    def copy_to_clipboard(self, clipboard: Clipboard) -> bool:
        """Write the cleaned text to the clipboard; failures are reported, never raised."""
        if not self.cleaned_text.strip():
            return False

        try:
            clipboard(self.cleaned_text)
        except Exception as e:
            logger.warning("clipboard_write_failed", error=str(e))
            self.notifier.error("Copy failed", "The cleaned text could not be copied.")
            return False

        self.notifier.info("Copied to clipboard!", "The cleaned text has been copied.")
        return True

    def export(self, fmt: Union[ExportFormat, str] = ExportFormat.TXT) -> ExportedFile:
        return export_text(self.cleaned_text, fmt)

    # ------------------------------------------------------------------
    # Shortcuts and teardown
    # ------------------------------------------------------------------

    def shortcut_map(self, toggle_palette: Callable[[], object]) -> ShortcutMap:
        """Bind the session's keyboard shortcuts; the palette lives in the UI."""
        return ShortcutMap({
            TOGGLE_PALETTE: toggle_palette,
            UNDO: self.undo,
            EXIT_REGEX_MODE: self.exit_regex_mode,
        })

    async def aclose(self) -> None:
        """Cancel the auto-clean timer and any clean it started."""
        await self.scheduler.aclose()

    async def __aenter__(self) -> "RevisionSession":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
