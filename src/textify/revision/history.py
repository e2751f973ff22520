"""Single-level undo buffer."""

from typing import Optional

import structlog

from ..models.revision import SessionSnapshot


logger = structlog.get_logger(__name__)


class HistoryBuffer:
    """
    Holds zero or one SessionSnapshot.

    Not a stack: ``push`` overwrites the previous entry
    and ``pop`` empties the buffer. The "nothing left, clear the workspace"
    fallback belongs to the session, which owns the text buffers.
    """

    def __init__(self) -> None:
        self._snapshot: Optional[SessionSnapshot] = None

    @property
    def has_snapshot(self) -> bool:
        return self._snapshot is not None

    def push(self, snapshot: SessionSnapshot) -> None:
        if self._snapshot is not None:
            logger.debug("history_snapshot_overwritten")
        self._snapshot = snapshot

    def pop(self) -> Optional[SessionSnapshot]:
        snapshot, self._snapshot = self._snapshot, None
        return snapshot

    def peek(self) -> Optional[SessionSnapshot]:
        return self._snapshot

    def clear(self) -> None:
        self._snapshot = None

    def __len__(self) -> int:
        return 0 if self._snapshot is None else 1
