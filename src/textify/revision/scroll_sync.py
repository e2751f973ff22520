"""
Scroll synchronization between the before and after panes.

Panes never reach into each other: each one implements ``on_scroll`` and the
coordinator forwards a position from the pane that moved to every other pane.
"""

from typing import List, Protocol

import structlog


logger = structlog.get_logger(__name__)


class ScrollPane(Protocol):
    def on_scroll(self, position: float) -> None:
        ...


class ScrollCoordinator:
    """Neutral relay of scroll positions between registered panes."""

    def __init__(self) -> None:
        self._panes: List[ScrollPane] = []
        self._syncing = False

    def register(self, pane: ScrollPane) -> None:
        if pane not in self._panes:
            self._panes.append(pane)

    def unregister(self, pane: ScrollPane) -> None:
        if pane in self._panes:
            self._panes.remove(pane)

    def scrolled(self, source: ScrollPane, position: float) -> None:
        """
        Propagate ``position`` from ``source`` to the other panes.

        A pane that scrolls in response to the relayed position calls back
        into ``scrolled``; those echoes are dropped.
        """
        if self._syncing:
            return

        self._syncing = True
        try:
            for pane in self._panes:
                if pane is not source:
                    pane.on_scroll(position)
        finally:
            self._syncing = False
