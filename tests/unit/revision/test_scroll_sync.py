"""
Unit tests for scroll synchronization between panes.
"""

import pytest

from textify.revision.scroll_sync import ScrollCoordinator


class EchoingPane:
    """Pane that reports its own scroll back to the coordinator, like a real view."""

    def __init__(self, coordinator):
        self.coordinator = coordinator
        self.positions = []

    def on_scroll(self, position):
        self.positions.append(position)
        self.coordinator.scrolled(self, position)


class TestScrollCoordinator:

    @pytest.mark.unit
    def test_position_reaches_other_panes_only(self):
        coordinator = ScrollCoordinator()
        before, after = EchoingPane(coordinator), EchoingPane(coordinator)
        coordinator.register(before)
        coordinator.register(after)

        coordinator.scrolled(before, 0.4)

        assert after.positions == [0.4]
        assert before.positions == []

    @pytest.mark.unit
    def test_unregistered_pane_is_not_updated(self):
        coordinator = ScrollCoordinator()
        before, after = EchoingPane(coordinator), EchoingPane(coordinator)
        coordinator.register(before)
        coordinator.register(after)
        coordinator.unregister(after)

        coordinator.scrolled(before, 0.9)

        assert after.positions == []

    @pytest.mark.unit
    def test_register_is_idempotent(self):
        coordinator = ScrollCoordinator()
        before, after = EchoingPane(coordinator), EchoingPane(coordinator)
        coordinator.register(before)
        coordinator.register(after)
        coordinator.register(after)

        coordinator.scrolled(before, 0.1)

        assert after.positions == [0.1]
