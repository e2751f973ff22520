"""
Unit tests for keyboard shortcuts and focus-trap arithmetic.
"""

import pytest

from textify.revision.shortcuts import (
    EXIT_REGEX_MODE,
    TOGGLE_PALETTE,
    UNDO,
    ShortcutMap,
    next_focus_index,
    normalize_chord,
)


class TestNormalizeChord:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "chord,expected",
        [
            ("Ctrl+K", TOGGLE_PALETTE),
            ("cmd+k", TOGGLE_PALETTE),
            ("Meta + Z", UNDO),
            ("Esc", EXIT_REGEX_MODE),
            ("shift+ctrl+z", "mod+shift+z"),
        ],
    )
    def test_normalize(self, chord, expected):
        assert normalize_chord(chord) == expected


class TestShortcutMap:

    @pytest.mark.unit
    def test_dispatch_runs_bound_action(self):
        calls = []
        shortcuts = ShortcutMap({"ctrl+k": lambda: calls.append("palette")})

        assert shortcuts.dispatch("Cmd+K") is True
        assert calls == ["palette"]

    @pytest.mark.unit
    def test_unbound_chord(self):
        assert ShortcutMap().dispatch("mod+k") is False

    @pytest.mark.unit
    def test_rebinding_replaces_action(self):
        calls = []
        shortcuts = ShortcutMap()
        shortcuts.bind("mod+z", lambda: calls.append(1))
        shortcuts.bind("ctrl+z", lambda: calls.append(2))

        shortcuts.dispatch("mod+z")

        assert calls == [2]
        assert list(shortcuts.chords()) == [UNDO]


class TestFocusTrap:

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "current,backwards,expected",
        [
            (0, False, 1),
            (2, False, 0),
            (0, True, 2),
            (1, True, 0),
            (-1, False, 0),
            (-1, True, 2),
            (7, False, 0),
        ],
    )
    def test_next_focus_index(self, current, backwards, expected):
        assert next_focus_index(current, 3, backwards=backwards) == expected

    @pytest.mark.unit
    def test_single_control_keeps_focus(self):
        assert next_focus_index(0, 1) == 0
        assert next_focus_index(0, 1, backwards=True) == 0

    @pytest.mark.unit
    def test_empty_row(self):
        with pytest.raises(ValueError):
            next_focus_index(0, 0)
