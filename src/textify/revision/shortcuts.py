"""
Keyboard shortcut dispatch and focus-trap arithmetic.

Chords are normalized to lowercase ``mod+key`` strings, where ``mod`` stands
for Ctrl or Cmd, so bindings are platform neutral.
"""

from typing import Callable, Dict, Iterable, Optional

import structlog


logger = structlog.get_logger(__name__)

TOGGLE_PALETTE = "mod+k"
UNDO = "mod+z"
EXIT_REGEX_MODE = "escape"

_KEY_ALIASES = {
    "ctrl": "mod",
    "control": "mod",
    "cmd": "mod",
    "meta": "mod",
    "command": "mod",
    "esc": "escape",
}
_MODIFIER_ORDER = ("mod", "alt", "shift")


def normalize_chord(chord: str) -> str:
    """
    Normalize a key chord.

    Examples:
        >>> normalize_chord("Ctrl+Z")
        'mod+z'
        >>> normalize_chord("shift+cmd+K")
        'mod+shift+k'
    """
    keys = [_KEY_ALIASES.get(k, k) for k in chord.lower().replace(" ", "").split("+") if k]
    modifiers = [m for m in _MODIFIER_ORDER if m in keys]
    rest = [k for k in keys if k not in _MODIFIER_ORDER]
    return "+".join(modifiers + rest)


class ShortcutMap:
    """Maps normalized chords to actions."""

    def __init__(self, bindings: Optional[Dict[str, Callable[[], object]]] = None):
        self._bindings: Dict[str, Callable[[], object]] = {}
        for chord, action in (bindings or {}).items():
            self.bind(chord, action)

    def bind(self, chord: str, action: Callable[[], object]) -> None:
        self._bindings[normalize_chord(chord)] = action

    def chords(self) -> Iterable[str]:
        return self._bindings.keys()

    def dispatch(self, chord: str) -> bool:
        """
        Run the action bound to ``chord``.

        Returns:
            True if an action handled the chord
        """
        action = self._bindings.get(normalize_chord(chord))
        if action is None:
            return False
        logger.debug("shortcut_dispatched", chord=normalize_chord(chord))
        action()
        return True


def next_focus_index(current: int, count: int, backwards: bool = False) -> int:
    """
    Index of the control that receives focus on Tab (or Shift+Tab).

    Focus wraps from the last control to the first and vice versa. An index
    outside the row (focus came from elsewhere) enters at the first control
    going forwards and at the last going backwards.

    Examples:
        >>> next_focus_index(2, 3)
        0
        >>> next_focus_index(0, 3, backwards=True)
        2
    """
    if count <= 0:
        raise ValueError("count must be positive")

    if not 0 <= current < count:
        return count - 1 if backwards else 0

    step = -1 if backwards else 1
    return (current + step) % count
