"""Button state shared between the network handler and the consumer."""

from __future__ import annotations

import threading

BUTTON_COUNT_LIMIT = 64

_BIT_TABLE: tuple[int, ...] = tuple(1 << i for i in range(BUTTON_COUNT_LIMIT))


def button_bit(i: int) -> int:
    """Return the bit mask for button ``i`` (0 <= i < 64)."""
    if not 0 <= i < BUTTON_COUNT_LIMIT:
        raise IndexError(f"button index {i} out of range 0..{BUTTON_COUNT_LIMIT - 1}")
    return _BIT_TABLE[i]


class ControllerState:
    """Staged button state that is published atomically.

    A frame of buttons is built with :meth:`start`, :meth:`add_button` and
    published with :meth:`end`; readers only ever see complete frames.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = 0
        self._staging = 0

    def start(self) -> None:
        """Begin a new frame with no buttons pressed."""
        self._staging = 0

    def add_button(self, i: int) -> None:
        """Mark button ``i`` as pressed in the current frame."""
        self._staging |= button_bit(i)

    def end(self) -> None:
        """Publish the current frame."""
        with self._lock:
            self._state = self._staging

    @property
    def button_state(self) -> int:
        """The most recently published button bitmask."""
        with self._lock:
            return self._state