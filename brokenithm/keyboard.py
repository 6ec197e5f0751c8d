"""Translation of button bitmasks into key press and release events."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

logger = logging.getLogger(__name__)

N_BUTTONS = 4


class KeyboardLayout(enum.Enum):
    """Key layouts mapping buttons to virtual key codes."""

    MANIA = (ord("A"), ord("D"), ord("J"), ord("L"))

    @property
    def keys(self) -> tuple[int, ...]:
        return self.value


@dataclass(frozen=True)
class KeyEvent:
    """A single key transition identified by its virtual key code."""

    key: int
    up: bool = False


def key_events(previous: int, keys: int, layout: KeyboardLayout) -> list[KeyEvent]:
    """Return the key transitions needed to go from ``previous`` to ``keys``."""
    changed = keys ^ previous
    to_down = changed & keys
    to_up = changed & previous
    events = []
    for i, key in enumerate(layout.keys[:N_BUTTONS]):
        bit = 1 << i
        if to_down & bit:
            logger.debug("%s Down", key)
            events.append(KeyEvent(key, up=False))
        elif to_up & bit:
            logger.debug("%s Up", key)
            events.append(KeyEvent(key, up=True))
    return events


Sender = Callable[[Sequence[KeyEvent]], None]


class KeyboardSimulator:
    """Tracks pressed buttons and emits key events for every change.

    Events are handed to ``sender`` in one batch per call to :meth:`send`.
    Without a sender, batches are collected in :attr:`sent`.
    """

    def __init__(
        self,
        layout: KeyboardLayout = KeyboardLayout.MANIA,
        sender: Sender | None = None,
    ) -> None:
        self.layout = layout
        self.sent: list[list[KeyEvent]] = []
        self._sender: Sender = sender if sender is not None else self.sent.append
        self._last_keys = 0

    @property
    def last_keys(self) -> int:
        return self._last_keys

    def send(self, keys: int) -> list[KeyEvent]:
        """Emit events for the change to ``keys`` and return them."""
        events = key_events(self._last_keys, keys, self.layout)
        self._last_keys = keys
        if events:
            self._sender(list(events))
        return events

    def delay(self, millis: int) -> None:
        """Sleep for ``millis`` milliseconds."""
        time.sleep(millis / 1000)