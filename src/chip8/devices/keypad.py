"""Keypad: thread-safe single-key input device."""

from __future__ import annotations

import threading
from typing import Callable

KEY_COUNT = 16

KeyListener = Callable[[int, bool], None]


class Keypad:
    """16-key hexadecimal keypad holding at most one pressed key.

    Host input code calls press()/release() from its own thread; the CPU
    reads ``pressed_key`` from the emulation thread. While a key is held,
    pressing another key is ignored until the held key is released.

    Listeners registered with add_listener() are called with
    ``(key, is_down)`` whenever the held key changes. They run on the
    thread that called press()/release(), outside the lock.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._key: int | None = None
        self._listeners: list[KeyListener] = []

    @property
    def pressed_key(self) -> int | None:
        with self._lock:
            return self._key

    def press(self, key: int) -> bool:
        """Mark ``key`` as held.

        Returns:
            True if the key became the held key, False if another key was
            already held (or it was already held).

        Raises:
            ValueError: If ``key`` is not in 0x0-0xF.
        """
        _check_key(key)
        with self._lock:
            if self._key is not None:
                return False
            self._key = key
        self._notify(key, True)
        return True

    def release(self, key: int) -> bool:
        """Release ``key`` if it is the held key.

        Returns:
            True if the held key was released.
        """
        _check_key(key)
        with self._lock:
            if self._key != key:
                return False
            self._key = None
        self._notify(key, False)
        return True

    def release_all(self) -> None:
        """Release whatever key is held."""
        with self._lock:
            key = self._key
            self._key = None
        if key is not None:
            self._notify(key, False)

    def add_listener(self, listener: KeyListener) -> None:
        """Register a callback for press/release changes."""
        with self._lock:
            self._listeners.append(listener)

    def _notify(self, key: int, is_down: bool) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(key, is_down)


def _check_key(key: int) -> None:
    if not 0 <= key < KEY_COUNT:
        raise ValueError(f"Invalid key: {key!r} (expected 0x0-0xF)")
