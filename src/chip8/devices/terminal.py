"""Terminal devices: Rich screen output and tty keyboard input for the CLI."""

from __future__ import annotations

import logging
import os
import select
import sys
import threading
import time
from typing import Callable, TextIO

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.text import Text

from ..memory.framebuffer import DISPLAY_HEIGHT, DISPLAY_WIDTH
from ..tui.screen import render_frame
from .keypad import Keypad

logger = logging.getLogger(__name__)

# Minimum seconds between audible bells
_BELL_INTERVAL = 0.1


class TerminalScreen:
    """Output device that renders frames into a Rich panel.

    ``draw`` only stores the latest frame; the frame is rendered whenever
    Rich asks for it (e.g. from a ``rich.live.Live`` refresh on the UI
    thread), so the CPU thread never blocks on terminal output.
    """

    def __init__(
        self,
        console: Console | None = None,
        title: str = "CHIP-8",
        status: Callable[[], str] | None = None,
        bell: bool = True,
    ) -> None:
        self.console = console if console is not None else Console()
        self.title = title
        self._status = status
        self._bell = bell
        self._lock = threading.Lock()
        self._frame = bytes(DISPLAY_WIDTH * DISPLAY_HEIGHT)
        self._last_bell = 0.0
        self.frame_count = 0
        self.beep_count = 0

    def draw(self, buffer: bytes) -> None:
        with self._lock:
            self._frame = bytes(buffer)
            self.frame_count += 1

    def beep(self) -> None:
        with self._lock:
            self.beep_count += 1
            now = time.monotonic()
            ring = self._bell and now - self._last_bell >= _BELL_INTERVAL
            if ring:
                self._last_bell = now
        if ring:
            self.console.bell()

    @property
    def frame(self) -> bytes:
        with self._lock:
            return self._frame

    def __rich__(self) -> RenderableType:
        body: RenderableType = render_frame(self.frame)
        if self._status is not None:
            body = Group(body, Text(self._status(), style="dim"))
        return Panel(body, title=self.title, expand=False)


class TerminalKeyboard:
    """Feeds a Keypad from single keystrokes on a POSIX terminal.

    Terminals report key presses but not releases, so each mapped keystroke
    holds its key for ``hold`` seconds; auto-repeat while a key is held down
    keeps extending the hold. Keystrokes for a different key while one is
    held are dropped, matching the keypad's single-key rule.

    The terminal is switched to cbreak mode while the reader runs (Ctrl-C
    still raises KeyboardInterrupt) and restored by stop().
    """

    def __init__(
        self,
        keypad: Keypad,
        keymap: dict[str, int],
        hold: float = 0.15,
        stream: TextIO | None = None,
    ) -> None:
        self.keypad = keypad
        self.keymap = {k.lower(): v for k, v in keymap.items()}
        self.hold = hold
        self._stream = stream if stream is not None else sys.stdin
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._saved_attrs: list | None = None
        self._held: int | None = None
        self._release_at = 0.0

    def start(self) -> bool:
        """Start reading keys in a background thread.

        Returns:
            False (and does nothing) when the stream is not a terminal.
        """
        if not self._stream.isatty():
            logger.debug("keyboard: stdin is not a tty, input disabled")
            return False
        import termios
        import tty

        fd = self._stream.fileno()
        self._saved_attrs = termios.tcgetattr(fd)
        tty.setcbreak(fd)
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, args=(fd,), daemon=True)
        self._thread.start()
        return True

    def stop(self) -> None:
        """Stop the reader thread and restore the terminal mode."""
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._saved_attrs is not None:
            import termios

            termios.tcsetattr(self._stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None
        self.keypad.release_all()
        self._held = None

    def __enter__(self) -> TerminalKeyboard:
        self.start()
        return self

    def __exit__(self, *exc: object) -> None:
        self.stop()

    def _run(self, fd: int) -> None:
        while not self._stop.is_set():
            ready, _, _ = select.select([fd], [], [], 0.02)
            if ready:
                data = os.read(fd, 32)
                for char in data.decode("utf-8", errors="ignore"):
                    self.feed(char, time.monotonic())
            self.expire(time.monotonic())

    def feed(self, char: str, now: float) -> None:
        """Handle one keystroke received at time ``now``."""
        key = self.keymap.get(char.lower())
        if key is None:
            return
        if self._held == key:
            self._release_at = now + self.hold
        elif self._held is None and self.keypad.press(key):
            self._held = key
            self._release_at = now + self.hold

    def expire(self, now: float) -> None:
        """Release the held key once its hold time has passed."""
        if self._held is not None and now >= self._release_at:
            self.keypad.release(self._held)
            self._held = None
