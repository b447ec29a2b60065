"""Tests for the terminal screen and keyboard devices."""

import io

from rich.console import Console

from chip8.config import default_keymap
from chip8.devices.device import OutputDevice
from chip8.devices.keypad import Keypad
from chip8.devices.terminal import TerminalKeyboard, TerminalScreen


def _console() -> Console:
    return Console(file=io.StringIO(), width=100, force_terminal=False)


class TestTerminalScreen:
    def test_is_output_device(self) -> None:
        assert isinstance(TerminalScreen(console=_console()), OutputDevice)

    def test_draw_keeps_latest_frame(self) -> None:
        screen = TerminalScreen(console=_console())
        frame = bytearray(2048)
        frame[0] = 0xFF
        screen.draw(bytes(frame))
        frame[1] = 0xFF  # later mutation must not leak into the stored frame
        assert screen.frame[0] == 0xFF
        assert screen.frame[1] == 0
        assert screen.frame_count == 1

    def test_renders_panel(self) -> None:
        console = _console()
        screen = TerminalScreen(console=console, title="demo", status=lambda: "PC 0x200")
        frame = bytearray(2048)
        frame[0] = frame[64] = 0xFF
        screen.draw(bytes(frame))
        console.print(screen)
        out = console.file.getvalue()
        assert "demo" in out
        assert "█" in out
        assert "PC 0x200" in out

    def test_beep_counts_and_throttles_bell(self) -> None:
        console = _console()
        rings: list[int] = []
        console.bell = lambda: rings.append(1)
        screen = TerminalScreen(console=console)
        for _ in range(5):
            screen.beep()
        assert screen.beep_count == 5
        assert len(rings) == 1

    def test_bell_disabled(self) -> None:
        console = _console()
        rings: list[int] = []
        console.bell = lambda: rings.append(1)
        screen = TerminalScreen(console=console, bell=False)
        screen.beep()
        assert rings == []


class TestTerminalKeyboard:
    def _keyboard(self, hold: float = 0.1) -> TerminalKeyboard:
        return TerminalKeyboard(
            Keypad(), default_keymap(), hold=hold, stream=io.StringIO(),
        )

    def test_not_a_tty(self) -> None:
        kb = self._keyboard()
        assert kb.start() is False
        kb.stop()

    def test_mapped_key_pressed_then_expires(self) -> None:
        kb = self._keyboard(hold=0.1)
        kb.feed("w", now=10.0)
        assert kb.keypad.pressed_key == 0x5
        kb.expire(now=10.05)
        assert kb.keypad.pressed_key == 0x5
        kb.expire(now=10.1)
        assert kb.keypad.pressed_key is None

    def test_repeat_extends_hold(self) -> None:
        kb = self._keyboard(hold=0.1)
        kb.feed("v", now=1.0)
        kb.feed("v", now=1.08)
        kb.expire(now=1.15)
        assert kb.keypad.pressed_key == 0xF

    def test_uppercase_maps(self) -> None:
        kb = self._keyboard()
        kb.feed("X", now=0.0)
        assert kb.keypad.pressed_key == 0x0

    def test_unmapped_ignored(self) -> None:
        kb = self._keyboard()
        kb.feed("p", now=0.0)
        assert kb.keypad.pressed_key is None

    def test_other_key_dropped_while_held(self) -> None:
        kb = self._keyboard(hold=0.1)
        kb.feed("1", now=0.0)
        kb.feed("2", now=0.01)
        assert kb.keypad.pressed_key == 0x1
        kb.expire(now=0.2)
        assert kb.keypad.pressed_key is None

    def test_stop_releases(self) -> None:
        kb = self._keyboard()
        kb.feed("q", now=0.0)
        kb.stop()
        assert kb.keypad.pressed_key is None
