"""Tests for the single-key keypad."""

import threading

import pytest

from chip8.devices.device import InputDevice, NullOutput, OutputDevice
from chip8.devices.keypad import Keypad


class TestKeypad:
    def test_starts_released(self) -> None:
        assert Keypad().pressed_key is None

    def test_press_and_release(self) -> None:
        pad = Keypad()
        assert pad.press(0xA) is True
        assert pad.pressed_key == 0xA
        assert pad.release(0xA) is True
        assert pad.pressed_key is None

    def test_second_key_ignored_while_held(self) -> None:
        pad = Keypad()
        pad.press(0x1)
        assert pad.press(0x2) is False
        assert pad.pressed_key == 0x1

    def test_releasing_other_key_keeps_held(self) -> None:
        pad = Keypad()
        pad.press(0x1)
        assert pad.release(0x2) is False
        assert pad.pressed_key == 0x1

    def test_release_all(self) -> None:
        pad = Keypad()
        pad.press(0x7)
        pad.release_all()
        assert pad.pressed_key is None

    @pytest.mark.parametrize("key", [-1, 16, 0xFF])
    def test_invalid_key(self, key: int) -> None:
        with pytest.raises(ValueError):
            Keypad().press(key)

    def test_listeners_notified(self) -> None:
        pad = Keypad()
        events: list[tuple[int, bool]] = []
        pad.add_listener(lambda key, down: events.append((key, down)))
        pad.press(0x3)
        pad.press(0x4)  # ignored
        pad.release(0x3)
        assert events == [(0x3, True), (0x3, False)]

    def test_concurrent_presses_hold_one_key(self) -> None:
        pad = Keypad()
        results: list[bool] = []
        lock = threading.Lock()

        def _press(key: int) -> None:
            ok = pad.press(key)
            with lock:
                results.append(ok)

        threads = [threading.Thread(target=_press, args=(k,)) for k in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert results.count(True) == 1
        assert pad.pressed_key is not None


class TestProtocols:
    def test_keypad_is_input_device(self) -> None:
        assert isinstance(Keypad(), InputDevice)

    def test_null_output_is_output_device(self) -> None:
        out = NullOutput()
        assert isinstance(out, OutputDevice)
        out.draw(bytes(2048))
        out.beep()
