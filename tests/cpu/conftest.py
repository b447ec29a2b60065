"""Shared fixtures for CPU tests."""

import random

import pytest

from chip8.cpu.cpu import CPU


class FakeInput:
    """Input device with a directly settable held key."""

    def __init__(self, key: int | None = None) -> None:
        self.pressed_key = key


class RecordingOutput:
    """Output device that records every frame and counts beeps."""

    def __init__(self) -> None:
        self.frames: list[bytes] = []
        self.beeps = 0

    def draw(self, buffer: bytes) -> None:
        self.frames.append(bytes(buffer))

    def beep(self) -> None:
        self.beeps += 1


@pytest.fixture
def make_cpu():
    """Factory fixture: returns a function that creates a fresh CPU.

    The CPU gets a FakeInput, a RecordingOutput and a seeded RNG, and runs
    unthrottled.
    """
    def _make(program: bytes = b"", key: int | None = None) -> CPU:
        return CPU(
            program, FakeInput(key), RecordingOutput(),
            rate_hz=0, rng=random.Random(1234),
        )
    return _make


@pytest.fixture
def exec_instruction(make_cpu):
    """Write one 16-bit instruction word at PC and step, return the cpu."""
    def _exec(cpu: CPU | None = None, word: int = 0) -> CPU:
        if cpu is None:
            cpu = make_cpu()
        cpu.memory.write16(cpu.pc, word)
        cpu.step()
        return cpu
    return _exec


@pytest.fixture
def set_regs():
    """Set named registers (e.g., set_regs(cpu, v1=5, vf=1))."""
    def _set(cpu: CPU, **kwargs: int) -> None:
        for name, value in kwargs.items():
            if not name.startswith("v"):
                raise ValueError(f"Register name must start with 'v': {name}")
            cpu.registers.write(int(name[1:], 16), value)
    return _set
