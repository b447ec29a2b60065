"""Integration tests: small hand-assembled programs run end to end."""

import random
import threading

from chip8.cpu.cpu import CPU
from chip8.devices.keypad import Keypad


class RecordingOutput:
    def __init__(self) -> None:
        self.frames: list[bytes] = []
        self.beeps = 0

    def draw(self, buffer: bytes) -> None:
        self.frames.append(buffer)

    def beep(self) -> None:
        self.beeps += 1


def _program(*words: int) -> bytes:
    return b"".join(w.to_bytes(2, "big") for w in words)


def _make_cpu(program: bytes, keypad: Keypad | None = None) -> tuple[CPU, RecordingOutput]:
    out = RecordingOutput()
    cpu = CPU(program, keypad or Keypad(), out, rate_hz=0, rng=random.Random(0))
    return cpu, out


class TestGlyphDraw:
    def test_draws_zero_glyph(self) -> None:
        cpu, out = _make_cpu(_program(
            0x6000,  # LD V0, 0
            0xF029,  # LD F, V0
            0x6100,  # LD V1, 0
            0xD115,  # DRW V1, V1, 5
            0x1208,  # JP 0x208
        ))
        cpu.run(max_cycles=6)
        rows = ["".join("#" if cpu.display.pixel(x, y) else "." for x in range(4))
                for y in range(5)]
        assert rows == ["####", "#..#", "#..#", "#..#", "####"]
        assert cpu.registers.read(0xF) == 0
        assert len(out.frames) == 1


class TestBcdAndSubroutine:
    def test_sum_of_digits(self) -> None:
        cpu, _ = _make_cpu(_program(
            0x6A7B,  # 0x200 LD VA, 123
            0xA300,  # 0x202 LD I, 0x300
            0xFA33,  # 0x204 LD B, VA
            0xF265,  # 0x206 LD V2, [I]
            0x2210,  # 0x208 CALL 0x210
            0x120A,  # 0x20A JP 0x20A
            0x0000,
            0x0000,
            0x8014,  # 0x210 ADD V0, V1
            0x8024,  # 0x212 ADD V0, V2
            0x00EE,  # 0x214 RET
        ))
        cpu.run(max_cycles=9)
        assert cpu.pc == 0x20A
        assert cpu.registers.read(0) == 6
        assert cpu.index == 0x303
        assert len(cpu.stack) == 0


class TestDelayLoop:
    def test_waits_for_delay_timer(self) -> None:
        cpu, _ = _make_cpu(_program(
            0x6005,  # 0x200 LD V0, 5
            0xF015,  # 0x202 LD DT, V0
            0xF107,  # 0x204 LD V1, DT
            0x3100,  # 0x206 SE V1, 0
            0x1204,  # 0x208 JP 0x204
            0x120A,  # 0x20A JP 0x20A
        ))
        cpu.run(max_cycles=100)
        assert cpu.pc == 0x20A
        assert cpu.delay_timer == 0


class TestKeyWait:
    def test_blocks_until_key(self) -> None:
        keypad = Keypad()
        cpu, _ = _make_cpu(_program(
            0xF30A,  # 0x200 LD V3, K
            0x1202,  # 0x202 JP 0x202
        ), keypad)
        cpu.run(max_cycles=20)
        assert cpu.pc == 0x200
        assert cpu.waiting_for_key
        keypad.press(0xE)
        cpu.step()
        assert cpu.registers.read(3) == 0xE
        assert cpu.pc == 0x202

    def test_key_from_other_thread(self) -> None:
        keypad = Keypad()
        cpu, _ = _make_cpu(_program(0xF30A, 0x1202), keypad)
        cpu.rate_hz = 50_000
        keypad.add_listener(lambda key, down: None)
        worker = threading.Thread(target=cpu.run)
        worker.start()
        keypad.press(0x9)
        while cpu.pc != 0x202 and worker.is_alive():
            worker.join(0.01)
        cpu.stop()
        worker.join(timeout=5)
        assert cpu.registers.read(3) == 0x9


class TestCollision:
    def test_overlapping_sprites_flag(self) -> None:
        cpu, out = _make_cpu(_program(
            0xA20C,  # 0x200 LD I, 0x20C
            0x6000,  # 0x202 LD V0, 0
            0xD001,  # 0x204 DRW V0, V0, 1
            0xD001,  # 0x206 DRW V0, V0, 1
            0x1208,  # 0x208 JP 0x208
            0x0000,
            0xFF00,  # 0x20C sprite row
        ))
        cpu.run(max_cycles=4)
        assert cpu.registers.read(0xF) == 0xFF
        assert cpu.display.lit_count() == 0
        assert len(out.frames) == 2
