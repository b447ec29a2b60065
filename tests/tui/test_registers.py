"""Tests for the register status display."""

from chip8.cpu.cpu import CPU
from chip8.tui.registers import format_registers


class TestFormatRegisters:
    def test_contains_all_registers(self) -> None:
        result = format_registers(CPU())
        for i in range(16):
            assert f"V{i:X}=0x00" in result
        assert "PC=0x0200" in result
        assert "Stack[0/16]: empty" in result

    def test_timers_and_stack(self) -> None:
        cpu = CPU()
        cpu.delay_timer = 12
        cpu.sound_timer = 3
        cpu.index = 0x2F0
        cpu.stack.push(0x204)
        result = format_registers(cpu)
        assert "I=0x02F0" in result
        assert "DT= 12" in result
        assert "ST=  3" in result
        assert "Stack[1/16]: 0x204" in result
