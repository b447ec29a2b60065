"""Tests for the register file and call stack."""

import pytest

from chip8.cpu.registers import RegisterFile
from chip8.cpu.stack import (
    STACK_DEPTH,
    CallStack,
    StackError,
    StackOverflowError,
    StackUnderflowError,
)


class TestRegisterFile:
    def test_initial_zero(self) -> None:
        regs = RegisterFile()
        assert all(regs.read(i) == 0 for i in range(16))

    def test_write_masks_to_8_bits(self) -> None:
        regs = RegisterFile()
        regs.write(3, 0x1FF)
        assert regs.read(3) == 0xFF

    def test_snapshot_is_copy(self) -> None:
        regs = RegisterFile()
        snap = regs.snapshot()
        regs.write(0, 1)
        assert snap[0] == 0


class TestCallStack:
    def test_lifo(self) -> None:
        stack = CallStack()
        stack.push(0x200)
        stack.push(0x300)
        assert stack.frames() == [0x200, 0x300]
        assert stack.pop() == 0x300
        assert stack.pop() == 0x200
        assert len(stack) == 0

    def test_full_depth(self) -> None:
        stack = CallStack()
        for i in range(STACK_DEPTH):
            stack.push(0x200 + i * 2)
        assert len(stack) == stack.capacity == 16

    def test_overflow(self) -> None:
        stack = CallStack()
        for _ in range(STACK_DEPTH):
            stack.push(0x200)
        with pytest.raises(StackOverflowError):
            stack.push(0x200)
        assert len(stack) == STACK_DEPTH

    def test_underflow(self) -> None:
        with pytest.raises(StackUnderflowError):
            CallStack().pop()

    def test_errors_share_base(self) -> None:
        assert issubclass(StackOverflowError, StackError)
        assert issubclass(StackUnderflowError, StackError)
