"""Instruction execution: implements the 35 CHIP-8 instructions."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .decode import (
    DecodeError,
    Instruction,
    OP_SYSTEM,
    OP_JP,
    OP_CALL,
    OP_SE_IMM,
    OP_SNE_IMM,
    OP_SE_REG,
    OP_LD_IMM,
    OP_ADD_IMM,
    OP_ALU,
    OP_SNE_REG,
    OP_LD_I,
    OP_JP_V0,
    OP_RND,
    OP_DRW,
    OP_KEY,
    OP_MISC,
    SYS_CLS,
    SYS_RET,
    ALU_LD,
    ALU_OR,
    ALU_AND,
    ALU_XOR,
    ALU_ADD,
    ALU_SUB,
    ALU_SHR,
    ALU_SUBN,
    ALU_SHL,
    KEY_SKP,
    KEY_SKNP,
    MISC_LD_VX_DT,
    MISC_LD_VX_K,
    MISC_LD_DT_VX,
    MISC_LD_ST_VX,
    MISC_ADD_I_VX,
    MISC_LD_F_VX,
    MISC_LD_B_VX,
    MISC_LD_MEM_VX,
    MISC_LD_VX_MEM,
)
from .registers import VF, RegisterFile
from ..loader.font import glyph_address

if TYPE_CHECKING:
    from .cpu import CPU

# Value written to VF when a draw turns a pixel off
COLLISION_FLAG = 0xFF


def execute(inst: Instruction, cpu: CPU) -> int:
    """Execute a decoded instruction. Returns the next PC value."""
    regs = cpu.registers
    pc = cpu.pc
    op = inst.op

    if op == OP_SYSTEM:
        return _exec_system(inst, cpu, pc)

    elif op == OP_JP:
        return inst.nnn

    elif op == OP_CALL:
        cpu.stack.push(pc)
        return inst.nnn

    elif op == OP_SE_IMM:
        return _skip_if(regs.read(inst.x) == inst.nn, pc)

    elif op == OP_SNE_IMM:
        return _skip_if(regs.read(inst.x) != inst.nn, pc)

    elif op == OP_SE_REG:
        return _skip_if(regs.read(inst.x) == regs.read(inst.y), pc)

    elif op == OP_LD_IMM:
        regs.write(inst.x, inst.nn)
        return pc + 2

    elif op == OP_ADD_IMM:
        # No carry flag for the immediate form
        regs.write(inst.x, regs.read(inst.x) + inst.nn)
        return pc + 2

    elif op == OP_ALU:
        _exec_alu(inst, regs)
        return pc + 2

    elif op == OP_SNE_REG:
        return _skip_if(regs.read(inst.x) != regs.read(inst.y), pc)

    elif op == OP_LD_I:
        cpu.index = inst.nnn
        return pc + 2

    elif op == OP_JP_V0:
        return (inst.nnn + regs.read(0)) & 0xFFFF

    elif op == OP_RND:
        regs.write(inst.x, cpu.rng.randrange(256) & inst.nn)
        return pc + 2

    elif op == OP_DRW:
        return _exec_draw(inst, cpu, pc)

    elif op == OP_KEY:
        return _exec_key(inst, cpu, pc)

    elif op == OP_MISC:
        return _exec_misc(inst, cpu, pc)

    raise DecodeError(inst.word, pc)


def _skip_if(condition: bool, pc: int) -> int:
    """Advance past this instruction, and past the next one too if ``condition``."""
    return pc + 4 if condition else pc + 2


def _exec_system(inst: Instruction, cpu: CPU, pc: int) -> int:
    """Execute 00E0 (clear screen) and 00EE (return)."""
    if inst.nn == SYS_CLS:
        cpu.display.clear()
        cpu.output.draw(cpu.display.snapshot())
        return pc + 2
    if inst.nn == SYS_RET:
        # The stack holds the call site, not the return address
        return (cpu.stack.pop() + 2) & 0xFFFF
    raise DecodeError(inst.word, pc)


def _exec_alu(inst: Instruction, regs: RegisterFile) -> None:
    """Execute the 8XYN register-to-register operations.

    The flag is written before the result, so VF holds the result when it is
    also the destination register.
    """
    vx = regs.read(inst.x)
    vy = regs.read(inst.y)
    f = inst.n
    flag: int | None = None

    if f == ALU_LD:
        result = vy
    elif f == ALU_OR:
        result = vx | vy
    elif f == ALU_AND:
        result = vx & vy
    elif f == ALU_XOR:
        result = vx ^ vy
    elif f == ALU_ADD:
        total = vx + vy
        result = total & 0xFF
        flag = 1 if total > 0xFF else 0
    elif f == ALU_SUB:
        result = (vx - vy) & 0xFF
        flag = 1 if vx >= vy else 0
    elif f == ALU_SHR:
        result = vx >> 1
        flag = vx & 0x01
    elif f == ALU_SUBN:
        result = (vy - vx) & 0xFF
        flag = 1 if vy >= vx else 0
    elif f == ALU_SHL:
        result = (vx << 1) & 0xFF
        # Raw masked bit (0x80), not normalized to 1
        flag = vx & 0x80
    else:
        raise DecodeError(inst.word)

    if flag is not None:
        regs.write(VF, flag)
    regs.write(inst.x, result)


def _exec_draw(inst: Instruction, cpu: CPU, pc: int) -> int:
    """Execute DXYN: XOR an N-row sprite from memory[I] at (VX, VY)."""
    regs = cpu.registers
    rows = cpu.memory.read_block(cpu.index, inst.n)
    collision = cpu.display.draw_sprite(regs.read(inst.x), regs.read(inst.y), rows)
    regs.write(VF, COLLISION_FLAG if collision else 0)
    cpu.output.draw(cpu.display.snapshot())
    return pc + 2


def _exec_key(inst: Instruction, cpu: CPU, pc: int) -> int:
    """Execute EX9E / EXA1: skip on key pressed / not pressed."""
    pressed = cpu.input.pressed_key
    is_down = pressed is not None and pressed == cpu.registers.read(inst.x)
    if inst.nn == KEY_SKP:
        return _skip_if(is_down, pc)
    if inst.nn == KEY_SKNP:
        return _skip_if(not is_down, pc)
    raise DecodeError(inst.word, pc)


def _exec_misc(inst: Instruction, cpu: CPU, pc: int) -> int:
    """Execute the FXNN timer, key-wait, index and memory-block operations."""
    regs = cpu.registers
    mem = cpu.memory
    x = inst.x
    f = inst.nn

    if f == MISC_LD_VX_DT:
        regs.write(x, cpu.delay_timer)

    elif f == MISC_LD_VX_K:
        pressed = cpu.input.pressed_key
        if pressed is None:
            # Re-executed on the next step until a key is held
            return pc
        regs.write(x, pressed)

    elif f == MISC_LD_DT_VX:
        cpu.delay_timer = regs.read(x)

    elif f == MISC_LD_ST_VX:
        cpu.sound_timer = regs.read(x)

    elif f == MISC_ADD_I_VX:
        cpu.index = (cpu.index + regs.read(x)) & 0xFFFF

    elif f == MISC_LD_F_VX:
        cpu.index = glyph_address(regs.read(x))

    elif f == MISC_LD_B_VX:
        value = regs.read(x)
        mem.write8(cpu.index, value // 100)
        mem.write8(cpu.index + 1, (value // 10) % 10)
        mem.write8(cpu.index + 2, value % 10)

    elif f == MISC_LD_MEM_VX:
        for i in range(x + 1):
            mem.write8(cpu.index + i, regs.read(i))

    elif f == MISC_LD_VX_MEM:
        for i in range(x + 1):
            regs.write(i, mem.read8(cpu.index + i))
        cpu.index = (cpu.index + x + 1) & 0xFFFF

    else:
        raise DecodeError(inst.word, pc)

    return pc + 2
