"""Disassembly: converts instruction words to human-readable text."""

from __future__ import annotations

from dataclasses import dataclass

from ..cpu.decode import (
    DecodeError,
    Instruction,
    decode,
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
    KEY_SKP,
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
from ..loader.rom import PROGRAM_OFFSET


@dataclass(frozen=True)
class DisassemblyLine:
    """A single line of disassembly output."""

    addr: int
    word: int
    text: str


# 8XYN operations: low nibble -> mnemonic
_ALU_NAMES: dict[int, str] = {
    0x0: "LD", 0x1: "OR", 0x2: "AND", 0x3: "XOR", 0x4: "ADD",
    0x5: "SUB", 0x6: "SHR", 0x7: "SUBN", 0xE: "SHL",
}


def _v(index: int) -> str:
    """Register name, e.g. ``VA``."""
    return f"V{index:X}"


def disassemble_instruction(inst: Instruction) -> str:
    """Format a decoded instruction in conventional CHIP-8 assembly syntax.

    Args:
        inst: A decoded Instruction.

    Returns:
        Text such as ``"LD V1, 0x2A"`` or ``"DRW V0, V1, 5"``.
    """
    op = inst.op
    x, y = _v(inst.x), _v(inst.y)

    if op == OP_SYSTEM:
        if inst.nn == SYS_CLS:
            return "CLS"
        if inst.nn == SYS_RET:
            return "RET"
    elif op == OP_JP:
        return f"JP 0x{inst.nnn:03X}"
    elif op == OP_CALL:
        return f"CALL 0x{inst.nnn:03X}"
    elif op == OP_SE_IMM:
        return f"SE {x}, 0x{inst.nn:02X}"
    elif op == OP_SNE_IMM:
        return f"SNE {x}, 0x{inst.nn:02X}"
    elif op == OP_SE_REG:
        return f"SE {x}, {y}"
    elif op == OP_LD_IMM:
        return f"LD {x}, 0x{inst.nn:02X}"
    elif op == OP_ADD_IMM:
        return f"ADD {x}, 0x{inst.nn:02X}"
    elif op == OP_ALU:
        name = _ALU_NAMES.get(inst.n)
        if name in ("SHR", "SHL"):
            return f"{name} {x}"
        if name is not None:
            return f"{name} {x}, {y}"
    elif op == OP_SNE_REG:
        return f"SNE {x}, {y}"
    elif op == OP_LD_I:
        return f"LD I, 0x{inst.nnn:03X}"
    elif op == OP_JP_V0:
        return f"JP V0, 0x{inst.nnn:03X}"
    elif op == OP_RND:
        return f"RND {x}, 0x{inst.nn:02X}"
    elif op == OP_DRW:
        return f"DRW {x}, {y}, {inst.n}"
    elif op == OP_KEY:
        return f"{'SKP' if inst.nn == KEY_SKP else 'SKNP'} {x}"
    elif op == OP_MISC:
        f = inst.nn
        if f == MISC_LD_VX_DT:
            return f"LD {x}, DT"
        if f == MISC_LD_VX_K:
            return f"LD {x}, K"
        if f == MISC_LD_DT_VX:
            return f"LD DT, {x}"
        if f == MISC_LD_ST_VX:
            return f"LD ST, {x}"
        if f == MISC_ADD_I_VX:
            return f"ADD I, {x}"
        if f == MISC_LD_F_VX:
            return f"LD F, {x}"
        if f == MISC_LD_B_VX:
            return f"LD B, {x}"
        if f == MISC_LD_MEM_VX:
            return f"LD [I], {x}"
        if f == MISC_LD_VX_MEM:
            return f"LD {x}, [I]"

    return f"??? (0x{inst.word:04X})"


def disassemble_word(word: int) -> str:
    """Disassemble a raw word; data words render as ``DW 0xNNNN``."""
    try:
        return disassemble_instruction(decode(word))
    except DecodeError:
        return f"DW 0x{word:04X}"


def disassemble_program(data: bytes, base: int = PROGRAM_OFFSET) -> list[DisassemblyLine]:
    """Disassemble a program image word by word.

    Programs mix code and sprite data, so every aligned word is shown;
    words that do not decode appear as ``DW``. A trailing odd byte is shown
    as ``DB``.

    Args:
        data: Raw program image.
        base: Address the first byte is loaded at.

    Returns:
        A list of DisassemblyLine objects, one per word.
    """
    lines: list[DisassemblyLine] = []
    for off in range(0, len(data) - 1, 2):
        word = (data[off] << 8) | data[off + 1]
        lines.append(DisassemblyLine(addr=base + off, word=word, text=disassemble_word(word)))
    if len(data) % 2:
        last = data[-1]
        lines.append(DisassemblyLine(
            addr=base + len(data) - 1, word=last, text=f"DB 0x{last:02X}",
        ))
    return lines
