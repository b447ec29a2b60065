"""Instruction decoder: splits a 16-bit word into its nibble fields."""

from dataclasses import dataclass


class DecodeError(ValueError):
    """Instruction word matches no known instruction."""

    def __init__(self, word: int, addr: int | None = None) -> None:
        self.word = word
        self.addr = addr
        where = f" at 0x{addr:03X}" if addr is not None else ""
        super().__init__(f"Unknown instruction 0x{word:04X}{where}")


@dataclass(frozen=True)
class Instruction:
    """Decoded instruction word.

    ``op`` is the top nibble; ``x`` and ``y`` are register indices; ``n``,
    ``nn`` and ``nnn`` are the low 4, 8 and 12 bits.
    """

    word: int
    op: int
    x: int = 0
    y: int = 0
    n: int = 0
    nn: int = 0
    nnn: int = 0


# Top-nibble families
OP_SYSTEM = 0x0
OP_JP = 0x1
OP_CALL = 0x2
OP_SE_IMM = 0x3
OP_SNE_IMM = 0x4
OP_SE_REG = 0x5
OP_LD_IMM = 0x6
OP_ADD_IMM = 0x7
OP_ALU = 0x8
OP_SNE_REG = 0x9
OP_LD_I = 0xA
OP_JP_V0 = 0xB
OP_RND = 0xC
OP_DRW = 0xD
OP_KEY = 0xE
OP_MISC = 0xF

# 0x0 family, selected by low byte
SYS_CLS = 0xE0
SYS_RET = 0xEE

# 0x8 family, selected by low nibble
ALU_LD = 0x0
ALU_OR = 0x1
ALU_AND = 0x2
ALU_XOR = 0x3
ALU_ADD = 0x4
ALU_SUB = 0x5
ALU_SHR = 0x6
ALU_SUBN = 0x7
ALU_SHL = 0xE

# 0xE family, selected by low byte
KEY_SKP = 0x9E
KEY_SKNP = 0xA1

# 0xF family, selected by low byte
MISC_LD_VX_DT = 0x07
MISC_LD_VX_K = 0x0A
MISC_LD_DT_VX = 0x15
MISC_LD_ST_VX = 0x18
MISC_ADD_I_VX = 0x1E
MISC_LD_F_VX = 0x29
MISC_LD_B_VX = 0x33
MISC_LD_MEM_VX = 0x55
MISC_LD_VX_MEM = 0x65

_SYS_SELECTORS = frozenset({SYS_CLS, SYS_RET})
_ALU_SELECTORS = frozenset({
    ALU_LD, ALU_OR, ALU_AND, ALU_XOR, ALU_ADD,
    ALU_SUB, ALU_SHR, ALU_SUBN, ALU_SHL,
})
_KEY_SELECTORS = frozenset({KEY_SKP, KEY_SKNP})
_MISC_SELECTORS = frozenset({
    MISC_LD_VX_DT, MISC_LD_VX_K, MISC_LD_DT_VX, MISC_LD_ST_VX,
    MISC_ADD_I_VX, MISC_LD_F_VX, MISC_LD_B_VX, MISC_LD_MEM_VX,
    MISC_LD_VX_MEM,
})


def decode(word: int, addr: int | None = None) -> Instruction:
    """Decode a 16-bit instruction word into an Instruction.

    Families that share a top nibble are checked against their sub-selector
    (low byte for 0x0/0xE/0xF, low nibble for 0x8). ``5XY0`` and ``9XY0`` do
    not check their low nibble.

    Args:
        word: Big-endian instruction word as fetched from memory.
        addr: Address the word was fetched from, used in error messages.

    Raises:
        DecodeError: If the word matches no instruction.
    """
    word &= 0xFFFF
    op = word >> 12
    nn = word & 0xFF

    if op == OP_SYSTEM and nn not in _SYS_SELECTORS:
        raise DecodeError(word, addr)
    if op == OP_ALU and (word & 0xF) not in _ALU_SELECTORS:
        raise DecodeError(word, addr)
    if op == OP_KEY and nn not in _KEY_SELECTORS:
        raise DecodeError(word, addr)
    if op == OP_MISC and nn not in _MISC_SELECTORS:
        raise DecodeError(word, addr)

    return Instruction(
        word=word,
        op=op,
        x=(word >> 8) & 0xF,
        y=(word >> 4) & 0xF,
        n=word & 0xF,
        nn=nn,
        nnn=word & 0xFFF,
    )


# ---------------------------------------------------------------------------
# Instruction mnemonic classifier (lightweight, for stats tracking)
# ---------------------------------------------------------------------------

_OP_MNEMONICS: dict[int, str] = {
    OP_JP: "JP", OP_CALL: "CALL", OP_SE_IMM: "SE", OP_SNE_IMM: "SNE",
    OP_SE_REG: "SE", OP_LD_IMM: "LD", OP_ADD_IMM: "ADD", OP_SNE_REG: "SNE",
    OP_LD_I: "LD I", OP_JP_V0: "JP V0", OP_RND: "RND", OP_DRW: "DRW",
}

_SYS_MNEMONICS: dict[int, str] = {SYS_CLS: "CLS", SYS_RET: "RET"}

_ALU_MNEMONICS: dict[int, str] = {
    ALU_LD: "LD", ALU_OR: "OR", ALU_AND: "AND", ALU_XOR: "XOR",
    ALU_ADD: "ADD", ALU_SUB: "SUB", ALU_SHR: "SHR", ALU_SUBN: "SUBN",
    ALU_SHL: "SHL",
}

_KEY_MNEMONICS: dict[int, str] = {KEY_SKP: "SKP", KEY_SKNP: "SKNP"}

_MISC_MNEMONICS: dict[int, str] = {
    MISC_LD_VX_DT: "LD Vx,DT", MISC_LD_VX_K: "LD Vx,K",
    MISC_LD_DT_VX: "LD DT,Vx", MISC_LD_ST_VX: "LD ST,Vx",
    MISC_ADD_I_VX: "ADD I,Vx", MISC_LD_F_VX: "LD F,Vx",
    MISC_LD_B_VX: "LD B,Vx", MISC_LD_MEM_VX: "LD [I],Vx",
    MISC_LD_VX_MEM: "LD Vx,[I]",
}


def instruction_mnemonic(inst: Instruction) -> str:
    """Return the short mnemonic name for a decoded instruction.

    This does not format operands; register/immediate forms of the same
    operation share a name (``SE`` covers both ``3XNN`` and ``5XY0``).
    """
    op = inst.op
    if op == OP_SYSTEM:
        return _SYS_MNEMONICS.get(inst.nn, "SYS?")
    if op == OP_ALU:
        return _ALU_MNEMONICS.get(inst.n, "ALU?")
    if op == OP_KEY:
        return _KEY_MNEMONICS.get(inst.nn, "KEY?")
    if op == OP_MISC:
        return _MISC_MNEMONICS.get(inst.nn, "MISC?")
    return _OP_MNEMONICS.get(op, "UNKNOWN")
