"""Register display: V0-VF, I, PC, timers and call stack."""

from __future__ import annotations

from ..cpu.cpu import CPU
from ..cpu.registers import REGISTER_COUNT


def format_registers(cpu: CPU) -> str:
    """Format the machine registers for display.

    Produces four rows of four V registers, followed by a line with I, PC
    and both timers and a line with the call stack.

    Args:
        cpu: The machine to inspect.

    Returns:
        A string suitable for display in a Rich Panel.
    """
    values = cpu.registers.snapshot()
    lines: list[str] = []
    cols = 4

    for row in range(REGISTER_COUNT // cols):
        parts: list[str] = []
        for col in range(cols):
            idx = row * cols + col
            parts.append(f"V{idx:X}=0x{values[idx]:02X}")
        lines.append("  ".join(parts))

    lines.append(
        f"I=0x{cpu.index:04X}  PC=0x{cpu.pc:04X}  "
        f"DT={cpu.delay_timer:3d}  ST={cpu.sound_timer:3d}"
    )
    frames = cpu.stack.frames()
    stack_str = " ".join(f"0x{addr:03X}" for addr in frames) if frames else "empty"
    lines.append(f"Stack[{len(frames)}/{cpu.stack.capacity}]: {stack_str}")
    return "\n".join(lines)
