"""Register file: 16 x 8-bit general purpose registers."""

REGISTER_COUNT = 16
VF = 0xF  # carry / borrow / collision flag


class RegisterFile:
    """General-purpose registers V0-VF. VF doubles as the flag register."""

    def __init__(self) -> None:
        self._regs: list[int] = [0] * REGISTER_COUNT

    def read(self, index: int) -> int:
        """Read register value."""
        return self._regs[index]

    def write(self, index: int, value: int) -> None:
        """Write register value. Value masked to 8 bits."""
        self._regs[index] = value & 0xFF

    def snapshot(self) -> list[int]:
        """Return a copy of all 16 register values."""
        return list(self._regs)
