"""RAM: 4 KB bytearray-backed main memory."""

MEMORY_SIZE = 4096


class RAM:
    """Byte-addressable main memory covering addresses 0x000-0xFFF."""

    def __init__(self, size: int = MEMORY_SIZE) -> None:
        self.size = size
        self._data = bytearray(size)

    def _offset(self, addr: int, width: int) -> int:
        """Check that ``width`` bytes at ``addr`` fit in memory."""
        if addr < 0 or addr + width > self.size:
            raise MemoryError(f"Access out of bounds: 0x{addr:04X}")
        return addr

    def read8(self, addr: int) -> int:
        """Read an unsigned byte."""
        return self._data[self._offset(addr, 1)]

    def read16(self, addr: int) -> int:
        """Read an unsigned 16-bit word (big-endian)."""
        off = self._offset(addr, 2)
        return (self._data[off] << 8) | self._data[off + 1]

    def write8(self, addr: int, value: int) -> None:
        """Write a byte."""
        self._data[self._offset(addr, 1)] = value & 0xFF

    def write16(self, addr: int, value: int) -> None:
        """Write a 16-bit word (big-endian)."""
        off = self._offset(addr, 2)
        self._data[off] = (value >> 8) & 0xFF
        self._data[off + 1] = value & 0xFF

    def read_block(self, addr: int, length: int) -> bytes:
        """Return a copy of ``length`` bytes starting at ``addr``."""
        off = self._offset(addr, length)
        return bytes(self._data[off:off + length])

    def load_segment(self, addr: int, data: bytes) -> None:
        """Bulk-load bytes into memory starting at ``addr``.

        Raises MemoryError if the segment extends beyond the end of memory.

        Args:
            addr: Start address for the load.
            data: Raw bytes to copy into memory.
        """
        off = self._offset(addr, len(data))
        self._data[off : off + len(data)] = data
