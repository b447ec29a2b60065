"""Raw program image loading."""

from __future__ import annotations

import os

from ..memory.ram import MEMORY_SIZE, RAM

PROGRAM_OFFSET = 0x200
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_OFFSET  # 3584 bytes


class RomError(ValueError):
    """Program image cannot be read or does not fit in program memory."""


def read_rom(path: str | os.PathLike[str]) -> bytes:
    """Read a program image from disk.

    The image is a headerless byte sequence; the only check is its size.

    Args:
        path: Path to the image file.

    Returns:
        The raw image bytes.

    Raises:
        RomError: If the file cannot be read or is too large.
    """
    try:
        with open(path, "rb") as f:
            data = f.read(MAX_PROGRAM_SIZE + 1)
    except OSError as e:
        raise RomError(f"cannot read '{os.fspath(path)}': {e}") from e
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomError(
            f"program image is too large: more than {MAX_PROGRAM_SIZE} bytes"
        )
    return data


def check_size(data: bytes) -> None:
    """Raise RomError if ``data`` does not fit between 0x200 and the end of memory."""
    if len(data) > MAX_PROGRAM_SIZE:
        raise RomError(
            f"program image is too large: {len(data)} bytes "
            f"(maximum {MAX_PROGRAM_SIZE})"
        )


def load_program(ram: RAM, data: bytes) -> None:
    """Copy a program image into memory at 0x200.

    Raises:
        RomError: If the image is too large.
    """
    check_size(data)
    ram.load_segment(PROGRAM_OFFSET, data)
