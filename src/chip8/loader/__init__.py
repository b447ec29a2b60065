"""Program loader: built-in glyph table and raw ROM images."""

from .font import FONT_OFFSET, FONT_SET, glyph_address
from .rom import MAX_PROGRAM_SIZE, PROGRAM_OFFSET, RomError, load_program, read_rom

__all__ = [
    "FONT_OFFSET", "FONT_SET", "glyph_address",
    "MAX_PROGRAM_SIZE", "PROGRAM_OFFSET", "RomError", "load_program", "read_rom",
]
