"""Framebuffer: 64x32 monochrome display memory."""

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32

PIXEL_ON = 0xFF
PIXEL_OFF = 0x00

SPRITE_WIDTH = 8


class FrameBuffer:
    """Row-major 64x32 grid of cells, each either 0 or 255.

    Cells are stored one byte per pixel (not packed) so the whole buffer can
    be handed to an output device as-is.
    """

    def __init__(self) -> None:
        self.width = DISPLAY_WIDTH
        self.height = DISPLAY_HEIGHT
        self._pixels = bytearray(DISPLAY_WIDTH * DISPLAY_HEIGHT)

    def clear(self) -> None:
        """Turn every pixel off."""
        self._pixels[:] = bytes(len(self._pixels))

    def pixel(self, x: int, y: int) -> int:
        """Return the cell value at (x, y), wrapping coordinates."""
        return self._pixels[(y % self.height) * self.width + (x % self.width)]

    def draw_sprite(self, x: int, y: int, rows: bytes) -> bool:
        """XOR an 8-pixel-wide sprite onto the display.

        Each byte of ``rows`` is one sprite row, most significant bit on the
        left. Coordinates wrap around both edges of the display.

        Args:
            x: Column of the sprite's left edge.
            y: Row of the sprite's top edge.
            rows: Sprite row bytes, top to bottom.

        Returns:
            True if any set pixel was turned off (collision).
        """
        pixels = self._pixels
        collision = False
        for dy, line in enumerate(rows):
            if not line:
                continue
            row_base = ((y + dy) % self.height) * self.width
            for dx in range(SPRITE_WIDTH):
                if line & (0x80 >> dx):
                    index = row_base + (x + dx) % self.width
                    if pixels[index] == PIXEL_ON:
                        collision = True
                    pixels[index] ^= PIXEL_ON
        return collision

    def snapshot(self) -> bytes:
        """Return an immutable copy of the whole buffer."""
        return bytes(self._pixels)

    def lit_count(self) -> int:
        """Number of pixels currently on."""
        return self._pixels.count(PIXEL_ON)
