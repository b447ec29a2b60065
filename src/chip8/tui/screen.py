"""Framebuffer rendering: packs two pixel rows into each text row."""

from __future__ import annotations

from rich.text import Text

from ..memory.framebuffer import DISPLAY_HEIGHT, DISPLAY_WIDTH

# (top pixel on, bottom pixel on) -> glyph
_HALF_BLOCKS: dict[tuple[bool, bool], str] = {
    (False, False): " ",
    (True, False): "▀",  # upper half block
    (False, True): "▄",  # lower half block
    (True, True): "█",  # full block
}


def frame_to_lines(
    buffer: bytes, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT,
) -> list[str]:
    """Convert a row-major 0/255 framebuffer into half-block text lines.

    Each output line covers two pixel rows, so a 64x32 frame becomes 16
    lines of 64 characters.

    Args:
        buffer: Framebuffer bytes, one byte per pixel.
        width: Pixels per row.
        height: Number of pixel rows (an odd last row renders as top-only).

    Returns:
        List of ``ceil(height / 2)`` strings, each ``width`` characters.
    """
    if len(buffer) != width * height:
        raise ValueError(
            f"framebuffer has {len(buffer)} bytes, expected {width * height}"
        )
    lines: list[str] = []
    for y in range(0, height, 2):
        top = buffer[y * width:(y + 1) * width]
        if y + 1 < height:
            bottom = buffer[(y + 1) * width:(y + 2) * width]
        else:
            bottom = bytes(width)
        lines.append("".join(
            _HALF_BLOCKS[(top[x] != 0, bottom[x] != 0)] for x in range(width)
        ))
    return lines


def render_frame(buffer: bytes, style: str = "bright_green") -> Text:
    """Render a framebuffer as a Rich Text block."""
    return Text("\n".join(frame_to_lines(buffer)), style=style, no_wrap=True)
