"""Memory: main RAM and the display framebuffer."""

from .framebuffer import FrameBuffer
from .ram import RAM

__all__ = ["FrameBuffer", "RAM"]
