"""Protocols for the keypad and display/audio devices."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class InputDevice(Protocol):
    """Hexadecimal keypad polled by the CPU.

    ``pressed_key`` is the single key currently held (0x0-0xF) or None.
    It is read from the CPU's thread, so implementations that are updated
    from another thread must synchronize internally.
    """

    @property
    def pressed_key(self) -> int | None:
        """The held key, or None when no key is down."""
        ...


@runtime_checkable
class OutputDevice(Protocol):
    """Monochrome 64x32 display plus a beeper.

    ``draw`` receives the whole framebuffer (2048 bytes, row-major, each 0 or
    255) every time it changes. ``beep`` is called once per step while the
    sound timer is running. Marshalling onto a UI thread is the device's job.
    """

    def draw(self, buffer: bytes) -> None:
        """Present a new frame."""
        ...

    def beep(self) -> None:
        """Sound one beep tick."""
        ...


class NullOutput:
    """Output device that discards frames and beeps."""

    def draw(self, buffer: bytes) -> None:
        pass

    def beep(self) -> None:
        pass
