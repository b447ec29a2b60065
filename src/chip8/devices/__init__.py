"""Input and output devices the CPU talks to."""

from .device import InputDevice, NullOutput, OutputDevice
from .keypad import KEY_COUNT, Keypad

__all__ = ["InputDevice", "KEY_COUNT", "Keypad", "NullOutput", "OutputDevice"]
