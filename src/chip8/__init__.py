"""CHIP-8 virtual machine."""

__version__ = "0.1.0"
