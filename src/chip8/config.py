"""Machine configuration: instruction rate, RNG seed and terminal key map."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path

from .cpu.cpu import DEFAULT_RATE_HZ


def default_keymap() -> dict[str, int]:
    """Conventional host layout for the 4x4 hex keypad.

        1 2 3 C        1 2 3 4
        4 5 6 D   <-   q w e r
        7 8 9 E        a s d f
        A 0 B F        z x c v
    """
    return {
        "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
        "q": 0x4, "w": 0x5, "e": 0x6, "r": 0xD,
        "a": 0x7, "s": 0x8, "d": 0x9, "f": 0xE,
        "z": 0xA, "x": 0x0, "c": 0xB, "v": 0xF,
    }


def _is_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: object) -> bool:
    return _is_int(value) or isinstance(value, float)


@dataclass
class MachineConfig:
    """Settings for running a program.

    ``rate_hz`` of 0 runs unthrottled. Timers always count down once per
    executed instruction, so changing the rate changes how fast they expire.
    """

    rate_hz: float = DEFAULT_RATE_HZ
    max_cycles: int | None = None
    seed: int | None = None
    key_hold: float = 0.15  # seconds a terminal key stays held
    keymap: dict[str, int] = field(default_factory=default_keymap)

    def __post_init__(self) -> None:
        if not _is_number(self.rate_hz) or self.rate_hz < 0:
            raise ValueError(f"rate_hz must be a number >= 0, got {self.rate_hz!r}")
        if self.max_cycles is not None and (not _is_int(self.max_cycles) or self.max_cycles < 0):
            raise ValueError(f"max_cycles must be an integer >= 0, got {self.max_cycles!r}")
        if self.seed is not None and not _is_int(self.seed):
            raise ValueError(f"seed must be an integer, got {self.seed!r}")
        if not _is_number(self.key_hold) or self.key_hold <= 0:
            raise ValueError(f"key_hold must be a number > 0, got {self.key_hold!r}")
        if not isinstance(self.keymap, dict):
            raise ValueError(f"keymap must be an object, got {self.keymap!r}")
        for char, key in self.keymap.items():
            if not isinstance(char, str) or len(char) != 1 or not _is_int(key) or not 0 <= key <= 0xF:
                raise ValueError(f"invalid keymap entry {char!r}: {key!r}")

    @classmethod
    def from_dict(cls, data: dict) -> MachineConfig:
        """Build a config from a dict, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"unknown config keys: {', '.join(unknown)}")
        return cls(**data)

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Save configuration to a JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> MachineConfig:
        """Load configuration from a JSON file."""
        with open(path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object")
        return cls.from_dict(data)
