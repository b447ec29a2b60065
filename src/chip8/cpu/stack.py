"""Call stack: 16 return-address slots with a depth counter."""

STACK_DEPTH = 16


class StackError(RuntimeError):
    """Base class for call stack faults."""


class StackOverflowError(StackError):
    """Subroutine call with every slot already in use."""


class StackUnderflowError(StackError):
    """Return with no call on the stack."""


class CallStack:
    """Fixed-depth LIFO of 16-bit call-site addresses.

    Overflow and underflow are fatal: both raise instead of wrapping the
    depth counter or clobbering a slot.
    """

    def __init__(self, depth: int = STACK_DEPTH) -> None:
        self._slots: list[int] = [0] * depth
        self.pointer: int = 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def __len__(self) -> int:
        return self.pointer

    def push(self, addr: int) -> None:
        """Push a call-site address."""
        if self.pointer >= len(self._slots):
            raise StackOverflowError(
                f"Call stack overflow (depth {len(self._slots)}) "
                f"calling from 0x{addr:03X}"
            )
        self._slots[self.pointer] = addr & 0xFFFF
        self.pointer += 1

    def pop(self) -> int:
        """Pop and return the most recent call-site address."""
        if self.pointer == 0:
            raise StackUnderflowError("Return with empty call stack")
        self.pointer -= 1
        return self._slots[self.pointer]

    def frames(self) -> list[int]:
        """Active call-site addresses, oldest first."""
        return self._slots[:self.pointer]
