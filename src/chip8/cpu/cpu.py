"""CPU core: machine state, fetch-decode-execute and the drive loop."""

from __future__ import annotations

import logging
import random
import threading
import time

from ..devices.device import InputDevice, NullOutput, OutputDevice
from ..devices.keypad import Keypad
from ..loader.font import FONT_OFFSET, FONT_SET
from ..loader.rom import PROGRAM_OFFSET, load_program
from ..memory.framebuffer import FrameBuffer
from ..memory.ram import RAM
from .decode import MISC_LD_VX_K, OP_MISC, decode, instruction_mnemonic
from .execute import execute
from .registers import RegisterFile
from .stack import CallStack

logger = logging.getLogger(__name__)

DEFAULT_RATE_HZ = 120_000

# Pacing gives up on catching up once it falls this far behind
_MAX_LAG = 0.1  # seconds


class CPU:
    """CHIP-8 machine: memory, registers, stack, timers and framebuffer.

    Construction loads the glyph table at 0x050 and ``program`` at 0x200 and
    leaves the machine ready to fetch its first instruction at 0x200. The
    input and output devices are borrowed for the machine's lifetime.

    ``step()`` is not reentrant; only one thread may drive a CPU.
    """

    def __init__(
        self,
        program: bytes = b"",
        input_device: InputDevice | None = None,
        output_device: OutputDevice | None = None,
        *,
        rate_hz: float = DEFAULT_RATE_HZ,
        rng: random.Random | None = None,
    ) -> None:
        self.memory = RAM()
        self.memory.load_segment(FONT_OFFSET, FONT_SET)
        load_program(self.memory, program)

        self.registers = RegisterFile()
        self.stack = CallStack()
        self.display = FrameBuffer()
        self.pc: int = PROGRAM_OFFSET
        self.index: int = 0
        self.delay_timer: int = 0
        self.sound_timer: int = 0

        self.input: InputDevice = input_device if input_device is not None else Keypad()
        self.output: OutputDevice = output_device if output_device is not None else NullOutput()
        self.rng = rng if rng is not None else random.Random()
        self.rate_hz = rate_hz

        self.cycle_count: int = 0
        self.waiting_for_key: bool = False
        self.instruction_stats: dict[str, int] = {}
        self._stop = threading.Event()

    def step(self) -> None:
        """Execute one instruction cycle: fetch, decode, execute, tick timers.

        Also records the instruction mnemonic in ``instruction_stats``
        for per-instruction profiling.

        Raises:
            MemoryError: If the fetch or a memory operand is out of range.
            DecodeError: If the fetched word is not an instruction.
            StackError: On call stack overflow or underflow.
        """
        pc = self.pc
        word = self.memory.read16(pc)
        inst = decode(word, pc)
        mnemonic = instruction_mnemonic(inst)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "pc=0x%03X word=0x%04X %-9s I=0x%03X DT=%d ST=%d",
                pc, word, mnemonic, self.index, self.delay_timer, self.sound_timer,
            )
        self.instruction_stats[mnemonic] = self.instruction_stats.get(mnemonic, 0) + 1

        self.pc = execute(inst, self) & 0xFFFF
        self.waiting_for_key = (
            self.pc == pc and inst.op == OP_MISC and inst.nn == MISC_LD_VX_K
        )
        self.cycle_count += 1
        self.tick_timers()

    def tick_timers(self) -> None:
        """Count both timers down by one, beeping while the sound timer runs."""
        if self.sound_timer > 0:
            self.output.beep()
            self.sound_timer -= 1
        if self.delay_timer > 0:
            self.delay_timer -= 1

    def run(
        self,
        stop: threading.Event | None = None,
        max_cycles: int | None = None,
    ) -> int:
        """Step repeatedly, paced to ``rate_hz`` instructions per second.

        Pacing follows a monotonic deadline so short sleeps do not
        accumulate drift; a ``rate_hz`` of 0 runs unthrottled.

        Args:
            stop: Optional external event checked between instructions.
            max_cycles: Stop after this many instructions (None = no limit).

        Returns:
            The number of instructions executed by this call.
        """
        period = 1.0 / self.rate_hz if self.rate_hz > 0 else 0.0
        executed = 0
        deadline = time.perf_counter()
        logger.debug("run: rate=%s Hz max_cycles=%s", self.rate_hz, max_cycles)
        try:
            while not self._stop.is_set() and not (stop is not None and stop.is_set()):
                if max_cycles is not None and executed >= max_cycles:
                    break
                self.step()
                executed += 1
                if period:
                    deadline += period
                    delay = deadline - time.perf_counter()
                    if delay > 0:
                        time.sleep(delay)
                    elif delay < -_MAX_LAG:
                        deadline = time.perf_counter()
        finally:
            self._stop.clear()
            logger.debug("run: stopped after %d instructions", executed)
        return executed

    def stop(self) -> None:
        """Ask a running ``run()`` loop to return after the current instruction.

        Safe to call from any thread.
        """
        self._stop.set()
