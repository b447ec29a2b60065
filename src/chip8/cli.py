"""Command-line interface for the CHIP-8 virtual machine."""

from __future__ import annotations

import argparse
import logging
import random
import sys
import threading

from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.panel import Panel

from .config import MachineConfig
from .cpu.cpu import CPU
from .cpu.decode import DecodeError
from .cpu.stack import StackError
from .devices.device import NullOutput
from .devices.keypad import Keypad
from .devices.terminal import TerminalKeyboard, TerminalScreen
from .loader.rom import MAX_PROGRAM_SIZE, PROGRAM_OFFSET, RomError, read_rom
from .tui.disasm import disassemble_program
from .tui.registers import format_registers
from .tui.stats import format_instruction_stats

logger = logging.getLogger(__name__)

# Errors that stop the machine; reported without a traceback
_MACHINE_ERRORS = (RomError, DecodeError, StackError, MemoryError)


def _non_negative_int(value: str) -> int:
    """Parse a non-negative integer argument (decimal or 0x-prefixed hex)."""
    try:
        number = int(value, 0)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be >= 0, got {value}")
    return number


def main(argv: list[str] | None = None) -> None:
    """Entry point for the emulator CLI."""
    parser = argparse.ArgumentParser(description="CHIP-8 Virtual Machine")
    sub = parser.add_subparsers(dest="command")

    run_parser = sub.add_parser("run", help="Run a program image")
    run_parser.add_argument("rom", help="Path to program image")
    run_parser.add_argument("--config", help="JSON machine configuration file")
    run_parser.add_argument(
        "--rate", type=float, default=None, metavar="HZ",
        help="Instructions per second (0 = unthrottled)",
    )
    run_parser.add_argument(
        "--max-cycles", type=_non_negative_int, default=None, metavar="N",
        help="Stop after N instructions",
    )
    run_parser.add_argument(
        "--seed", type=_non_negative_int, default=None,
        help="Seed for the random number instruction",
    )
    run_parser.add_argument(
        "--save-config", metavar="FILE",
        help="Write the effective configuration to FILE before running",
    )
    run_parser.add_argument(
        "--headless", action="store_true",
        help="Run without display or keyboard",
    )
    run_parser.add_argument(
        "--trace", action="store_true",
        help="Log every executed instruction",
    )
    run_parser.add_argument(
        "--stats", action="store_true",
        help="Print instruction statistics on exit",
    )

    disasm_parser = sub.add_parser("disasm", help="Disassemble a program image")
    disasm_parser.add_argument("rom", help="Path to program image")

    info_parser = sub.add_parser("info", help="Show program image size")
    info_parser.add_argument("rom", help="Path to program image")

    args = parser.parse_args(argv)

    try:
        if args.command == "run":
            config = _build_config(args)
            _setup_logging(args.trace)
            cpu = run_program(args.rom, config, headless=args.headless)
            if args.stats:
                print(format_instruction_stats(cpu.instruction_stats), file=sys.stderr)
        elif args.command == "disasm":
            disasm_program(args.rom)
        elif args.command == "info":
            show_info(args.rom)
        else:
            parser.print_help()
            sys.exit(1)
    except _MACHINE_ERRORS as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _build_config(args: argparse.Namespace) -> MachineConfig:
    """Load ``--config`` (if given) and apply command-line overrides."""
    if args.config:
        try:
            config = MachineConfig.load(args.config)
        except (OSError, ValueError) as e:
            print(f"Error: cannot load config '{args.config}': {e}", file=sys.stderr)
            sys.exit(1)
    else:
        config = MachineConfig()
    if args.rate is not None:
        if args.rate < 0:
            print("Error: --rate must be >= 0", file=sys.stderr)
            sys.exit(1)
        config.rate_hz = args.rate
    if args.max_cycles is not None:
        config.max_cycles = args.max_cycles
    if args.seed is not None:
        config.seed = args.seed
    if args.save_config:
        try:
            config.save(args.save_config)
        except OSError as e:
            print(f"Error: cannot save config '{args.save_config}': {e}", file=sys.stderr)
            sys.exit(1)
    return config


def _setup_logging(trace: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if trace else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def run_program(path: str, config: MachineConfig, headless: bool = False) -> CPU:
    """Load a program image and run it until stopped.

    With a display, the CPU runs on a worker thread while the main thread
    refreshes the screen and waits for Ctrl-C. Headless runs step on the
    calling thread. A fatal machine error is re-raised on the calling
    thread either way.

    Args:
        path: Path to the program image.
        config: Machine configuration.
        headless: Run without terminal display and keyboard.

    Returns:
        The CPU after it stopped.
    """
    data = read_rom(path)
    logger.debug("loaded %d bytes from %s", len(data), path)
    rng = random.Random(config.seed)
    keypad = Keypad()

    if headless:
        cpu = CPU(data, keypad, NullOutput(), rate_hz=config.rate_hz, rng=rng)
        try:
            cpu.run(max_cycles=config.max_cycles)
        except KeyboardInterrupt:
            pass
        _report(cpu)
        return cpu

    console = Console()

    def _status() -> str:
        state = "waiting for key" if cpu.waiting_for_key else "running"
        key = keypad.pressed_key
        key_str = f"{key:X}" if key is not None else "-"
        return f"PC 0x{cpu.pc:03X}  cycles {cpu.cycle_count:,}  key {key_str}  {state}"

    screen = TerminalScreen(console=console, title=path, status=_status)
    cpu = CPU(data, keypad, screen, rate_hz=config.rate_hz, rng=rng)

    errors: list[BaseException] = []

    def _drive() -> None:
        try:
            cpu.run(max_cycles=config.max_cycles)
        except Exception as e:  # re-raised on the main thread
            errors.append(e)

    worker = threading.Thread(target=_drive, name="chip8-cpu", daemon=True)
    keyboard = TerminalKeyboard(keypad, config.keymap, hold=config.key_hold)
    with keyboard, Live(screen, console=console, refresh_per_second=30):
        worker.start()
        try:
            while worker.is_alive():
                worker.join(0.1)
        except KeyboardInterrupt:
            cpu.stop()
            worker.join()

    if errors:
        raise errors[0]
    _report(cpu)
    return cpu


def _report(cpu: CPU) -> None:
    console = Console(stderr=True)
    console.print(f"Stopped after {cpu.cycle_count:,} cycles.")
    console.print(Panel(format_registers(cpu), title="Registers", expand=False))


def disasm_program(path: str) -> None:
    """Print a disassembly listing of a program image."""
    data = read_rom(path)
    for line in disassemble_program(data):
        print(f"0x{line.addr:03X}: {line.word:04X}  {line.text}")


def show_info(path: str) -> None:
    """Print the image size and how much program memory it leaves free."""
    data = read_rom(path)
    end = PROGRAM_OFFSET + len(data)
    print(f"{path}: {len(data)} bytes")
    print(f"  loaded at 0x{PROGRAM_OFFSET:03X}-0x{max(end - 1, PROGRAM_OFFSET):03X}")
    print(f"  free program memory: {MAX_PROGRAM_SIZE - len(data)} bytes")
