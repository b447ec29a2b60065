#!/usr/bin/env python3
"""Emulator performance profiler.

Runs micro-benchmarks of hot-path components and a few hand-assembled
workloads (or a ROM from disk) unthrottled, reporting throughput and
instruction mix.

Usage:
    uv run python scripts/bench.py                  # all workloads
    uv run python scripts/bench.py draw             # single workload
    uv run python scripts/bench.py --rom game.ch8   # a program image
    uv run python scripts/bench.py --cprofile alu   # cProfile dump
    uv run python scripts/bench.py --micro-only     # just micro-benchmarks
"""

from __future__ import annotations

import argparse
import cProfile
import io
import pstats
import random
import sys
import time
from pathlib import Path
from typing import Any

# Add project to path so we can import without installing
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from chip8.cpu.cpu import CPU
from chip8.cpu.decode import decode
from chip8.devices.device import NullOutput
from chip8.devices.keypad import Keypad
from chip8.loader.rom import read_rom
from chip8.memory.framebuffer import FrameBuffer
from chip8.memory.ram import RAM


def _program(*words: int) -> bytes:
    return b"".join(w.to_bytes(2, "big") for w in words)


# Workloads: (name, program, max_cycles, description)
WORKLOADS: list[tuple[str, bytes, int, str]] = [
    ("alu", _program(
        0x6001,  # LD V0, 1
        0x8104,  # ADD V1, V0
        0x8215,  # SUB V2, V1
        0x8313,  # XOR V3, V1
        0x830E,  # SHL V3
        0x1202,  # JP 0x202
    ), 300_000, "Register arithmetic (8XYN heavy)"),
    ("draw", _program(
        0xA050,  # LD I, 0x050 (glyph 0)
        0xC03F,  # RND V0, 0x3F
        0xC11F,  # RND V1, 0x1F
        0xD015,  # DRW V0, V1, 5
        0x1202,  # JP 0x202
    ), 200_000, "Sprite blits at random positions"),
    ("bcd", _program(
        0xA300,  # LD I, 0x300
        0x7001,  # ADD V0, 1
        0xF033,  # LD B, V0
        0xF265,  # LD V2, [I]
        0xA300,  # LD I, 0x300
        0x1202,  # JP 0x202
    ), 200_000, "BCD conversion and block loads"),
    ("call", _program(
        0x2206,  # 0x200 CALL 0x206
        0x1200,  # 0x202 JP 0x200
        0x0000,
        0x7001,  # 0x206 ADD V0, 1
        0x00EE,  # 0x208 RET
    ), 300_000, "Subroutine call/return"),
]


def setup_cpu(program: bytes) -> CPU:
    """Create an unthrottled CPU with a null display and an idle keypad."""
    return CPU(program, Keypad(), NullOutput(), rate_hz=0, rng=random.Random(0))


def run_timed(cpu: CPU, max_cycles: int) -> dict[str, Any]:
    """Run the CPU and return timing + stats."""
    start = time.perf_counter()
    cpu.run(max_cycles=max_cycles)
    elapsed = time.perf_counter() - start

    cycles = cpu.cycle_count
    ips = cycles / elapsed if elapsed > 0 else 0

    return {
        "cycles": cycles,
        "elapsed": elapsed,
        "ips": ips,
        "stats": dict(cpu.instruction_stats),
    }


def run_cprofile(cpu: CPU, max_cycles: int) -> pstats.Stats:
    """Run under cProfile and return stats."""
    pr = cProfile.Profile()
    pr.enable()
    cpu.run(max_cycles=max_cycles)
    pr.disable()
    return pstats.Stats(pr)


# ---------------------------------------------------------------------------
# Hot-path micro-benchmarks (isolated components)
# ---------------------------------------------------------------------------

MICRO_N = 500_000


def bench_ram_read16(n: int = MICRO_N) -> dict[str, Any]:
    """Benchmark ram.read16() in isolation (the instruction fetch path)."""
    ram = RAM()
    ram.write16(0x200, 0x00E0)

    start = time.perf_counter()
    for _ in range(n):
        ram.read16(0x200)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_decode(n: int = MICRO_N) -> dict[str, Any]:
    """Benchmark instruction decode + Instruction allocation."""
    words = [0x6A2B, 0x8124, 0xD125, 0xF033, 0x1200]
    nw = len(words)
    start = time.perf_counter()
    for i in range(n):
        decode(words[i % nw])
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_draw_sprite(n: int = 100_000) -> dict[str, Any]:
    """Benchmark a 15-row sprite blit."""
    fb = FrameBuffer()
    sprite = bytes([0xA5, 0x5A] * 7 + [0xFF])
    start = time.perf_counter()
    for i in range(n):
        fb.draw_sprite(i & 63, i & 31, sprite)
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


def bench_step(n: int = 200_000) -> dict[str, Any]:
    """Benchmark a full cpu.step() cycle on a tight ADD/JP loop."""
    cpu = setup_cpu(_program(0x7001, 0x1200))
    start = time.perf_counter()
    for _ in range(n):
        cpu.step()
    elapsed = time.perf_counter() - start
    return {"ops": n, "elapsed": elapsed, "ops_per_sec": n / elapsed}


# ---------------------------------------------------------------------------
# Output formatting
# ---------------------------------------------------------------------------

def fmt_rate(ips: float) -> str:
    """Format instructions/operations per second."""
    if ips >= 1_000_000:
        return f"{ips / 1_000_000:.2f}M"
    if ips >= 1_000:
        return f"{ips / 1_000:.1f}K"
    return f"{ips:.0f}"


def print_workload_result(name: str, result: dict[str, Any]) -> None:
    """Print results for a workload."""
    print(f"  {name:<14} {result['elapsed']:7.3f}s  "
          f"{fmt_rate(result['ips']):>8}/s  "
          f"{result['cycles']:>10,} cycles")

    stats = result["stats"]
    total = sum(stats.values())
    if total == 0:
        return
    top5 = sorted(stats.items(), key=lambda x: x[1], reverse=True)[:5]
    parts = [f"{mnemonic} {count / total * 100:.0f}%" for mnemonic, count in top5]
    print(f"  {'':14} mix: {', '.join(parts)}")


def print_micro_result(name: str, result: dict[str, Any]) -> None:
    """Print results for a micro-benchmark."""
    print(f"  {name:<20} {result['elapsed']:7.3f}s  "
          f"{fmt_rate(result['ops_per_sec']):>8}/s  "
          f"({result['ops']:,} ops)")


def print_cprofile_report(stats: pstats.Stats, top_n: int = 25) -> None:
    """Print a cProfile report focused on the hot path."""
    stream = io.StringIO()
    stats.stream = stream
    stats.sort_stats("tottime")
    stats.print_stats(top_n)
    print(stream.getvalue())


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> None:
    parser = argparse.ArgumentParser(description="Profile the CHIP-8 emulator")
    parser.add_argument("workload", nargs="?", default=None,
                        help="Run a specific workload (substring match)")
    parser.add_argument("--rom", help="Benchmark a program image instead")
    parser.add_argument("--cycles", type=int, default=500_000,
                        help="Instruction limit for --rom (default 500000)")
    parser.add_argument("--cprofile", action="store_true",
                        help="Run under cProfile and print hot functions")
    parser.add_argument("--micro-only", action="store_true",
                        help="Only run micro-benchmarks")
    parser.add_argument("--no-micro", action="store_true",
                        help="Skip micro-benchmarks")
    args = parser.parse_args()

    if args.rom:
        selected = [(Path(args.rom).name, read_rom(args.rom), args.cycles, args.rom)]
    elif args.workload:
        selected = [(n, p, c, d) for n, p, c, d in WORKLOADS
                    if args.workload.lower() in n.lower()]
        if not selected:
            print(f"No workload matching '{args.workload}'")
            print(f"Available: {', '.join(n for n, *_ in WORKLOADS)}")
            sys.exit(1)
    else:
        selected = WORKLOADS

    if not args.no_micro:
        print("Micro-benchmarks (isolated hot-path components)")
        print("-" * 65)
        print_micro_result("ram.read16", bench_ram_read16())
        print_micro_result("decode", bench_decode())
        print_micro_result("draw_sprite (15 rows)", bench_draw_sprite())
        print_micro_result("cpu.step (tight loop)", bench_step())
        print()

    if args.micro_only:
        return

    print("Workloads")
    print("-" * 65)

    for name, program, max_cycles, desc in selected:
        cpu = setup_cpu(program)
        if args.cprofile:
            print(f"\ncProfile: {name} ({desc})")
            print("=" * 65)
            print_cprofile_report(run_cprofile(cpu, max_cycles))
        else:
            print_workload_result(name, run_timed(cpu, max_cycles))
    print()


if __name__ == "__main__":
    main()
