"""Instruction statistics: formats per-instruction execution counts."""

from __future__ import annotations


# Instruction category definitions for grouping.
# Each set contains the mnemonics belonging to that category.
_FLOW_MNEMONICS: set[str] = {
    "JP", "JP V0", "CALL", "RET", "SE", "SNE",
}

_ALU_MNEMONICS: set[str] = {
    "LD", "ADD", "OR", "AND", "XOR", "SUB", "SUBN", "SHR", "SHL",
}

_MEMORY_MNEMONICS: set[str] = {
    "LD I", "ADD I,Vx", "LD F,Vx", "LD B,Vx", "LD [I],Vx", "LD Vx,[I]",
}

_DISPLAY_MNEMONICS: set[str] = {"CLS", "DRW"}

_IO_MNEMONICS: set[str] = {
    "SKP", "SKNP", "LD Vx,K", "LD Vx,DT", "LD DT,Vx", "LD ST,Vx", "RND",
}

# Category definitions: (label, mnemonic set)
_CATEGORIES: list[tuple[str, set[str]]] = [
    ("Flow", _FLOW_MNEMONICS),
    ("ALU", _ALU_MNEMONICS),
    ("Memory", _MEMORY_MNEMONICS),
    ("Display", _DISPLAY_MNEMONICS),
    ("I/O", _IO_MNEMONICS),
]


def _categorize(mnemonic: str) -> str:
    """Return the category label for a given mnemonic, or "Other"."""
    for label, mnemonics in _CATEGORIES:
        if mnemonic in mnemonics:
            return label
    return "Other"


def format_instruction_stats(stats: dict[str, int], top_n: int = 12) -> str:
    """Format instruction execution statistics.

    Shows the top N instructions by count with percentage of total,
    followed by category totals.

    Args:
        stats: Dict mapping instruction mnemonic to execution count.
        top_n: Maximum number of individual instructions to show.

    Returns:
        A multi-line string suitable for display.
    """
    if not stats:
        return "No instructions executed."

    total = sum(stats.values())
    lines: list[str] = []

    sorted_stats = sorted(stats.items(), key=lambda x: x[1], reverse=True)
    shown = sorted_stats[:top_n]

    max_name_len = max(len(name) for name, _ in shown)
    max_count_len = max(len(str(count)) for _, count in shown)

    lines.append(f"Top {len(shown)} instructions (total: {total:,})")
    lines.append("")

    entries: list[str] = []
    for name, count in shown:
        pct = count / total * 100
        entries.append(
            f"{name.ljust(max_name_len)} {str(count).rjust(max_count_len)} ({pct:5.1f}%)"
        )

    if len(sorted_stats) > top_n:
        rest_count = sum(c for _, c in sorted_stats[top_n:])
        rest_pct = rest_count / total * 100
        entries.append(
            f"{'... others'.ljust(max_name_len)} "
            f"{str(rest_count).rjust(max_count_len)} ({rest_pct:5.1f}%)"
        )

    # Three columns, filled top to bottom
    col_width = max(len(e) for e in entries) + 2
    n_cols = 3
    n_rows = (len(entries) + n_cols - 1) // n_cols
    for row in range(n_rows):
        parts: list[str] = []
        for col in range(n_cols):
            idx = col * n_rows + row
            if idx < len(entries):
                parts.append(entries[idx].ljust(col_width))
        lines.append("  " + "".join(parts).rstrip())

    cat_totals: dict[str, int] = {}
    for name, count in stats.items():
        cat = _categorize(name)
        cat_totals[cat] = cat_totals.get(cat, 0) + count

    lines.append("")
    cat_parts: list[str] = []
    for cat in ["Flow", "ALU", "Memory", "Display", "I/O", "Other"]:
        if cat in cat_totals:
            count = cat_totals[cat]
            cat_parts.append(f"{cat}: {count:,} ({count / total * 100:.0f}%)")
    lines.append("  " + "  |  ".join(cat_parts))

    return "\n".join(lines)
