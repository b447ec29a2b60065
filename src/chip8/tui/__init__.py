"""Terminal presentation: screen rendering, status panels and disassembly."""
