"""CPU core: registers, call stack, decoder, executor and drive loop."""
