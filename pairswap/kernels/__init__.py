"""Integer-only math kernels for the exchange."""
