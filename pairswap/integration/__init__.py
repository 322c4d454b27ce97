"""Adapters between external transaction formats and the exchange core."""
