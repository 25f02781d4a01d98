"""Battlemap engine core: generation, scoring and error types."""
