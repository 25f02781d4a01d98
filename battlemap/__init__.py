"""Seeded battlemap generation, tactical scoring and compact map encoding."""

__version__ = "0.1.0"
