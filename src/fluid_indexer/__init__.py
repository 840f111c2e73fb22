"""Indexer for FLUID program, locker and claim events."""

__version__ = "0.1.0"
